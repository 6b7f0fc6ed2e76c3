from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from fastapi.responses import Response
from sqlalchemy.orm import Session
from typing import Optional
import logging

from app.database import get_db
from app import crud
from app.errors import (
    ALREADY_EXISTS_MESSAGE,
    MISSING_NL_QUERY_MESSAGE,
    MISSING_VALUE_MESSAGE,
    NOT_FOUND_MESSAGE,
    ValidationFailure,
)
from app.filters import filters_applied
from app.nl_parser import ParseConflict, ParseUnparsed, parse_natural_language_query
from app.schemas import (
    InterpretedQuery,
    NaturalLanguageResponse,
    StringListResponse,
    StringResponse,
)
from app.validation import validate_create_payload, validate_list_params

router = APIRouter(prefix="/strings")
logger = logging.getLogger(__name__)


def _reject(failure: ValidationFailure):
    raise HTTPException(status_code=failure.status_code, detail=failure.message)


async def read_json_body(request: Request):
    """Parsed JSON body; the database work stays in the sync route"""
    try:
        return await request.json()
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=MISSING_VALUE_MESSAGE
        )


@router.post("", response_model=StringResponse, status_code=status.HTTP_201_CREATED)
def create_string(payload=Depends(read_json_body), db: Session = Depends(get_db)):
    """
    Analyze and store a string.
    Returns 409 if string already exists.
    """
    result = validate_create_payload(payload)
    if isinstance(result, ValidationFailure):
        _reject(result)

    db_string = crud.create_string_analysis(db, result.value)
    if db_string is None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=ALREADY_EXISTS_MESSAGE
        )

    return StringResponse.from_record(db_string)


@router.get("", response_model=StringListResponse)
def get_all_strings(
    request: Request,
    is_palindrome: Optional[str] = Query(None, description="true or false"),
    min_length: Optional[str] = Query(None, description="Minimum length (inclusive)"),
    max_length: Optional[str] = Query(None, description="Maximum length (inclusive)"),
    word_count: Optional[str] = Query(None, description="Exact word count"),
    contains_character: Optional[str] = Query(None, description="Single character, case-insensitive"),
    db: Session = Depends(get_db)
):
    """
    Get all strings with optional filtering.
    """
    # declared above for the OpenAPI docs; validated together from the raw params
    result = validate_list_params(request.query_params)
    if isinstance(result, ValidationFailure):
        _reject(result)

    strings = crud.get_all_strings(db, result)
    data = [StringResponse.from_record(s) for s in strings]

    return StringListResponse(
        data=data,
        count=len(data),
        filters_applied=filters_applied(result)
    )


@router.get("/filter-by-natural-language", response_model=NaturalLanguageResponse)
def filter_by_natural_language(
    query: Optional[str] = Query(None, description="Natural language query"),
    db: Session = Depends(get_db)
):
    """
    Filter strings using natural language queries.
    Example: "all single word palindromic strings"
    """
    if not query:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=MISSING_NL_QUERY_MESSAGE
        )

    parsed = parse_natural_language_query(query)

    if isinstance(parsed, ParseUnparsed):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=parsed.message
        )

    if isinstance(parsed, ParseConflict):
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=parsed.message
        )

    strings = crud.get_all_strings(db, parsed.filters)
    data = [StringResponse.from_record(s) for s in strings]

    return NaturalLanguageResponse(
        data=data,
        count=len(data),
        interpreted_query=InterpretedQuery(
            original=query,
            parsed_filters=filters_applied(parsed.filters)
        )
    )


@router.get("/by-id/{string_id}", response_model=StringResponse)
def get_string_by_id(string_id: str, db: Session = Depends(get_db)):
    """
    Get analysis for a string by its SHA-256 id.
    Returns 404 if string doesn't exist.
    """
    db_string = crud.get_string_by_id(db, string_id)
    if not db_string:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=NOT_FOUND_MESSAGE
        )
    return StringResponse.from_record(db_string)


@router.get("/{string_value:path}", response_model=StringResponse)
def get_string(string_value: str, db: Session = Depends(get_db)):
    """
    Get analysis for a specific string.
    Returns 404 if string doesn't exist.
    """
    db_string = crud.get_string_by_value(db, string_value)
    if not db_string:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=NOT_FOUND_MESSAGE
        )
    return StringResponse.from_record(db_string)


@router.delete("/by-id/{string_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_string_by_id(string_id: str, db: Session = Depends(get_db)):
    """
    Delete a string by its SHA-256 id.
    Returns 404 if string doesn't exist.
    """
    if not crud.delete_string_by_id(db, string_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=NOT_FOUND_MESSAGE
        )
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/{string_value:path}", status_code=status.HTTP_204_NO_CONTENT)
def delete_string(string_value: str, db: Session = Depends(get_db)):
    """
    Delete a string from the system.
    Returns 404 if string doesn't exist.
    """
    if not crud.delete_string_by_value(db, string_value):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=NOT_FOUND_MESSAGE
        )
    return Response(status_code=status.HTTP_204_NO_CONTENT)
