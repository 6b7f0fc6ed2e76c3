from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Dict, Optional, List
from datetime import datetime, timezone


class StringCreate(BaseModel):
    value: str = Field(..., description="String to analyze")


class StringProperties(BaseModel):
    length: int
    is_palindrome: bool
    unique_characters: int
    word_count: int
    sha256_hash: str
    character_frequency_map: Dict[str, int]


class StringResponse(BaseModel):
    id: str
    value: str
    properties: StringProperties
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @field_validator("created_at")
    @classmethod
    def ensure_utc(cls, v: datetime) -> datetime:
        """SQLite hands back naive datetimes; everything is stored in UTC"""
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v

    @classmethod
    def from_record(cls, record) -> "StringResponse":
        return cls(
            id=record.id,
            value=record.value,
            properties=StringProperties(
                length=record.length,
                is_palindrome=record.is_palindrome,
                unique_characters=record.unique_characters,
                word_count=record.word_count,
                sha256_hash=record.sha256_hash,
                character_frequency_map=record.character_frequency_map,
            ),
            created_at=record.created_at,
        )


class QueryFilters(BaseModel):
    """Structured filter criteria, combined conjunctively"""

    is_palindrome: Optional[bool] = None
    min_length: Optional[int] = Field(None, ge=0)
    max_length: Optional[int] = Field(None, ge=0)
    word_count: Optional[int] = Field(None, ge=0)
    contains_character: Optional[str] = Field(None, min_length=1, max_length=1)

    model_config = ConfigDict(extra="forbid", strict=True)


class StringListResponse(BaseModel):
    data: List[StringResponse]
    count: int
    filters_applied: Dict


class InterpretedQuery(BaseModel):
    original: str
    parsed_filters: Dict


class NaturalLanguageResponse(BaseModel):
    data: List[StringResponse]
    count: int
    interpreted_query: InterpretedQuery
