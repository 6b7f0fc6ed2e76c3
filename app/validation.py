"""
Request validation.

Each function takes the raw request input and returns either the typed
request structure or a ``ValidationFailure``; nothing here raises for bad
client input.
"""
import re
from typing import Any, Mapping, Optional, Union

from pydantic import ValidationError

from app.errors import (
    EMPTY_VALUE_MESSAGE,
    INVALID_QUERY_MESSAGE,
    MISSING_VALUE_MESSAGE,
    NOT_UTF8_MESSAGE,
    WRONG_TYPE_MESSAGE,
    FailureKind,
    ValidationFailure,
)
from app.filters import validate_filters
from app.schemas import QueryFilters, StringCreate

_NON_NEGATIVE_INT = re.compile(r"[0-9]+")


def validate_create_payload(payload: Any) -> Union[StringCreate, ValidationFailure]:
    """Validate the body of a create request"""
    if not isinstance(payload, dict) or "value" not in payload:
        return ValidationFailure(FailureKind.MISSING, MISSING_VALUE_MESSAGE)

    value = payload["value"]
    if not isinstance(value, str):
        return ValidationFailure(FailureKind.WRONG_TYPE, WRONG_TYPE_MESSAGE)
    if not value.strip():
        return ValidationFailure(FailureKind.INVALID, EMPTY_VALUE_MESSAGE)
    try:
        value.encode("utf-8")
    except UnicodeEncodeError:
        # lone surrogates survive JSON decoding but have no UTF-8 encoding to hash
        return ValidationFailure(FailureKind.INVALID, NOT_UTF8_MESSAGE)

    return StringCreate(value=value)


def _parse_bool(raw: str) -> Optional[bool]:
    if raw == "true":
        return True
    if raw == "false":
        return False
    return None


def validate_list_params(params: Mapping[str, str]) -> Union[QueryFilters, ValidationFailure]:
    """
    Turn list query parameters into ``QueryFilters``.

    ``is_palindrome`` accepts only ``true``/``false``; length and word count
    parameters must be non-negative integers. Unknown parameters are ignored.
    """
    invalid = ValidationFailure(FailureKind.INVALID, INVALID_QUERY_MESSAGE)
    fields = {}

    raw = params.get("is_palindrome")
    if raw is not None:
        flag = _parse_bool(raw)
        if flag is None:
            return invalid
        fields["is_palindrome"] = flag

    for name in ("min_length", "max_length", "word_count"):
        raw = params.get(name)
        if raw is None:
            continue
        raw = raw.strip()
        if not _NON_NEGATIVE_INT.fullmatch(raw):
            return invalid
        fields[name] = int(raw)

    raw = params.get("contains_character")
    if raw is not None:
        fields["contains_character"] = raw

    try:
        filters = QueryFilters(**fields)
    except ValidationError:
        return invalid

    failure = validate_filters(filters)
    if failure is not None:
        return failure
    return filters
