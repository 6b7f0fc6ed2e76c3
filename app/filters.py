"""
Filter engine.

One definition of what it means for a stored string to match a set of
``QueryFilters``, shared by the query-parameter and natural-language paths.
Column filters translate to SQL clauses; ``contains_character`` is a
case-insensitive substring test on the raw value and is always evaluated in
Python so every Unicode character folds the same way on every backend.
"""
from typing import Dict, Iterable, List, Optional

from app.errors import INVALID_QUERY_MESSAGE, FailureKind, ValidationFailure
from app.models import StringAnalysis
from app.schemas import QueryFilters


def validate_filters(filters: QueryFilters) -> Optional[ValidationFailure]:
    """Reject a length range whose lower bound exceeds its upper bound"""
    if (
        filters.min_length is not None
        and filters.max_length is not None
        and filters.min_length > filters.max_length
    ):
        return ValidationFailure(FailureKind.INVALID, INVALID_QUERY_MESSAGE)
    return None


def build_conditions(filters: QueryFilters) -> list:
    """SQLAlchemy clauses for the filters that map onto stored columns"""
    conditions = []

    if filters.is_palindrome is not None:
        conditions.append(StringAnalysis.is_palindrome == filters.is_palindrome)

    if filters.min_length is not None:
        conditions.append(StringAnalysis.length >= filters.min_length)

    if filters.max_length is not None:
        conditions.append(StringAnalysis.length <= filters.max_length)

    if filters.word_count is not None:
        conditions.append(StringAnalysis.word_count == filters.word_count)

    return conditions


def contains_character(value: str, character: str) -> bool:
    return character.lower() in value.lower()


def record_matches(record, filters: QueryFilters) -> bool:
    """In-memory equivalent of ``build_conditions`` plus the character test"""
    if filters.is_palindrome is not None and record.is_palindrome != filters.is_palindrome:
        return False

    if filters.min_length is not None and record.length < filters.min_length:
        return False

    if filters.max_length is not None and record.length > filters.max_length:
        return False

    if filters.word_count is not None and record.word_count != filters.word_count:
        return False

    if filters.contains_character is not None and not contains_character(
        record.value, filters.contains_character
    ):
        return False

    return True


def apply_filters(records: Iterable, filters: QueryFilters) -> List:
    return [record for record in records if record_matches(record, filters)]


def filters_applied(filters: QueryFilters) -> Dict:
    """Only the filters the caller actually supplied"""
    return filters.model_dump(exclude_none=True)
