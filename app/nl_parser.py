"""
Natural-language filter parsing.

A query is matched against a fixed, ordered list of phrase rules. Each rule
looks at the lower-cased query on its own and yields one field assignment per
occurrence of its phrase, so rules combine in any order. Contradictions are
found afterwards by comparing every assignment made to the same field.

Examples:
    "all single word palindromic strings" -> {word_count: 1, is_palindrome: true}
    "strings longer than 10 characters"   -> {min_length: 11}
    "strings containing the letter z"     -> {contains_character: "z"}
"""
import logging
import re
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterator, List, Tuple, Union

from app.filters import validate_filters
from app.schemas import QueryFilters

logger = logging.getLogger(__name__)

UNPARSED_MESSAGE = "Unable to parse natural language query"
CONFLICT_MESSAGE = "Query parsed but resulted in conflicting filters"

Assignment = Tuple[str, Any]


@dataclass(frozen=True)
class ParseSuccess:
    filters: QueryFilters


@dataclass(frozen=True)
class ParseConflict:
    message: str = CONFLICT_MESSAGE


@dataclass(frozen=True)
class ParseUnparsed:
    message: str = UNPARSED_MESSAGE


ParseResult = Union[ParseSuccess, ParseConflict, ParseUnparsed]


@dataclass(frozen=True)
class PhraseRule:
    name: str
    pattern: re.Pattern
    assign: Callable[[re.Match], Assignment]

    def apply(self, query: str) -> Iterator[Assignment]:
        for match in self.pattern.finditer(query):
            yield self.assign(match)


RULES: Tuple[PhraseRule, ...] = (
    PhraseRule(
        "single_word",
        re.compile(r"\b(?:single|one) word"),
        lambda m: ("word_count", 1),
    ),
    PhraseRule(
        "palindrome",
        re.compile(r"palindrom(?:e|ic)"),
        lambda m: ("is_palindrome", True),
    ),
    PhraseRule(
        "longer_than",
        re.compile(r"longer than\s*(\d+)"),
        lambda m: ("min_length", int(m.group(1)) + 1),
    ),
    PhraseRule(
        "shorter_than",
        re.compile(r"shorter than\s*(\d+)"),
        lambda m: ("max_length", int(m.group(1)) - 1),
    ),
    PhraseRule(
        "first_vowel",
        re.compile(r"first vowel"),
        lambda m: ("contains_character", "a"),
    ),
    PhraseRule(
        "contains_letter",
        re.compile(r"contain(?:s|ing)?\s+(?:the\s+)?letter\s+([a-z])\b"),
        lambda m: ("contains_character", m.group(1)),
    ),
    PhraseRule(
        "contains_character",
        re.compile(r"contain(?:s|ing)?\s+(?:the\s+)?character\s+(\S)(?=[\s.,;:!?]|$)"),
        lambda m: ("contains_character", m.group(1)),
    ),
)


def collect_assignments(query: str) -> List[Assignment]:
    """Every field assignment made by every rule, in rule order"""
    lower = query.lower()
    assignments = []
    for rule in RULES:
        for assignment in rule.apply(lower):
            logger.debug(f"Rule {rule.name} matched: {assignment[0]}={assignment[1]!r}")
            assignments.append(assignment)
    return assignments


def parse_natural_language_query(query: str) -> ParseResult:
    """Map a free-text query onto structured filters"""
    if not query or not query.strip():
        return ParseUnparsed()

    assignments = collect_assignments(query.strip())
    if not assignments:
        return ParseUnparsed()

    values: Dict[str, Any] = {}
    conflicting = set()
    for field, value in assignments:
        if field in values and values[field] != value:
            conflicting.add(field)
        values.setdefault(field, value)

    if conflicting:
        logger.info(f"Conflicting filters in query {query!r}: {sorted(conflicting)}")
        return ParseConflict()

    # "shorter than 0" leaves no length a string can have
    if any(values.get(bound, 0) < 0 for bound in ("min_length", "max_length")):
        return ParseConflict()

    filters = QueryFilters(**values)
    if validate_filters(filters) is not None:
        return ParseConflict()

    return ParseSuccess(filters)
