from dataclasses import dataclass
from enum import Enum

MISSING_VALUE_MESSAGE = 'Invalid request body or missing "value" field'
WRONG_TYPE_MESSAGE = 'Invalid data type for "value" (must be string)'
EMPTY_VALUE_MESSAGE = '"value" must not be empty'
NOT_UTF8_MESSAGE = '"value" must be valid Unicode text'
INVALID_QUERY_MESSAGE = "Invalid query parameter values or types"
MISSING_NL_QUERY_MESSAGE = "Query parameter 'query' is required"
ALREADY_EXISTS_MESSAGE = "String already exists in the system"
NOT_FOUND_MESSAGE = "String does not exist in the system"


class FailureKind(str, Enum):
    MISSING = "missing"
    WRONG_TYPE = "wrong_type"
    INVALID = "invalid"


@dataclass(frozen=True)
class ValidationFailure:
    """Client input that cannot be turned into a request structure"""

    kind: FailureKind
    message: str

    @property
    def status_code(self) -> int:
        # a mistyped value is well-formed JSON the server cannot process
        return 422 if self.kind is FailureKind.WRONG_TYPE else 400
