"""Error taxonomy and response codes for the URL record service."""

from enum import Enum
from typing import Any, Dict, List, Optional


class ResponseCode(str, Enum):
    """Symbolic codes carried in every response envelope."""

    SUCCESSFUL_GET_ALL_URLS = "SUCCESSFUL_GET_ALL_URLS"
    SUCCESSFUL_GET_URL = "SUCCESSFUL_GET_URL"
    SUCCESSFUL_CREATED_URL = "SUCCESSFUL_CREATED_URL"
    SUCCESSFUL_EDITED_URL = "SUCCESSFUL_EDITED_URL"
    INVALID_URL_FORMAT = "INVALID_URL_FORMAT"
    INVALID_URL_ID = "INVALID_URL_ID"
    INVALID_SHORT_CODE = "INVALID_SHORT_CODE"
    INVALID_INPUT = "INVALID_INPUT"
    NOT_FOUND = "NOT_FOUND"
    DB_ERROR = "DB_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class UrlRecordError(Exception):
    """Base class for every error the service reports to callers."""

    code = ResponseCode.INTERNAL_ERROR
    default_message = "Internal server error"

    def __init__(self, message: Optional[str] = None, code: Optional[ResponseCode] = None):
        self.message = message or self.default_message
        if code is not None:
            self.code = code
        super().__init__(self.message)

    @property
    def detail(self) -> Any:
        """Payload placed in the envelope's ``message`` field."""
        return self.message


class InvalidInput(UrlRecordError):
    """Request input failed syntactic validation.

    Args:
        issues: Field-level problems, each a dict with at least
            ``field`` and ``message``
        code: Symbolic code for the envelope
    """

    code = ResponseCode.INVALID_INPUT
    default_message = "Invalid input"

    def __init__(self, issues: List[Dict[str, Any]], code: Optional[ResponseCode] = None):
        self.issues = issues
        summary = "; ".join(f"{issue['field']}: {issue['message']}" for issue in issues)
        super().__init__(summary or self.default_message, code=code)

    @property
    def detail(self) -> Any:
        return self.issues


class NotFound(UrlRecordError):
    """No record matches the requested id or short code."""

    code = ResponseCode.NOT_FOUND
    default_message = "URL not found"


class StoreError(UrlRecordError):
    """The persistent store failed or timed out."""

    code = ResponseCode.DB_ERROR
    default_message = "Database error"


class ShortCodeConflictError(StoreError):
    """Insert rejected because the short code is already taken."""

    default_message = "Short code already exists"


class InternalError(UrlRecordError):
    """Unexpected fault; details are logged, never returned."""


_HTTP_STATUS = {
    InvalidInput: 400,
    NotFound: 404,
    StoreError: 500,
    InternalError: 500,
}


def http_status_for(error: UrlRecordError) -> int:
    """Map an error variant to its HTTP status code.

    Args:
        error: Error instance

    Returns:
        HTTP status code (500 for anything unmapped)
    """
    for cls in type(error).__mro__:
        if cls in _HTTP_STATUS:
            return _HTTP_STATUS[cls]
    return 500
