"""
Application error taxonomy.

Every failure a route can report is raised as an ApiError subclass. The
error kind decides the HTTP status code; the error carries its own message
and the JSON key that message is rendered under, so a single exception
handler in main.py produces every error response.
"""

from enum import Enum
from typing import Any, Dict, Optional

from fastapi import status


class ErrorKind(str, Enum):
    """Failure categories with their HTTP status codes."""

    CLIENT_INPUT = "client_input"
    AUTHENTICATION = "authentication"
    NOT_FOUND = "not_found"
    UNEXPECTED = "unexpected"

    @property
    def status_code(self) -> int:
        return _STATUS_CODES[self]


_STATUS_CODES = {
    ErrorKind.CLIENT_INPUT: status.HTTP_400_BAD_REQUEST,
    ErrorKind.AUTHENTICATION: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.UNEXPECTED: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


class ApiError(Exception):
    """
    Base class for errors rendered as JSON responses.

    Args:
        message: Human readable message returned to the caller
        body_key: JSON key holding the message ("error" or "message")
    """

    kind: ErrorKind = ErrorKind.UNEXPECTED

    def __init__(self, message: str, body_key: str = "error"):
        super().__init__(message)
        self.message = message
        self.body_key = body_key

    @property
    def status_code(self) -> int:
        return self.kind.status_code

    def to_body(self, include_detail: bool = False) -> Dict[str, Any]:
        """Build the JSON response body for this error."""
        return {self.body_key: self.message}


class ClientInputError(ApiError):
    """Malformed id, missing required field, or failed schema validation."""

    kind = ErrorKind.CLIENT_INPUT


class AuthenticationError(ApiError):
    """Unknown user, wrong password, or wrong security answers."""

    kind = ErrorKind.AUTHENTICATION


class NotFoundError(ApiError):
    """No record matches the requested id."""

    kind = ErrorKind.NOT_FOUND


class UnexpectedError(ApiError):
    """Store or hashing failure. The cause is only exposed in development."""

    kind = ErrorKind.UNEXPECTED

    def __init__(self, message: str, body_key: str = "error", cause: Optional[BaseException] = None):
        super().__init__(message, body_key)
        self.cause = cause

    def to_body(self, include_detail: bool = False) -> Dict[str, Any]:
        body = super().to_body()
        if include_detail and self.cause is not None:
            body["detail"] = f"{type(self.cause).__name__}: {self.cause}"
        return body
