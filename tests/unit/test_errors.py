"""
Unit tests for the error taxonomy.
"""

import pytest

from books_api.src.errors import (
    ApiError,
    AuthenticationError,
    ClientInputError,
    ErrorKind,
    NotFoundError,
    UnexpectedError,
)


class TestErrorKinds:
    """Tests for kind to status code mapping."""

    @pytest.mark.parametrize(
        "error_cls,kind,status_code",
        [
            (ClientInputError, ErrorKind.CLIENT_INPUT, 400),
            (AuthenticationError, ErrorKind.AUTHENTICATION, 401),
            (NotFoundError, ErrorKind.NOT_FOUND, 404),
            (UnexpectedError, ErrorKind.UNEXPECTED, 500),
        ],
    )
    def test_status_codes(self, error_cls, kind, status_code):
        """Test every error class maps to its HTTP status."""
        error = error_cls("boom")

        assert isinstance(error, ApiError)
        assert error.kind is kind
        assert error.status_code == status_code


class TestErrorBodies:
    """Tests for rendered error bodies."""

    def test_default_body_key(self):
        """Test errors render under "error" by default."""
        assert NotFoundError("Book not found").to_body() == {"error": "Book not found"}

    def test_message_body_key(self):
        """Test auth errors can render under "message"."""
        error = AuthenticationError("Unauthorized: Incorrect answers", body_key="message")
        assert error.to_body() == {"message": "Unauthorized: Incorrect answers"}

    def test_unexpected_error_hides_cause_by_default(self):
        """Test the cause is not exposed outside development."""
        error = UnexpectedError("An error occurred", cause=RuntimeError("db down"))
        assert error.to_body() == {"error": "An error occurred"}

    def test_unexpected_error_shows_cause_in_development(self):
        """Test the cause is added as detail when requested."""
        error = UnexpectedError("An error occurred", cause=RuntimeError("db down"))

        body = error.to_body(include_detail=True)
        assert body == {"error": "An error occurred", "detail": "RuntimeError: db down"}

    def test_client_error_never_has_detail(self):
        """Test non-server errors ignore the detail flag."""
        assert ClientInputError("Bad Request").to_body(include_detail=True) == {"error": "Bad Request"}
