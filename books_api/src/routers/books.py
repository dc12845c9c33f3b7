"""
Books router.

Provides REST API endpoints for:
- Listing all books
- Fetching, updating and deleting a book by id
- Adding a book

Errors are raised as ApiError subclasses and rendered under the "error"
key by the application's exception handler.
"""

import re
import structlog
from typing import List, Optional, Type, TypeVar
from fastapi import APIRouter, Depends, Request, Response, status
from fastapi.exceptions import RequestValidationError
from pydantic import BaseModel, ValidationError

from books_api.src.dependencies import get_book_repository, read_body, request_body_openapi
from books_api.src.errors import ClientInputError, NotFoundError, UnexpectedError
from books_api.src.models.book import (
    Book, BookCreateRequest, BookUpdateRequest, BookErrorResponse
)
from books_api.src.repositories.book_repo import BookRepository

logger = structlog.get_logger(__name__)

router = APIRouter(
    prefix="/books",
    tags=["Books"],
    responses={
        400: {"model": BookErrorResponse, "description": "Bad Request"},
        500: {"model": BookErrorResponse, "description": "Internal Server Error"}
    }
)

_LEADING_INT = re.compile(r"\s*([+-]?[0-9]+)")

PayloadT = TypeVar("PayloadT", bound=BaseModel)


def parse_book_id(raw: str) -> Optional[int]:
    """
    Parse a path segment as a base-10 integer.

    Leading whitespace and a sign are accepted and parsing stops at the
    first non-digit, so "12abc" is 12. A segment without leading digits is
    not a number.

    Args:
        raw: Path segment

    Returns:
        Parsed id or None if the segment is not numeric
    """
    match = _LEADING_INT.match(raw)
    if not match:
        return None
    return int(match.group(1))


def _require_book_id(raw: str, message: str) -> int:
    book_id = parse_book_id(raw)
    if book_id is None:
        logger.warning("invalid_book_id", raw_id=raw)
        raise ClientInputError(message)
    return book_id


async def _read_payload(request: Request, model: Type[PayloadT]) -> Optional[PayloadT]:
    """
    Read a JSON or form body into `model`.

    Undecodable JSON and wrongly typed fields are raised as
    RequestValidationError so they render like any other invalid request.
    An empty body yields None.
    """
    try:
        body = await read_body(request)
    except ValueError as e:
        raise RequestValidationError(
            [{"type": "json_invalid", "loc": ("body",), "msg": "JSON decode error", "input": {}}]
        ) from e

    if body is None:
        return None

    try:
        return model.model_validate(body)
    except ValidationError as e:
        errors = e.errors(include_url=False, include_context=False)
        raise RequestValidationError(
            [{**error, "loc": ("body", *error["loc"])} for error in errors]
        ) from e


# ============================================================================
# BOOK ENDPOINTS
# ============================================================================


@router.get(
    "",
    response_model=List[Book],
    response_model_exclude_none=True,
    summary="List Books"
)
async def list_books(
    book_repo: BookRepository = Depends(get_book_repository)
) -> List[Book]:
    """Return every book in the collection."""
    try:
        return await book_repo.find_all()
    except Exception as e:
        raise UnexpectedError("An error occurred while fetching books", cause=e) from e


@router.get(
    "/{book_id}",
    response_model=Book,
    response_model_exclude_none=True,
    summary="Get Book",
    responses={404: {"model": BookErrorResponse, "description": "Book not found"}}
)
async def get_book(
    book_id: str,
    book_repo: BookRepository = Depends(get_book_repository)
) -> Book:
    """
    Return a single book.

    **Error Responses:**
    - 400: Id is not a number
    - 404: No book has this id
    """
    parsed_id = _require_book_id(book_id, "Invalid book id")

    try:
        book = await book_repo.find_by_id(parsed_id)
    except Exception as e:
        raise UnexpectedError("An error occurred while fetching the book", cause=e) from e

    if not book:
        raise NotFoundError("Book not found")

    return book


@router.post(
    "",
    response_model=Book,
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
    summary="Add Book",
    openapi_extra=request_body_openapi(BookCreateRequest)
)
async def create_book(
    request: Request,
    book_repo: BookRepository = Depends(get_book_repository)
) -> Book:
    """
    Add a book with a caller-supplied id.

    Accepts a JSON or URL-encoded form body. The id is stored as given; it
    is neither generated nor checked for duplicates.

    **Error Responses:**
    - 400: Title is missing or empty
    - 400: Body is not valid JSON or a field has the wrong type
    """
    payload = await _read_payload(request, BookCreateRequest)

    if payload is None or not payload.title:
        logger.warning("book_create_rejected_missing_title")
        raise ClientInputError("Book title is required")

    book = Book(id=payload.id, title=payload.title, author=payload.author)

    try:
        await book_repo.insert(book)
    except Exception as e:
        raise UnexpectedError("An error occurred while adding the book", cause=e) from e

    return book


@router.delete(
    "/{book_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete Book",
    responses={404: {"model": BookErrorResponse, "description": "Book not found"}}
)
async def delete_book(
    book_id: str,
    book_repo: BookRepository = Depends(get_book_repository)
) -> Response:
    """
    Delete a book.

    **Error Responses:**
    - 400: Id is not a number
    - 404: No book has this id
    """
    parsed_id = _require_book_id(book_id, "Invalid book id")

    try:
        result = await book_repo.delete_where(parsed_id)
    except Exception as e:
        raise UnexpectedError("An error occurred while deleting the book", cause=e) from e

    if not result.deleted:
        raise NotFoundError("Book not found")

    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.put(
    "/{book_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Update Book",
    responses={404: {"model": BookErrorResponse, "description": "Book not found"}},
    openapi_extra=request_body_openapi(BookUpdateRequest)
)
async def update_book(
    book_id: str,
    request: Request,
    book_repo: BookRepository = Depends(get_book_repository)
) -> Response:
    """
    Replace the title and author of a book.

    Accepts a JSON or URL-encoded form body.

    **Error Responses:**
    - 400: Id is not a number ("Input must be a number")
    - 400: Title is missing or empty ("Bad Request")
    - 404: No book has this id
    """
    parsed_id = _require_book_id(book_id, "Input must be a number")
    payload = await _read_payload(request, BookUpdateRequest)

    if payload is None or not payload.title:
        logger.warning("book_update_rejected_missing_title", book_id=parsed_id)
        raise ClientInputError("Bad Request")

    try:
        result = await book_repo.update_where(parsed_id, payload.title, payload.author)
    except Exception as e:
        raise UnexpectedError("An error occurred while updating the book", cause=e) from e

    if not result.matched:
        raise NotFoundError("Book not found")

    return Response(status_code=status.HTTP_204_NO_CONTENT)
