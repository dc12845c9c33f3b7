"""
Book models.

Provides Pydantic schemas for:
- Stored book records returned by the API
- Create and update request bodies
- Error responses for the book routes
"""

from typing import Optional

from pydantic import BaseModel, Field


# ============================================================================
# Domain Model
# ============================================================================


class Book(BaseModel):
    """
    Book record.

    The id is supplied by the caller on create and is not checked for
    uniqueness.
    """
    id: Optional[int] = Field(
        None,
        description="Book ID"
    )
    title: str = Field(
        ...,
        description="Book title"
    )
    author: Optional[str] = Field(
        None,
        description="Book author"
    )

    model_config = {
        "json_schema_extra": {
            "example": {
                "id": 1,
                "title": "Book One",
                "author": "Author One"
            }
        }
    }


# ============================================================================
# Pydantic Request Models
# ============================================================================


class BookCreateRequest(BaseModel):
    """
    Create book request schema.

    Title is optional here so a missing title reaches the handler and is
    reported with the route's own message instead of a schema error.
    """
    id: Optional[int] = Field(
        None,
        description="Caller-supplied book ID"
    )
    title: Optional[str] = Field(
        None,
        description="Book title (required, non-empty)"
    )
    author: Optional[str] = Field(
        None,
        description="Book author"
    )

    model_config = {
        "json_schema_extra": {
            "example": {
                "id": 3,
                "title": "Book Three",
                "author": "Author Three"
            }
        }
    }


class BookUpdateRequest(BaseModel):
    """Update book request schema. Replaces title and author."""
    title: Optional[str] = Field(
        None,
        description="Book title (required, non-empty)"
    )
    author: Optional[str] = Field(
        None,
        description="Book author"
    )

    model_config = {
        "json_schema_extra": {
            "example": {
                "title": "Updated Book",
                "author": "Updated Author"
            }
        }
    }


# ============================================================================
# Pydantic Response Models
# ============================================================================


class BookErrorResponse(BaseModel):
    """Error response schema for the book routes."""
    error: str = Field(
        ...,
        min_length=1,
        description="Error message"
    )

    model_config = {
        "json_schema_extra": {
            "example": {
                "error": "Book not found"
            }
        }
    }
