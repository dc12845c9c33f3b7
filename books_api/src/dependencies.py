"""
FastAPI dependency injection for stores, services and request metadata.

The application factory places its settings, repositories and services on
`app.state`; the dependencies below hand them to route handlers. Tests
build an application around their own stores and never share process-wide
state.
"""

import json
from typing import Any, Dict, Type
from fastapi import Request
from pydantic import BaseModel

from books_api.src.repositories.book_repo import BookRepository
from books_api.src.services.auth_service import AuthService

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


# ============================================================================
# APPLICATION STATE DEPENDENCIES
# ============================================================================


def get_book_repository(request: Request) -> BookRepository:
    """
    Get the book repository.

    Args:
        request: HTTP request

    Returns:
        Book repository

    Example:
        @router.get("/books")
        async def list_books(repo: BookRepository = Depends(get_book_repository)):
            return await repo.find_all()
    """
    return request.app.state.book_repo


def get_auth_service(request: Request) -> AuthService:
    """
    Get the authentication service.

    Args:
        request: HTTP request

    Returns:
        Authentication service
    """
    return request.app.state.auth_service


# ============================================================================
# REQUEST METADATA DEPENDENCIES
# ============================================================================


async def get_client_ip(request: Request) -> str:
    """
    Get client IP address from request.

    Checks X-Forwarded-For header first (for proxies),
    then falls back to client host.

    Args:
        request: HTTP request

    Returns:
        Client IP address
    """
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        # X-Forwarded-For can contain multiple IPs, get the first one
        return forwarded.split(",")[0].strip()

    if request.client:
        return request.client.host

    return "unknown"



# ============================================================================
# REQUEST BODY
# ============================================================================


async def read_body(request: Request) -> Any:
    """
    Read a JSON or URL-encoded form body.

    Form fields arrive as strings; the last value wins for repeated keys.

    Args:
        request: HTTP request

    Returns:
        Decoded body, or None when the request has no body

    Raises:
        ValueError: If a JSON body cannot be decoded
    """
    content_type = request.headers.get("content-type", "")
    if content_type.startswith(FORM_CONTENT_TYPE):
        form = await request.form()
        return dict(form)

    raw = await request.body()
    if not raw:
        return None
    return json.loads(raw)


def request_body_openapi(model: Type[BaseModel]) -> Dict[str, Any]:
    """OpenAPI request body for handlers that read the body with read_body."""
    schema = model.model_json_schema()
    return {
        "requestBody": {
            "content": {
                "application/json": {"schema": schema},
                FORM_CONTENT_TYPE: {"schema": schema},
            }
        }
    }
