"""
Authentication router.

Provides REST API endpoints for:
- Password login by email
- Security-question verification

Errors are rendered under the "message" key. Passwords and submitted
answers are never logged.
"""

import structlog
from fastapi import APIRouter, Depends, Request
from pydantic import ValidationError

from books_api.src.dependencies import (
    get_auth_service, get_client_ip, read_body, request_body_openapi
)
from books_api.src.errors import AuthenticationError, ClientInputError, UnexpectedError
from books_api.src.models.auth import LoginRequest, MessageResponse, SecurityAnswersRequest
from books_api.src.services.auth_service import AuthService, SecurityCheckResult

logger = structlog.get_logger(__name__)

router = APIRouter(
    tags=["Authentication"],
    responses={
        400: {"model": MessageResponse, "description": "Bad Request"},
        401: {"model": MessageResponse, "description": "Unauthorized"},
        500: {"model": MessageResponse, "description": "Internal Server Error"}
    }
)

INVALID_BODY_MESSAGE = "Bad Request: Invalid request body"
MISSING_CREDENTIALS_MESSAGE = "Bad Request: Missing email or password"
INVALID_CREDENTIALS_MESSAGE = "Unauthorized: Invalid email or password"


# ============================================================================
# AUTHENTICATION ENDPOINTS
# ============================================================================


@router.post(
    "/login",
    response_model=MessageResponse,
    summary="User Login",
    openapi_extra=request_body_openapi(LoginRequest)
)
async def login(
    request: Request,
    auth_service: AuthService = Depends(get_auth_service),
    client_ip: str = Depends(get_client_ip)
) -> MessageResponse:
    """
    Check a user's email and password.

    Accepts a JSON or URL-encoded form body. An unknown email and a wrong
    password produce the same response, as does a non-string email or
    password, which can never match a user.

    **Error Responses:**
    - 400: Email or password missing
    - 401: Invalid credentials
    """
    try:
        body = await read_body(request)
    except ValueError:
        body = None

    if not isinstance(body, dict) or not body.get("email") or not body.get("password"):
        logger.warning("login_rejected_missing_fields", ip_address=client_ip)
        raise ClientInputError(MISSING_CREDENTIALS_MESSAGE, body_key="message")

    try:
        payload = LoginRequest.model_validate(body)
    except ValidationError as e:
        logger.warning(
            "login_rejected_invalid_types", ip_address=client_ip, error_count=e.error_count()
        )
        raise AuthenticationError(INVALID_CREDENTIALS_MESSAGE, body_key="message") from e

    logger.info("login_attempt", email=payload.email, ip_address=client_ip)

    try:
        user = await auth_service.authenticate_user(payload.email, payload.password)
    except Exception as e:
        raise UnexpectedError(
            "An error occurred while logging in", body_key="message", cause=e
        ) from e

    if not user:
        logger.warning("login_failed", email=payload.email, ip_address=client_ip)
        raise AuthenticationError(INVALID_CREDENTIALS_MESSAGE, body_key="message")

    logger.info("login_success", email=payload.email, ip_address=client_ip)
    return MessageResponse(message="Authentication successful")


@router.post(
    "/users/{email}/verify-security-question",
    response_model=MessageResponse,
    summary="Verify Security Questions",
    openapi_extra={
        "requestBody": {
            "required": True,
            "content": {
                "application/json": {
                    "schema": SecurityAnswersRequest.model_json_schema()
                }
            }
        }
    }
)
async def verify_security_questions(
    email: str,
    request: Request,
    auth_service: AuthService = Depends(get_auth_service)
) -> MessageResponse:
    """
    Check the answers to a user's security questions.

    The body is validated against SecurityAnswersRequest before the user is
    looked up. Answers are compared in order and case-sensitively.

    **Error Responses:**
    - 400: Body fails validation or answer count differs from question count
    - 401: Unknown user or incorrect answers
    """
    try:
        body = await read_body(request)
    except ValueError:
        body = None

    try:
        answers_request = SecurityAnswersRequest.model_validate(body)
    except ValidationError as e:
        logger.warning(
            "security_answers_rejected_invalid_body",
            email=email,
            error_count=e.error_count()
        )
        raise ClientInputError(INVALID_BODY_MESSAGE, body_key="message") from e

    answers = [item.answer for item in answers_request.answers]

    try:
        result = await auth_service.verify_security_answers(email, answers)
    except Exception as e:
        raise UnexpectedError(
            "An error occurred while verifying security questions",
            body_key="message",
            cause=e
        ) from e

    if result is SecurityCheckResult.USER_NOT_FOUND:
        raise AuthenticationError("Unauthorized: User not found", body_key="message")

    if result is SecurityCheckResult.COUNT_MISMATCH:
        raise ClientInputError(INVALID_BODY_MESSAGE, body_key="message")

    if result is SecurityCheckResult.INCORRECT:
        raise AuthenticationError("Unauthorized: Incorrect answers", body_key="message")

    return MessageResponse(message="Security questions successfully answered")
