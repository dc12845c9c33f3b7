"""
FastAPI application entry point for the In-N-Out-Books API.

This module provides the application factory with:
- Landing page, health and metrics endpoints
- Book and authentication routers
- Request/response logging with correlation IDs
- Prometheus metrics
- Security headers, CORS, GZip and trailing-slash tolerant routing
- Central error rendering (application errors, unmatched routes, crashes)
"""

import time
import traceback
import uuid
import structlog
import uvicorn
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request, Response, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import HTMLResponse, JSONResponse, PlainTextResponse
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from prometheus_client import CollectorRegistry, CONTENT_TYPE_LATEST

from books_api.src.config import get_settings, Settings
from books_api.src.errors import ApiError
from books_api.src.repositories.book_repo import BookRepository
from books_api.src.repositories.user_repo import UserRepository
from books_api.src.repositories.seed import build_book_repository, build_user_repository
from books_api.src.routers import auth, books
from books_api.src.services.auth_service import AuthService, build_password_context
from shared.logging import bind_context, clear_context, configure_logging
from shared.metrics import HTTPMetrics, get_metrics_handler, setup_metrics

logger = structlog.get_logger(__name__)

LANDING_PAGE = """<html>
<head>
  <title>In-N-Out-Books</title>
  <style>
    body, h1, h2 { margin: 0; padding: 0; border: 0; }
    body { background: #f0f0f0; color: #333; margin: 1.25rem; font-size: 1.25rem; font-family: 'Arial', sans-serif; }
    h1, h2 { color: #333; text-align: center; }
    .container { width: 60%; margin: 0 auto; }
    .content { background: #fff; border: 1px solid #ccc; padding: 1rem; box-shadow: 0 0 10px rgba(0, 0, 0, 0.1); }
    .content h3 { margin-top: 0; }
  </style>
</head>
<body>
  <div class="container">
    <header>
      <h1>In-N-Out-Books</h1>
      <h2>Manage Your Book Collection</h2>
    </header>
    <br />
    <main>
      <div class="content">
        <h3>Welcome</h3>
        <p>Welcome to In-N-Out-Books, a platform inspired by the love of books and designed to help you manage your own collection. Whether you are an avid reader keeping track of your reads or a book club organizer managing a shared collection, In-N-Out-Books caters to your needs.</p>
      </div>
    </main>
  </div>
</body>
</html>
"""

# ============================================================================
# Middleware
# ============================================================================


def _route_label(scope: Dict[str, Any], root_path: str) -> str:
    """
    Route template for metric labels, so ids do not explode cardinality.

    Reads the route the router matched. When an included router mounts its
    routes under a prefix, the prefix shows up as growth of `root_path`
    and is put back in front of the route's own path.
    """
    route = scope.get("route")
    path = getattr(route, "path", None)
    if not path:
        return "unmatched"

    matched_root = scope.get("root_path", "")
    prefix = matched_root[len(root_path):] if matched_root.startswith(root_path) else ""
    if prefix and not path.startswith(prefix):
        return prefix + path
    return path


class TrailingSlashMiddleware:
    """Route "/api/books/" like "/api/books", as non-strict routing does."""

    def __init__(self, app):
        self.app = app

    async def __call__(self, scope, receive, send):
        if scope["type"] == "http":
            path = scope["path"]
            if len(path) > 1 and path.endswith("/"):
                scope = dict(scope, path=path.rstrip("/") or "/")
        await self.app(scope, receive, send)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Middleware for request logging, correlation IDs and metrics."""

    def __init__(self, app, metrics: Optional[HTTPMetrics] = None):
        super().__init__(app)
        self.metrics = metrics

    async def dispatch(self, request: Request, call_next):
        """Process request and log details."""
        correlation_id = request.headers.get("X-Correlation-ID") or str(uuid.uuid4())
        request.state.correlation_id = correlation_id

        method = request.method
        path = request.url.path
        root_path = request.scope.get("root_path", "")

        clear_context()
        bind_context(correlation_id=correlation_id)

        start_time = time.perf_counter()
        logger.info("request_started", method=method, path=path)

        try:
            response = await call_next(request)
        except Exception as e:
            duration = time.perf_counter() - start_time
            logger.error(
                "request_failed",
                method=method,
                path=path,
                error=str(e),
                duration=f"{duration:.3f}s"
            )
            if self.metrics is not None:
                route = _route_label(request.scope, root_path)
                self.metrics.requests_total.labels(
                    method=method, route=route, status=status.HTTP_500_INTERNAL_SERVER_ERROR
                ).inc()
            raise

        duration = time.perf_counter() - start_time

        if self.metrics is not None:
            route = _route_label(request.scope, root_path)
            self.metrics.requests_total.labels(
                method=method, route=route, status=response.status_code
            ).inc()
            self.metrics.request_duration.labels(method=method, route=route).observe(duration)

        logger.info(
            "request_completed",
            method=method,
            path=path,
            status_code=response.status_code,
            duration=f"{duration:.3f}s"
        )

        response.headers["X-Correlation-ID"] = correlation_id
        return response


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Middleware to add security headers to responses."""

    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        return response


# ============================================================================
# Exception Handlers
# ============================================================================


async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    """Render application errors with the status code of their kind."""
    settings: Settings = request.app.state.settings
    cause = getattr(exc, "cause", None)
    log = logger.error if exc.status_code >= 500 else logger.warning
    log(
        "api_error",
        path=request.url.path,
        kind=exc.kind.value,
        status_code=exc.status_code,
        message=exc.message,
        cause=repr(cause) if cause is not None else None
    )
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_body(include_detail=settings.is_development)
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed JSON or wrongly typed fields are client input errors."""
    errors = jsonable_encoder(exc.errors())
    logger.warning("validation_error", path=request.url.path, error_count=len(errors))
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "Bad Request", "detail": errors}
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> Response:
    """Unmatched method/path answers with a plain-text 404."""
    if exc.status_code in (status.HTTP_404_NOT_FOUND, status.HTTP_405_METHOD_NOT_ALLOWED):
        logger.info("route_not_found", method=request.method, path=request.url.path)
        return PlainTextResponse("404 Not Found", status_code=status.HTTP_404_NOT_FOUND)

    logger.warning(
        "http_exception",
        path=request.url.path,
        status_code=exc.status_code,
        detail=exc.detail
    )
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail},
        headers=getattr(exc, "headers", None)
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Terminal handler. The traceback is only returned in development."""
    settings: Settings = request.app.state.settings
    logger.error(
        "unexpected_exception",
        path=request.url.path,
        error=str(exc),
        exc_info=exc
    )
    error: Any = {}
    if settings.is_development:
        error = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"message": "Internal Server Error", "error": error}
    )


# ============================================================================
# Application Factory
# ============================================================================


def create_app(
    settings: Optional[Settings] = None,
    book_repo: Optional[BookRepository] = None,
    user_repo: Optional[UserRepository] = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        settings: Application settings (cached settings when omitted)
        book_repo: Book store (seeded or empty per settings when omitted)
        user_repo: User store (seeded or empty per settings when omitted)

    Returns:
        Configured application
    """
    settings = settings or get_settings()

    configure_logging(
        log_level=settings.log_level,
        json_logs=settings.log_format == "json",
        app_name=settings.app_name,
        environment=settings.environment,
    )

    registry = CollectorRegistry()
    http_metrics, auth_metrics = setup_metrics(registry)
    pwd_context = build_password_context(settings.password_bcrypt_rounds)

    if book_repo is None:
        book_repo = build_book_repository() if settings.seed_data_enabled else BookRepository()
    if user_repo is None:
        user_repo = (
            build_user_repository(pwd_context.hash)
            if settings.seed_data_enabled else UserRepository()
        )

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Manage a book collection and check user credentials.",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        redirect_slashes=False,
    )

    app.state.settings = settings
    app.state.book_repo = book_repo
    app.state.user_repo = user_repo
    app.state.auth_service = AuthService(
        user_repo, settings=settings, metrics=auth_metrics, pwd_context=pwd_context
    )
    app.state.metrics_registry = registry

    # Middleware (last added runs first)
    if settings.cors_enabled:
        logger.info("configuring_cors", origins=settings.cors_origins)
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.cors_origins,
            allow_credentials=True,
            allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
            allow_headers=["*"],
        )
    app.add_middleware(GZipMiddleware, minimum_size=1000)
    if settings.security_headers_enabled:
        app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(
        RequestLoggingMiddleware,
        metrics=http_metrics if settings.metrics_enabled else None
    )
    app.add_middleware(TrailingSlashMiddleware)

    app.add_exception_handler(ApiError, api_error_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    @app.get("/", response_class=HTMLResponse, include_in_schema=False)
    async def landing_page() -> str:
        return LANDING_PAGE

    @app.get("/health", tags=["Health"])
    async def health_check() -> Dict[str, Any]:
        """Liveness check without touching the stores."""
        return {
            "status": "healthy",
            "service": settings.app_name,
            "version": settings.app_version,
            "environment": settings.environment
        }

    if settings.metrics_enabled:
        metrics_handler = get_metrics_handler(registry)

        @app.get(settings.metrics_endpoint, tags=["Monitoring"], response_class=PlainTextResponse)
        async def metrics() -> Response:
            """Prometheus metrics endpoint."""
            return Response(content=metrics_handler(), media_type=CONTENT_TYPE_LATEST)

    app.include_router(books.router, prefix=settings.api_prefix)
    app.include_router(auth.router, prefix=settings.api_prefix)

    logger.info(
        "application_created",
        version=settings.app_version,
        seed_data=settings.seed_data_enabled,
        metrics=settings.metrics_enabled
    )
    return app


app = create_app()

# ============================================================================
# Application Entry Point
# ============================================================================

if __name__ == "__main__":
    settings = get_settings()
    logger.info(
        "starting_uvicorn_server",
        host=settings.host,
        port=settings.port,
        reload=settings.debug
    )

    uvicorn.run(
        "books_api.src.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
        access_log=True,
    )
