"""Error Handlers — global exception handlers for the userhub API.

Invariants:
    - AppError → its own envelope, status and headers (e.g. Retry-After on 429), logged at
      the level its severity names, with category and context
    - RequestValidationError → 400 with field-level details
    - Unmatched path or method (404/405 from routing) → 404 "Route not found" with the
      endpoint map
    - 4xx responses of rate-limited routes keep the X-RateLimit-* headers already earned
    - Exception (catch-all) → 500; detail hidden in production

Design Decisions:
    - Four-layer handler: domain (AppError), validation (Pydantic), routing (HTTPException),
      catch-all (Exception)
    - Extracted from main.py to keep the app factory short
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from userhub.core.errors import AppError

logger = logging.getLogger(__name__)

AVAILABLE_ENDPOINTS = {
    "health": "GET /health",
    "users": "GET /api/users",
    "contact": "POST /api/contact",
    "root": "GET /",
}

# A known path with an unserved method is reported like an unknown path.
ROUTE_MISS_STATUSES = {
    status.HTTP_404_NOT_FOUND, status.HTTP_405_METHOD_NOT_ALLOWED,
}


def rate_limit_headers(request: Request) -> dict[str, str]:
    """X-RateLimit-* headers recorded by enforce_rate_limit for this request."""
    return dict(getattr(request.state, "rate_limit_headers", None) or {})


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_app_error_handler(app)
    _register_validation_error_handler(app)
    _register_http_error_handler(app)
    _register_generic_error_handler(app)


def _register_app_error_handler(app: FastAPI) -> None:
    """Register domain/infrastructure error handler."""

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        """Handle all userhub domain/infrastructure errors."""
        identity = getattr(request.state, "identity", None)
        if identity is not None and exc.context.identity is None:
            exc.context.identity = identity.name
        logger.log(
            exc.severity.log_level,
            f"AppError: {exc.message}",
            extra={
                "error_code": exc.code,
                "category": exc.category.value,
                "path": request.url.path,
                **exc.context.log_fields(),
            },
        )
        headers = {**rate_limit_headers(request), **exc.headers}
        return JSONResponse(
            status_code=exc.http_status,
            content=exc.to_response(),
            headers=headers or None,
        )


def _register_validation_error_handler(app: FastAPI) -> None:
    """Register Pydantic validation error handler."""

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError,
    ):
        """Handle Pydantic validation errors."""
        logger.warning(
            f"Validation error on {request.url.path}: {exc.errors()}",
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=_build_validation_error_response(exc),
            headers=rate_limit_headers(request) or None,
        )


def _register_http_error_handler(app: FastAPI) -> None:
    """Register routing-level HTTP error handler (404/405)."""

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code in ROUTE_MISS_STATUSES:
            return JSONResponse(
                status_code=status.HTTP_404_NOT_FOUND,
                content=_build_route_not_found_response(request),
            )
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "success": False,
                "error": str(exc.detail),
                "message": f"Cannot {request.method} {request.url.path}",
                "code": "HTTP_ERROR",
            },
            headers=getattr(exc, "headers", None),
        )


def _register_generic_error_handler(app: FastAPI) -> None:
    """Register catch-all error handler."""

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all — internal details only outside production."""
        logger.error(
            f"Unhandled exception on {request.url.path}: {exc}",
            exc_info=True,
        )
        settings = request.app.state.settings
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "success": False,
                "error": "Internal Server Error",
                "message": (
                    "Something went wrong!" if settings.is_production else str(exc)
                ),
                "code": "INTERNAL_ERROR",
            },
        )


def _build_validation_error_response(exc: RequestValidationError) -> dict:
    """Build structured validation error response."""
    details = [
        {
            "field": ".".join(str(loc) for loc in e["loc"]),
            "message": e["msg"],
            "type": e["type"],
        }
        for e in exc.errors()
    ]
    summary = "; ".join(f"{d['field']}: {d['message']}" for d in details)
    return {
        "success": False,
        "error": "Validation Error",
        "message": f"Invalid request data: {summary}" if summary else "Invalid request data",
        "code": "VALIDATION_ERROR",
        "details": details,
    }


def _build_route_not_found_response(request: Request) -> dict:
    target = request.url.path
    if request.url.query:
        target = f"{target}?{request.url.query}"
    return {
        "success": False,
        "error": "Route not found",
        "message": f"Cannot {request.method} {target}",
        "code": "ROUTE_NOT_FOUND",
        "availableEndpoints": AVAILABLE_ENDPOINTS,
    }
