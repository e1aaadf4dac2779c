"""Error Hierarchy — typed, categorized exceptions for every userhub failure mode.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Every error carries a short title (the "error" field) and a human message
    - Client errors (400-level) are recoverable; infrastructure errors (500-level) are critical
    - to_response() produces the REST envelope: {"success": false, "error", "message", "code", ...}
    - severity picks the log level; category and context go to the log record, never the client

Design Decisions:
    - Single hierarchy with AppError base: one global handler catches all (ADR: uniform error shape)
    - Extra payload fields (retryAfter, limit...) merged into the envelope, HTTP headers kept apart
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"

    @property
    def log_level(self) -> int:
        return _LOG_LEVELS[self]


_LOG_LEVELS = {
    ErrorSeverity.INFO: logging.INFO,
    ErrorSeverity.WARNING: logging.WARNING,
    ErrorSeverity.ERROR: logging.ERROR,
    ErrorSeverity.CRITICAL: logging.CRITICAL,
}


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    BUSINESS_RULE = "business_rule"
    RESOURCE_NOT_FOUND = "resource_not_found"
    AUTHENTICATION = "authentication"
    AUTHORIZATION = "authorization"
    RATE_LIMIT = "rate_limit"
    DATABASE = "database"


@dataclass
class ErrorContext:
    """Context attached to an error for logs, never shown verbatim to clients."""
    resource_id: str | None = None
    identity: str | None = None
    debug_info: dict[str, Any] | None = None

    def log_fields(self) -> dict[str, Any]:
        """Non-empty fields, ready to pass as logging extra."""
        fields = {
            "resource_id": self.resource_id,
            "identity": self.identity,
            "debug_info": self.debug_info,
        }
        return {k: v for k, v in fields.items() if v is not None}


class AppError(Exception):
    """Base exception for all userhub errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
        title: str = "Internal Server Error",
        extra: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status
        self.title = title
        self.extra = extra or {}
        self.headers = headers or {}

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        body = {
            "success": False,
            "error": self.title,
            "message": self.message,
            "code": self.code,
        }
        body.update(self.extra)
        return body


# ─── Client Errors (400-level) ──────────────────────────────────

class ValidationError(AppError):
    """Request input is missing or malformed."""
    def __init__(
        self,
        message: str,
        title: str = "Validation Error",
        field: str | None = None,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            message, "VALIDATION_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, context, 400, title,
        )
        self.field = field


class DuplicateEmailError(AppError):
    """A user with the same email (case-insensitive) already exists."""
    def __init__(self, email: str, context: ErrorContext | None = None):
        super().__init__(
            "User with this email already exists",
            "DUPLICATE_EMAIL", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.WARNING, context, 400, "Duplicate email",
        )
        self.email = email


class ResourceNotFoundError(AppError):
    """Requested resource does not exist."""
    def __init__(
        self, resource_type: str, resource_id: object, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{resource_type} with ID {resource_id} not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.INFO,
            context or ErrorContext(resource_id=str(resource_id)),
            404, f"{resource_type} not found",
        )
        self.resource_type = resource_type
        self.resource_id = resource_id


class AuthenticationError(AppError):
    """Credential missing (strict mode) or not recognised."""
    def __init__(
        self, message: str, title: str = "Authentication required",
        context: ErrorContext | None = None,
    ):
        super().__init__(
            message, "AUTHENTICATION_FAILED", ErrorCategory.AUTHENTICATION,
            ErrorSeverity.WARNING, context, 401, title,
        )


class PermissionDeniedError(AppError):
    """Caller identity lacks the role an endpoint requires."""
    def __init__(self, required_roles: list[str], context: ErrorContext | None = None):
        super().__init__(
            f"This endpoint requires one of the roles: {', '.join(required_roles)}",
            "INSUFFICIENT_PERMISSIONS", ErrorCategory.AUTHORIZATION,
            ErrorSeverity.WARNING, context, 403, "Insufficient permissions",
        )
        self.required_roles = required_roles


class RateLimitExceededError(AppError):
    """Caller exceeded the sliding-window request budget."""
    def __init__(
        self,
        retry_after: int,
        limit: int,
        window_seconds: int,
        reset_at: datetime,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            f"Rate limit exceeded. Try again in {retry_after} seconds.",
            "RATE_LIMITED", ErrorCategory.RATE_LIMIT,
            ErrorSeverity.WARNING, context, 429, "Too many requests",
            extra={
                "retryAfter": retry_after,
                "limit": limit,
                "window": describe_window(window_seconds),
            },
            headers={
                "Retry-After": str(retry_after),
                "X-RateLimit-Limit": str(limit),
                "X-RateLimit-Remaining": "0",
                "X-RateLimit-Reset": reset_at.isoformat(),
            },
        )
        self.retry_after = retry_after


# ─── Infrastructure Errors (500-level) ──────────────────────────

class DatabaseError(AppError):
    """Store operation failed unexpectedly."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database error: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL,
            context or ErrorContext(debug_info={"operation": operation}),
            500, "Database error",
        )
        self.operation = operation


def describe_window(window_seconds: int) -> str:
    """Human label for a rate-limit window ("15 minutes", "30 seconds")."""
    if window_seconds % 60 == 0:
        minutes = window_seconds // 60
        return f"{minutes} minute{'s' if minutes != 1 else ''}"
    return f"{window_seconds} seconds"
