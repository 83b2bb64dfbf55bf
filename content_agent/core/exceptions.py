"""
Application error taxonomy.

Services raise these; the handlers registered in main.py turn them into
JSON responses of the form {"error": code, "detail": message, ...details}.
"""
from typing import Any, Dict, Optional


class AppError(Exception):
    """Base class for errors that map onto an HTTP response."""
    code = "internal_error"
    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        self.message = message or self.default_message
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        body = {"error": self.code, "detail": self.message}
        body.update(self.details)
        return body


class ValidationError(AppError):
    code = "validation_error"
    status_code = 400
    default_message = "Validation failed"


class InvalidState(AppError):
    code = "invalid_state"
    status_code = 400
    default_message = "Operation not allowed in the current state"


class Unauthorized(AppError):
    code = "unauthorized"
    status_code = 401
    default_message = "Invalid or expired credentials"


class Forbidden(AppError):
    code = "forbidden"
    status_code = 403
    default_message = "Access denied"


class NotFound(AppError):
    code = "not_found"
    status_code = 404
    default_message = "Resource not found"


class Conflict(AppError):
    code = "conflict"
    status_code = 409
    default_message = "Resource already exists"


class QuotaExceeded(AppError):
    code = "quota_exceeded"
    status_code = 429
    default_message = "Monthly usage limit reached"


class UpstreamError(AppError):
    code = "upstream_error"
    status_code = 502
    default_message = "AI service temporarily unavailable. Please try again later."


class InternalError(AppError):
    pass


class RateLimited(AppError):
    code = "rate_limited"
    status_code = 429
    default_message = "Too many requests"
