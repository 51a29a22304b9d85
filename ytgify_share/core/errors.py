"""
Domain error hierarchy.

Services raise these errors; the exception handlers registered in
``ytgify_share.server.exception_handlers`` render them as
``{"error", "message", "details"}`` JSON bodies with the matching status code.
"""

from __future__ import annotations

from typing import Any, List, Optional


class YtgifyError(Exception):
    """Base class for all errors raised by the ytgify-share services."""

    status_code: int = 500
    error: str = "Internal server error"

    def __init__(self, message: Optional[str] = None, details: Optional[List[Any]] = None) -> None:
        self.message = message or self.error
        self.details = details
        super().__init__(self.message)

    def to_dict(self) -> dict:
        body: dict = {"error": self.error, "message": self.message}
        if self.details:
            body["details"] = self.details
        return body


class AuthenticationError(YtgifyError):
    status_code = 401
    error = "Unauthorized"

    def __init__(self, message: str = "You must be logged in to access this resource", **kwargs) -> None:
        super().__init__(message, **kwargs)


class InvalidCredentialsError(AuthenticationError):
    error = "Invalid credentials"

    def __init__(self, message: str = "Email or password is incorrect", **kwargs) -> None:
        super().__init__(message, **kwargs)


class PermissionDeniedError(YtgifyError):
    status_code = 403
    error = "Forbidden"

    def __init__(self, message: str = "You do not have permission to access this resource", **kwargs) -> None:
        super().__init__(message, **kwargs)


class NotFoundError(YtgifyError):
    status_code = 404
    error = "Record not found"


class UploadError(YtgifyError):
    status_code = 400
    error = "Upload failed"


class ValidationFailedError(YtgifyError):
    status_code = 422
    error = "Validation failed"

    def __init__(self, message: str = "Validation failed", details: Optional[List[Any]] = None) -> None:
        super().__init__(message, details=details)


class RateLimitedError(YtgifyError):
    status_code = 429
    error = "Too many requests"

    def __init__(self, message: str = "Rate limit exceeded. Please try again later.", **kwargs) -> None:
        super().__init__(message, **kwargs)
