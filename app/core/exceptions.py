# app/core/exceptions.py
"""
Domain errors raised by services and repositories.

Services never build HTTP responses themselves; `app.main` registers a single
handler that turns any AppError into `{"detail": ...}` with `status_code`.
"""

from fastapi import status


class AppError(Exception):
    """Base class for errors the API knows how to report."""

    status_code: int = status.HTTP_400_BAD_REQUEST
    default_detail: str = "Request failed"

    def __init__(self, detail: str | None = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Not found"


class ConflictError(AppError):
    """Unique constraint violation or a state that forbids the operation."""

    status_code = status.HTTP_409_CONFLICT
    default_detail = "Conflict"


class InvalidCodeError(AppError):
    """
    Wrong or expired OTP, bad credentials, bad token.

    The message never says which check failed.
    """

    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Invalid or expired code"


class ForbiddenError(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "Forbidden"


class ValidationError(AppError):
    status_code = 422
    default_detail = "Invalid input"


class PayloadTooLargeError(AppError):
    status_code = 413
    default_detail = "Payload too large"
