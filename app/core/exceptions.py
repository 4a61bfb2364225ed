"""
Application error taxonomy.

Every rejection the API produces maps to one of these classes. Each carries a
stable machine-readable ``error_code`` plus a human-readable message, and the
handlers registered in ``main.py`` render them as
``{"error": <error_code>, "detail": <message>}``.
"""

from typing import Dict, List, Optional

from fastapi import status


class AppError(Exception):
    """Base class for all errors surfaced through the API."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    error_code: str = "internal_error"
    message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.message
        super().__init__(self.message)

    @property
    def headers(self) -> Optional[Dict[str, str]]:
        return None


class ValidationError(AppError):
    """Malformed request body or parameters."""
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    error_code = "validation_error"
    message = "Validation error"

    def __init__(self, fields: List[dict], message: Optional[str] = None):
        self.fields = fields
        super().__init__(message)


class Unauthenticated(AppError):
    """Missing, malformed, invalid or expired credentials."""
    status_code = status.HTTP_401_UNAUTHORIZED
    error_code = "unauthenticated"
    message = "Could not validate credentials"

    @property
    def headers(self) -> Optional[Dict[str, str]]:
        return {"WWW-Authenticate": "Bearer"}


class Forbidden(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    error_code = "forbidden"
    message = "Insufficient permissions"


class NotFound(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    error_code = "not_found"
    message = "Resource not found"


class NotFoundOrUnauthorized(AppError):
    """
    The resource does not exist or belongs to someone else.

    Both conditions share one response, so other users' resources are not
    revealed.
    """
    status_code = status.HTTP_404_NOT_FOUND
    error_code = "not_found_or_unauthorized"
    message = "Resource not found or unauthorized"


class ProfileRequired(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    error_code = "profile_required"
    message = "Profile not found. Please complete your profile first."


class ProfileAlreadyExists(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    error_code = "profile_already_exists"
    message = "Profile already exists"


class EmailAlreadyRegistered(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    error_code = "email_already_registered"
    message = "Email already registered"


class DuplicateApplication(AppError):
    status_code = status.HTTP_409_CONFLICT
    error_code = "duplicate_application"
    message = "You have already applied to this job"


class JobClosed(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    error_code = "job_closed"
    message = "Job is no longer accepting applications"


class InvalidStatusTransition(AppError):
    status_code = status.HTTP_409_CONFLICT
    error_code = "invalid_status_transition"
    message = "Status transition not allowed"


class InvalidOrExpiredOTP(AppError):
    """Wrong, reused and expired codes all produce this same error."""
    status_code = status.HTTP_400_BAD_REQUEST
    error_code = "invalid_or_expired_otp"
    message = "Invalid or expired OTP"


class CorruptDigest(AppError):
    """A stored password digest could not be parsed."""
    error_code = "corrupt_digest"
    message = "Stored credential is unreadable"


class InternalError(AppError):
    pass
