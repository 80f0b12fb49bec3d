"""Custom exceptions and error codes."""

from enum import StrEnum
from typing import Any


class ErrorCode(StrEnum):
    """Standardized error codes for the API."""

    # Authentication errors (401)
    UNAUTHORIZED = "UNAUTHORIZED"
    INVALID_TOKEN = "INVALID_TOKEN"
    TOKEN_EXPIRED = "TOKEN_EXPIRED"

    # Authorization errors (403)
    FORBIDDEN = "FORBIDDEN"

    # Not found errors (404)
    PROFILE_NOT_FOUND = "PROFILE_NOT_FOUND"
    CATEGORY_NOT_FOUND = "CATEGORY_NOT_FOUND"
    RECOMMENDATION_NOT_FOUND = "RECOMMENDATION_NOT_FOUND"

    # Validation errors (400)
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_USERNAME = "INVALID_USERNAME"

    # Conflict errors (409)
    USERNAME_TAKEN = "USERNAME_TAKEN"

    # Rate limiting (429)
    RATE_LIMIT_EXCEEDED = "RATE_LIMIT_EXCEEDED"

    # Server errors (500)
    INTERNAL_ERROR = "INTERNAL_ERROR"
    DATABASE_ERROR = "DATABASE_ERROR"
    USERNAME_CHECK_FAILED = "USERNAME_CHECK_FAILED"


class AppException(Exception):
    """Base application exception."""

    def __init__(
        self,
        error_code: ErrorCode,
        message: str,
        status_code: int = 400,
        details: Any | None = None,
    ) -> None:
        self.error_code = error_code
        self.message = message
        self.status_code = status_code
        self.details = details
        super().__init__(self.message)


class AuthenticationError(AppException):
    """Authentication failed."""

    def __init__(
        self,
        message: str = "Authentication required",
        error_code: ErrorCode = ErrorCode.UNAUTHORIZED,
    ) -> None:
        super().__init__(
            error_code=error_code,
            message=message,
            status_code=401,
        )


class ProfileNotFoundError(AppException):
    """Profile not found (by id or by username)."""

    def __init__(self, identifier: str) -> None:
        super().__init__(
            error_code=ErrorCode.PROFILE_NOT_FOUND,
            message=f"Profile not found: {identifier}",
            status_code=404,
            details={"profile": identifier},
        )


class CategoryNotFoundError(AppException):
    """Category not found."""

    def __init__(self, category_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.CATEGORY_NOT_FOUND,
            message=f"Category not found: {category_id}",
            status_code=404,
            details={"category_id": category_id},
        )


class RecommendationNotFoundError(AppException):
    """Recommendation not found."""

    def __init__(self, recommendation_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.RECOMMENDATION_NOT_FOUND,
            message=f"Recommendation not found: {recommendation_id}",
            status_code=404,
            details={"recommendation_id": recommendation_id},
        )


class InvalidUsernameError(AppException):
    """Username breaks the length or character rules."""

    def __init__(self, username: str, message: str) -> None:
        super().__init__(
            error_code=ErrorCode.INVALID_USERNAME,
            message=message,
            status_code=400,
            details={"username": username},
        )


class UsernameTakenError(AppException):
    """Username already belongs to another account.

    Raised by the profile repository when the unique username index rejects
    a write, i.e. a concurrent claim won the race.
    """

    def __init__(self, username: str) -> None:
        super().__init__(
            error_code=ErrorCode.USERNAME_TAKEN,
            message="Username is already taken",
            status_code=409,
            details={"username": username},
        )


class UsernameCheckFailedError(AppException):
    """The availability lookup could not be performed."""

    def __init__(self) -> None:
        super().__init__(
            error_code=ErrorCode.USERNAME_CHECK_FAILED,
            message="Error checking username availability",
            status_code=500,
        )
