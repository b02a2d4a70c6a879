"""Custom exceptions and error codes."""

from enum import StrEnum
from typing import Any


class ErrorCode(StrEnum):
    """Standardized error codes for the API."""

    # Authentication errors (401)
    UNAUTHORIZED = "UNAUTHORIZED"
    INVALID_TOKEN = "INVALID_TOKEN"

    # Authorization errors (403)
    FORBIDDEN = "FORBIDDEN"

    # Not found errors (404)
    USER_NOT_FOUND = "USER_NOT_FOUND"
    PHOTO_NOT_FOUND = "PHOTO_NOT_FOUND"

    # Validation errors (400)
    VALIDATION_ERROR = "VALIDATION_ERROR"

    # Photo state errors (400)
    ALREADY_MAIN_PHOTO = "ALREADY_MAIN_PHOTO"
    MAIN_PHOTO_DELETION = "MAIN_PHOTO_DELETION"

    # Collaborator and persistence failures (400)
    ASSET_STORE_ERROR = "ASSET_STORE_ERROR"
    PERSISTENCE_ERROR = "PERSISTENCE_ERROR"

    # Rate limiting (429)
    RATE_LIMIT_EXCEEDED = "RATE_LIMIT_EXCEEDED"

    # Server errors (500)
    INTERNAL_ERROR = "INTERNAL_ERROR"


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


class AuthorizationError(AppException):
    """Authorization failed."""

    def __init__(self, message: str = "Access denied") -> None:
        super().__init__(
            error_code=ErrorCode.FORBIDDEN,
            message=message,
            status_code=403,
        )


class UserNotFoundError(AppException):
    """User (caller or directory member) not found."""

    def __init__(self, username: str) -> None:
        super().__init__(
            error_code=ErrorCode.USER_NOT_FOUND,
            message=f"User not found: {username}",
            status_code=404,
            details={"username": username},
        )


class PhotoNotFoundError(AppException):
    """Photo not found in the caller's collection."""

    def __init__(self, photo_id: int) -> None:
        super().__init__(
            error_code=ErrorCode.PHOTO_NOT_FOUND,
            message=f"Photo not found: {photo_id}",
            status_code=404,
            details={"photo_id": photo_id},
        )


class AlreadyMainPhotoError(AppException):
    """Target photo is already the main photo."""

    def __init__(self, photo_id: int) -> None:
        super().__init__(
            error_code=ErrorCode.ALREADY_MAIN_PHOTO,
            message="This is already your main photo",
            status_code=400,
            details={"photo_id": photo_id},
        )


class MainPhotoDeletionError(AppException):
    """The main photo cannot be deleted."""

    def __init__(self, photo_id: int) -> None:
        super().__init__(
            error_code=ErrorCode.MAIN_PHOTO_DELETION,
            message="Cannot delete main photo",
            status_code=400,
            details={"photo_id": photo_id},
        )


class AssetStoreError(AppException):
    """The remote asset store rejected or failed an upload/removal.

    The message is the store's own and is surfaced verbatim.
    """

    def __init__(self, message: str) -> None:
        super().__init__(
            error_code=ErrorCode.ASSET_STORE_ERROR,
            message=message,
            status_code=400,
        )


class PersistenceError(AppException):
    """A unit of work could not be committed."""

    def __init__(self, message: str) -> None:
        super().__init__(
            error_code=ErrorCode.PERSISTENCE_ERROR,
            message=message,
            status_code=400,
        )
