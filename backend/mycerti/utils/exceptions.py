"""Custom exceptions and error handling utilities."""
from typing import Any, Dict, Optional

from fastapi import status
from sqlalchemy.exc import IntegrityError


class AppException(Exception):
    """Base exception for application errors."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, extra: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.extra = extra or {}

    def to_dict(self) -> Dict[str, Any]:
        """Uniform response body: {"error": message} plus any extra fields."""
        return {"error": self.message, **self.extra}


class ValidationError(AppException):
    """Raised when validation fails."""
    status_code = status.HTTP_400_BAD_REQUEST


class ConflictError(AppException):
    """Raised when a unique value (email, subdomain) is already in use."""
    status_code = status.HTTP_400_BAD_REQUEST


class QuotaExceededError(AppException):
    """Raised when a plan limit would be exceeded."""
    status_code = status.HTTP_400_BAD_REQUEST


class AuthenticationError(AppException):
    """Raised when authentication fails."""
    status_code = status.HTTP_401_UNAUTHORIZED


class NotFoundError(AppException):
    """Raised when a resource is not found."""
    status_code = status.HTTP_404_NOT_FOUND


class AuthorizationError(AppException):
    """Raised when the caller may not touch a resource.

    Reported as 404 so user-facing routes do not reveal that the resource exists.
    """
    status_code = status.HTTP_404_NOT_FOUND


class InternalError(AppException):
    """Raised for unexpected failures; details stay in the server log."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


def handle_database_error(error: Exception, operation: str) -> AppException:
    """
    Convert database errors to application exceptions.

    Args:
        error: The database error
        operation: Description of the operation that failed

    Returns:
        ConflictError for integrity violations, InternalError otherwise
    """
    if isinstance(error, IntegrityError):
        return ConflictError(f"Resource already exists: {operation}")
    return InternalError("Internal server error")


def access_denied_error(resource: str = "Site") -> AuthorizationError:
    """Create the 404-shaped error used when a resource is out of the caller's reach."""
    return AuthorizationError(f"{resource} not found or access denied")


def validation_error(message: str, **extra: Any) -> ValidationError:
    """Create a standardized 400 validation error."""
    return ValidationError(message, extra)


def conflict_error(message: str) -> ConflictError:
    """Create a standardized 400 conflict error."""
    return ConflictError(message)


def quota_exceeded_error(message: str) -> QuotaExceededError:
    """Create a standardized 400 quota error."""
    return QuotaExceededError(message)


def authentication_error(message: str = "Invalid credentials") -> AuthenticationError:
    """
    Create a standardized 401 authentication error.

    Args:
        message: Authentication error message

    Returns:
        AuthenticationError
    """
    return AuthenticationError(message)
