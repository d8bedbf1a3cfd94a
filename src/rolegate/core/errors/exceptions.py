"""Domain exceptions for the application.

These exceptions represent business-logic errors and are converted to the
``{success: false, ...}`` response envelope by the exception handlers.
"""

from typing import Any


class AppException(Exception):
    """Base exception for all application errors.

    All domain exceptions should inherit from this class.

    Attributes:
        message: Human-readable error message
        error_code: Machine-readable error code for clients
        status_code: HTTP status code for the response
        details: Additional error details
    """

    message: str = "An unexpected error occurred"
    error_code: str = "internal_error"
    status_code: int = 500

    def __init__(
        self,
        message: str | None = None,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message or self.message
        self.error_code = error_code or self.error_code
        self.details = details or {}
        super().__init__(self.message)


class NotFoundError(AppException):
    """Raised when a requested resource is not found.

    Example:
        raise NotFoundError(resource="User", resource_id=user_id)
    """

    message = "Resource not found"
    error_code = "not_found"
    status_code = 404

    def __init__(
        self,
        message: str | None = None,
        resource: str | None = None,
        resource_id: int | str | None = None,
        **kwargs: Any,
    ) -> None:
        details = kwargs.pop("details", {})
        if resource:
            details["resource"] = resource
        if resource_id is not None:
            details["resource_id"] = resource_id
        if message is None and resource:
            message = f"{resource} with id {resource_id} not found."
        super().__init__(message=message, details=details, **kwargs)


class ConflictError(AppException):
    """Raised when a write would violate a uniqueness constraint.

    Example:
        raise ConflictError("Role already exists.", details={"name": name})
    """

    message = "Resource conflict"
    error_code = "conflict"
    status_code = 409


class ValidationError(AppException):
    """Raised when request data fails validation or references missing rows.

    Example:
        raise ValidationError(
            "One or more permissions do not exist.",
            errors=[{"field": "permission_ids", "message": "Unknown id 42"}]
        )
    """

    message = "Validation error"
    error_code = "validation_error"
    status_code = 422

    def __init__(
        self,
        message: str | None = None,
        errors: list[dict[str, Any]] | None = None,
        **kwargs: Any,
    ) -> None:
        details = kwargs.pop("details", {})
        if errors:
            details["errors"] = errors
        super().__init__(message=message, details=details, **kwargs)


class UnauthorizedError(AppException):
    """Raised when authentication is required but not provided or invalid."""

    message = "Access denied"
    error_code = "unauthorized"
    status_code = 401


class ForbiddenError(AppException):
    """Raised when an authenticated user lacks permission for a route.

    Example:
        raise ForbiddenError(details={"required_permissions": ["view_roles"]})
    """

    message = "Access denied"
    error_code = "forbidden"
    status_code = 403


class BadRequestError(AppException):
    """Raised for general client errors."""

    message = "Bad request"
    error_code = "bad_request"
    status_code = 400


class InternalError(AppException):
    """Raised when a persistence or other unexpected failure is translated.

    The message stays generic; the cause is only logged.
    """

    message = "Internal server error"
    error_code = "internal_error"
    status_code = 500
