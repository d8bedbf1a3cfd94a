"""Error handling module rendering failures into the response envelope."""

from rolegate.core.errors.exceptions import (
    AppException,
    BadRequestError,
    ConflictError,
    ForbiddenError,
    InternalError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)
from rolegate.core.errors.handlers import (
    ErrorEnvelope,
    FieldError,
    register_exception_handlers,
)
from rolegate.core.errors.persistence import translate_persistence_errors


__all__ = [
    # Exceptions
    "AppException",
    "BadRequestError",
    "ConflictError",
    # Handlers
    "ErrorEnvelope",
    "FieldError",
    "ForbiddenError",
    "InternalError",
    "NotFoundError",
    "UnauthorizedError",
    "ValidationError",
    "register_exception_handlers",
    "translate_persistence_errors",
]
