"""Translation of SQLAlchemy failures into domain exceptions."""

from collections.abc import Iterator
from contextlib import contextmanager

import structlog
from sqlalchemy.exc import IntegrityError, NoResultFound, SQLAlchemyError

from rolegate.core import messages
from rolegate.core.errors.exceptions import (
    AppException,
    ConflictError,
    InternalError,
    NotFoundError,
    ValidationError,
)


logger = structlog.get_logger()

# SQLSTATE for foreign_key_violation (PostgreSQL)
FOREIGN_KEY_VIOLATION = "23503"


def is_foreign_key_violation(exc: IntegrityError) -> bool:
    """Tell a dangling reference apart from a uniqueness clash.

    asyncpg errors carry the SQLSTATE; SQLite only reports it in the message.
    """
    orig = exc.orig
    if getattr(orig, "sqlstate", None) == FOREIGN_KEY_VIOLATION:
        return True
    return "FOREIGN KEY constraint failed" in str(orig)


@contextmanager
def translate_persistence_errors(resource: str) -> Iterator[None]:
    """Map store failures raised inside the block onto the error taxonomy.

    Unique violations become ``ConflictError``, foreign-key violations
    become ``ValidationError``, missing rows become ``NotFoundError`` and
    anything else collapses to ``InternalError``. Driver detail is logged,
    never returned.

    Usage:
        with translate_persistence_errors("Role"):
            role = await self.repo.create(...)
    """
    try:
        yield
    except AppException:
        raise
    except IntegrityError as exc:
        foreign_key = is_foreign_key_violation(exc)
        logger.warning(
            "persistence_integrity_error",
            resource=resource,
            foreign_key=foreign_key,
            error=str(exc.orig),
        )
        if foreign_key:
            raise ValidationError(
                messages.REFERENCE_NOT_FOUND.format(resource=resource)
            ) from exc
        raise ConflictError(messages.ALREADY_EXISTS.format(resource=resource)) from exc
    except NoResultFound as exc:
        raise NotFoundError(f"{resource} not found.", resource=resource) from exc
    except SQLAlchemyError as exc:
        logger.exception("persistence_error", resource=resource)
        raise InternalError(messages.INTERNAL_SERVER_ERROR) from exc
