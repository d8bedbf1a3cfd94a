"""Database layer - session management, base models, and mixins."""

from rolegate.core.database.base import Base, IntegerIdMixin, TimestampMixin
from rolegate.core.database.session import (
    create_engine_from_settings,
    create_session_factory,
    get_db,
)


__all__ = [
    "Base",
    "IntegerIdMixin",
    "TimestampMixin",
    "create_engine_from_settings",
    "create_session_factory",
    "get_db",
]
