"""Permission resolution.

A user's effective permissions are the union of the permissions attached to
each of their roles. Holding the ``SuperAdmin`` role satisfies every check.
All lookups fail closed: a missing user or a database error means no roles
and no permissions.
"""

from collections.abc import Iterable
from typing import Annotated

import structlog
from fastapi import Depends
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from rolegate.api.dependencies import DBSession
from rolegate.core.permissions.catalog import SUPER_ADMIN
from rolegate.modules.users.models import User


logger = structlog.get_logger()


def effective_permissions(user: User) -> set[str]:
    """Union of permission names over all of ``user``'s roles."""
    return {permission.name for role in user.roles for permission in role.permissions}


class PermissionResolver:
    """Answer role and permission questions about a user."""

    def __init__(self, session: DBSession) -> None:
        self.session = session

    async def _load_user(self, user_id: int) -> User | None:
        """Load the user with roles and each role's permissions."""
        stmt = (
            select(User)
            .where(User.id == user_id)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_user_roles(self, user_id: int) -> list[str]:
        """Get the names of all roles assigned to a user.

        Args:
            user_id: The user's ID

        Returns:
            Role names, or an empty list if the user is missing or the
            lookup fails
        """
        try:
            user = await self._load_user(user_id)
        except SQLAlchemyError:
            logger.exception("role_lookup_failed", user_id=user_id)
            return []
        if user is None:
            return []
        return [role.name for role in user.roles]

    async def get_user_permissions(self, user_id: int) -> set[str]:
        """Get the effective permission names of a user.

        Args:
            user_id: The user's ID

        Returns:
            Set of permission names (empty on failure)
        """
        try:
            user = await self._load_user(user_id)
        except SQLAlchemyError:
            logger.exception("permission_lookup_failed", user_id=user_id)
            return set()
        if user is None:
            return set()
        return effective_permissions(user)

    async def has_any_permission(self, user_id: int, required: Iterable[str]) -> bool:
        """Check if a user holds at least one of ``required``.

        ``SuperAdmin`` holders pass without looking at permissions.

        Args:
            user_id: The user's ID
            required: Permission names, any one of which suffices

        Returns:
            True if the user satisfies the requirement
        """
        try:
            user = await self._load_user(user_id)
        except SQLAlchemyError:
            logger.exception("permission_lookup_failed", user_id=user_id)
            return False
        if user is None:
            logger.warning("permission_check_unknown_user", user_id=user_id)
            return False

        if any(role.name == SUPER_ADMIN for role in user.roles):
            return True

        return not effective_permissions(user).isdisjoint(required)


Resolver = Annotated[PermissionResolver, Depends(PermissionResolver)]
