"""User repository for database operations."""

from collections.abc import Sequence
from datetime import UTC, datetime
from typing import Annotated

from fastapi import Depends
from sqlalchemy import Select, delete, func, insert, or_, select, update
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert

from rolegate.api.dependencies import DBSession
from rolegate.core.permissions.models import UserRole
from rolegate.modules.users.models import RefreshToken, User


class UserRepository:
    """Repository for User database operations.

    Every read reloads the profile, roles and role permissions so that
    callers never see collections left stale by link-table writes.
    """

    def __init__(self, session: DBSession) -> None:
        self.session = session

    @staticmethod
    def _fresh(stmt: Select[tuple[User]]) -> Select[tuple[User]]:
        return stmt.execution_options(populate_existing=True)

    async def create(self, user: User) -> User:
        """Create a new user (and its profile, if attached).

        Args:
            user: User instance to create

        Returns:
            The created user with ID and relations populated
        """
        self.session.add(user)
        await self.session.flush()
        return await self.reload(user.id)

    async def get_by_id(self, user_id: int) -> User | None:
        """Get a user by ID.

        Args:
            user_id: The user's ID

        Returns:
            User if found, None otherwise
        """
        stmt = self._fresh(select(User).where(User.id == user_id))
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def reload(self, user_id: int) -> User:
        """Load a user known to exist, refreshing every relation."""
        stmt = self._fresh(select(User).where(User.id == user_id))
        result = await self.session.execute(stmt)
        return result.scalar_one()

    async def get_by_username(self, username: str) -> User | None:
        """Get a user by username.

        Args:
            username: The user's login name

        Returns:
            User if found, None otherwise
        """
        stmt = self._fresh(select(User).where(User.username == username))
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_email(self, email: str) -> User | None:
        """Get a user by email address.

        Args:
            email: The user's email

        Returns:
            User if found, None otherwise
        """
        stmt = self._fresh(select(User).where(User.email == email))
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def find_conflict(
        self,
        username: str | None = None,
        email: str | None = None,
        exclude_id: int | None = None,
    ) -> User | None:
        """Find a user already holding ``username`` or ``email``."""
        clauses = []
        if username is not None:
            clauses.append(User.username == username)
        if email is not None:
            clauses.append(User.email == email)
        if not clauses:
            return None
        stmt = select(User).where(or_(*clauses))
        if exclude_id is not None:
            stmt = stmt.where(User.id != exclude_id)
        result = await self.session.execute(stmt.limit(1))
        return result.scalar_one_or_none()

    async def list_page(self, offset: int = 0, limit: int = 20) -> tuple[list[User], int]:
        """List users, most recently updated first.

        Args:
            offset: Number of rows to skip
            limit: Maximum number of rows to return

        Returns:
            Tuple of (users list, total count)
        """
        count_result = await self.session.execute(select(func.count()).select_from(User))
        total = count_result.scalar_one()

        stmt = self._fresh(
            select(User)
            .order_by(User.updated_at.desc(), User.id.desc())
            .offset(offset)
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        users = list(result.scalars().all())

        return users, total

    async def set_roles(self, user_id: int, role_ids: Sequence[int]) -> None:
        """Replace the user's role assignments with ``role_ids``."""
        await self.session.execute(delete(UserRole).where(UserRole.user_id == user_id))
        if role_ids:
            await self.session.execute(
                insert(UserRole),
                [{"user_id": user_id, "role_id": role_id} for role_id in dict.fromkeys(role_ids)],
            )

    async def update(self, user: User) -> User:
        """Flush pending changes and reload the user.

        Args:
            user: User instance with updated fields

        Returns:
            The updated user
        """
        await self.session.flush()
        return await self.reload(user.id)

    async def delete(self, user: User) -> None:
        """Delete a user together with its profile.

        Role links and refresh tokens go with it through ON DELETE CASCADE.

        Args:
            user: User instance to delete
        """
        await self.session.delete(user)
        await self.session.flush()


class RefreshTokenRepository:
    """Repository for RefreshToken database operations.

    Every write is a single statement so that concurrent logins and
    rotations rely only on the database's row-level atomicity.
    """

    def __init__(self, session: DBSession) -> None:
        self.session = session

    async def upsert(self, user_id: int, token: str, expires_at: datetime) -> None:
        """Insert ``token`` or, if it is already stored, reactivate it.

        Args:
            user_id: Owner of the token
            token: The refresh token string
            expires_at: Expiry copied from the token's claims
        """
        dialect = self.session.get_bind().dialect.name
        insert_stmt = (sqlite_insert if dialect == "sqlite" else pg_insert)(RefreshToken)
        stmt = insert_stmt.values(
            token=token,
            user_id=user_id,
            is_active=True,
            expires_at=expires_at,
        ).on_conflict_do_update(
            index_elements=["token"],
            set_={"is_active": True, "expires_at": expires_at, "updated_at": func.now()},
        )
        await self.session.execute(stmt)

    async def deactivate(self, token: str, user_id: int | None = None) -> int:
        """Mark an active token inactive.

        When ``user_id`` is given the update only matches a row that is
        still valid for that user, so exactly one concurrent rotation wins.

        Args:
            token: The refresh token string
            user_id: Owner the row must be bound to

        Returns:
            Number of rows that transitioned to inactive
        """
        stmt = (
            update(RefreshToken)
            .where(RefreshToken.token == token, RefreshToken.is_active.is_(True))
            .values(is_active=False)
            .execution_options(synchronize_session=False)
        )
        if user_id is not None:
            stmt = stmt.where(
                RefreshToken.user_id == user_id,
                RefreshToken.expires_at > datetime.now(UTC),
            )
        result = await self.session.execute(stmt)
        return result.rowcount

    async def is_valid(self, user_id: int, token: str) -> bool:
        """Check that ``token`` is active, unexpired and bound to ``user_id``.

        Args:
            user_id: The claimed owner
            token: The refresh token string

        Returns:
            True if a matching usable row exists
        """
        stmt = (
            select(RefreshToken.id)
            .where(
                RefreshToken.token == token,
                RefreshToken.user_id == user_id,
                RefreshToken.is_active.is_(True),
                RefreshToken.expires_at > datetime.now(UTC),
            )
            .limit(1)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none() is not None

    async def delete_stale(self, now: datetime) -> int:
        """Delete tokens that are expired or no longer active.

        Args:
            now: Rows expiring before this time are removed

        Returns:
            Number of tokens deleted
        """
        stmt = delete(RefreshToken).where(
            or_(RefreshToken.expires_at < now, RefreshToken.is_active.is_(False))
        ).execution_options(synchronize_session=False)
        result = await self.session.execute(stmt)
        return result.rowcount


# Type aliases for dependency injection
UserRepo = Annotated[UserRepository, Depends(UserRepository)]
RefreshTokenRepo = Annotated[RefreshTokenRepository, Depends(RefreshTokenRepository)]
