"""Permission repository for database operations."""

from collections.abc import Collection
from typing import Annotated

from fastapi import Depends
from sqlalchemy import func, select

from rolegate.api.dependencies import DBSession
from rolegate.core.permissions.models import Permission


class PermissionRepository:
    """Repository for Permission database operations."""

    def __init__(self, session: DBSession) -> None:
        self.session = session

    async def create(self, permission: Permission) -> Permission:
        self.session.add(permission)
        await self.session.flush()
        await self.session.refresh(permission)
        return permission

    async def get_by_id(self, permission_id: int) -> Permission | None:
        return await self.session.get(Permission, permission_id)

    async def get_by_name(self, name: str) -> Permission | None:
        result = await self.session.execute(select(Permission).where(Permission.name == name))
        return result.scalar_one_or_none()

    async def get_many(self, permission_ids: Collection[int]) -> list[Permission]:
        """Fetch the permissions among ``permission_ids`` that exist."""
        if not permission_ids:
            return []
        result = await self.session.execute(
            select(Permission).where(Permission.id.in_(permission_ids))
        )
        return list(result.scalars().all())

    async def list_page(self, offset: int = 0, limit: int = 20) -> tuple[list[Permission], int]:
        """List permissions, most recently updated first.

        Returns:
            Tuple of (permissions list, total count)
        """
        count_result = await self.session.execute(select(func.count()).select_from(Permission))
        total = count_result.scalar_one()

        stmt = (
            select(Permission)
            .order_by(Permission.updated_at.desc(), Permission.id.desc())
            .offset(offset)
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all()), total

    async def update(self, permission: Permission) -> Permission:
        await self.session.flush()
        await self.session.refresh(permission)
        return permission

    async def delete(self, permission: Permission) -> None:
        """Delete a permission; its role grants go with it through ON DELETE CASCADE."""
        await self.session.delete(permission)
        await self.session.flush()


PermissionRepo = Annotated[PermissionRepository, Depends(PermissionRepository)]
