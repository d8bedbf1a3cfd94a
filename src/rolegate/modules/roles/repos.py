"""Role repository for database operations."""

from collections.abc import Collection
from typing import Annotated

from fastapi import Depends
from sqlalchemy import delete, func, insert, select

from rolegate.api.dependencies import DBSession
from rolegate.core.permissions.models import Role, RolePermission


class RoleRepository:
    """Repository for Role database operations.

    Reads use ``populate_existing`` so that permission collections reflect
    link rows written with bulk statements in the same session.
    """

    def __init__(self, session: DBSession) -> None:
        self.session = session

    async def create(self, role: Role) -> Role:
        self.session.add(role)
        await self.session.flush()
        return await self.reload(role.id)

    async def get_by_id(self, role_id: int) -> Role | None:
        stmt = select(Role).where(Role.id == role_id).execution_options(populate_existing=True)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def reload(self, role_id: int) -> Role:
        stmt = select(Role).where(Role.id == role_id).execution_options(populate_existing=True)
        result = await self.session.execute(stmt)
        return result.scalar_one()

    async def get_by_name(self, name: str) -> Role | None:
        result = await self.session.execute(select(Role).where(Role.name == name))
        return result.scalar_one_or_none()

    async def get_many(self, role_ids: Collection[int]) -> list[Role]:
        """Fetch the roles among ``role_ids`` that exist."""
        if not role_ids:
            return []
        result = await self.session.execute(select(Role).where(Role.id.in_(role_ids)))
        return list(result.scalars().all())

    async def list_page(self, offset: int = 0, limit: int = 20) -> tuple[list[Role], int]:
        """List roles, most recently updated first.

        Returns:
            Tuple of (roles list, total count)
        """
        count_result = await self.session.execute(select(func.count()).select_from(Role))
        total = count_result.scalar_one()

        stmt = (
            select(Role)
            .order_by(Role.updated_at.desc(), Role.id.desc())
            .offset(offset)
            .limit(limit)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all()), total

    async def grant(self, role_id: int, permission_ids: Collection[int]) -> None:
        if permission_ids:
            await self.session.execute(
                insert(RolePermission),
                [{"role_id": role_id, "permission_id": pid} for pid in permission_ids],
            )

    async def revoke(self, role_id: int, permission_ids: Collection[int]) -> None:
        if permission_ids:
            await self.session.execute(
                delete(RolePermission)
                .where(
                    RolePermission.role_id == role_id,
                    RolePermission.permission_id.in_(permission_ids),
                )
                .execution_options(synchronize_session=False)
            )

    async def update(self, role: Role) -> Role:
        await self.session.flush()
        return await self.reload(role.id)

    async def delete(self, role: Role) -> None:
        """Delete a role with its permission grants; user links cascade in the database."""
        await self.session.delete(role)
        await self.session.flush()


RoleRepo = Annotated[RoleRepository, Depends(RoleRepository)]
