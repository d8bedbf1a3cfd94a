"""Role service for business logic."""

from collections.abc import Collection
from typing import Annotated

import structlog
from fastapi import Depends

from rolegate.api.dependencies import DBSession, PageParams
from rolegate.core import messages
from rolegate.core.errors import (
    BadRequestError,
    ConflictError,
    NotFoundError,
    ValidationError,
    translate_persistence_errors,
)
from rolegate.core.permissions.catalog import SUPER_ADMIN
from rolegate.core.permissions.models import Role
from rolegate.modules.permissions.repos import PermissionRepository
from rolegate.modules.roles.repos import RoleRepository
from rolegate.modules.roles.schemas import RoleCreate, RoleUpdate


logger = structlog.get_logger()

RESOURCE = "Role"


class RoleService:
    """Service for role management and role permission assignment."""

    def __init__(self, db: DBSession) -> None:
        self.repo = RoleRepository(db)
        self.permission_repo = PermissionRepository(db)

    async def list_roles(self, page: PageParams) -> tuple[list[Role], int]:
        return await self.repo.list_page(offset=page.offset, limit=page.page_size)

    async def get_role(self, role_id: int) -> Role:
        """Get a role by ID.

        Raises:
            NotFoundError: If the role doesn't exist
        """
        role = await self.repo.get_by_id(role_id)
        if role is None:
            raise NotFoundError(
                messages.NOT_FOUND.format(resource=RESOURCE, id=role_id),
                resource=RESOURCE,
                resource_id=role_id,
            )
        return role

    async def create_role(self, data: RoleCreate) -> Role:
        """Create a role, granting ``data.permission_ids`` if given.

        Raises:
            ConflictError: If the name is taken
            ValidationError: If a permission ID doesn't exist
        """
        await self._ensure_name_free(data.name)
        permission_ids = set(data.permission_ids or [])
        await self._ensure_permissions_exist(permission_ids)

        with translate_persistence_errors(RESOURCE):
            role = await self.repo.create(Role(name=data.name, description=data.description))
            await self.repo.grant(role.id, permission_ids)
            role = await self.repo.reload(role.id)

        logger.info("role_created", role_id=role.id, permission_count=len(permission_ids))
        return role

    async def update_role(self, role_id: int, data: RoleUpdate) -> Role:
        """Rename or re-describe a role.

        Raises:
            NotFoundError: If the role doesn't exist
            BadRequestError: If the SuperAdmin role would be renamed
            ConflictError: If the new name is taken
        """
        role = await self.get_role(role_id)
        updates = data.model_dump(exclude_unset=True)

        new_name = updates.get("name")
        if new_name is not None and new_name != role.name:
            if role.name == SUPER_ADMIN:
                raise BadRequestError(messages.PROTECTED_ROLE, error_code="protected_role")
            await self._ensure_name_free(new_name)

        for field, value in updates.items():
            if field == "name" and value is None:
                continue
            setattr(role, field, value)

        with translate_persistence_errors(RESOURCE):
            role = await self.repo.update(role)

        logger.info("role_updated", role_id=role.id, fields=sorted(updates))
        return role

    async def set_permissions(self, role_id: int, permission_ids: Collection[int]) -> Role:
        """Make ``permission_ids`` the role's exact permission set.

        Only the difference is written: grants that are no longer wanted are
        removed and missing ones are added.

        Raises:
            NotFoundError: If the role doesn't exist
            ValidationError: If a permission to add doesn't exist
        """
        role = await self.get_role(role_id)
        current = {link.permission_id for link in role.permission_links}
        desired = set(permission_ids)

        to_connect = desired - current
        to_disconnect = current - desired
        await self._ensure_permissions_exist(to_connect)

        with translate_persistence_errors(RESOURCE):
            await self.repo.revoke(role.id, to_disconnect)
            await self.repo.grant(role.id, to_connect)
            role = await self.repo.reload(role.id)

        logger.info(
            "role_permissions_updated",
            role_id=role.id,
            granted=sorted(to_connect),
            revoked=sorted(to_disconnect),
        )
        return role

    async def delete_role(self, role_id: int) -> None:
        """Delete a role.

        Raises:
            NotFoundError: If the role doesn't exist
            BadRequestError: If it is the SuperAdmin role
        """
        role = await self.get_role(role_id)
        if role.name == SUPER_ADMIN:
            raise BadRequestError(messages.PROTECTED_ROLE, error_code="protected_role")

        with translate_persistence_errors(RESOURCE):
            await self.repo.delete(role)

        logger.info("role_deleted", role_id=role_id)

    async def _ensure_name_free(self, name: str) -> None:
        if await self.repo.get_by_name(name) is not None:
            raise ConflictError(
                messages.ALREADY_EXISTS.format(resource=RESOURCE),
                error_code="role_exists",
                details={"name": name},
            )

    async def _ensure_permissions_exist(self, permission_ids: Collection[int]) -> None:
        found = await self.permission_repo.get_many(permission_ids)
        missing = set(permission_ids) - {p.id for p in found}
        if missing:
            raise ValidationError(
                messages.PERMISSIONS_NOT_FOUND,
                errors=[
                    {"field": "permission_ids", "message": f"Unknown permission id {pid}"}
                    for pid in sorted(missing)
                ],
            )


RoleSvc = Annotated[RoleService, Depends(RoleService)]
