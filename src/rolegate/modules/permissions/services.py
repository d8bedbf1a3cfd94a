"""Permission service for business logic."""

from typing import Annotated

import structlog
from fastapi import Depends

from rolegate.api.dependencies import PageParams
from rolegate.core import messages
from rolegate.core.errors import ConflictError, NotFoundError, translate_persistence_errors
from rolegate.core.permissions.models import Permission
from rolegate.modules.permissions.repos import PermissionRepo
from rolegate.modules.permissions.schemas import PermissionCreate, PermissionUpdate


logger = structlog.get_logger()

RESOURCE = "Permission"


class PermissionService:
    """Service for permission CRUD."""

    def __init__(self, repo: PermissionRepo) -> None:
        self.repo = repo

    async def list_permissions(self, page: PageParams) -> tuple[list[Permission], int]:
        return await self.repo.list_page(offset=page.offset, limit=page.page_size)

    async def get_permission(self, permission_id: int) -> Permission:
        """Get a permission by ID.

        Raises:
            NotFoundError: If the permission doesn't exist
        """
        permission = await self.repo.get_by_id(permission_id)
        if permission is None:
            raise NotFoundError(
                messages.NOT_FOUND.format(resource=RESOURCE, id=permission_id),
                resource=RESOURCE,
                resource_id=permission_id,
            )
        return permission

    async def create_permission(self, data: PermissionCreate) -> Permission:
        """Create a permission.

        Raises:
            ConflictError: If the name is taken
        """
        await self._ensure_name_free(data.name)
        with translate_persistence_errors(RESOURCE):
            permission = await self.repo.create(
                Permission(name=data.name, description=data.description)
            )
        logger.info("permission_created", permission_id=permission.id, name=permission.name)
        return permission

    async def update_permission(self, permission_id: int, data: PermissionUpdate) -> Permission:
        """Update a permission's name or description.

        Raises:
            NotFoundError: If the permission doesn't exist
            ConflictError: If the new name is taken
        """
        permission = await self.get_permission(permission_id)
        updates = data.model_dump(exclude_unset=True)

        new_name = updates.get("name")
        if new_name is not None and new_name != permission.name:
            await self._ensure_name_free(new_name)

        for field, value in updates.items():
            if field == "name" and value is None:
                continue
            setattr(permission, field, value)

        with translate_persistence_errors(RESOURCE):
            permission = await self.repo.update(permission)
        logger.info("permission_updated", permission_id=permission.id, fields=sorted(updates))
        return permission

    async def delete_permission(self, permission_id: int) -> None:
        """Delete a permission and every grant of it.

        Raises:
            NotFoundError: If the permission doesn't exist
        """
        permission = await self.get_permission(permission_id)
        with translate_persistence_errors(RESOURCE):
            await self.repo.delete(permission)
        logger.info("permission_deleted", permission_id=permission_id)

    async def _ensure_name_free(self, name: str) -> None:
        if await self.repo.get_by_name(name) is not None:
            raise ConflictError(
                messages.ALREADY_EXISTS.format(resource=RESOURCE),
                error_code="permission_exists",
                details={"name": name},
            )


PermissionSvc = Annotated[PermissionService, Depends(PermissionService)]
