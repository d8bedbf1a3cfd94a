"""Pydantic schemas for role operations."""

from datetime import datetime

from pydantic import BaseModel, Field

from rolegate.api.dependencies import RecordRef
from rolegate.core.constants import MAX_DESCRIPTION_LENGTH, MAX_ROLE_NAME_LENGTH
from rolegate.core.permissions.models import Role, RolePermission


class RoleCreate(BaseModel):
    """Schema for creating a role, optionally with its permissions."""

    name: str = Field(..., min_length=1, max_length=MAX_ROLE_NAME_LENGTH)
    description: str | None = Field(None, max_length=MAX_DESCRIPTION_LENGTH)
    permission_ids: list[RecordRef] | None = None


class RoleUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=MAX_ROLE_NAME_LENGTH)
    description: str | None = Field(None, max_length=MAX_DESCRIPTION_LENGTH)


class RolePermissionsUpdate(BaseModel):
    """The complete set of permissions the role should hold afterwards."""

    permission_ids: list[RecordRef]


class RolePermissionResponse(BaseModel):
    id: int
    role_id: int
    permission_id: int
    permission_name: str
    description: str | None


class RoleResponse(BaseModel):
    id: int
    name: str
    description: str | None
    created_at: datetime
    updated_at: datetime
    permissions: list[RolePermissionResponse]


def to_role_permission_response(link: RolePermission) -> RolePermissionResponse:
    return RolePermissionResponse(
        id=link.id,
        role_id=link.role_id,
        permission_id=link.permission_id,
        permission_name=link.permission.name,
        description=link.permission.description,
    )


def to_role_response(role: Role) -> RoleResponse:
    return RoleResponse(
        id=role.id,
        name=role.name,
        description=role.description,
        created_at=role.created_at,
        updated_at=role.updated_at,
        permissions=[to_role_permission_response(link) for link in role.permission_links],
    )
