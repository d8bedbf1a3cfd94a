"""Pydantic schemas for permission operations."""

from datetime import datetime

from pydantic import BaseModel, Field

from rolegate.core.constants import MAX_DESCRIPTION_LENGTH, MAX_PERMISSION_NAME_LENGTH
from rolegate.core.permissions.models import Permission


class PermissionCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=MAX_PERMISSION_NAME_LENGTH)
    description: str | None = Field(None, max_length=MAX_DESCRIPTION_LENGTH)


class PermissionUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=MAX_PERMISSION_NAME_LENGTH)
    description: str | None = Field(None, max_length=MAX_DESCRIPTION_LENGTH)


class PermissionResponse(BaseModel):
    id: int
    name: str
    description: str | None
    created_at: datetime
    updated_at: datetime


def to_permission_response(permission: Permission) -> PermissionResponse:
    return PermissionResponse(
        id=permission.id,
        name=permission.name,
        description=permission.description,
        created_at=permission.created_at,
        updated_at=permission.updated_at,
    )
