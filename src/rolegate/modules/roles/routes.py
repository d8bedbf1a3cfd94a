"""Role API routes."""

from typing import Annotated

from fastapi import APIRouter, Depends, status

from rolegate.api.dependencies import Pagination, RecordId
from rolegate.api.envelope import Envelope, Page, ok, paginate
from rolegate.core import messages
from rolegate.core.auth.schemas import AuthIdentity
from rolegate.core.permissions.policy import RouteGuard
from rolegate.modules.roles.schemas import (
    RoleCreate,
    RolePermissionsUpdate,
    RoleResponse,
    RoleUpdate,
    to_role_response,
)
from rolegate.modules.roles.services import RoleSvc


router = APIRouter(prefix="/roles", tags=["roles"])

RESOURCE = "Role"


@router.get(
    "",
    response_model=Envelope[Page[RoleResponse]],
    summary="List roles",
)
async def list_roles(
    _actor: Annotated[AuthIdentity, Depends(RouteGuard("roles.list"))],
    service: RoleSvc,
    page: Pagination,
) -> Envelope[Page[RoleResponse]]:
    """List roles with their permissions."""
    roles, total = await service.list_roles(page)
    return ok(
        messages.RETRIEVED.format(resource=RESOURCE),
        paginate([to_role_response(r) for r in roles], page, total),
    )


@router.post(
    "",
    response_model=Envelope[RoleResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Create role",
)
async def create_role(
    data: RoleCreate,
    _actor: Annotated[AuthIdentity, Depends(RouteGuard("roles.create"))],
    service: RoleSvc,
) -> Envelope[RoleResponse]:
    """Create a role, optionally granting permissions."""
    role = await service.create_role(data)
    return ok(messages.CREATED.format(resource=RESOURCE), to_role_response(role))


@router.get(
    "/{role_id}",
    response_model=Envelope[RoleResponse],
    summary="Get role",
)
async def get_role(
    role_id: RecordId,
    _actor: Annotated[AuthIdentity, Depends(RouteGuard("roles.get"))],
    service: RoleSvc,
) -> Envelope[RoleResponse]:
    role = await service.get_role(role_id)
    return ok(messages.RETRIEVED.format(resource=RESOURCE), to_role_response(role))


@router.patch(
    "/{role_id}",
    response_model=Envelope[RoleResponse],
    summary="Update role",
    description="Rename or re-describe a role. The SuperAdmin role cannot be renamed.",
)
async def update_role(
    role_id: RecordId,
    data: RoleUpdate,
    _actor: Annotated[AuthIdentity, Depends(RouteGuard("roles.update"))],
    service: RoleSvc,
) -> Envelope[RoleResponse]:
    role = await service.update_role(role_id, data)
    return ok(messages.UPDATED.format(resource=RESOURCE), to_role_response(role))


@router.delete(
    "/{role_id}",
    response_model=Envelope[None],
    summary="Delete role",
    description="Delete a role. The SuperAdmin role cannot be deleted.",
)
async def delete_role(
    role_id: RecordId,
    _actor: Annotated[AuthIdentity, Depends(RouteGuard("roles.delete"))],
    service: RoleSvc,
) -> Envelope[None]:
    await service.delete_role(role_id)
    return ok(messages.DELETED.format(resource=RESOURCE, id=role_id))


@router.patch(
    "/{role_id}/permissions",
    response_model=Envelope[RoleResponse],
    summary="Set role permissions",
    description="Replace the role's permissions with exactly the given permission IDs.",
)
async def set_role_permissions(
    role_id: RecordId,
    data: RolePermissionsUpdate,
    _actor: Annotated[AuthIdentity, Depends(RouteGuard("roles.permissions"))],
    service: RoleSvc,
) -> Envelope[RoleResponse]:
    """Grant and revoke permissions so the role holds exactly ``permission_ids``."""
    role = await service.set_permissions(role_id, data.permission_ids)
    return ok(messages.UPDATED.format(resource=RESOURCE), to_role_response(role))
