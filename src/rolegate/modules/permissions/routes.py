"""Permission API routes."""

from typing import Annotated

from fastapi import APIRouter, Depends, status

from rolegate.api.dependencies import Pagination, RecordId
from rolegate.api.envelope import Envelope, Page, ok, paginate
from rolegate.core import messages
from rolegate.core.auth.schemas import AuthIdentity
from rolegate.core.permissions.policy import RouteGuard
from rolegate.modules.permissions.schemas import (
    PermissionCreate,
    PermissionResponse,
    PermissionUpdate,
    to_permission_response,
)
from rolegate.modules.permissions.services import PermissionSvc


router = APIRouter(prefix="/permissions", tags=["permissions"])

RESOURCE = "Permission"


@router.get(
    "",
    response_model=Envelope[Page[PermissionResponse]],
    summary="List permissions",
)
async def list_permissions(
    _actor: Annotated[AuthIdentity, Depends(RouteGuard("permissions.list"))],
    service: PermissionSvc,
    page: Pagination,
) -> Envelope[Page[PermissionResponse]]:
    permissions, total = await service.list_permissions(page)
    return ok(
        messages.RETRIEVED.format(resource=RESOURCE),
        paginate([to_permission_response(p) for p in permissions], page, total),
    )


@router.post(
    "",
    response_model=Envelope[PermissionResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Create permission",
)
async def create_permission(
    data: PermissionCreate,
    _actor: Annotated[AuthIdentity, Depends(RouteGuard("permissions.create"))],
    service: PermissionSvc,
) -> Envelope[PermissionResponse]:
    permission = await service.create_permission(data)
    return ok(messages.CREATED.format(resource=RESOURCE), to_permission_response(permission))


@router.get(
    "/{permission_id}",
    response_model=Envelope[PermissionResponse],
    summary="Get permission",
)
async def get_permission(
    permission_id: RecordId,
    _actor: Annotated[AuthIdentity, Depends(RouteGuard("permissions.get"))],
    service: PermissionSvc,
) -> Envelope[PermissionResponse]:
    permission = await service.get_permission(permission_id)
    return ok(messages.RETRIEVED.format(resource=RESOURCE), to_permission_response(permission))


@router.patch(
    "/{permission_id}",
    response_model=Envelope[PermissionResponse],
    summary="Update permission",
)
async def update_permission(
    permission_id: RecordId,
    data: PermissionUpdate,
    _actor: Annotated[AuthIdentity, Depends(RouteGuard("permissions.update"))],
    service: PermissionSvc,
) -> Envelope[PermissionResponse]:
    permission = await service.update_permission(permission_id, data)
    return ok(messages.UPDATED.format(resource=RESOURCE), to_permission_response(permission))


@router.delete(
    "/{permission_id}",
    response_model=Envelope[None],
    summary="Delete permission",
    description="Delete a permission and remove it from every role.",
)
async def delete_permission(
    permission_id: RecordId,
    _actor: Annotated[AuthIdentity, Depends(RouteGuard("permissions.delete"))],
    service: PermissionSvc,
) -> Envelope[None]:
    await service.delete_permission(permission_id)
    return ok(messages.DELETED.format(resource=RESOURCE, id=permission_id))
