"""User API routes."""

from typing import Annotated

from fastapi import APIRouter, Depends, status

from rolegate.api.dependencies import Pagination, RecordId
from rolegate.api.envelope import Envelope, Page, ok, paginate
from rolegate.core import messages
from rolegate.core.auth.schemas import AuthIdentity
from rolegate.core.permissions.policy import RouteGuard
from rolegate.core.permissions.resolver import Resolver
from rolegate.modules.users.schemas import (
    ProfileResponse,
    UserCreate,
    UserInfoResponse,
    UserResponse,
    UserUpdate,
    to_profile_response,
    to_user_info_response,
    to_user_response,
)
from rolegate.modules.users.services import UserSvc


router = APIRouter(prefix="/users", tags=["users"])

RESOURCE = "User"


@router.get(
    "/info",
    response_model=Envelope[UserInfoResponse],
    summary="Get current user",
    description="Get the caller's account with profile, roles and effective permissions.",
)
async def get_info(
    actor: Annotated[AuthIdentity, Depends(RouteGuard("users.info"))],
    service: UserSvc,
) -> Envelope[UserInfoResponse]:
    """Get the authenticated user's own account."""
    user = await service.get_user(actor.user_id)
    return ok(messages.RETRIEVED.format(resource=RESOURCE), to_user_info_response(user))


@router.get(
    "",
    response_model=Envelope[Page[UserResponse]],
    summary="List users",
    description="List users, most recently updated first.",
)
async def list_users(
    _actor: Annotated[AuthIdentity, Depends(RouteGuard("users.list"))],
    service: UserSvc,
    page: Pagination,
) -> Envelope[Page[UserResponse]]:
    """List users with pagination."""
    users, total = await service.list_users(page)
    return ok(
        messages.RETRIEVED.format(resource=RESOURCE),
        paginate([to_user_response(u) for u in users], page, total),
    )


@router.post(
    "",
    response_model=Envelope[UserResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Create user",
    description="Create an active user with a profile and optional roles.",
)
async def create_user(
    data: UserCreate,
    actor: Annotated[AuthIdentity, Depends(RouteGuard("users.create"))],
    service: UserSvc,
    resolver: Resolver,
) -> Envelope[UserResponse]:
    """Create a new user."""
    actor_roles = await resolver.get_user_roles(actor.user_id)
    user = await service.create_user(data, actor_roles)
    return ok(messages.CREATED.format(resource=RESOURCE), to_user_response(user))


@router.get(
    "/{user_id}",
    response_model=Envelope[UserResponse],
    summary="Get user",
)
async def get_user(
    user_id: RecordId,
    _actor: Annotated[AuthIdentity, Depends(RouteGuard("users.get"))],
    service: UserSvc,
) -> Envelope[UserResponse]:
    """Get a user by ID."""
    user = await service.get_user(user_id)
    return ok(messages.RETRIEVED.format(resource=RESOURCE), to_user_response(user))


@router.patch(
    "/{user_id}",
    response_model=Envelope[UserResponse],
    summary="Update user",
    description="Update a user. The addressed account's current password is required.",
)
async def update_user(
    user_id: RecordId,
    data: UserUpdate,
    actor: Annotated[AuthIdentity, Depends(RouteGuard("users.update"))],
    service: UserSvc,
    resolver: Resolver,
) -> Envelope[UserResponse]:
    """Update a user."""
    actor_roles = await resolver.get_user_roles(actor.user_id)
    user = await service.update_user(user_id, data, actor_roles)
    return ok(messages.UPDATED.format(resource=RESOURCE), to_user_response(user))


@router.delete(
    "/{user_id}",
    response_model=Envelope[None],
    summary="Delete user",
)
async def delete_user(
    user_id: RecordId,
    _actor: Annotated[AuthIdentity, Depends(RouteGuard("users.delete"))],
    service: UserSvc,
) -> Envelope[None]:
    """Delete a user."""
    await service.delete_user(user_id)
    return ok(messages.DELETED.format(resource=RESOURCE, id=user_id))


@router.get(
    "/{user_id}/profile",
    response_model=Envelope[ProfileResponse],
    summary="Get user profile",
)
async def get_profile(
    user_id: RecordId,
    _actor: Annotated[AuthIdentity, Depends(RouteGuard("users.profile"))],
    service: UserSvc,
) -> Envelope[ProfileResponse]:
    """Get a user's profile."""
    profile = await service.get_profile(user_id)
    return ok(messages.RETRIEVED.format(resource="Profile"), to_profile_response(profile))
