"""User service for business logic."""

from collections.abc import Collection, Sequence
from typing import Annotated

import structlog
from fastapi import Depends

from rolegate.api.dependencies import AppSettings, DBSession, PageParams
from rolegate.config import Settings
from rolegate.core import messages
from rolegate.core.auth.backend import hash_password, verify_password
from rolegate.core.errors import (
    BadRequestError,
    ConflictError,
    ForbiddenError,
    NotFoundError,
    ValidationError,
    translate_persistence_errors,
)
from rolegate.core.permissions.catalog import SUPER_ADMIN
from rolegate.modules.roles.repos import RoleRepository
from rolegate.modules.users.models import User, UserProfile, UserStatus
from rolegate.modules.users.repos import UserRepository
from rolegate.modules.users.schemas import UserCreate, UserUpdate


logger = structlog.get_logger()

RESOURCE = "User"

_PROFILE_FIELDS = (
    "first_name",
    "last_name",
    "gender",
    "birthday",
    "address",
    "phone",
    "company",
    "avatar_url",
)


class UserService:
    """Service for user management operations.

    Contains business logic for user CRUD operations, role assignment
    and profile lookups.
    """

    def __init__(self, db: DBSession, settings: AppSettings) -> None:
        self.repo = UserRepository(db)
        self.role_repo = RoleRepository(db)
        self.settings: Settings = settings

    async def list_users(self, page: PageParams) -> tuple[list[User], int]:
        return await self.repo.list_page(offset=page.offset, limit=page.page_size)

    async def get_user(self, user_id: int) -> User:
        """Get a user by ID.

        Raises:
            NotFoundError: If user doesn't exist
        """
        user = await self.repo.get_by_id(user_id)
        if user is None:
            raise NotFoundError(
                messages.NOT_FOUND.format(resource=RESOURCE, id=user_id),
                resource=RESOURCE,
                resource_id=user_id,
            )
        return user

    async def get_profile(self, user_id: int) -> UserProfile:
        """Get the profile of a user.

        Raises:
            NotFoundError: If the user or its profile doesn't exist
        """
        user = await self.get_user(user_id)
        if user.profile is None:
            raise NotFoundError(
                messages.NOT_FOUND.format(resource="Profile", id=user_id),
                resource="Profile",
                resource_id=user_id,
            )
        return user.profile

    async def create_user(self, data: UserCreate, actor_roles: Sequence[str]) -> User:
        """Create an active user with a profile and optional roles.

        Args:
            data: User creation data
            actor_roles: Role names of the caller, used to police SuperAdmin grants

        Returns:
            The created user

        Raises:
            ConflictError: If the username or email is taken
            ValidationError: If a role ID doesn't exist
            ForbiddenError: If a non-SuperAdmin grants SuperAdmin
        """
        await self._ensure_unique(username=data.username, email=data.email)
        if data.role_ids:
            await self._check_role_grant(data.role_ids, actor_roles)

        user = User(
            username=data.username,
            email=data.email,
            password_hash=hash_password(data.password, self.settings.bcrypt_rounds),
            status=UserStatus.ACTIVE.value,
        )
        user.profile = UserProfile(**data.model_dump(include=set(_PROFILE_FIELDS)))

        with translate_persistence_errors(RESOURCE):
            user = await self.repo.create(user)
            if data.role_ids:
                await self.repo.set_roles(user.id, data.role_ids)
                user = await self.repo.reload(user.id)

        logger.info("user_created", user_id=user.id, role_ids=data.role_ids or [])
        return user

    async def update_user(
        self,
        user_id: int,
        data: UserUpdate,
        actor_roles: Sequence[str],
    ) -> User:
        """Update a user after checking the account's current password.

        Raises:
            NotFoundError: If user doesn't exist
            BadRequestError: If ``current_password`` doesn't match
            ConflictError: If the new email is taken
            ValidationError: If a role ID doesn't exist
            ForbiddenError: If a non-SuperAdmin grants SuperAdmin
        """
        user = await self.get_user(user_id)
        if not verify_password(data.current_password, user.password_hash):
            raise BadRequestError(
                messages.CURRENT_PASSWORD_REQUIRED,
                error_code="current_password_mismatch",
            )
        if data.role_ids is not None:
            await self._check_role_grant(data.role_ids, actor_roles)

        updates = data.model_dump(
            exclude_unset=True,
            exclude={"current_password", "password_confirmation", "role_ids"},
        )

        email = updates.pop("email", None)
        if email is not None and email != user.email:
            await self._ensure_unique(email=email, exclude_id=user.id)
            user.email = email

        password = updates.pop("password", None)
        if password is not None:
            user.password_hash = hash_password(password, self.settings.bcrypt_rounds)

        status = updates.pop("status", None)
        if status is not None:
            user.status = UserStatus(status).value

        profile_updates = {k: v for k, v in updates.items() if k in _PROFILE_FIELDS}
        if profile_updates:
            self._apply_profile(user, profile_updates)

        with translate_persistence_errors(RESOURCE):
            if data.role_ids is not None:
                await self.repo.set_roles(user.id, data.role_ids)
            user = await self.repo.update(user)

        logger.info("user_updated", user_id=user.id, fields=sorted(data.model_fields_set))
        return user

    async def delete_user(self, user_id: int) -> None:
        """Delete a user, its profile, role links and refresh tokens.

        Raises:
            NotFoundError: If user doesn't exist
        """
        user = await self.get_user(user_id)
        with translate_persistence_errors(RESOURCE):
            await self.repo.delete(user)
        logger.info("user_deleted", user_id=user_id)

    def _apply_profile(self, user: User, values: dict[str, object]) -> None:
        if user.profile is None:
            # A profile needs a first name; fall back to the username.
            values.setdefault("first_name", user.username)
            user.profile = UserProfile(**values)
            return
        for field, value in values.items():
            if field == "first_name" and value is None:
                continue
            setattr(user.profile, field, value)

    async def _ensure_unique(
        self,
        username: str | None = None,
        email: str | None = None,
        exclude_id: int | None = None,
    ) -> None:
        existing = await self.repo.find_conflict(
            username=username, email=email, exclude_id=exclude_id
        )
        if existing is not None:
            raise ConflictError(
                messages.ALREADY_EXISTS.format(resource=RESOURCE),
                error_code="user_exists",
            )

    async def _check_role_grant(
        self,
        role_ids: Collection[int],
        actor_roles: Sequence[str],
    ) -> None:
        wanted = set(role_ids)
        roles = await self.role_repo.get_many(wanted)
        missing = wanted - {role.id for role in roles}
        if missing:
            raise ValidationError(
                messages.ROLES_NOT_FOUND,
                errors=[
                    {"field": "role_ids", "message": f"Unknown role id {rid}"}
                    for rid in sorted(missing)
                ],
            )
        if any(role.name == SUPER_ADMIN for role in roles) and SUPER_ADMIN not in actor_roles:
            raise ForbiddenError(messages.SUPER_ADMIN_GRANT_DENIED, error_code="forbidden")


UserSvc = Annotated[UserService, Depends(UserService)]
