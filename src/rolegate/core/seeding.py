"""Idempotent seeding of the built-in roles, permissions and super admin.

Running the seed twice leaves the database unchanged the second time:
every row is looked up by its unique name before it is created.
"""

from collections.abc import Sequence
from dataclasses import dataclass, field

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from rolegate.config import Settings
from rolegate.core import messages
from rolegate.core.auth.backend import hash_password
from rolegate.core.errors import ConflictError, ValidationError
from rolegate.core.permissions.catalog import (
    PERMISSION_DESCRIPTIONS,
    SUPER_ADMIN,
    PermissionName,
    SystemRole,
)
from rolegate.core.permissions.models import Permission, Role
from rolegate.modules.permissions.repos import PermissionRepository
from rolegate.modules.roles.repos import RoleRepository
from rolegate.modules.users.models import User, UserProfile, UserStatus
from rolegate.modules.users.repos import UserRepository


logger = structlog.get_logger()

ROLE_DESCRIPTIONS: dict[SystemRole, str] = {
    SystemRole.SUPER_ADMIN: "Unrestricted access to every operation",
    SystemRole.ADMIN: "Administrators",
    SystemRole.USERS: "Regular users",
}


@dataclass
class SeedReport:
    """What a seed run created."""

    permissions: list[str] = field(default_factory=list)
    roles: list[str] = field(default_factory=list)
    grants: int = 0
    super_admin_created: bool = False

    @property
    def changed(self) -> bool:
        return bool(self.permissions or self.roles or self.grants or self.super_admin_created)


async def _ensure_permissions(session: AsyncSession, report: SeedReport) -> list[Permission]:
    repo = PermissionRepository(session)
    permissions = []
    for name in PermissionName:
        permission = await repo.get_by_name(name.value)
        if permission is None:
            permission = await repo.create(
                Permission(name=name.value, description=PERMISSION_DESCRIPTIONS[name])
            )
            report.permissions.append(name.value)
        permissions.append(permission)
    return permissions


async def _ensure_roles(session: AsyncSession, report: SeedReport) -> dict[str, Role]:
    repo = RoleRepository(session)
    roles = {}
    for name in SystemRole:
        role = await repo.get_by_name(name.value)
        if role is None:
            role = await repo.create(Role(name=name.value, description=ROLE_DESCRIPTIONS[name]))
            report.roles.append(name.value)
        roles[name.value] = role
    return roles


async def _grant_everything(
    session: AsyncSession,
    role: Role,
    permissions: Sequence[Permission],
    report: SeedReport,
) -> None:
    repo = RoleRepository(session)
    role = await repo.reload(role.id)
    held = {link.permission_id for link in role.permission_links}
    missing = {p.id for p in permissions} - held
    await repo.grant(role.id, missing)
    report.grants += len(missing)


async def _ensure_super_admin(
    session: AsyncSession,
    settings: Settings,
    role: Role,
    report: SeedReport,
) -> None:
    repo = UserRepository(session)
    user = await repo.get_by_username(settings.super_admin_username)
    if user is None:
        user = User(
            username=settings.super_admin_username,
            email=settings.super_admin_email,
            password_hash=hash_password(settings.super_admin_password, settings.bcrypt_rounds),
            status=UserStatus.ACTIVE.value,
        )
        user.profile = UserProfile(first_name="Super", last_name="Admin")
        user = await repo.create(user)
        report.super_admin_created = True

    role_ids = [r.id for r in user.roles]
    if role.id not in role_ids:
        await repo.set_roles(user.id, [*role_ids, role.id])


async def seed_defaults(session: AsyncSession, settings: Settings) -> SeedReport:
    """Create whatever part of the default RBAC setup is missing.

    The caller owns the transaction and commits it.

    Args:
        session: Session to write through
        settings: Provides the super admin credentials and bcrypt cost

    Returns:
        Report of the rows that were created
    """
    report = SeedReport()
    permissions = await _ensure_permissions(session, report)
    roles = await _ensure_roles(session, report)
    await _grant_everything(session, roles[SUPER_ADMIN], permissions, report)
    await _ensure_super_admin(session, settings, roles[SUPER_ADMIN], report)
    await session.flush()

    logger.info(
        "seed_complete",
        permissions_created=len(report.permissions),
        roles_created=len(report.roles),
        grants_created=report.grants,
        super_admin_created=report.super_admin_created,
    )
    return report


async def create_account(
    session: AsyncSession,
    settings: Settings,
    *,
    username: str,
    email: str,
    password: str,
    role_names: Sequence[str] = (),
) -> User:
    """Create an active user with the named roles, bypassing the API guards.

    Raises:
        ConflictError: If the username or email is taken
        ValidationError: If a role name doesn't exist
    """
    users = UserRepository(session)
    if await users.find_conflict(username=username, email=email) is not None:
        raise ConflictError(
            messages.ALREADY_EXISTS.format(resource="User"),
            error_code="user_exists",
        )

    role_repo = RoleRepository(session)
    role_ids = []
    for name in dict.fromkeys(role_names):
        role = await role_repo.get_by_name(name)
        if role is None:
            raise ValidationError(
                messages.ROLES_NOT_FOUND,
                errors=[{"field": "role", "message": f"Unknown role {name}"}],
            )
        role_ids.append(role.id)

    user = User(
        username=username,
        email=email,
        password_hash=hash_password(password, settings.bcrypt_rounds),
        status=UserStatus.ACTIVE.value,
    )
    user.profile = UserProfile(first_name=username)
    user = await users.create(user)
    if role_ids:
        await users.set_roles(user.id, role_ids)
        user = await users.reload(user.id)

    logger.info("account_created", user_id=user.id, roles=list(role_names))
    return user
