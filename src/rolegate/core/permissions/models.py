"""Permission system database models.

This module defines the RBAC (Role-Based Access Control) models:
- Permission: A named capability such as ``view_users``
- Role: A named set of permissions
- RolePermission: Link between a role and one of its permissions
- UserRole: Link between a user and one of their roles
"""

from sqlalchemy import ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from rolegate.core.constants import (
    MAX_DESCRIPTION_LENGTH,
    MAX_PERMISSION_NAME_LENGTH,
    MAX_ROLE_NAME_LENGTH,
)
from rolegate.core.database.base import Base, IntegerIdMixin, TimestampMixin


class Permission(Base, IntegerIdMixin, TimestampMixin):
    """Permission model representing a single named capability.

    Attributes:
        name: Unique capability name (e.g., "view_users", "add_roles")
        description: Human-readable description of the permission
    """

    __tablename__ = "permissions"

    name: Mapped[str] = mapped_column(
        String(MAX_PERMISSION_NAME_LENGTH),
        nullable=False,
        unique=True,
    )
    description: Mapped[str | None] = mapped_column(
        String(MAX_DESCRIPTION_LENGTH),
        nullable=True,
    )

    def __repr__(self) -> str:
        return f"<Permission(id={self.id}, name={self.name})>"


class RolePermission(Base, IntegerIdMixin, TimestampMixin):
    """Grant of one permission to one role."""

    __tablename__ = "role_permissions"
    __table_args__ = (
        UniqueConstraint("role_id", "permission_id", name="uq_role_permission"),
    )

    role_id: Mapped[int] = mapped_column(
        ForeignKey("roles.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    permission_id: Mapped[int] = mapped_column(
        ForeignKey("permissions.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    permission: Mapped[Permission] = relationship(
        Permission,
        lazy="selectin",
    )

    def __repr__(self) -> str:
        return f"<RolePermission(role_id={self.role_id}, permission_id={self.permission_id})>"


class Role(Base, IntegerIdMixin, TimestampMixin):
    """Role model representing a named set of permissions.

    Attributes:
        name: Unique role name (e.g., "SuperAdmin", "Admin")
        description: Human-readable description of the role
        permission_links: RolePermission rows, used for detailed responses
        permissions: Read-only view of the granted Permission rows
    """

    __tablename__ = "roles"

    name: Mapped[str] = mapped_column(
        String(MAX_ROLE_NAME_LENGTH),
        nullable=False,
        unique=True,
    )
    description: Mapped[str | None] = mapped_column(
        String(MAX_DESCRIPTION_LENGTH),
        nullable=True,
    )

    permission_links: Mapped[list[RolePermission]] = relationship(
        RolePermission,
        cascade="all, delete-orphan",
        order_by=RolePermission.id,
        lazy="selectin",
    )
    permissions: Mapped[list[Permission]] = relationship(
        Permission,
        secondary="role_permissions",
        order_by=Permission.id,
        viewonly=True,
        lazy="selectin",
    )

    def __repr__(self) -> str:
        return f"<Role(id={self.id}, name={self.name})>"


class UserRole(Base):
    """Assignment of one role to one user."""

    __tablename__ = "user_roles"

    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    )
    role_id: Mapped[int] = mapped_column(
        ForeignKey("roles.id", ondelete="CASCADE"),
        primary_key=True,
        index=True,
    )

    def __repr__(self) -> str:
        return f"<UserRole(user_id={self.user_id}, role_id={self.role_id})>"
