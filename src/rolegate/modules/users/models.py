"""User database models."""

from datetime import date, datetime
from enum import IntEnum, StrEnum

from sqlalchemy import Boolean, Date, DateTime, ForeignKey, SmallInteger, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from rolegate.core.constants import (
    MAX_EMAIL_LENGTH,
    MAX_NAME_LENGTH,
    MAX_PHONE_LENGTH,
    MAX_STATUS_LENGTH,
    MAX_TOKEN_LENGTH,
    MAX_URL_LENGTH,
    MAX_USERNAME_LENGTH,
)
from rolegate.core.database.base import Base, IntegerIdMixin, TimestampMixin
from rolegate.core.permissions.models import Role


class UserStatus(StrEnum):
    """Account states; only ``active`` accounts may log in."""

    ACTIVE = "active"
    INACTIVE = "inactive"
    LOCKED = "locked"


class Gender(IntEnum):
    UNISEX = 0
    MALE = 1
    FEMALE = 2


class User(Base, IntegerIdMixin, TimestampMixin):
    """User model representing an account that can authenticate.

    Attributes:
        username: Unique login name
        email: Unique email address
        password_hash: Bcrypt-hashed password
        status: Account status, one of ``UserStatus``
        profile: Optional personal details
        roles: Read-only view of the roles assigned through ``user_roles``
    """

    __tablename__ = "users"

    username: Mapped[str] = mapped_column(
        String(MAX_USERNAME_LENGTH),
        nullable=False,
        unique=True,
    )
    email: Mapped[str] = mapped_column(
        String(MAX_EMAIL_LENGTH),
        nullable=False,
        unique=True,
    )
    password_hash: Mapped[str] = mapped_column(
        Text,
        nullable=False,
    )
    status: Mapped[str] = mapped_column(
        String(MAX_STATUS_LENGTH),
        default=UserStatus.ACTIVE.value,
        nullable=False,
    )

    # Relationships
    profile: Mapped["UserProfile"] = relationship(
        "UserProfile",
        back_populates="user",
        cascade="all, delete-orphan",
        uselist=False,
        lazy="selectin",
    )
    roles: Mapped[list[Role]] = relationship(
        Role,
        secondary="user_roles",
        order_by=Role.id,
        viewonly=True,
        lazy="selectin",
    )

    @property
    def is_active(self) -> bool:
        return self.status == UserStatus.ACTIVE

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username={self.username}, status={self.status})>"


class UserProfile(Base, IntegerIdMixin, TimestampMixin):
    """Personal details attached to a user, deleted along with it."""

    __tablename__ = "user_profiles"

    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )
    first_name: Mapped[str] = mapped_column(String(MAX_NAME_LENGTH), nullable=False)
    last_name: Mapped[str | None] = mapped_column(String(MAX_NAME_LENGTH), nullable=True)
    gender: Mapped[int] = mapped_column(
        SmallInteger,
        default=Gender.UNISEX.value,
        nullable=False,
    )
    birthday: Mapped[date | None] = mapped_column(Date, nullable=True)
    address: Mapped[str | None] = mapped_column(String(MAX_NAME_LENGTH), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(MAX_PHONE_LENGTH), nullable=True)
    company: Mapped[str | None] = mapped_column(String(MAX_NAME_LENGTH), nullable=True)
    avatar_url: Mapped[str | None] = mapped_column(String(MAX_URL_LENGTH), nullable=True)

    user: Mapped[User] = relationship(User, back_populates="profile")

    def __repr__(self) -> str:
        return f"<UserProfile(id={self.id}, user_id={self.user_id})>"


class RefreshToken(Base, IntegerIdMixin, TimestampMixin):
    """Persisted refresh token session.

    Rows are deactivated, not deleted, on logout and rotation; the sweep job
    removes expired and inactive rows.

    Attributes:
        token: The signed refresh token string (unique)
        user_id: The user this token belongs to
        is_active: False once the token is revoked or rotated
        expires_at: Copied from the token's ``exp`` claim
    """

    __tablename__ = "refresh_tokens"

    token: Mapped[str] = mapped_column(
        String(MAX_TOKEN_LENGTH),
        nullable=False,
        unique=True,
    )
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean,
        default=True,
        nullable=False,
    )
    expires_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        index=True,
    )

    def __repr__(self) -> str:
        return f"<RefreshToken(id={self.id}, user_id={self.user_id}, is_active={self.is_active})>"
