"""Pydantic schemas for user operations."""

import re
from datetime import date, datetime
from typing import Self

from pydantic import BaseModel, EmailStr, Field, field_validator, model_validator

from rolegate.api.dependencies import RecordRef
from rolegate.core import messages
from rolegate.core.constants import (
    MAX_NAME_LENGTH,
    MAX_PASSWORD_BYTES,
    MAX_PASSWORD_LENGTH,
    MAX_PHONE_LENGTH,
    MAX_URL_LENGTH,
    MAX_USERNAME_LENGTH,
    MIN_PASSWORD_LENGTH,
)
from rolegate.modules.users.models import Gender, User, UserProfile, UserStatus


# ============================================================
# Password Validation
# ============================================================

# Password complexity rules: (regex pattern, human-readable name)
PASSWORD_COMPLEXITY_RULES: list[tuple[str, str]] = [
    (r"[A-Z]", "uppercase letter"),
    (r"[a-z]", "lowercase letter"),
    (r"\d", "digit"),
    (r"[!@#$%^&*(),.?\":{}|<>\[\]\\;'`~_+\-=/]", "special character"),
]


def validate_password_bytes(password: str) -> str:
    """Reject passwords longer than bcrypt accepts once UTF-8 encoded.

    Raises:
        ValueError: If the encoded password exceeds ``MAX_PASSWORD_BYTES``
    """
    if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValueError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")
    return password


def validate_password_complexity(password: str) -> str:
    """Validate password meets complexity requirements.

    Requirements:
    - At least one uppercase letter
    - At least one lowercase letter
    - At least one digit
    - At least one special character

    Raises:
        ValueError: If password doesn't meet requirements
    """
    validate_password_bytes(password)

    missing = [
        name
        for pattern, name in PASSWORD_COMPLEXITY_RULES
        if not re.search(pattern, password)
    ]

    if missing:
        if len(missing) == 1:
            raise ValueError(f"Password must contain at least one {missing[0]}")
        raise ValueError(f"Password must contain at least one: {', '.join(missing)}")

    return password


# ============================================================
# Request Schemas
# ============================================================


class ProfileFields(BaseModel):
    """Optional personal details shared by create and update payloads."""

    last_name: str | None = Field(None, max_length=MAX_NAME_LENGTH)
    birthday: date | None = None
    address: str | None = Field(None, max_length=MAX_NAME_LENGTH)
    phone: str | None = Field(None, max_length=MAX_PHONE_LENGTH)
    company: str | None = Field(None, max_length=MAX_NAME_LENGTH)
    avatar_url: str | None = Field(None, max_length=MAX_URL_LENGTH)


class UserCreate(ProfileFields):
    """Schema for creating a user with a profile."""

    username: str = Field(..., min_length=1, max_length=MAX_USERNAME_LENGTH)
    email: EmailStr
    password: str = Field(..., min_length=MIN_PASSWORD_LENGTH, max_length=MAX_PASSWORD_LENGTH)
    password_confirmation: str
    first_name: str = Field(..., min_length=1, max_length=MAX_NAME_LENGTH)
    gender: Gender = Gender.UNISEX
    role_ids: list[RecordRef] | None = None

    @field_validator("password")
    @classmethod
    def password_complexity(cls, v: str) -> str:
        """Validate password complexity."""
        return validate_password_complexity(v)

    @model_validator(mode="after")
    def passwords_match(self) -> Self:
        if self.password != self.password_confirmation:
            raise ValueError(messages.PASSWORD_CONFIRMATION_MISMATCH)
        return self


class UserUpdate(ProfileFields):
    """Schema for updating a user.

    ``current_password`` must be the addressed account's password.
    """

    current_password: str = Field(..., min_length=1, max_length=MAX_PASSWORD_LENGTH)
    email: EmailStr | None = None
    password: str | None = Field(
        None, min_length=MIN_PASSWORD_LENGTH, max_length=MAX_PASSWORD_LENGTH
    )
    password_confirmation: str | None = None
    status: UserStatus | None = None
    first_name: str | None = Field(None, min_length=1, max_length=MAX_NAME_LENGTH)
    gender: Gender | None = None
    role_ids: list[RecordRef] | None = None

    @field_validator("password")
    @classmethod
    def password_complexity(cls, v: str | None) -> str | None:
        """Validate password complexity."""
        if v is None:
            return v
        return validate_password_complexity(v)

    @field_validator("current_password")
    @classmethod
    def current_password_bytes(cls, v: str) -> str:
        return validate_password_bytes(v)

    @model_validator(mode="after")
    def passwords_match(self) -> Self:
        if self.password is not None and self.password != self.password_confirmation:
            raise ValueError(messages.PASSWORD_CONFIRMATION_MISMATCH)
        return self


# ============================================================
# Response Schemas
# ============================================================


class ProfileResponse(BaseModel):
    """Schema for profile response data."""

    id: int
    user_id: int
    first_name: str
    last_name: str | None
    gender: int
    birthday: date | None
    address: str | None
    phone: str | None
    company: str | None
    avatar_url: str | None


class UserResponse(BaseModel):
    """Schema for user response data."""

    id: int
    username: str
    email: str
    status: str
    created_at: datetime
    updated_at: datetime
    profile: ProfileResponse | None
    roles: list[str]
    role_ids: list[int]


class UserInfoResponse(UserResponse):
    """The caller's own account, with its effective permissions."""

    permissions: list[str]
    permission_ids: list[int]


# ============================================================
# Mapping
# ============================================================


def to_profile_response(profile: UserProfile) -> ProfileResponse:
    return ProfileResponse(
        id=profile.id,
        user_id=profile.user_id,
        first_name=profile.first_name,
        last_name=profile.last_name,
        gender=profile.gender,
        birthday=profile.birthday,
        address=profile.address,
        phone=profile.phone,
        company=profile.company,
        avatar_url=profile.avatar_url,
    )


def to_user_response(user: User) -> UserResponse:
    return UserResponse(
        id=user.id,
        username=user.username,
        email=user.email,
        status=user.status,
        created_at=user.created_at,
        updated_at=user.updated_at,
        profile=to_profile_response(user.profile) if user.profile else None,
        roles=[role.name for role in user.roles],
        role_ids=[role.id for role in user.roles],
    )


def to_user_info_response(user: User) -> UserInfoResponse:
    """Map a user and the union of its roles' permissions."""
    granted = {
        permission.name: permission.id
        for role in user.roles
        for permission in role.permissions
    }
    return UserInfoResponse(
        **to_user_response(user).model_dump(),
        permissions=sorted(granted),
        permission_ids=sorted(granted.values()),
    )
