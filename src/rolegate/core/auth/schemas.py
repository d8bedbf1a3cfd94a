"""Authentication schemas for credentials, token claims and login outcomes."""

from datetime import datetime
from enum import StrEnum
from typing import Literal

from pydantic import BaseModel, Field

from rolegate.core.constants import BEARER_TOKEN_TYPE, MAX_PASSWORD_LENGTH, MAX_USERNAME_LENGTH


TokenType = Literal["access", "refresh"]


class AuthIdentity(BaseModel):
    """Minimal identity carried by both token classes.

    Attributes:
        user_id: The user's numeric ID
        username: The user's login name
    """

    user_id: int
    username: str


class TokenClaims(AuthIdentity):
    """Claims decoded from a verified token.

    Attributes:
        exp: Token expiration time
        iat: Token issue time
        type: Token class (access or refresh)
        jti: Unique token ID
    """

    exp: datetime
    iat: datetime | None = None
    type: TokenType
    jti: str | None = None

    def identity(self) -> AuthIdentity:
        return AuthIdentity(user_id=self.user_id, username=self.username)


class TokenPair(BaseModel):
    """A pair of access and refresh tokens.

    Attributes:
        access_token: Short-lived JWT for API access
        refresh_token: Long-lived JWT exchanged for a new pair
        token_type: Always "bearer"
    """

    access_token: str
    refresh_token: str
    token_type: str = BEARER_TOKEN_TYPE


class LoginRequest(BaseModel):
    """Request body for login."""

    username: str = Field(min_length=1, max_length=MAX_USERNAME_LENGTH)
    password: str = Field(min_length=1, max_length=MAX_PASSWORD_LENGTH)


class LoginStatus(StrEnum):
    """Result of checking a username/password pair."""

    SUCCESS = "SUCCESS"
    USER_NOT_FOUND = "USER_NOT_FOUND"
    WRONG_PASSWORD = "WRONG_PASSWORD"
    ACCOUNT_LOCKED = "ACCOUNT_LOCKED"
    SERVER_ERROR = "SERVER_ERROR"


class LoginOutcome(BaseModel):
    """Tagged result returned by the credential verifier.

    ``identity`` is only set when ``status`` is ``SUCCESS``.
    """

    status: LoginStatus
    message: str
    identity: AuthIdentity | None = None

    @property
    def succeeded(self) -> bool:
        return self.status == LoginStatus.SUCCESS
