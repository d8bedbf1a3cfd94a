"""Authentication API routes.

Provides endpoints for:
- Login
- Logout
- Token refresh (with rotation)
- Access token verification
"""

from fastapi import APIRouter
from pydantic import BaseModel

from rolegate.api.envelope import Envelope, fail, ok
from rolegate.core import messages
from rolegate.core.auth.dependencies import BearerToken, CurrentIdentity
from rolegate.core.auth.schemas import LoginRequest, TokenPair
from rolegate.core.auth.service import AuthSvc


router = APIRouter(prefix="/auth", tags=["auth"])


class VerifiedUser(BaseModel):
    user_id: int
    username: str
    status: str


@router.post(
    "/login",
    response_model=Envelope[TokenPair],
    summary="Login with username and password",
    description=(
        "Authenticate with username and password to receive access and refresh tokens. "
        "Failures return 401 with status USER_NOT_FOUND, WRONG_PASSWORD, "
        "ACCOUNT_LOCKED or SERVER_ERROR."
    ),
)
async def login(data: LoginRequest, service: AuthSvc) -> Envelope[TokenPair]:
    """Login with username and password."""
    tokens = await service.login(data.username, data.password)
    return ok(messages.LOGIN_SUCCEEDED, tokens)


@router.post(
    "/logout",
    response_model=Envelope[None],
    summary="Logout",
    description="Revoke the refresh token sent as bearer token. Repeating the call is safe.",
)
async def logout(token: BearerToken, service: AuthSvc) -> Envelope[None]:
    """Logout by revoking the refresh token."""
    if not token:
        return fail(messages.INVALID_REQUEST)
    await service.logout(token)
    return ok(messages.LOGOUT_SUCCEEDED)


@router.post(
    "/refresh-token",
    response_model=Envelope[TokenPair],
    summary="Refresh tokens",
    description=(
        "Exchange the refresh token sent as bearer token for a new pair. "
        "The old refresh token is revoked and cannot be used again."
    ),
)
async def refresh_token(token: BearerToken, service: AuthSvc) -> Envelope[TokenPair]:
    """Rotate the refresh token and issue a new access token."""
    if not token:
        return fail(messages.INVALID_REQUEST)
    tokens = await service.refresh_tokens(token)
    if tokens is None:
        return fail(messages.INVALID_REFRESH_TOKEN)
    return ok(messages.TOKEN_REFRESHED, tokens)


@router.post(
    "/verify",
    response_model=Envelope[VerifiedUser],
    summary="Verify access token",
    description="Check the access token and confirm its user still exists.",
)
async def verify(identity: CurrentIdentity, service: AuthSvc) -> Envelope[VerifiedUser]:
    """Verify the caller's access token."""
    user = await service.verify(identity)
    return ok(
        messages.TOKEN_VERIFIED,
        VerifiedUser(user_id=user.id, username=user.username, status=user.status),
    )
