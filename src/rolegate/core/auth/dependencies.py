"""FastAPI dependencies for authentication.

Provides the authentication guard as the ``CurrentIdentity`` dependency and
helpers for reading bearer tokens.
"""

from typing import Annotated

import structlog
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from rolegate.core import messages
from rolegate.core.auth.schemas import AuthIdentity
from rolegate.core.auth.tokens import TokenSvc
from rolegate.core.errors import UnauthorizedError
from rolegate.core.permissions.guards import check_authenticated


logger = structlog.get_logger()

# Bearer token extractor (auto_error=False lets us return our own envelope)
bearer_scheme = HTTPBearer(auto_error=False)


async def get_bearer_token(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
) -> str | None:
    """Return the raw bearer token, if the request carries one."""
    if credentials is None:
        return None
    return credentials.credentials


BearerToken = Annotated[str | None, Depends(get_bearer_token)]


async def get_current_identity(
    request: Request,
    token: BearerToken,
    tokens: TokenSvc,
) -> AuthIdentity:
    """Authenticate the request from its access token.

    The identity is stored on ``request.state`` and bound into the
    structlog context for the rest of the request.

    Raises:
        UnauthorizedError: If the token is missing, invalid or expired
    """
    decision = check_authenticated(token, tokens)
    if not decision.allowed or decision.identity is None:
        logger.warning("authentication_failed", reason=decision.reason)
        raise UnauthorizedError(messages.ACCESS_DENIED, error_code=decision.reason)

    identity = decision.identity
    request.state.user_id = identity.user_id
    structlog.contextvars.bind_contextvars(user_id=identity.user_id)
    return identity


CurrentIdentity = Annotated[AuthIdentity, Depends(get_current_identity)]
