"""Authentication service for login, logout, token refresh and verification."""

from typing import Annotated

import structlog
from fastapi import Depends

from rolegate.api.dependencies import AppSettings, DBSession
from rolegate.core import messages
from rolegate.core.auth.credentials import CredentialVerifier
from rolegate.core.auth.schemas import AuthIdentity, TokenPair
from rolegate.core.auth.tokens import TokenService
from rolegate.core.errors import UnauthorizedError
from rolegate.modules.users.models import User
from rolegate.modules.users.repos import UserRepository


logger = structlog.get_logger()


class AuthService:
    """Service for authentication operations.

    Composes the credential verifier and the token service into the login,
    logout, refresh and verify flows.
    """

    def __init__(self, db: DBSession, settings: AppSettings) -> None:
        self.db = db
        self.verifier = CredentialVerifier(db)
        self.tokens = TokenService(db, settings)
        self.user_repo = UserRepository(db)

    async def login(self, username: str, password: str) -> TokenPair:
        """Authenticate a user and open a refresh-token session.

        A failed bookkeeping write does not fail the login; it is logged
        and the next refresh with this token will be rejected.

        Args:
            username: Login name
            password: Plain text password

        Returns:
            New token pair

        Raises:
            UnauthorizedError: With the login status as error code
        """
        outcome = await self.verifier.validate(username, password)
        if not outcome.succeeded or outcome.identity is None:
            logger.warning("login_failed", username=username, status=outcome.status)
            raise UnauthorizedError(outcome.message, error_code=outcome.status.value)

        identity = outcome.identity
        tokens = self.tokens.issue_token_pair(identity)
        await self.tokens.persist_refresh_token(identity.user_id, tokens.refresh_token)

        logger.info("login_succeeded", user_id=identity.user_id)
        return tokens

    async def logout(self, refresh_token: str) -> bool:
        """Revoke a refresh token.

        Safe to repeat; revoking an inactive or unknown token does nothing.

        Returns:
            True if an active session was closed by this call
        """
        revoked = await self.tokens.revoke_refresh_token(refresh_token)
        logger.info("logout", revoked=revoked)
        return revoked

    async def refresh_tokens(self, refresh_token: str) -> TokenPair | None:
        """Exchange a refresh token for a new pair, rotating the old one.

        The old token is claimed with a conditional update, so a replayed or
        concurrently used token yields None.

        Args:
            refresh_token: The refresh token presented by the client

        Returns:
            New token pair, or None if the token is invalid, expired,
            revoked or already rotated
        """
        claims = self.tokens.verify_refresh_token(refresh_token)
        if claims is None:
            return None

        if not await self.tokens.is_refresh_token_valid(claims.user_id, refresh_token):
            logger.warning("refresh_token_rejected", user_id=claims.user_id, reason="inactive")
            return None

        identity = claims.identity()
        tokens = self.tokens.issue_token_pair(identity)

        if not await self.tokens.revoke_refresh_token(refresh_token, user_id=claims.user_id):
            logger.warning("refresh_token_rejected", user_id=claims.user_id, reason="lost_rotation")
            return None

        await self.tokens.persist_refresh_token(identity.user_id, tokens.refresh_token)
        logger.info("refresh_token_rotated", user_id=identity.user_id)
        return tokens

    async def verify(self, identity: AuthIdentity) -> User:
        """Confirm that the subject of an access token still exists.

        Raises:
            UnauthorizedError: If the user has been deleted
        """
        user = await self.user_repo.get_by_id(identity.user_id)
        if user is None:
            logger.warning("verify_unknown_user", user_id=identity.user_id)
            raise UnauthorizedError(messages.ACCESS_DENIED, error_code="user_not_found")
        return user


# Type alias for dependency injection
AuthSvc = Annotated[AuthService, Depends(AuthService)]
