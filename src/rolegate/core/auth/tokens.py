"""Token service: issuing, verifying and bookkeeping of JWTs.

Access tokens and refresh tokens are signed with different secrets, so a
leaked access secret cannot be used to mint refresh tokens. Refresh tokens
are also persisted, which is what makes rotation and logout effective.

Nothing in this module raises past its public methods: verification
failures return ``None`` and bookkeeping failures are logged and reported
as ``False``.
"""

from datetime import timedelta
from typing import Annotated

import structlog
from fastapi import Depends
from sqlalchemy.exc import SQLAlchemyError

from rolegate.api.dependencies import AppSettings, DBSession
from rolegate.core.auth.backend import decode_token, encode_token, read_token_expiry
from rolegate.core.auth.schemas import AuthIdentity, TokenClaims, TokenPair, TokenType
from rolegate.modules.users.repos import RefreshTokenRepository


logger = structlog.get_logger()


class TokenService:
    """Issue, verify, persist and revoke access and refresh tokens."""

    def __init__(self, session: DBSession, settings: AppSettings) -> None:
        self.session = session
        self.settings = settings
        self.token_repo = RefreshTokenRepository(session)

    # ============================================================
    # Issuing
    # ============================================================

    def issue_access_token(self, identity: AuthIdentity) -> str:
        """Sign a short-lived access token with the access secret."""
        return encode_token(
            identity,
            secret=self.settings.secret_key,
            algorithm=self.settings.jwt_algorithm,
            token_type="access",
            expires_delta=timedelta(minutes=self.settings.access_token_expire_minutes),
        )

    def issue_refresh_token(self, identity: AuthIdentity) -> str:
        """Sign a long-lived refresh token with the refresh secret."""
        return encode_token(
            identity,
            secret=self.settings.refresh_secret_key,
            algorithm=self.settings.jwt_algorithm,
            token_type="refresh",
            expires_delta=timedelta(days=self.settings.refresh_token_expire_days),
        )

    def issue_token_pair(self, identity: AuthIdentity) -> TokenPair:
        return TokenPair(
            access_token=self.issue_access_token(identity),
            refresh_token=self.issue_refresh_token(identity),
        )

    # ============================================================
    # Verification
    # ============================================================

    def verify(
        self,
        token: str,
        secret: str,
        token_type: TokenType | None = None,
    ) -> TokenClaims | None:
        """Validate signature, expiry and (optionally) the token class.

        Args:
            token: Encoded JWT
            secret: Secret the token must be signed with
            token_type: Expected ``type`` claim

        Returns:
            Decoded claims, or None when the token is invalid
        """
        claims = decode_token(
            token,
            secret=secret,
            algorithm=self.settings.jwt_algorithm,
            token_type=token_type,
        )
        if claims is None:
            logger.warning("token_verification_failed", expected_type=token_type)
        return claims

    def verify_access_token(self, token: str) -> TokenClaims | None:
        return self.verify(token, self.settings.secret_key, "access")

    def verify_refresh_token(self, token: str) -> TokenClaims | None:
        return self.verify(token, self.settings.refresh_secret_key, "refresh")

    # ============================================================
    # Refresh token bookkeeping
    # ============================================================

    async def persist_refresh_token(self, user_id: int, token: str) -> bool:
        """Store ``token`` as an active session for ``user_id``.

        An already stored token is reactivated and its expiry refreshed.
        The write runs in a SAVEPOINT; a failure is logged and leaves the
        surrounding transaction usable.

        Returns:
            True if the row was written
        """
        expires_at = read_token_expiry(token)
        if expires_at is None:
            logger.warning("refresh_token_persist_failed", user_id=user_id, reason="no_expiry")
            return False

        try:
            async with self.session.begin_nested():
                await self.token_repo.upsert(user_id, token, expires_at)
        except SQLAlchemyError as exc:
            logger.warning(
                "refresh_token_persist_failed",
                user_id=user_id,
                reason=type(exc).__name__,
            )
            return False
        return True

    async def revoke_refresh_token(self, token: str, user_id: int | None = None) -> bool:
        """Deactivate ``token``.

        Revoking an unknown or already inactive token is a no-op. With
        ``user_id`` the row must also still be valid for that user, which
        turns the call into an atomic claim used by rotation.

        Returns:
            True if this call moved a row from active to inactive
        """
        try:
            async with self.session.begin_nested():
                revoked = await self.token_repo.deactivate(token, user_id=user_id)
        except SQLAlchemyError as exc:
            logger.warning(
                "refresh_token_revoke_failed",
                user_id=user_id,
                reason=type(exc).__name__,
            )
            return False
        if not revoked:
            logger.info("refresh_token_already_inactive", user_id=user_id)
        return revoked > 0

    async def is_refresh_token_valid(self, user_id: int, token: str) -> bool:
        """Check the persisted state of ``token`` for ``user_id``.

        Any lookup failure counts as invalid.
        """
        try:
            return await self.token_repo.is_valid(user_id, token)
        except SQLAlchemyError as exc:
            logger.warning(
                "refresh_token_lookup_failed",
                user_id=user_id,
                reason=type(exc).__name__,
            )
            return False


TokenSvc = Annotated[TokenService, Depends(TokenService)]
