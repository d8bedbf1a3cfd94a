"""Credential verification for username/password logins."""

from typing import Annotated

import structlog
from fastapi import Depends
from sqlalchemy.exc import SQLAlchemyError

from rolegate.api.dependencies import DBSession
from rolegate.core import messages
from rolegate.core.auth.backend import verify_password
from rolegate.core.auth.schemas import AuthIdentity, LoginOutcome, LoginStatus
from rolegate.modules.users.repos import UserRepository


logger = structlog.get_logger()


class CredentialVerifier:
    """Check a username/password pair and report a tagged outcome.

    The verifier never raises for a bad login; the caller decides how each
    ``LoginStatus`` is presented.
    """

    def __init__(self, session: DBSession) -> None:
        self.user_repo = UserRepository(session)

    async def validate(self, username: str, password: str) -> LoginOutcome:
        """Validate credentials.

        Args:
            username: Login name
            password: Plain text password

        Returns:
            LoginOutcome carrying the identity on success
        """
        try:
            user = await self.user_repo.get_by_username(username)
        except SQLAlchemyError:
            logger.exception("credential_lookup_failed", username=username)
            return LoginOutcome(
                status=LoginStatus.SERVER_ERROR,
                message=messages.INTERNAL_SERVER_ERROR,
            )

        if user is None:
            return LoginOutcome(
                status=LoginStatus.USER_NOT_FOUND,
                message=messages.USER_NOT_FOUND,
            )

        if not verify_password(password, user.password_hash):
            return LoginOutcome(
                status=LoginStatus.WRONG_PASSWORD,
                message=messages.WRONG_PASSWORD,
            )

        if not user.is_active:
            return LoginOutcome(
                status=LoginStatus.ACCOUNT_LOCKED,
                message=messages.ACCOUNT_LOCKED,
            )

        return LoginOutcome(
            status=LoginStatus.SUCCESS,
            message=messages.LOGIN_SUCCEEDED,
            identity=AuthIdentity(user_id=user.id, username=user.username),
        )


Verifier = Annotated[CredentialVerifier, Depends(CredentialVerifier)]
