"""Authentication: credential verification, JWT handling and the auth routes."""

from rolegate.core.auth.backend import hash_password, verify_password
from rolegate.core.auth.schemas import AuthIdentity, LoginOutcome, LoginStatus, TokenPair


__all__ = [
    "AuthIdentity",
    "LoginOutcome",
    "LoginStatus",
    "TokenPair",
    "hash_password",
    "verify_password",
]
