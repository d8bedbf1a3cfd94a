"""Authentication backend for password hashing and JWT encoding.

This module provides the stateless building blocks used by the credential
verifier and the token service:
- Password hashing with bcrypt
- JWT token creation and verification
"""

import secrets
from datetime import UTC, datetime, timedelta
from typing import Any

import bcrypt
from jose import JWTError, jwt

from rolegate.core.auth.schemas import AuthIdentity, TokenClaims, TokenType
from rolegate.core.constants import BCRYPT_ROUNDS, TOKEN_JTI_LENGTH


# ============================================================
# Password Utilities
# ============================================================


def hash_password(password: str, rounds: int = BCRYPT_ROUNDS) -> str:
    """Hash a password using bcrypt.

    Args:
        password: Plain text password
        rounds: bcrypt cost factor

    Returns:
        Bcrypt hash of the password
    """
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash.

    A malformed stored hash counts as a mismatch.

    Args:
        plain_password: Plain text password to verify
        hashed_password: Bcrypt hash to verify against

    Returns:
        True if password matches, False otherwise
    """
    try:
        return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))
    except ValueError:
        return False


# ============================================================
# JWT Token Utilities
# ============================================================


def encode_token(
    identity: AuthIdentity,
    *,
    secret: str,
    algorithm: str,
    token_type: TokenType,
    expires_delta: timedelta,
) -> str:
    """Sign a JWT carrying ``identity``.

    Args:
        identity: User ID and username to embed
        secret: Signing secret for this token class
        algorithm: JWT algorithm
        token_type: "access" or "refresh"
        expires_delta: Lifetime of the token

    Returns:
        Encoded JWT
    """
    now = datetime.now(UTC)
    to_encode: dict[str, Any] = {
        "sub": str(identity.user_id),
        "username": identity.username,
        "exp": now + expires_delta,
        "iat": now,
        "type": token_type,
        "jti": secrets.token_urlsafe(TOKEN_JTI_LENGTH),  # Unique token ID
    }
    return jwt.encode(to_encode, secret, algorithm=algorithm)


def decode_token(
    token: str,
    *,
    secret: str,
    algorithm: str,
    token_type: TokenType | None = None,
) -> TokenClaims | None:
    """Decode and validate a JWT.

    Args:
        token: The JWT to decode
        secret: Secret the token must be signed with
        algorithm: Accepted JWT algorithm
        token_type: Expected ``type`` claim, if any

    Returns:
        TokenClaims if valid, None if the signature, expiry, type or
        payload shape is wrong
    """
    try:
        payload = jwt.decode(token, secret, algorithms=[algorithm])

        user_id = payload.get("sub")
        exp = payload.get("exp")
        iat = payload.get("iat")
        if not user_id or exp is None:
            return None
        if token_type is not None and payload.get("type") != token_type:
            return None

        return TokenClaims(
            user_id=int(user_id),
            username=payload.get("username", ""),
            exp=datetime.fromtimestamp(exp, tz=UTC),
            iat=datetime.fromtimestamp(iat, tz=UTC) if iat is not None else None,
            type=payload.get("type", "access"),
            jti=payload.get("jti"),
        )

    except (JWTError, ValueError, TypeError):
        return None


def read_token_expiry(token: str) -> datetime | None:
    """Read the ``exp`` claim without verifying the signature.

    Only used on tokens this process has just signed.
    """
    try:
        exp = jwt.get_unverified_claims(token).get("exp")
    except JWTError:
        return None
    if exp is None:
        return None
    return datetime.fromtimestamp(exp, tz=UTC)
