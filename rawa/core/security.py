"""Password hashing and JWT creation/verification for authentication."""

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any

import bcrypt
import jwt

from rawa.core.config import settings
from rawa.core.exceptions import InvalidInput

# Bcrypt cost (rounds). Raising it later slows verification of new hashes only;
# existing hashes keep the cost embedded in their own salt string.
BCRYPT_ROUNDS = 10

# Min/max lengths for username and password validation.
USERNAME_MIN_LEN = 3
USERNAME_MAX_LEN = 191
PASSWORD_MIN_LEN = 6
PASSWORD_MAX_LEN = 128


@dataclass(frozen=True)
class TokenClaims:
    """Identity carried by a valid access token."""

    user_id: int
    username: str


def hash_password(plain_password: str) -> str:
    """Hash a plain-text password for storage. Each call uses a fresh random salt."""
    if not isinstance(plain_password, str) or not plain_password:
        raise InvalidInput("Password must be a non-empty string")
    # bcrypt has a 72-byte limit; truncate to avoid errors (validation already limits length).
    pw_bytes = plain_password.encode("utf-8")[:72]
    return bcrypt.hashpw(pw_bytes, bcrypt.gensalt(rounds=BCRYPT_ROUNDS)).decode("utf-8")


def verify_password(plain_password: str, hashed: str | None) -> bool:
    """Verify a plain password against a stored hash. Never raises; bad input is a mismatch."""
    if not hashed or not isinstance(plain_password, str):
        return False
    pw_bytes = plain_password.encode("utf-8")[:72]
    try:
        return bcrypt.checkpw(pw_bytes, hashed.encode("utf-8"))
    except (ValueError, TypeError):
        return False


def create_access_token(
    user_id: int,
    username: str,
    expires_delta: timedelta | None = None,
) -> str:
    """Create a JWT access token with sub (user id), username, iat and exp."""
    now = datetime.now(UTC)
    expire = now + (expires_delta or timedelta(minutes=settings.JWT_EXPIRE_MINUTES))
    payload: dict[str, Any] = {
        "sub": str(user_id),
        "username": username,
        "exp": expire,
        "iat": now,
    }
    secret = settings.JWT_SECRET.get_secret_value()
    return jwt.encode(
        payload,
        secret,
        algorithm=settings.JWT_ALGORITHM,
    )


def decode_access_token(token: str) -> dict[str, Any]:
    """
    Decode and validate JWT; return payload (sub, username, exp, iat).
    Raises jwt.PyJWTError on invalid or expired token.
    """
    secret = settings.JWT_SECRET.get_secret_value()
    return jwt.decode(
        token,
        secret,
        algorithms=[settings.JWT_ALGORITHM],
        options={"require": ["sub", "exp", "iat"]},
    )


def verify_access_token(token: str | None) -> TokenClaims | None:
    """
    Return the token's claims, or None for any malformed, tampered or expired token.

    Callers get no hint about which check failed.
    """
    if not token:
        return None
    try:
        payload = decode_access_token(token)
    except jwt.PyJWTError:
        return None
    try:
        user_id = int(payload["sub"])
    except (KeyError, TypeError, ValueError):
        return None
    username = payload.get("username")
    if not isinstance(username, str):
        return None
    return TokenClaims(user_id=user_id, username=username)
