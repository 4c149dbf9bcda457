"""Password hashing and JWT access tokens."""

import base64
import hashlib
from datetime import datetime, timedelta, timezone
from typing import Any

import bcrypt
import jwt

from bidplatform.app.config import Settings

BCRYPT_ROUNDS = 10


def _prehash(password: str) -> bytes:
    # bcrypt only reads 72 bytes; SHA-256 + base64 keeps long passphrases significant
    return base64.b64encode(hashlib.sha256(password.encode("utf-8")).digest())


def hash_password(password: str) -> str:
    """Hash a password with bcrypt."""
    hashed = bcrypt.hashpw(_prehash(password), bcrypt.gensalt(rounds=BCRYPT_ROUNDS))
    return hashed.decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Check a password against a stored bcrypt hash."""
    try:
        return bcrypt.checkpw(_prehash(password), password_hash.encode("utf-8"))
    except ValueError:
        # Stored value is not a bcrypt hash
        return False


def create_access_token(
    user_id: str,
    role: str,
    settings: Settings,
    expires_delta: timedelta | None = None,
) -> str:
    """Create a signed access token carrying the user id and role.

    Args:
        user_id: User's UUID as string
        role: User's role
        settings: Provides secret, algorithm and default lifetime
        expires_delta: Optional custom expiration time

    Returns:
        JWT token string
    """
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(days=settings.jwt_expires_days))

    payload = {
        "user": {"id": user_id, "role": role},
        "iat": now,
        "exp": expire,
    }
    return jwt.encode(
        payload, settings.jwt_secret.get_secret_value(), algorithm=settings.jwt_algorithm
    )


def decode_access_token(token: str, settings: Settings) -> dict[str, Any]:
    """Verify and decode an access token.

    Raises:
        jwt.InvalidTokenError: If the token is expired, tampered with or malformed
    """
    payload: dict[str, Any] = jwt.decode(
        token,
        settings.jwt_secret.get_secret_value(),
        algorithms=[settings.jwt_algorithm],
    )
    return payload
