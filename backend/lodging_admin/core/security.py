"""Security utilities for PIN hashing and JWT handling."""

import secrets
from datetime import UTC, datetime, timedelta
from typing import Any

import bcrypt
from jose import jwt

from lodging_admin.core.config import get_settings


def verify_pin(plain_pin: str, hashed_pin: str) -> bool:
    """Check a PIN against its hash using bcrypt."""
    try:
        return bcrypt.checkpw(plain_pin.encode(), hashed_pin.encode())
    except (ValueError, TypeError):  # guard against malformed hashes
        return False


def get_pin_hash(pin: str) -> str:
    """Hash a PIN for configuration using bcrypt."""
    return bcrypt.hashpw(pin.encode(), bcrypt.gensalt()).decode()


def pins_match(candidate: str, expected: str) -> bool:
    """Constant-time comparison for plain shared PINs."""
    return secrets.compare_digest(candidate.encode(), expected.encode())


def create_access_token(
    subject: str, expires_delta: timedelta | None = None, **extra: Any
) -> str:
    """Create a JWT access token."""
    settings = get_settings()
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.access_token_expire_minutes)
    expire = datetime.now(UTC) + expires_delta
    claims: dict[str, Any] = {"sub": subject, "exp": expire}
    claims.update(extra)
    return jwt.encode(claims, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> dict[str, Any]:
    """Decode a JWT token, raising JWTError on failure."""
    settings = get_settings()
    return jwt.decode(
        token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm]
    )
