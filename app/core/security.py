"""Password hashing, identity assertions, and single-use tokens.

- Passwords are hashed with bcrypt through passlib's ``CryptContext``.
- Identity assertions are HS256 JWTs signed with ``settings.JWT_SECRET`` and
  valid for ``settings.ACCESS_TOKEN_EXPIRE_DAYS``.
- Verification and reset tokens are random UUID4 strings.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Any
from uuid import uuid4

from jose import JWTError, jwt
from passlib.context import CryptContext

from app.core.config import settings

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


# ---------------------------------------------------------------------------
# Credential hashing
# ---------------------------------------------------------------------------

def hash_password(plaintext: str) -> str:
    """Return a salted bcrypt hash of *plaintext*."""
    return pwd_context.hash(plaintext)


def verify_password(plaintext: str, hashed: str | None) -> bool:
    """Return True iff *plaintext* matches *hashed*.

    Malformed or empty hashes count as a mismatch.
    """
    if not hashed:
        return False
    try:
        return pwd_context.verify(plaintext, hashed)
    except (ValueError, TypeError):
        logger.warning("password_hash_unreadable")
        return False


# ---------------------------------------------------------------------------
# Identity assertion
# ---------------------------------------------------------------------------

def issue_access_token(claims: dict[str, Any], now: datetime | None = None) -> str:
    """Sign *claims* into a JWT that expires after the configured number of days."""
    issued_at = now or datetime.now(timezone.utc)
    to_encode = claims.copy()
    to_encode.update(
        {
            "iat": issued_at,
            "exp": issued_at + timedelta(days=settings.ACCESS_TOKEN_EXPIRE_DAYS),
        }
    )
    return jwt.encode(to_encode, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> dict[str, Any] | None:
    """Return the claims of *token*, or None if it is forged, malformed, or expired."""
    if not token:
        return None
    try:
        return jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except JWTError:
        return None


# ---------------------------------------------------------------------------
# Single-use tokens
# ---------------------------------------------------------------------------

def generate_verification_token() -> str:
    return str(uuid4())


def token_expiry(hours: int, now: datetime | None = None) -> datetime:
    """Return the UTC instant *hours* from *now*."""
    return (now or datetime.now(timezone.utc)) + timedelta(hours=hours)


def is_expired(expires_at: datetime | None, now: datetime | None = None) -> bool:
    """Tokens without a stored expiry never expire."""
    if expires_at is None:
        return False
    return expires_at <= (now or datetime.now(timezone.utc))
