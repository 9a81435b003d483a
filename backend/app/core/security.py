"""Password hashing and session token generation."""

from __future__ import annotations

import functools
import secrets

import bcrypt

from app.core.config import settings

SESSION_TOKEN_BYTES = 32


def hash_password(password: str, rounds: int | None = None) -> str:
    """Return a salted bcrypt digest for ``password``."""
    salt = bcrypt.gensalt(rounds=rounds or settings.BCRYPT_ROUNDS)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, hashed_password: str) -> bool:
    """Check ``password`` against a stored digest in constant time."""
    try:
        return bcrypt.checkpw(password.encode("utf-8"), hashed_password.encode("utf-8"))
    except ValueError:
        # Malformed digest in the employees table
        return False


@functools.lru_cache(maxsize=1)
def _dummy_hash() -> str:
    return hash_password(secrets.token_hex(16))


def burn_password_check(password: str) -> None:
    """Spend one verification on a throwaway digest of the configured cost."""
    verify_password(password, _dummy_hash())


def generate_session_token() -> str:
    """Return an unguessable, URL-safe session token."""
    return secrets.token_urlsafe(SESSION_TOKEN_BYTES)
