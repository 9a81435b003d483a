"""Password hashing, verification and session token generation."""
from __future__ import annotations

from app.core.security import (
    burn_password_check,
    generate_session_token,
    hash_password,
    verify_password,
)


def test_hash_is_salted_and_verifies() -> None:
    first = hash_password("admin123")
    second = hash_password("admin123")

    assert first != second
    assert first.startswith("$2")
    assert verify_password("admin123", first)
    assert verify_password("admin123", second)


def test_wrong_password_is_rejected() -> None:
    digest = hash_password("admin123")
    assert not verify_password("admin124", digest)
    assert not verify_password("", digest)


def test_malformed_digest_is_rejected_not_raised() -> None:
    assert not verify_password("admin123", "not-a-bcrypt-digest")


def test_burn_password_check_returns_nothing() -> None:
    assert burn_password_check("whatever") is None


def test_session_tokens_are_unique_and_long() -> None:
    tokens = {generate_session_token() for _ in range(50)}
    assert len(tokens) == 50
    assert all(len(token) >= 40 for token in tokens)
