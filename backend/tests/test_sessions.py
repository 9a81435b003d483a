"""SessionManager: authentication, issue / validate / destroy, expiry."""
from __future__ import annotations

from datetime import timedelta

import pytest

from app.core.errors import InvalidCredentials, Unauthorized
from app.core.sessions import InMemorySessionStore, SessionManager, SessionUser
from app.repositories.employees import create_employee


@pytest.fixture
def manager(clock) -> SessionManager:
    return SessionManager(InMemorySessionStore(), ttl=timedelta(minutes=30), clock=clock)


@pytest.fixture
async def employee(db):
    employee = await create_employee(
        db,
        username="jdoe",
        password="s3cret!",
        full_name="Jane Doe",
        email="jane@example.com",
    )
    await db.commit()
    return employee


async def test_authenticate_then_session_round_trip(db, manager, employee) -> None:
    found = await manager.authenticate(db, "jdoe", "s3cret!")
    token = manager.create_session(found)

    user = manager.validate_session(token)
    assert user == SessionUser(id=employee.id, username="jdoe", full_name="Jane Doe")
    assert "password" not in user.to_dict()
    assert "password_hash" not in user.to_dict()

    # Still valid on repeated checks until destroyed
    assert manager.validate_session(token) == user

    manager.destroy_session(token)
    with pytest.raises(Unauthorized):
        manager.validate_session(token)


@pytest.mark.parametrize(
    ("username", "password"),
    [("jdoe", "wrong"), ("nobody", "s3cret!"), ("JDOE", "s3cret!")],
)
async def test_authenticate_rejects_bad_credentials(db, manager, employee, username, password) -> None:
    with pytest.raises(InvalidCredentials):
        await manager.authenticate(db, username, password)


async def test_inactive_employee_cannot_authenticate(db, manager, employee) -> None:
    employee.is_active = False
    await db.commit()

    with pytest.raises(InvalidCredentials):
        await manager.authenticate(db, "jdoe", "s3cret!")


def test_validate_rejects_missing_and_unknown_tokens(manager) -> None:
    for token in (None, "", "not-a-token"):
        with pytest.raises(Unauthorized):
            manager.validate_session(token)


def test_session_expires_after_ttl(manager, clock) -> None:
    token = manager.create_session(SessionUser(id=1, username="admin", full_name="Admin"))

    clock.advance(minutes=29, seconds=59)
    assert manager.validate_session(token).username == "admin"

    clock.advance(seconds=1)
    with pytest.raises(Unauthorized):
        manager.validate_session(token)
    # The expired record is gone, not just hidden
    assert manager.store.get(token) is None


def test_destroy_is_idempotent(manager) -> None:
    token = manager.create_session(SessionUser(id=1, username="admin", full_name="Admin"))

    manager.destroy_session(token)
    manager.destroy_session(token)
    manager.destroy_session(None)
    manager.destroy_session("never-issued")

    assert len(manager.store) == 0


def test_purge_expired_keeps_live_sessions(manager, clock) -> None:
    old = manager.create_session(SessionUser(id=1, username="a", full_name="A"))
    clock.advance(minutes=20)
    fresh = manager.create_session(SessionUser(id=2, username="b", full_name="B"))
    clock.advance(minutes=15)

    assert manager.purge_expired() == 1
    assert manager.store.get(old) is None
    assert manager.validate_session(fresh).username == "b"


def test_each_login_gets_its_own_token(manager) -> None:
    user = SessionUser(id=1, username="admin", full_name="Admin")
    first = manager.create_session(user)
    second = manager.create_session(user)

    assert first != second
    manager.destroy_session(first)
    assert manager.validate_session(second) == user
