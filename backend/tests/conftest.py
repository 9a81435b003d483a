"""
Shared fixtures for the portal backend tests.

Every test gets a fresh in-memory SQLite database (aiosqlite) and an
application wired to it with a frozen clock, so timestamps and session
expiry are deterministic.  The environment is set before anything under
``app`` is imported because settings are read at import time.
"""
from __future__ import annotations

import os

os.environ["DATABASE_URL_OVERRIDE"] = "sqlite+aiosqlite://"
os.environ["APP_ENV"] = "test"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["SESSION_TTL_MINUTES"] = "30"
os.environ["SEED_ADMIN_USERNAME"] = "admin"
os.environ["SEED_ADMIN_PASSWORD"] = "admin123"

from datetime import datetime, timedelta, timezone

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from app.db.session import build_engine, build_session_factory, create_schema
from app.main import bootstrap, create_app


class FrozenClock:
    """Callable clock that only moves when told to."""

    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2026, 1, 5, 9, 0, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def clock() -> FrozenClock:
    return FrozenClock()


@pytest_asyncio.fixture
async def engine():
    engine = build_engine("sqlite+aiosqlite://")
    await create_schema(engine)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def db(engine):
    """A session for repository-level tests."""
    async with build_session_factory(engine)() as session:
        yield session


@pytest_asyncio.fixture
async def app(engine, clock):
    """Application bound to the test engine, with the seed admin in place."""
    application = create_app(engine=engine, clock=clock)
    await bootstrap(application)
    return application


@pytest_asyncio.fixture
async def client(app):
    """Async httpx client over ASGI transport, no live server needed."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture
async def auth_client(client):
    """``client`` after logging in as the seed admin."""
    response = await client.post("/api/login", json={"username": "admin", "password": "admin123"})
    assert response.status_code == 200, response.text
    return client
