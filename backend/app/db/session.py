"""
Async SQLAlchemy engine and session factory.
"""

from __future__ import annotations

import functools
from contextlib import asynccontextmanager
from typing import AsyncIterator

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.core.config import settings
from app.db.models import Base


def build_engine(url: str, *, echo: bool = False) -> AsyncEngine:
    """Create an async engine with pool settings suited to the dialect."""
    if url.startswith("sqlite"):
        kwargs: dict = {"connect_args": {"check_same_thread": False}}
        if ":memory:" in url or url.endswith("://"):
            # One shared connection, otherwise every checkout sees an empty database
            kwargs["poolclass"] = StaticPool
        return create_async_engine(url, echo=echo, **kwargs)

    return create_async_engine(
        url,
        echo=echo,
        pool_size=20,
        max_overflow=10,
        pool_pre_ping=True,
    )


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


@functools.lru_cache(maxsize=1)
def get_engine() -> AsyncEngine:
    """Process-wide engine built from settings on first use."""
    return build_engine(settings.DATABASE_URL, echo=(settings.APP_ENV == "development"))


def async_session() -> AsyncSession:
    """Open a session on the default engine (scripts, CLI)."""
    return build_session_factory(get_engine())()


async def create_schema(engine: AsyncEngine) -> None:
    """Create any missing tables. Existing tables are left untouched."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


@asynccontextmanager
async def session_scope(factory: async_sessionmaker[AsyncSession]) -> AsyncIterator[AsyncSession]:
    """
    Yield one session per request and roll it back if the handler fails.

    Nothing is committed here; write handlers commit before they return.
    """
    async with factory() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()
