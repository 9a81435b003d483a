"""Shared dependencies for API routes."""

from __future__ import annotations

from datetime import datetime
from typing import AsyncGenerator

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.sessions import Clock, SessionManager, SessionUser
from app.db.session import session_scope


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """Yield an async DB session bound to this application's engine."""
    async with session_scope(request.app.state.session_factory) as session:
        yield session


def get_session_manager(request: Request) -> SessionManager:
    return request.app.state.session_manager


def get_clock(request: Request) -> Clock:
    return request.app.state.clock


def get_now(clock: Clock = Depends(get_clock)) -> datetime:
    """Timestamp for the current request."""
    return clock()


def get_session_token(request: Request) -> str | None:
    """Session token from the request cookie, if any."""
    return request.cookies.get(settings.SESSION_COOKIE_NAME)


def get_current_employee(
    token: str | None = Depends(get_session_token),
    sessions: SessionManager = Depends(get_session_manager),
) -> SessionUser:
    """Resolve the signed-in employee or raise Unauthorized."""
    return sessions.validate_session(token)
