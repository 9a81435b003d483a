"""Authentication endpoints: session login and logout."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_db, get_session_manager, get_session_token
from app.api.schemas.auth import EmployeeOut, LoginRequest, LoginResponse
from app.api.schemas.common import MessageResponse
from app.core.config import settings
from app.core.constants import MSG_LOGIN_REQUIRED_FIELDS, MSG_LOGOUT_FAILED
from app.core.errors import InternalError, ValidationError
from app.core.logging import get_logger
from app.core.sessions import SessionManager, SessionUser

logger = get_logger(__name__)

router = APIRouter(tags=["Auth"])


@router.post("/login", response_model=LoginResponse)
async def login(
    response: Response,
    payload: LoginRequest | None = None,
    db: AsyncSession = Depends(get_db),
    sessions: SessionManager = Depends(get_session_manager),
) -> LoginResponse:
    """Authenticate an employee and set the session cookie."""
    if payload is None or not payload.username or not payload.password:
        raise ValidationError(MSG_LOGIN_REQUIRED_FIELDS)

    employee = await sessions.authenticate(db, payload.username, payload.password)
    user = SessionUser.from_employee(employee)
    token = sessions.create_session(user)

    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=token,
        max_age=settings.SESSION_TTL_MINUTES * 60,
        httponly=True,
        samesite="lax",
        secure=settings.SESSION_COOKIE_SECURE,
    )
    logger.info("Employee logged in", employee_id=user.id, username=user.username)
    return LoginResponse(employee=EmployeeOut(**user.to_dict()))


@router.post("/logout", response_model=MessageResponse)
async def logout(
    response: Response,
    token: str | None = Depends(get_session_token),
    sessions: SessionManager = Depends(get_session_manager),
) -> MessageResponse:
    """Destroy the current session, if any, and clear the cookie."""
    try:
        sessions.destroy_session(token)
    except Exception as exc:
        logger.error("Logout failed", error=str(exc))
        raise InternalError(MSG_LOGOUT_FAILED) from exc

    response.delete_cookie(
        key=settings.SESSION_COOKIE_NAME,
        httponly=True,
        samesite="lax",
        secure=settings.SESSION_COOKIE_SECURE,
    )
    return MessageResponse(message="Logged out successfully.")
