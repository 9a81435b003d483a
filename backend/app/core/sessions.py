"""
Server-side session management.

Sessions are opaque tokens held in a client cookie and mapped, in process
memory, to the small profile the API needs: ``{id, username, full_name}``.
Nothing survives a restart; a single-instance deployment is assumed.

The store and the clock are injected so expiry can be driven from tests::

    manager = SessionManager(ttl=timedelta(minutes=30), clock=frozen_clock)
    employee = await manager.authenticate(db, "admin", "admin123")
    token = manager.create_session(employee)
    user = manager.validate_session(token)
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import datetime, timedelta
from typing import Callable, Iterator

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import InvalidCredentials, Unauthorized
from app.core.logging import get_logger
from app.core.security import generate_session_token
from app.db.models.base import utcnow
from app.db.models.employee import Employee
from app.repositories import employees as employee_repository

logger = get_logger(__name__)

Clock = Callable[[], datetime]


@dataclass(frozen=True)
class SessionUser:
    """The employee profile carried by a session and returned to clients."""

    id: int
    username: str
    full_name: str

    @classmethod
    def from_employee(cls, employee: Employee) -> "SessionUser":
        return cls(id=employee.id, username=employee.username, full_name=employee.full_name)

    def to_dict(self) -> dict[str, object]:
        return asdict(self)


@dataclass(frozen=True)
class SessionRecord:
    user: SessionUser
    created_at: datetime
    expires_at: datetime

    def is_expired(self, now: datetime) -> bool:
        return now >= self.expires_at


class InMemorySessionStore:
    """Keyed token -> SessionRecord map."""

    def __init__(self) -> None:
        self._records: dict[str, SessionRecord] = {}

    def get(self, token: str) -> SessionRecord | None:
        return self._records.get(token)

    def put(self, token: str, record: SessionRecord) -> None:
        self._records[token] = record

    def delete(self, token: str) -> bool:
        return self._records.pop(token, None) is not None

    def items(self) -> Iterator[tuple[str, SessionRecord]]:
        return iter(list(self._records.items()))

    def __len__(self) -> int:
        return len(self._records)


class SessionManager:
    """Authenticates employees and issues, validates and destroys sessions."""

    def __init__(
        self,
        store: InMemorySessionStore | None = None,
        *,
        ttl: timedelta,
        clock: Clock = utcnow,
    ) -> None:
        self.store = store if store is not None else InMemorySessionStore()
        self.ttl = ttl
        self.clock = clock

    async def authenticate(self, db: AsyncSession, username: str, password: str) -> Employee:
        """Return the active employee for these credentials or raise InvalidCredentials."""
        employee = await employee_repository.authenticate_employee(
            db,
            username=username,
            password=password,
        )
        if employee is None:
            logger.info("Login rejected", username=username)
            raise InvalidCredentials()
        return employee

    def create_session(self, employee: Employee | SessionUser) -> str:
        """Store a new session for ``employee`` and return its token."""
        user = employee if isinstance(employee, SessionUser) else SessionUser.from_employee(employee)
        self.purge_expired()
        now = self.clock()
        token = generate_session_token()
        self.store.put(token, SessionRecord(user=user, created_at=now, expires_at=now + self.ttl))
        logger.info("Session created", employee_id=user.id, username=user.username)
        return token

    def validate_session(self, token: str | None) -> SessionUser:
        """Resolve ``token`` to its SessionUser or raise Unauthorized."""
        if not token:
            raise Unauthorized()

        record = self.store.get(token)
        if record is None:
            raise Unauthorized()

        if record.is_expired(self.clock()):
            self.store.delete(token)
            logger.info("Session expired", username=record.user.username)
            raise Unauthorized()

        return record.user

    def destroy_session(self, token: str | None) -> None:
        """Drop the session for ``token``. Unknown tokens are ignored."""
        if token and self.store.delete(token):
            logger.info("Session destroyed")

    def purge_expired(self) -> int:
        """Remove every expired session and return how many were dropped."""
        now = self.clock()
        expired = [token for token, record in self.store.items() if record.is_expired(now)]
        for token in expired:
            self.store.delete(token)
        if expired:
            logger.info("Expired sessions purged", count=len(expired))
        return len(expired)
