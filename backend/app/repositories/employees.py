"""
Employee repository containing all data-access operations for the employees table.

Repository rules:
- Pure data-access logic only
- Every function receives AsyncSession explicitly
- Functions flush, but never commit
"""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.security import burn_password_check, hash_password, verify_password
from app.db.models.employee import Employee


async def create_employee(
    db: AsyncSession,
    *,
    username: str,
    password: str,
    full_name: str,
    email: str | None = None,
) -> Employee:
    """Create a new employee with a hashed password."""
    employee = Employee(
        username=username.strip(),
        password_hash=hash_password(password),
        full_name=full_name.strip(),
        email=email.strip() if email else None,
    )
    db.add(employee)
    await db.flush()
    return employee


async def get_employee_by_username(
    db: AsyncSession,
    username: str,
    *,
    active_only: bool = False,
) -> Employee | None:
    """Fetch an employee by exact username."""
    stmt = select(Employee).where(Employee.username == username)
    if active_only:
        stmt = stmt.where(Employee.is_active.is_(True))
    result = await db.execute(stmt)
    return result.scalar_one_or_none()


async def authenticate_employee(
    db: AsyncSession,
    *,
    username: str,
    password: str,
) -> Employee | None:
    """Validate credentials and return the active employee on success."""
    employee = await get_employee_by_username(db, username, active_only=True)
    if employee is None:
        burn_password_check(password)
        return None
    if not verify_password(password, employee.password_hash):
        return None
    return employee


async def ensure_employee(
    db: AsyncSession,
    *,
    username: str,
    password: str,
    full_name: str,
) -> tuple[Employee, bool]:
    """Return the named employee, creating it first if absent."""
    existing = await get_employee_by_username(db, username)
    if existing is not None:
        return existing, False
    employee = await create_employee(
        db,
        username=username,
        password=password,
        full_name=full_name,
    )
    return employee, True
