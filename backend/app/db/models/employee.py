"""
Employee model — credentials and profile for portal sign-in.

Rows are created by the startup seed or out-of-band provisioning
(scripts/seed_employees.py, scripts/hash_password.py); the API never
writes to this table.
"""

from typing import Optional

from sqlalchemy import Boolean, Integer, String, true
from sqlalchemy.orm import Mapped, mapped_column

from app.db.models.base import Base


class Employee(Base):
    __tablename__ = "employees"

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True
    )
    username: Mapped[str] = mapped_column(
        String(50), unique=True, nullable=False, index=True
    )
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    full_name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)

    # No endpoint flips this; inactive employees simply cannot log in.
    is_active: Mapped[bool] = mapped_column(
        Boolean, default=True, server_default=true(), nullable=False
    )

    def __repr__(self) -> str:
        return f"<Employee id={self.id} {self.username} active={self.is_active}>"
