"""
Customer model — one row per insured customer / policy.

policy_number is unique across the table.  Attribution columns
(created_by, last_modified_by) hold employee usernames, not foreign keys,
so records outlive the employees who touched them.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import Date, DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.db.models.base import Base, Money, utcnow

# Columns replaced wholesale by an update; everything else is system-managed.
MUTABLE_FIELDS: tuple[str, ...] = (
    "source",
    "name_insured",
    "contact_person",
    "phone_number",
    "address",
    "email",
    "policy_number",
    "carrier",
    "premium",
    "effective_date",
    "expiration_date",
    "alert",
    "product",
    "status",
    "reference",
    "additional_comments",
)


class Customer(Base):
    __tablename__ = "customers"

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True
    )

    # ── Contact ───────────────────────────────
    source: Mapped[str] = mapped_column(String(100), nullable=False)
    name_insured: Mapped[str] = mapped_column(String(200), nullable=False, index=True)
    contact_person: Mapped[str] = mapped_column(String(200), nullable=False)
    phone_number: Mapped[str] = mapped_column(String(20), nullable=False)
    address: Mapped[str] = mapped_column(Text, nullable=False)
    email: Mapped[str] = mapped_column(String(100), nullable=False)

    # ── Policy ────────────────────────────────
    policy_number: Mapped[str] = mapped_column(
        String(50), unique=True, nullable=False, index=True
    )
    carrier: Mapped[str] = mapped_column(String(100), nullable=False)
    premium: Mapped[Decimal] = mapped_column(Money, nullable=False)
    effective_date: Mapped[date] = mapped_column(Date, nullable=False)
    expiration_date: Mapped[date] = mapped_column(Date, nullable=False)
    alert: Mapped[str] = mapped_column(String(20), nullable=False)  # due | not_due
    product: Mapped[str] = mapped_column(String(100), nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False)
    reference: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    additional_comments: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # ── Audit ─────────────────────────────────
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False, index=True
    )
    created_by: Mapped[str] = mapped_column(String(50), nullable=False)
    last_modified_by: Mapped[str] = mapped_column(String(50), nullable=False)

    def __repr__(self) -> str:
        return f"<Customer id={self.id} policy={self.policy_number} by={self.last_modified_by}>"
