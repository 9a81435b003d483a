"""
Customer repository containing all data-access operations for the customers table.

Repository rules:
- Pure data-access logic only
- Every function receives AsyncSession explicitly
- Functions flush, but never commit

``fields`` arguments are mappings keyed by the column names listed in
``MUTABLE_FIELDS``; anything else in the mapping is ignored.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Mapping

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.constants import SearchField
from app.core.errors import DuplicatePolicy, NotFound
from app.db.models.base import utcnow
from app.db.models.customer import MUTABLE_FIELDS, Customer

_SEARCH_COLUMNS = {
    SearchField.NAME: Customer.name_insured,
    SearchField.POLICY: Customer.policy_number,
}


async def get_customer(db: AsyncSession, customer_id: int) -> Customer | None:
    """Fetch a customer by primary key."""
    return await db.get(Customer, customer_id)


async def policy_number_taken(
    db: AsyncSession,
    policy_number: str,
    *,
    exclude_id: int | None = None,
) -> bool:
    """True when another customer already holds ``policy_number``."""
    stmt = select(Customer.id).where(Customer.policy_number == policy_number)
    if exclude_id is not None:
        stmt = stmt.where(Customer.id != exclude_id)
    result = await db.execute(stmt.limit(1))
    return result.first() is not None


async def list_customers(
    db: AsyncSession,
    *,
    search: str | None = None,
    search_field: SearchField | None = None,
) -> list[Customer]:
    """
    List customers, most recently updated first.

    With both ``search`` and ``search_field`` set, keep only rows whose
    name_insured / policy_number contains the term, ignoring case.
    """
    stmt = select(Customer).order_by(Customer.updated_at.desc(), Customer.id.desc())
    if search and search_field is not None:
        column = _SEARCH_COLUMNS[search_field]
        stmt = stmt.where(column.icontains(search, autoescape=True))
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def _flush_or_duplicate(db: AsyncSession, policy_number: str) -> None:
    try:
        await db.flush()
    except IntegrityError as exc:
        # Lost a race with a concurrent writer between the check and the flush
        raise DuplicatePolicy(policy_number) from exc


async def create_customer(
    db: AsyncSession,
    fields: Mapping[str, Any],
    *,
    actor: str,
    now: datetime | None = None,
) -> Customer:
    """Insert a customer attributed to ``actor``."""
    policy_number = fields["policy_number"]
    if await policy_number_taken(db, policy_number):
        raise DuplicatePolicy(policy_number)

    stamp = now or utcnow()
    customer = Customer(
        **{name: fields.get(name) for name in MUTABLE_FIELDS},
        created_at=stamp,
        updated_at=stamp,
        created_by=actor,
        last_modified_by=actor,
    )
    db.add(customer)
    await _flush_or_duplicate(db, policy_number)
    return customer


async def update_customer(
    db: AsyncSession,
    customer_id: int,
    fields: Mapping[str, Any],
    *,
    actor: str,
    now: datetime | None = None,
) -> Customer:
    """Replace every mutable field of a customer; omitted fields become None."""
    customer = await get_customer(db, customer_id)
    if customer is None:
        raise NotFound()

    policy_number = fields["policy_number"]
    if await policy_number_taken(db, policy_number, exclude_id=customer_id):
        raise DuplicatePolicy(policy_number)

    for name in MUTABLE_FIELDS:
        setattr(customer, name, fields.get(name))
    customer.last_modified_by = actor
    customer.updated_at = now or utcnow()

    await _flush_or_duplicate(db, policy_number)
    return customer


async def delete_customer(db: AsyncSession, customer_id: int) -> None:
    """Hard-delete a customer. Raises NotFound when no row matched."""
    result = await db.execute(delete(Customer).where(Customer.id == customer_id))
    if result.rowcount == 0:
        raise NotFound()
    await db.flush()
