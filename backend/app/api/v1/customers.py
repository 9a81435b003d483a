"""Customer record CRUD endpoints. Every route requires a signed-in employee."""

from __future__ import annotations

from datetime import datetime

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_employee, get_db, get_now
from app.api.schemas.common import MessageResponse
from app.api.schemas.customers import (
    CustomerCreatedResponse,
    CustomerIn,
    CustomerListResponse,
    CustomerOut,
)
from app.core.constants import SearchField
from app.core.errors import DuplicatePolicy
from app.core.logging import get_logger
from app.core.sessions import SessionUser
from app.repositories import customers as customer_repository

logger = get_logger(__name__)

router = APIRouter(
    prefix="/customers",
    tags=["Customers"],
    dependencies=[Depends(get_current_employee)],
)


def _parse_search_field(value: str | None) -> SearchField | None:
    # Unknown fields fall back to an unfiltered list
    try:
        return SearchField(value) if value else None
    except ValueError:
        return None


@router.get("", response_model=CustomerListResponse)
async def list_customers(
    search: str | None = None,
    search_field: str | None = Query(default=None, alias="searchField"),
    db: AsyncSession = Depends(get_db),
) -> CustomerListResponse:
    """List customers, most recently updated first, optionally filtered."""
    customers = await customer_repository.list_customers(
        db,
        search=search.strip() if search else None,
        search_field=_parse_search_field(search_field),
    )
    return CustomerListResponse(
        customers=[CustomerOut.model_validate(c) for c in customers],
    )


@router.post("", response_model=CustomerCreatedResponse, status_code=status.HTTP_201_CREATED)
async def create_customer(
    payload: CustomerIn,
    db: AsyncSession = Depends(get_db),
    employee: SessionUser = Depends(get_current_employee),
    now: datetime = Depends(get_now),
) -> CustomerCreatedResponse:
    """Create a customer attributed to the signed-in employee."""
    try:
        customer = await customer_repository.create_customer(
            db,
            payload.model_dump(),
            actor=employee.username,
            now=now,
        )
    except DuplicatePolicy:
        logger.info("Duplicate policy rejected", policy_number=payload.policy_number, actor=employee.username)
        raise
    await db.commit()

    logger.info(
        "Customer created",
        customer_id=customer.id,
        policy_number=customer.policy_number,
        actor=employee.username,
    )
    return CustomerCreatedResponse(
        message="Customer created successfully",
        customerId=customer.id,
    )


@router.put("/{customer_id}", response_model=MessageResponse)
async def update_customer(
    customer_id: int,
    payload: CustomerIn,
    db: AsyncSession = Depends(get_db),
    employee: SessionUser = Depends(get_current_employee),
    now: datetime = Depends(get_now),
) -> MessageResponse:
    """Replace a customer record with the submitted one."""
    try:
        await customer_repository.update_customer(
            db,
            customer_id,
            payload.model_dump(),
            actor=employee.username,
            now=now,
        )
    except DuplicatePolicy:
        logger.info("Duplicate policy rejected", policy_number=payload.policy_number, actor=employee.username)
        raise
    await db.commit()

    logger.info("Customer updated", customer_id=customer_id, actor=employee.username)
    return MessageResponse(message="Customer updated successfully.")


@router.delete("/{customer_id}", response_model=MessageResponse)
async def delete_customer(
    customer_id: int,
    db: AsyncSession = Depends(get_db),
    employee: SessionUser = Depends(get_current_employee),
) -> MessageResponse:
    """Permanently remove a customer record."""
    await customer_repository.delete_customer(db, customer_id)
    await db.commit()
    logger.info("Customer deleted", customer_id=customer_id, actor=employee.username)
    return MessageResponse(message="Customer deleted successfully.")
