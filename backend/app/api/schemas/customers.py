"""Customer request/response schemas."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

from app.core.constants import CustomerAlert


class CustomerIn(BaseModel):
    """Full customer record as submitted for both create and update."""

    source: str = Field(..., min_length=1, max_length=100)
    name_insured: str = Field(..., min_length=1, max_length=200)
    contact_person: str = Field(..., min_length=1, max_length=200)
    phone_number: str = Field(..., min_length=1, max_length=20)
    address: str = Field(..., min_length=1)
    email: str = Field(..., min_length=1, max_length=100)
    policy_number: str = Field(..., min_length=1, max_length=50)
    carrier: str = Field(..., min_length=1, max_length=100)
    premium: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)
    effective_date: date
    expiration_date: date
    alert: CustomerAlert
    product: str = Field(..., min_length=1, max_length=100)
    status: str = Field(..., min_length=1, max_length=20)
    reference: str | None = Field(default=None, max_length=100)
    additional_comments: str | None = None

    @field_validator("policy_number")
    @classmethod
    def _strip_policy_number(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("policy_number must not be blank")
        return value

    @field_validator("reference", "additional_comments", mode="before")
    @classmethod
    def _blank_to_none(cls, value: object) -> object:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("effective_date", "expiration_date", mode="before")
    @classmethod
    def _date_part(cls, value: object) -> object:
        # Clients may echo back full ISO timestamps
        if isinstance(value, str) and "T" in value:
            return value.split("T", 1)[0]
        return value


class CustomerOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    source: str
    name_insured: str
    contact_person: str
    phone_number: str
    address: str
    email: str
    policy_number: str
    carrier: str
    premium: Decimal
    effective_date: date
    expiration_date: date
    alert: str
    product: str
    status: str
    reference: str | None
    additional_comments: str | None
    created_at: datetime
    updated_at: datetime
    created_by: str
    last_modified_by: str

    @field_serializer("premium")
    def _premium_as_string(self, value: Decimal) -> str:
        return f"{value:.2f}"


class CustomerListResponse(BaseModel):
    success: bool = True
    customers: list[CustomerOut]


class CustomerCreatedResponse(BaseModel):
    success: bool = True
    message: str
    customerId: int
