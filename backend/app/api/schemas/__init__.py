"""API schema package."""

from app.api.schemas.auth import EmployeeOut, LoginRequest, LoginResponse
from app.api.schemas.common import MessageResponse
from app.api.schemas.customers import (
    CustomerCreatedResponse,
    CustomerIn,
    CustomerListResponse,
    CustomerOut,
)

__all__ = [
    "LoginRequest",
    "LoginResponse",
    "EmployeeOut",
    "MessageResponse",
    "CustomerIn",
    "CustomerOut",
    "CustomerListResponse",
    "CustomerCreatedResponse",
]
