"""Authentication request/response schemas."""

from __future__ import annotations

from pydantic import BaseModel


class LoginRequest(BaseModel):
    """Request payload for login endpoint.

    Both fields are optional and unbounded at the schema level so that a
    missing or blank value gets the login-specific 400 message and any other
    value goes through the same credential check.
    """

    username: str | None = None
    password: str | None = None


class EmployeeOut(BaseModel):
    """The only employee data that ever leaves the server."""

    id: int
    username: str
    full_name: str


class LoginResponse(BaseModel):
    success: bool = True
    employee: EmployeeOut
