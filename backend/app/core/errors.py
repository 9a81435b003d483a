"""
Domain exception hierarchy for the portal.

Every error a request can end in derives from PortalError and carries the
HTTP status and the user-facing message it maps to.  The API layer
registers one handler for PortalError (see app.main), so routes and
repositories simply raise.
"""

from __future__ import annotations

from app.core.constants import (
    MSG_CUSTOMER_NOT_FOUND,
    MSG_DUPLICATE_POLICY,
    MSG_INTERNAL_ERROR,
    MSG_INVALID_CREDENTIALS,
    MSG_UNAUTHORIZED,
)


class PortalError(Exception):
    """Base exception for all portal errors."""

    status_code: int = 500
    default_message: str = MSG_INTERNAL_ERROR

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(PortalError):
    """A required field is missing or malformed."""

    status_code = 400
    default_message = "Invalid request."


class InvalidCredentials(PortalError):
    """Unknown username, inactive employee, or wrong password."""

    status_code = 401
    default_message = MSG_INVALID_CREDENTIALS


class Unauthorized(PortalError):
    """No session, or the session token is unknown or expired."""

    status_code = 401
    default_message = MSG_UNAUTHORIZED


class DuplicatePolicy(PortalError):
    """policy_number already belongs to another customer."""

    status_code = 400
    default_message = MSG_DUPLICATE_POLICY

    def __init__(self, policy_number: str | None = None, message: str | None = None) -> None:
        self.policy_number = policy_number
        super().__init__(message)


class NotFound(PortalError):
    """The addressed customer does not exist."""

    status_code = 404
    default_message = MSG_CUSTOMER_NOT_FOUND


class InternalError(PortalError):
    """Unanticipated store failure; the detail stays in the logs."""

    status_code = 500
    default_message = MSG_INTERNAL_ERROR
