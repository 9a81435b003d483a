"""Shared constants and enums used across the application."""

from enum import StrEnum


class CustomerAlert(StrEnum):
    """Renewal alert flag carried on every customer record."""

    DUE = "due"
    NOT_DUE = "not_due"


class SearchField(StrEnum):
    """Fields the customer list can be filtered on."""

    NAME = "name"
    POLICY = "policy"


API_PREFIX = "/api"

# Messages returned to the client verbatim
MSG_LOGIN_REQUIRED_FIELDS = "Username and password are required."
MSG_INVALID_CREDENTIALS = "Invalid credentials."
MSG_UNAUTHORIZED = "Unauthorized. Please log in."
MSG_DUPLICATE_POLICY = "Policy number already exists."
MSG_CUSTOMER_NOT_FOUND = "Customer not found."
MSG_INTERNAL_ERROR = "Internal server error."
MSG_LOGOUT_FAILED = "Could not log out."
