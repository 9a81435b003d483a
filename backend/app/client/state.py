"""
Pure client state for the portal workspace.

Nothing here performs I/O.  The controller feeds actions into ``reduce``
and hands the resulting state to a renderer::

    state = initial_state()
    state = reduce(state, LoggedIn(employee))
    state = reduce(state, CustomersLoaded(customers))

Views: ``LOGIN`` until an employee is known, ``WORKSPACE`` afterwards.
The workspace holds at most one "currently edited" customer id; ``None``
means the form is in new-record mode.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import StrEnum
from typing import Any, Mapping

from app.core.constants import SearchField

# Form fields, in display order.  Saving always sends all of them.
FORM_FIELDS: tuple[str, ...] = (
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

DATE_FIELDS = frozenset({"effective_date", "expiration_date"})


class View(StrEnum):
    LOGIN = "login"
    WORKSPACE = "workspace"


@dataclass(frozen=True)
class ClientState:
    view: View = View.LOGIN
    employee: dict[str, Any] | None = None
    customers: tuple[dict[str, Any], ...] = ()
    editing_id: int | None = None
    form: dict[str, str] = field(default_factory=dict)
    login_error: str | None = None
    form_error: str | None = None
    notice: str | None = None
    list_error: str | None = None
    loading: bool = False

    @property
    def is_editing(self) -> bool:
        return self.editing_id is not None


# ─── Actions ──────────────────────────────────
@dataclass(frozen=True)
class SessionRestored:
    employee: dict[str, Any]


@dataclass(frozen=True)
class LoggedIn:
    employee: dict[str, Any]


@dataclass(frozen=True)
class LoginFailed:
    message: str


@dataclass(frozen=True)
class LoggedOut:
    pass


@dataclass(frozen=True)
class CustomersRequested:
    pass


@dataclass(frozen=True)
class CustomersLoaded:
    customers: tuple[dict[str, Any], ...]


@dataclass(frozen=True)
class CustomersFailed:
    message: str


@dataclass(frozen=True)
class CustomerSelected:
    customer_id: int


@dataclass(frozen=True)
class FormEdited:
    values: Mapping[str, Any]


@dataclass(frozen=True)
class FormCleared:
    pass


@dataclass(frozen=True)
class RequestSucceeded:
    message: str


@dataclass(frozen=True)
class RequestFailed:
    message: str


Action = (
    SessionRestored
    | LoggedIn
    | LoginFailed
    | LoggedOut
    | CustomersRequested
    | CustomersLoaded
    | CustomersFailed
    | CustomerSelected
    | FormEdited
    | FormCleared
    | RequestSucceeded
    | RequestFailed
)


def initial_state() -> ClientState:
    return ClientState()


def empty_form() -> dict[str, str]:
    return {name: "" for name in FORM_FIELDS}


def customer_to_form(customer: Mapping[str, Any]) -> dict[str, str]:
    """Copy a customer record into form values; dates keep only YYYY-MM-DD."""
    form = empty_form()
    for name in FORM_FIELDS:
        value = customer.get(name)
        if value is None:
            continue
        text = str(value)
        if name in DATE_FIELDS:
            text = text.split("T", 1)[0]
        form[name] = text
    return form


def form_payload(state: ClientState) -> dict[str, Any]:
    """The entire form as a request body, for both create and update."""
    payload: dict[str, Any] = {name: state.form.get(name, "") for name in FORM_FIELDS}
    for optional in ("reference", "additional_comments"):
        if payload[optional] == "":
            payload[optional] = None
    return payload


def resolve_search(name: str, policy: str) -> tuple[str, SearchField] | None:
    """Pick the filter for a search; the name field wins when both are filled."""
    name = name.strip()
    policy = policy.strip()
    if name:
        return name, SearchField.NAME
    if policy:
        return policy, SearchField.POLICY
    return None


def _workspace(state: ClientState, employee: dict[str, Any]) -> ClientState:
    return replace(
        initial_state(),
        view=View.WORKSPACE,
        employee=dict(employee),
        form=empty_form(),
    )


def reduce(state: ClientState, action: Action) -> ClientState:
    """Return the state that follows ``action``."""
    if isinstance(action, (SessionRestored, LoggedIn)):
        return _workspace(state, action.employee)

    if isinstance(action, LoginFailed):
        return replace(state, view=View.LOGIN, login_error=action.message)

    if isinstance(action, LoggedOut):
        return initial_state()

    if isinstance(action, CustomersRequested):
        return replace(state, loading=True, list_error=None)

    if isinstance(action, CustomersLoaded):
        return replace(state, loading=False, customers=tuple(action.customers), list_error=None)

    if isinstance(action, CustomersFailed):
        return replace(state, loading=False, customers=(), list_error=action.message)

    if isinstance(action, CustomerSelected):
        for customer in state.customers:
            if customer.get("id") == action.customer_id:
                return replace(
                    state,
                    editing_id=action.customer_id,
                    form=customer_to_form(customer),
                    form_error=None,
                    notice=None,
                )
        return replace(state, form_error=f"Customer {action.customer_id} is not in the list.")

    if isinstance(action, FormEdited):
        form = dict(state.form or empty_form())
        for name, value in action.values.items():
            if name in FORM_FIELDS:
                form[name] = "" if value is None else str(value)
        return replace(state, form=form)

    if isinstance(action, FormCleared):
        return replace(state, editing_id=None, form=empty_form(), form_error=None, notice=None)

    if isinstance(action, RequestSucceeded):
        return replace(
            state,
            editing_id=None,
            form=empty_form(),
            form_error=None,
            notice=action.message,
        )

    if isinstance(action, RequestFailed):
        return replace(state, form_error=action.message, notice=None)

    raise TypeError(f"Unknown action: {action!r}")
