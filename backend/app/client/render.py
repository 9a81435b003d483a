"""Plain-text rendering of ClientState for terminals."""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Any, Mapping

from app.client.state import FORM_FIELDS, ClientState, View


def format_premium(value: Any) -> str:
    try:
        return f"${Decimal(str(value)):.2f}"
    except (InvalidOperation, ValueError):
        return f"${value}"


def format_alert(value: Any) -> str:
    return "DUE" if value == "due" else "NOT DUE"


def render_customer(customer: Mapping[str, Any]) -> str:
    """Two lines per record, the way the workspace list shows them."""
    status = str(customer.get("status") or "").upper()
    return (
        f"[{customer.get('id')}] {customer.get('name_insured')}\n"
        f"    Policy: {customer.get('policy_number')} | "
        f"Carrier: {customer.get('carrier')} | "
        f"Premium: {format_premium(customer.get('premium'))} | "
        f"{status} | {format_alert(customer.get('alert'))}\n"
        f"    Product: {customer.get('product')} | "
        f"Last Modified By: {customer.get('last_modified_by')}"
    )


def render_customer_list(state: ClientState) -> str:
    if state.loading:
        return "Loading customers..."
    if state.list_error:
        return state.list_error
    if not state.customers:
        return "No customers found."
    return "\n".join(render_customer(c) for c in state.customers)


def render_form(state: ClientState) -> str:
    title = "Edit Customer" if state.is_editing else "Add New Customer"
    width = max(len(name) for name in FORM_FIELDS)
    lines = [f"== {title} =="]
    for name in FORM_FIELDS:
        lines.append(f"  {name.ljust(width)} : {state.form.get(name, '')}")
    return "\n".join(lines)


def render_messages(state: ClientState) -> list[str]:
    lines = []
    if state.form_error:
        lines.append(f"Error: {state.form_error}")
    if state.notice:
        lines.append(state.notice)
    return lines


def render(state: ClientState, *, show_form: bool = False) -> str:
    """Render the current view."""
    if state.view is View.LOGIN:
        lines = ["== Employee Login =="]
        if state.login_error:
            lines.append(f"Error: {state.login_error}")
        else:
            lines.append("Not logged in.")
        return "\n".join(lines)

    employee = state.employee or {}
    lines = [f"== Customers == (signed in as {employee.get('full_name', '?')})"]
    lines.extend(render_messages(state))
    lines.append(render_customer_list(state))
    if show_form:
        lines.append(render_form(state))
    return "\n".join(lines)
