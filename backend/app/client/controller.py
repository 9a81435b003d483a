"""
Portal client controller.

Mediates between the pure state in ``app.client.state`` and the HTTP
adapter in ``app.client.api``.  Every public method performs at most a
couple of API calls, folds the outcome into ``self.state`` and returns it.

A stored session is trusted on start-up without asking the server; the
first API call that answers 401 logs the client out.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Mapping

from app.client import state as st
from app.client.api import ApiError, NetworkError, PortalAPI
from app.core.constants import SearchField
from app.core.logging import get_logger

logger = get_logger(__name__)


class MemoryTokenStore:
    """Session storage that lives as long as the process."""

    def __init__(self) -> None:
        self._saved: dict[str, Any] | None = None

    def load(self) -> dict[str, Any] | None:
        return self._saved

    def save(self, token: str, employee: Mapping[str, Any]) -> None:
        self._saved = {"token": token, "employee": dict(employee)}

    def clear(self) -> None:
        self._saved = None


class FileTokenStore:
    """Session storage in a small JSON file, readable only by its owner."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path).expanduser()

    def load(self) -> dict[str, Any] | None:
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return None
        except (OSError, ValueError) as exc:
            logger.warning("Ignoring unreadable session file", path=str(self.path), error=str(exc))
            return None
        if not isinstance(data, dict) or not data.get("token") or not isinstance(data.get("employee"), dict):
            return None
        return data

    def save(self, token: str, employee: Mapping[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps({"token": token, "employee": dict(employee)}), encoding="utf-8")
        self.path.chmod(0o600)

    def clear(self) -> None:
        self.path.unlink(missing_ok=True)


class PortalController:
    """Drives the portal workspace for one employee."""

    def __init__(self, api: PortalAPI, tokens: MemoryTokenStore | FileTokenStore | None = None) -> None:
        self.api = api
        self.tokens = tokens or MemoryTokenStore()
        self.state = st.initial_state()

    def dispatch(self, action: st.Action) -> st.ClientState:
        self.state = st.reduce(self.state, action)
        return self.state

    # ─── Session ──────────────────────────────
    async def start(self) -> st.ClientState:
        """Open the workspace from a stored session, or stay on the login view."""
        saved = self.tokens.load()
        if saved is None:
            return self.state

        self.api.restore_session(saved["token"])
        self.dispatch(st.SessionRestored(saved["employee"]))
        return await self.load_customers()

    async def login(self, username: str, password: str) -> st.ClientState:
        try:
            employee = await self.api.login(username, password)
        except NetworkError as exc:
            return self.dispatch(st.LoginFailed(exc.message))
        except ApiError as exc:
            return self.dispatch(st.LoginFailed(exc.message))

        token = self.api.session_token
        if token:
            self.tokens.save(token, employee)
        self.dispatch(st.LoggedIn(employee))
        return await self.load_customers()

    async def logout(self) -> st.ClientState:
        """Log out locally; a failed server call does not keep the session."""
        try:
            await self.api.logout()
        except (ApiError, NetworkError) as exc:
            logger.warning("Server logout failed", error=exc.message)
        return self._drop_session()

    def _drop_session(self) -> st.ClientState:
        self.tokens.clear()
        self.api.forget_session()
        return self.dispatch(st.LoggedOut())

    def _handle_api_error(self, exc: ApiError) -> st.ClientState:
        if exc.is_unauthorized:
            logger.info("Session rejected by server, logging out")
            return self._drop_session()
        return self.dispatch(st.RequestFailed(exc.message))

    # ─── Customer list ────────────────────────
    async def load_customers(
        self,
        search: str | None = None,
        search_field: SearchField | None = None,
    ) -> st.ClientState:
        self.dispatch(st.CustomersRequested())
        try:
            customers = await self.api.list_customers(search, search_field)
        except NetworkError:
            return self.dispatch(st.CustomersFailed("Error loading customers."))
        except ApiError as exc:
            if exc.is_unauthorized:
                return self._handle_api_error(exc)
            return self.dispatch(st.CustomersFailed(exc.message))
        return self.dispatch(st.CustomersLoaded(tuple(customers)))

    async def search(self, name: str = "", policy: str = "") -> st.ClientState:
        """Filter by name when given, otherwise by policy, otherwise reload everything."""
        resolved = st.resolve_search(name, policy)
        if resolved is None:
            return await self.load_customers()
        term, field = resolved
        return await self.load_customers(term, field)

    # ─── Form ─────────────────────────────────
    def select(self, customer_id: int) -> st.ClientState:
        return self.dispatch(st.CustomerSelected(customer_id))

    def edit(self, **values: Any) -> st.ClientState:
        return self.dispatch(st.FormEdited(values))

    def new_record(self) -> st.ClientState:
        return self.dispatch(st.FormCleared())

    async def save(self) -> st.ClientState:
        """Create or update from the whole form, then reload the list."""
        payload = st.form_payload(self.state)
        customer_id = self.state.editing_id
        try:
            if customer_id is None:
                _, message = await self.api.create_customer(payload)
            else:
                message = await self.api.update_customer(customer_id, payload)
        except NetworkError:
            return self.dispatch(st.RequestFailed("A network error occurred."))
        except ApiError as exc:
            return self._handle_api_error(exc)

        self.dispatch(st.RequestSucceeded(message))
        return await self.load_customers()

    async def delete(self) -> st.ClientState:
        """Delete the customer being edited; a no-op in new-record mode."""
        customer_id = self.state.editing_id
        if customer_id is None:
            return self.state
        try:
            message = await self.api.delete_customer(customer_id)
        except NetworkError:
            return self.dispatch(st.RequestFailed("A network error occurred."))
        except ApiError as exc:
            return self._handle_api_error(exc)

        self.dispatch(st.RequestSucceeded(message))
        return await self.load_customers()
