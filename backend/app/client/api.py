"""
HTTP adapter for the portal API.

Wraps an ``httpx.AsyncClient`` and turns responses into plain data or
one of two exceptions:

    ApiError      the server answered with a non-2xx status
    NetworkError  the request never got an answer (refused, timeout, ...)

The session travels as a cookie; ``session_token`` exposes it so the
controller can persist and restore it.
"""

from __future__ import annotations

from typing import Any

import httpx

from app.core.config import settings
from app.core.constants import API_PREFIX, SearchField
from app.core.logging import get_logger

logger = get_logger(__name__)

NETWORK_ERROR_MESSAGE = "Network error. Could not connect to server."


class ClientError(Exception):
    """Base class for client-side failures."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ApiError(ClientError):
    """Non-2xx response carrying the server's message."""

    def __init__(self, status_code: int, message: str) -> None:
        self.status_code = status_code
        super().__init__(message)

    @property
    def is_unauthorized(self) -> bool:
        return self.status_code == 401


class NetworkError(ClientError):
    """Transport failure; the server's verdict is unknown."""


class PortalAPI:
    """Thin async client for the portal's JSON endpoints."""

    def __init__(
        self,
        base_url: str | None = None,
        *,
        cookie_name: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.cookie_name = cookie_name or settings.SESSION_COOKIE_NAME
        self._client = httpx.AsyncClient(
            base_url=base_url or settings.PORTAL_URL,
            timeout=timeout or settings.PORTAL_TIMEOUT_SECONDS,
            transport=transport,
        )

    async def __aenter__(self) -> "PortalAPI":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    # ─── Session cookie ───────────────────────
    @property
    def session_token(self) -> str | None:
        token = None
        for cookie in self._client.cookies.jar:
            if cookie.name == self.cookie_name:
                token = cookie.value
        return token

    def restore_session(self, token: str) -> None:
        self._client.cookies.clear()
        self._client.cookies.set(self.cookie_name, token)

    def forget_session(self) -> None:
        self._client.cookies.clear()

    # ─── Transport ────────────────────────────
    async def _request(self, method: str, path: str, **kwargs: Any) -> dict[str, Any]:
        try:
            response = await self._client.request(method, f"{API_PREFIX}{path}", **kwargs)
        except httpx.TransportError as exc:
            logger.warning("Portal unreachable", method=method, path=path, error=str(exc))
            raise NetworkError(NETWORK_ERROR_MESSAGE) from exc

        try:
            data = response.json()
        except ValueError:
            data = {}

        if response.is_success:
            return data

        message = data.get("message") if isinstance(data, dict) else None
        raise ApiError(response.status_code, message or f"Request failed ({response.status_code}).")

    # ─── Endpoints ────────────────────────────
    async def login(self, username: str, password: str) -> dict[str, Any]:
        self.forget_session()
        data = await self._request("POST", "/login", json={"username": username, "password": password})
        return data["employee"]

    async def logout(self) -> None:
        try:
            await self._request("POST", "/logout")
        finally:
            self.forget_session()

    async def list_customers(
        self,
        search: str | None = None,
        search_field: SearchField | None = None,
    ) -> list[dict[str, Any]]:
        params = {}
        if search and search_field:
            params = {"search": search, "searchField": search_field.value}
        data = await self._request("GET", "/customers", params=params)
        return data.get("customers", [])

    async def create_customer(self, payload: dict[str, Any]) -> tuple[int, str]:
        data = await self._request("POST", "/customers", json=payload)
        return data["customerId"], data.get("message", "")

    async def update_customer(self, customer_id: int, payload: dict[str, Any]) -> str:
        data = await self._request("PUT", f"/customers/{customer_id}", json=payload)
        return data.get("message", "")

    async def delete_customer(self, customer_id: int) -> str:
        data = await self._request("DELETE", f"/customers/{customer_id}")
        return data.get("message", "")
