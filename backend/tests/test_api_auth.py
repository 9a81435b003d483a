"""Login, logout and the session gate, exercised through the HTTP API."""
from __future__ import annotations

import pytest
from httpx import ASGITransport, AsyncClient

from app.core.config import settings

COOKIE = settings.SESSION_COOKIE_NAME


async def test_health_is_public(client) -> None:
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok", "env": "test"}


@pytest.mark.parametrize(
    "body",
    [
        {},
        {"username": "admin"},
        {"password": "admin123"},
        {"username": "", "password": "admin123"},
        {"username": "admin", "password": ""},
    ],
)
async def test_login_requires_both_fields(client, body) -> None:
    response = await client.post("/api/login", json=body)

    assert response.status_code == 400
    assert response.json() == {"success": False, "message": "Username and password are required."}
    assert COOKIE not in response.cookies


async def test_login_without_body_asks_for_both_fields(client) -> None:
    response = await client.post("/api/login")

    assert response.status_code == 400
    assert response.json() == {"success": False, "message": "Username and password are required."}


@pytest.mark.parametrize(
    "username, password",
    [("admin", "wrong"), ("nobody", "admin123"), ("ADMIN", "admin123"), ("x" * 200, "admin123"), ("admin", "p" * 500)],
)
async def test_login_rejects_bad_credentials(client, username, password) -> None:
    response = await client.post("/api/login", json={"username": username, "password": password})

    assert response.status_code == 401
    assert response.json() == {"success": False, "message": "Invalid credentials."}
    assert COOKIE not in response.cookies


async def test_login_sets_cookie_and_returns_public_profile(client) -> None:
    response = await client.post("/api/login", json={"username": "admin", "password": "admin123"})

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["employee"]["username"] == "admin"
    assert body["employee"]["full_name"] == "System Administrator"
    assert set(body["employee"]) == {"id", "username", "full_name"}

    set_cookie = response.headers["set-cookie"].lower()
    assert COOKIE in set_cookie
    assert "httponly" in set_cookie
    assert "samesite=lax" in set_cookie


async def test_customer_routes_require_a_session(client) -> None:
    response = await client.get("/api/customers")
    assert response.status_code == 401
    assert response.json() == {"success": False, "message": "Unauthorized. Please log in."}

    await client.post("/api/login", json={"username": "admin", "password": "admin123"})
    response = await client.get("/api/customers")
    assert response.status_code == 200
    assert response.json() == {"success": True, "customers": []}


@pytest.mark.parametrize(
    "method, path",
    [
        ("GET", "/api/customers"),
        ("POST", "/api/customers"),
        ("PUT", "/api/customers/1"),
        ("DELETE", "/api/customers/1"),
    ],
)
async def test_every_customer_route_is_gated(client, method, path) -> None:
    response = await client.request(method, path)
    assert response.status_code == 401


async def test_forged_cookie_is_rejected(client) -> None:
    client.cookies.set(COOKIE, "not-a-real-token")
    response = await client.get("/api/customers")
    assert response.status_code == 401


async def test_logout_ends_the_session(auth_client) -> None:
    response = await auth_client.post("/api/logout")
    assert response.status_code == 200
    assert response.json() == {"success": True, "message": "Logged out successfully."}

    response = await auth_client.get("/api/customers")
    assert response.status_code == 401


async def test_stolen_token_is_dead_after_logout(auth_client) -> None:
    token = auth_client.cookies.get(COOKIE)
    await auth_client.post("/api/logout")

    auth_client.cookies.clear()
    auth_client.cookies.set(COOKIE, token)
    response = await auth_client.get("/api/customers")
    assert response.status_code == 401


async def test_logout_without_session_succeeds(client) -> None:
    first = await client.post("/api/logout")
    second = await client.post("/api/logout")
    assert first.status_code == second.status_code == 200


async def test_session_expires_after_ttl(auth_client, clock) -> None:
    clock.advance(minutes=29)
    assert (await auth_client.get("/api/customers")).status_code == 200

    clock.advance(minutes=2)
    response = await auth_client.get("/api/customers")
    assert response.status_code == 401


async def test_each_login_gets_its_own_session(app, client) -> None:
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as other:
        await client.post("/api/login", json={"username": "admin", "password": "admin123"})
        await other.post("/api/login", json={"username": "admin", "password": "admin123"})
        assert client.cookies.get(COOKIE) != other.cookies.get(COOKIE)

        await other.post("/api/logout")
        assert (await other.get("/api/customers")).status_code == 401
        assert (await client.get("/api/customers")).status_code == 200
