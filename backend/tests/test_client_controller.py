"""
PortalController against the real application.

The HTTP adapter talks to the app in-process through httpx's ASGI
transport, so cookies, status codes and messages are the server's own.
"""
from __future__ import annotations

import httpx
import pytest
import pytest_asyncio

from app.client.api import NETWORK_ERROR_MESSAGE, PortalAPI
from app.client.controller import FileTokenStore, MemoryTokenStore, PortalController
from app.client.state import View
from tests.factories import make_customer


@pytest_asyncio.fixture
async def api(app):
    async with PortalAPI("http://test", transport=httpx.ASGITransport(app=app)) as portal:
        yield portal


@pytest.fixture
def controller(api) -> PortalController:
    return PortalController(api, MemoryTokenStore())


def fill(controller: PortalController, **overrides) -> None:
    controller.new_record()
    controller.edit(**make_customer(**overrides))


async def test_login_failure_stays_on_login_view(controller) -> None:
    state = await controller.login("admin", "nope")
    assert state.view is View.LOGIN
    assert state.login_error == "Invalid credentials."
    assert controller.tokens.load() is None


async def test_login_loads_workspace_and_stores_token(controller) -> None:
    state = await controller.login("admin", "admin123")

    assert state.view is View.WORKSPACE
    assert state.employee["username"] == "admin"
    assert state.customers == ()
    assert controller.tokens.load()["token"] == controller.api.session_token


async def test_create_edit_delete_cycle(controller) -> None:
    await controller.login("admin", "admin123")

    fill(controller)
    state = await controller.save()
    assert state.notice == "Customer created successfully"
    assert state.form_error is None
    [customer] = state.customers

    controller.select(customer["id"])
    controller.edit(status="lapsed")
    state = await controller.save()
    assert state.notice == "Customer updated successfully."
    assert state.customers[0]["status"] == "lapsed"
    assert not state.is_editing

    controller.select(customer["id"])
    state = await controller.delete()
    assert state.notice == "Customer deleted successfully."
    assert state.customers == ()


async def test_duplicate_policy_keeps_form(controller) -> None:
    await controller.login("admin", "admin123")
    fill(controller, policy_number="POL-1")
    await controller.save()

    fill(controller, policy_number="POL-1", name_insured="Other Person")
    state = await controller.save()

    assert state.form_error == "Policy number already exists."
    assert state.form["name_insured"] == "Other Person"
    assert len(state.customers) == 1


async def test_delete_in_new_record_mode_does_nothing(controller) -> None:
    await controller.login("admin", "admin123")
    before = controller.state
    assert await controller.delete() is before


async def test_search_filters_by_name_first(controller) -> None:
    await controller.login("admin", "admin123")
    for policy, name in [("HOME-1", "John Smith"), ("AUTO-2", "Mary Jones")]:
        fill(controller, policy_number=policy, name_insured=name)
        await controller.save()

    state = await controller.search(name="jones", policy="HOME")
    assert [c["name_insured"] for c in state.customers] == ["Mary Jones"]

    state = await controller.search(policy="home")
    assert [c["policy_number"] for c in state.customers] == ["HOME-1"]

    state = await controller.search()
    assert len(state.customers) == 2


async def test_logout_returns_to_login(controller) -> None:
    await controller.login("admin", "admin123")
    state = await controller.logout()

    assert state.view is View.LOGIN
    assert controller.tokens.load() is None
    assert controller.api.session_token is None


async def test_stored_session_is_trusted_until_rejected(app, api) -> None:
    tokens = MemoryTokenStore()
    first = PortalController(api, tokens)
    await first.login("admin", "admin123")
    token = tokens.load()["token"]

    # Server forgets the session while the token is still stored locally
    app.state.session_manager.destroy_session(token)

    second = PortalController(api, tokens)
    state = await second.start()
    assert state.view is View.LOGIN
    assert tokens.load() is None


async def test_stored_session_restores_workspace(api) -> None:
    tokens = MemoryTokenStore()
    await PortalController(api, tokens).login("admin", "admin123")
    api.forget_session()

    state = await PortalController(api, tokens).start()
    assert state.view is View.WORKSPACE
    assert state.employee["username"] == "admin"


async def test_start_without_stored_session(controller) -> None:
    state = await controller.start()
    assert state.view is View.LOGIN
    assert state.login_error is None


async def test_expired_session_logs_out_on_save(controller, clock) -> None:
    await controller.login("admin", "admin123")
    clock.advance(hours=1)

    fill(controller)
    state = await controller.save()
    assert state.view is View.LOGIN


# ---------------------------------------------------------------------------
# Network failures
# ---------------------------------------------------------------------------

def unreachable(request: httpx.Request) -> httpx.Response:
    raise httpx.ConnectError("connection refused", request=request)


@pytest_asyncio.fixture
async def offline():
    async with PortalAPI("http://portal.invalid", transport=httpx.MockTransport(unreachable)) as portal:
        tokens = MemoryTokenStore()
        tokens.save("stale-token", {"id": 1, "username": "admin", "full_name": "System Administrator"})
        yield PortalController(portal, tokens)


async def test_network_error_on_login() -> None:
    async with PortalAPI("http://portal.invalid", transport=httpx.MockTransport(unreachable)) as portal:
        state = await PortalController(portal).login("admin", "admin123")
    assert state.view is View.LOGIN
    assert state.login_error == NETWORK_ERROR_MESSAGE


async def test_network_error_while_listing(offline) -> None:
    state = await offline.start()
    assert state.view is View.WORKSPACE
    assert state.list_error == "Error loading customers."
    assert state.customers == ()


async def test_network_error_while_saving(offline) -> None:
    await offline.start()
    fill(offline)
    state = await offline.save()
    assert state.form_error == "A network error occurred."
    assert state.form["policy_number"] == "POL-1001"


async def test_logout_is_local_when_server_is_unreachable(offline) -> None:
    await offline.start()
    state = await offline.logout()
    assert state.view is View.LOGIN
    assert offline.tokens.load() is None


# ---------------------------------------------------------------------------
# Token file
# ---------------------------------------------------------------------------

def test_file_token_store_round_trip(tmp_path) -> None:
    store = FileTokenStore(tmp_path / "nested" / "session.json")
    assert store.load() is None

    store.save("abc", {"id": 1, "username": "admin", "full_name": "Admin"})
    assert store.load() == {"token": "abc", "employee": {"id": 1, "username": "admin", "full_name": "Admin"}}
    assert (store.path.stat().st_mode & 0o777) == 0o600

    store.clear()
    store.clear()
    assert store.load() is None


def test_file_token_store_ignores_garbage(tmp_path) -> None:
    path = tmp_path / "session.json"
    path.write_text("{not json", encoding="utf-8")
    assert FileTokenStore(path).load() is None

    path.write_text('{"token": ""}', encoding="utf-8")
    assert FileTokenStore(path).load() is None
