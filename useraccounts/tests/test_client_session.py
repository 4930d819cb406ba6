from __future__ import annotations

import asyncio
import os
import stat
from pathlib import Path

import httpx
import pytest
from flask import Flask

from useraccounts.client.api import AccountsApiClient, ApiError
from useraccounts.client.session import BUSY_MESSAGE, SessionManager, SessionState, SessionStatus
from useraccounts.client.token_store import FileTokenStore, MemoryTokenStore

BASE_URL = "http://testserver"


class FlaskBridge:
    """Routes httpx requests into a Flask test client and records what was sent."""

    def __init__(self, app: Flask) -> None:
        self._client = app.test_client()
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        headers = {
            name: request.headers[name]
            for name in ("Authorization", "Content-Type", "X-Request-ID")
            if name in request.headers
        }
        response = self._client.open(
            request.url.path,
            method=request.method,
            headers=headers,
            data=request.content,
        )
        return httpx.Response(
            response.status_code,
            content=response.get_data(),
            headers={"Content-Type": response.content_type},
        )


@pytest.fixture()
def bridge(app: Flask) -> FlaskBridge:
    return FlaskBridge(app)


@pytest.fixture()
def api(bridge: FlaskBridge) -> AccountsApiClient:
    return AccountsApiClient(BASE_URL, transport=httpx.MockTransport(bridge))


@pytest.fixture()
def store() -> MemoryTokenStore:
    return MemoryTokenStore()


@pytest.fixture()
def session(api: AccountsApiClient, store: MemoryTokenStore) -> SessionManager:
    return SessionManager(api=api, store=store)


def _register(session: SessionManager, registration: dict[str, str], **overrides: str):
    return asyncio.run(session.register(**{**registration, **overrides}))


def test_start_without_token_is_anonymous(session: SessionManager, bridge: FlaskBridge) -> None:
    assert session.state.status is SessionStatus.LOADING

    state = asyncio.run(session.start())

    assert state.status is SessionStatus.ANONYMOUS
    assert bridge.requests == []


def test_register_authenticates_and_persists_token(
    session: SessionManager, store: MemoryTokenStore, registration: dict[str, str]
) -> None:
    result = _register(session, registration, confirm_password=registration["password"])

    assert result.success
    assert session.state.is_authenticated
    assert session.state.user is not None
    assert session.state.user.username == "alice"
    assert store.load() == session.state.token


def test_session_survives_restart(
    api: AccountsApiClient, store: MemoryTokenStore, registration: dict[str, str]
) -> None:
    first = SessionManager(api=api, store=store)
    _register(first, registration)

    second = SessionManager(api=api, store=store)
    state = asyncio.run(second.start())

    assert state.status is SessionStatus.AUTHENTICATED
    assert state.user == first.state.user


def test_start_with_rejected_token_clears_it(api: AccountsApiClient) -> None:
    store = MemoryTokenStore("stale-token")
    session = SessionManager(api=api, store=store)

    state = asyncio.run(session.start())

    assert state.status is SessionStatus.ANONYMOUS
    assert state.token is None
    assert store.load() is None


def test_register_validates_locally_without_request(
    session: SessionManager, bridge: FlaskBridge, registration: dict[str, str]
) -> None:
    result = _register(session, registration, phone="123", confirm_password="different")

    assert not result.success
    assert {error.field for error in result.field_errors} == {"phone", "confirm_password"}
    assert bridge.requests == []


def test_register_conflict_reports_server_message(
    session: SessionManager, api: AccountsApiClient, registration: dict[str, str]
) -> None:
    _register(SessionManager(api=api, store=MemoryTokenStore()), registration)

    result = _register(session, registration)

    assert not result.success
    assert result.error == "User already exists"
    assert session.state.status is not SessionStatus.AUTHENTICATED


def test_login_failure_and_success(
    session: SessionManager, api: AccountsApiClient, registration: dict[str, str]
) -> None:
    _register(SessionManager(api=api, store=MemoryTokenStore()), registration)

    failed = asyncio.run(session.login("alice", "wrong-password"))
    assert not failed.success
    assert failed.error == "Invalid credentials"
    assert not session.state.is_authenticated

    ok = asyncio.run(session.login("alice", "secret123"))
    assert ok.success
    assert session.state.is_authenticated
    assert not session.state.busy


def test_update_profile_refreshes_user(
    session: SessionManager, registration: dict[str, str]
) -> None:
    _register(session, registration)

    result = asyncio.run(
        session.update_profile(email="alice@new.example.com", phone="5559999999", dob="1990-05-18")
    )

    assert result.success
    assert result.message == "Profile updated successfully"
    assert session.state.user is not None
    assert session.state.user.email == "alice@new.example.com"
    assert session.state.user.phone == "5559999999"


def test_update_profile_conflict_keeps_session(
    session: SessionManager, api: AccountsApiClient, registration: dict[str, str]
) -> None:
    _register(SessionManager(api=api, store=MemoryTokenStore()), registration,
              username="bob", email="bob@example.com")
    _register(session, registration)
    before = session.state.user

    result = asyncio.run(
        session.update_profile(email="bob@example.com", phone="5550000000", dob="2000-01-01")
    )

    assert not result.success
    assert result.error == "Email is already in use"
    assert session.state.is_authenticated
    assert session.state.user == before


@pytest.mark.parametrize("logout_on", ["PUT", "GET"])
def test_logout_during_profile_request_keeps_session_empty(
    bridge: FlaskBridge, registration: dict[str, str], logout_on: str
) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        response = bridge(request)
        if request.method == logout_on:
            session.logout()
        return response

    api = AccountsApiClient(BASE_URL, transport=httpx.MockTransport(handler))
    session = SessionManager(api=api, store=MemoryTokenStore())
    _register(session, registration)

    if logout_on == "PUT":
        result = asyncio.run(
            session.update_profile(email="new@example.com", phone="5559999999", dob="1990-05-18")
        )
    else:
        result = asyncio.run(session.refresh_profile())

    assert not result.success
    assert session.state == SessionState(status=SessionStatus.ANONYMOUS)


def test_logout_forgets_token_and_sends_no_credentials(
    session: SessionManager,
    store: MemoryTokenStore,
    bridge: FlaskBridge,
    registration: dict[str, str],
) -> None:
    _register(session, registration)

    session.logout()

    assert session.state == SessionState(status=SessionStatus.ANONYMOUS)
    assert store.load() is None

    result = asyncio.run(session.refresh_profile())

    assert not result.success
    assert "Authorization" not in bridge.requests[-1].headers
    assert session.state.status is SessionStatus.ANONYMOUS


def test_subscribers_see_transitions(session: SessionManager, registration: dict[str, str]) -> None:
    seen: list[SessionStatus] = []
    unsubscribe = session.subscribe(lambda state: seen.append(state.status))

    _register(session, registration)
    unsubscribe()
    session.logout()

    assert seen[-1] is SessionStatus.AUTHENTICATED
    assert SessionStatus.ANONYMOUS not in seen


def _session_with(handler) -> SessionManager:
    api = AccountsApiClient(BASE_URL, transport=httpx.MockTransport(handler))
    return SessionManager(api=api, store=MemoryTokenStore())


def test_server_error_shows_fallback_message() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, json={"error": "internal_error", "message": "db exploded"})

    result = asyncio.run(_session_with(handler).login("alice", "secret123"))

    assert not result.success
    assert result.error == "Login failed"


def test_transport_failure_shows_fallback_message() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    session = _session_with(handler)
    result = asyncio.run(session.login("alice", "secret123"))

    assert not result.success
    assert result.error == "Login failed"
    assert not session.state.busy


@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(200, content=b"<html>ok</html>", headers={"Content-Type": "text/html"}),
        httpx.Response(200, json=["not", "an", "object"]),
    ],
)
def test_unreadable_success_body_shows_fallback_message(response: httpx.Response) -> None:
    session = _session_with(lambda request: response)

    result = asyncio.run(session.login("alice", "secret123"))

    assert not result.success
    assert result.error == "Login failed"
    assert not session.state.busy
    assert not session.state.is_authenticated


def test_unreadable_profile_update_body_keeps_user(
    bridge: FlaskBridge, registration: dict[str, str]
) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.method == "PUT":
            return httpx.Response(200, content=b"not json")
        return bridge(request)

    session = _session_with(handler)
    _register(session, registration)
    before = session.state.user

    result = asyncio.run(
        session.update_profile(email="new@example.com", phone="5559999999", dob="1990-05-18")
    )

    assert not result.success
    assert result.error == "Update failed"
    assert session.state.is_authenticated
    assert session.state.user == before


def test_concurrent_mutations_are_rejected(registration: dict[str, str]) -> None:
    async def handler(request: httpx.Request) -> httpx.Response:
        await asyncio.sleep(0.01)
        return httpx.Response(401, json={"error": "invalid_credentials"})

    session = _session_with(handler)

    async def run_both():
        return await asyncio.gather(
            session.login("alice", "secret123"), session.login("alice", "secret123")
        )

    first, second = asyncio.run(run_both())

    assert [first.error, second.error].count(BUSY_MESSAGE) == 1


def test_api_error_parses_field_errors() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            400,
            json={
                "error": "validation_error",
                "message": "Please enter a valid email",
                "context": {
                    "fields": ["email"],
                    "errors": [
                        {"field": "email", "message": "Please enter a valid email", "type": "x"}
                    ],
                },
            },
        )

    api = AccountsApiClient(BASE_URL, transport=httpx.MockTransport(handler))

    with pytest.raises(ApiError) as excinfo:
        asyncio.run(api.register({}))

    assert excinfo.value.status == 400
    assert excinfo.value.code == "validation_error"
    assert [error.field for error in excinfo.value.field_errors] == ["email"]
    assert not excinfo.value.is_server_error


def test_file_token_store_roundtrip(tmp_path: Path) -> None:
    store = FileTokenStore(tmp_path / "nested" / "token")

    assert store.load() is None
    store.save("abc.def.ghi")
    assert FileTokenStore(store.path).load() == "abc.def.ghi"
    if os.name == "posix":
        assert stat.S_IMODE(store.path.stat().st_mode) == 0o600

    store.clear()
    store.clear()
    assert store.load() is None
