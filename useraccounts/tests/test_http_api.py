from __future__ import annotations

import pytest
from flask import Flask
from flask.testing import FlaskClient
from sqlalchemy.exc import OperationalError

from useraccounts.infrastructure.container import Container


@pytest.fixture()
def client(app: Flask) -> FlaskClient:
    return app.test_client()


def _bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def _register(client: FlaskClient, payload: dict[str, str]) -> dict:
    response = client.post("/api/auth/register", json=payload)
    assert response.status_code == 200, response.get_json()
    return response.get_json()


def test_register_then_fetch_profile(client: FlaskClient, registration: dict[str, str]) -> None:
    body = _register(client, registration)

    assert body["token"]
    assert body["user"]["username"] == "alice"
    assert body["user"]["dob"] == "1990-05-17"
    assert "password" not in body["user"]
    assert "password_hash" not in body["user"]

    profile = client.get("/api/user/profile", headers=_bearer(body["token"]))

    assert profile.status_code == 200
    assert profile.get_json() == body["user"]


def test_register_rejects_invalid_payload_with_every_field(client: FlaskClient) -> None:
    response = client.post(
        "/api/auth/register",
        json={"username": "al", "email": "bad", "password": "1", "phone": "1", "dob": "x"},
    )

    assert response.status_code == 400
    body = response.get_json()
    assert body["error"] == "validation_error"
    assert body["context"]["fields"] == ["dob", "email", "password", "phone", "username"]
    assert len(body["context"]["errors"]) == 5


def test_register_without_json_body(client: FlaskClient) -> None:
    response = client.post("/api/auth/register", data="not json", content_type="text/plain")

    assert response.status_code == 400
    assert response.get_json()["error"] == "validation_error"


@pytest.mark.parametrize("body", [[1, 2], "abc", 5, [["a", "b", "c"]]])
@pytest.mark.parametrize(
    ("method", "path", "needs_token"),
    [
        ("POST", "/api/auth/register", False),
        ("POST", "/api/auth/login", False),
        ("PUT", "/api/user/profile", True),
    ],
)
def test_non_object_json_body_is_rejected(
    client: FlaskClient,
    registration: dict[str, str],
    method: str,
    path: str,
    needs_token: bool,
    body: object,
) -> None:
    headers = _bearer(_register(client, registration)["token"]) if needs_token else {}

    response = client.open(path, method=method, headers=headers, json=body)

    assert response.status_code == 400
    payload = response.get_json()
    assert payload["error"] == "validation_error"
    assert payload["message"] == "Request body must be a JSON object"
    assert payload["context"]["fields"] == ["body"]


def test_register_duplicate_returns_conflict(
    client: FlaskClient, registration: dict[str, str]
) -> None:
    _register(client, registration)

    response = client.post(
        "/api/auth/register", json={**registration, "email": "second@example.com"}
    )

    assert response.status_code == 400
    assert response.get_json()["error"] == "user_already_exists"


def test_login_success_and_failure(client: FlaskClient, registration: dict[str, str]) -> None:
    registered = _register(client, registration)

    ok = client.post("/api/auth/login", json={"username": "alice", "password": "secret123"})
    by_email = client.post(
        "/api/auth/login", json={"username": "alice@example.com", "password": "secret123"}
    )
    wrong = client.post("/api/auth/login", json={"username": "alice", "password": "nope-nope"})
    unknown = client.post("/api/auth/login", json={"username": "ghost", "password": "secret123"})

    assert ok.status_code == 200
    assert ok.get_json()["user"]["id"] == registered["user"]["id"]
    assert by_email.status_code == 200
    assert wrong.status_code == 401
    assert unknown.status_code == 401
    assert wrong.get_json() == unknown.get_json()


def test_profile_requires_bearer_token(client: FlaskClient) -> None:
    missing = client.get("/api/user/profile")
    wrong_scheme = client.get("/api/user/profile", headers={"Authorization": "Basic abc"})
    garbage = client.get("/api/user/profile", headers=_bearer("not-a-token"))

    assert missing.status_code == 401
    assert missing.get_json()["error"] == "unauthorized"
    assert wrong_scheme.status_code == 401
    assert garbage.status_code == 401
    assert garbage.get_json()["error"] == "invalid_token"


def test_expired_token_rejected(
    client: FlaskClient, registration: dict[str, str], clock
) -> None:
    token = _register(client, registration)["token"]

    clock.advance(hours=24, seconds=1)
    response = client.get("/api/user/profile", headers=_bearer(token))

    assert response.status_code == 401
    assert response.get_json()["error"] == "token_expired"


def test_token_for_missing_user_returns_404(client: FlaskClient, container: Container) -> None:
    token = container.token_service.issue(12345).token

    response = client.get("/api/user/profile", headers=_bearer(token))

    assert response.status_code == 404
    assert response.get_json()["error"] == "user_not_found"


def test_update_profile(client: FlaskClient, registration: dict[str, str], clock) -> None:
    registered = _register(client, registration)
    clock.advance(minutes=5)

    response = client.put(
        "/api/user/profile",
        headers=_bearer(registered["token"]),
        json={"email": "New@Example.com", "phone": "5559876543", "dob": "1991-02-03"},
    )

    assert response.status_code == 200
    body = response.get_json()
    assert body["message"] == "Profile updated successfully"
    assert body["user"]["email"] == "new@example.com"
    assert body["user"]["phone"] == "5559876543"
    assert body["user"]["dob"] == "1991-02-03"
    assert body["user"]["username"] == "alice"
    assert body["user"]["created_at"] == registered["user"]["created_at"]
    assert body["user"]["updated_at"] != registered["user"]["updated_at"]


def test_update_profile_email_conflict_keeps_record(
    client: FlaskClient, registration: dict[str, str]
) -> None:
    alice = _register(client, registration)
    _register(client, {**registration, "username": "bob", "email": "bob@example.com"})

    response = client.put(
        "/api/user/profile",
        headers=_bearer(alice["token"]),
        json={"email": "bob@example.com", "phone": "5550000000", "dob": "2000-01-01"},
    )

    assert response.status_code == 400
    assert response.get_json() == {"error": "email_in_use", "message": "Email is already in use"}
    profile = client.get("/api/user/profile", headers=_bearer(alice["token"]))
    assert profile.get_json() == alice["user"]


def test_update_profile_validates_before_touching_storage(
    client: FlaskClient, registration: dict[str, str]
) -> None:
    alice = _register(client, registration)

    response = client.put(
        "/api/user/profile",
        headers=_bearer(alice["token"]),
        json={"email": "bad", "phone": "123", "dob": "2000-01-01"},
    )

    assert response.status_code == 400
    assert response.get_json()["context"]["fields"] == ["email", "phone"]


def test_update_profile_requires_auth(client: FlaskClient) -> None:
    response = client.put(
        "/api/user/profile",
        json={"email": "a@example.com", "phone": "5550000000", "dob": "2000-01-01"},
    )

    assert response.status_code == 401


def test_health_and_response_headers(client: FlaskClient) -> None:
    response = client.get("/api/health", headers={"X-Request-ID": "req-123"})

    assert response.status_code == 200
    assert response.get_json() == {"ok": True, "database": "ok"}
    assert response.headers["X-Request-ID"] == "req-123"
    assert response.headers["X-Content-Type-Options"] == "nosniff"
    assert response.headers["Cache-Control"] == "no-store"


def test_unknown_route_is_json(client: FlaskClient) -> None:
    response = client.get("/api/nope")

    assert response.status_code == 404
    assert response.get_json()["error"] == "not_found"


def test_database_failure_hides_details(
    client: FlaskClient,
    container: Container,
    registration: dict[str, str],
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    token = _register(client, registration)["token"]

    def broken(user_id: int):
        raise OperationalError("SELECT users", {}, Exception("disk I/O error"))

    monkeypatch.setattr(container.user_repository, "find_by_id", broken)
    response = client.get("/api/user/profile", headers=_bearer(token))

    assert response.status_code == 500
    assert response.get_json() == {"error": "database_error", "message": "Server error"}


def test_unexpected_failure_is_generic_500(
    client: FlaskClient,
    container: Container,
    registration: dict[str, str],
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    token = _register(client, registration)["token"]

    def broken(user_id: int):
        raise RuntimeError("boom at /srv/app/secret.py")

    monkeypatch.setattr(container.user_repository, "find_by_id", broken)
    response = client.get("/api/user/profile", headers=_bearer(token))

    assert response.status_code == 500
    assert response.get_json() == {"error": "internal_error", "message": "Server error"}
