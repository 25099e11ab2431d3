"""Unit tests for auth API router (notesync/api/auth.py)."""

import uuid
from datetime import datetime, timezone

import pytest
from fastapi import HTTPException
from fastapi.testclient import TestClient

from notesync.core.schemas.auth import TokenResponse, UserResponse
from notesync.core.services import auth_service as auth_service_module
from notesync.database import get_db_session
from notesync.main import app
from notesync.security import create_access_token


@pytest.fixture
def client():
    async def _no_session():
        yield None

    app.dependency_overrides[get_db_session] = _no_session
    yield TestClient(app)
    app.dependency_overrides.clear()


def _user(**overrides) -> UserResponse:
    data = {
        "id": uuid.uuid4(),
        "name": "Ada",
        "email": "ada@example.com",
        "role": "user",
        "created_at": datetime.now(timezone.utc),
    }
    data.update(overrides)
    return UserResponse(**data)


def _token(user: UserResponse) -> TokenResponse:
    return TokenResponse(access_token="tok", token_type="bearer", expires_in=60, user=user)


def test_signup_calls_service(monkeypatch, client):
    called = {}

    async def fake_signup(self, request):
        called["request"] = request
        return _token(_user(name=request.name, email=request.email))

    monkeypatch.setattr(auth_service_module.AuthService, "signup", fake_signup)

    resp = client.post(
        "/api/auth/signup",
        json={"name": "Ada", "email": "ada@example.com", "password": "s3cret"},
    )

    assert resp.status_code == 201
    body = resp.json()
    assert body["access_token"] == "tok"
    assert body["user"]["email"] == "ada@example.com"
    assert called["request"].name == "Ada"


def test_signup_validates_payload(client):
    resp = client.post("/api/auth/signup", json={"name": "Ada", "email": "nope", "password": "1"})
    assert resp.status_code == 422


def test_login_failure_is_401(monkeypatch, client):
    async def fake_login(self, request):
        raise HTTPException(status_code=401, detail="Invalid credentials")

    monkeypatch.setattr(auth_service_module.AuthService, "login", fake_login)

    resp = client.post("/api/auth/login", json={"email": "ada@example.com", "password": "x"})
    assert resp.status_code == 401


def test_current_user_requires_token(client):
    resp = client.get("/api/auth/user")
    assert resp.status_code in (401, 403)


def test_current_user_uses_token_subject(monkeypatch, client):
    user_id = uuid.uuid4()

    async def fake_get_current_user(self, uid):
        return _user(id=uid)

    monkeypatch.setattr(auth_service_module.AuthService, "get_current_user", fake_get_current_user)
    token = create_access_token({"sub": str(user_id), "name": "Ada"})

    resp = client.get("/api/auth/user", headers={"Authorization": f"Bearer {token}"})

    assert resp.status_code == 200
    assert resp.json()["id"] == str(user_id)


def test_logout_passes_raw_token(monkeypatch, client):
    seen = {}

    async def fake_logout(self, token):
        seen["token"] = token
        return True

    monkeypatch.setattr(auth_service_module.AuthService, "logout", fake_logout)
    token = create_access_token({"sub": str(uuid.uuid4()), "name": "Ada"})

    resp = client.post("/api/auth/logout", headers={"Authorization": f"Bearer {token}"})

    assert resp.status_code == 200
    assert resp.json()["message"] == "Logged out successfully"
    assert seen["token"] == token
