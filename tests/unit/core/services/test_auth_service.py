"""AuthService against SQLite with the in-memory token blacklist."""

import uuid

import pytest
from fastapi import HTTPException
from sqlalchemy import select

from notesync.core.errors import ConflictError, NotFoundError
from notesync.core.models import ActivityLog
from notesync.core.schemas.auth import LoginRequest, SignupRequest
from notesync.core.services.auth_service import AuthService
from notesync.security import decode_access_token

PASSWORD = "TestPassword123!"


async def _actions(session):
    result = await session.execute(select(ActivityLog.action).order_by(ActivityLog.id))
    return list(result.scalars())


@pytest.mark.asyncio
async def test_signup_issues_token_and_records_activity(test_session):
    svc = AuthService(test_session)

    resp = await svc.signup(SignupRequest(name="Ada", email="Ada@Example.com", password="s3cret"))

    assert resp.token_type == "bearer"
    assert resp.user.email == "ada@example.com"
    assert resp.user.name == "Ada"

    payload = await decode_access_token(resp.access_token)
    assert payload["sub"] == str(resp.user.id)
    assert payload["name"] == "Ada"
    assert await _actions(test_session) == ["signup"]


@pytest.mark.asyncio
async def test_signup_duplicate_email_conflicts(test_session, owner):
    with pytest.raises(ConflictError):
        await AuthService(test_session).signup(
            SignupRequest(name="Other", email="OWNER@example.com", password="s3cret")
        )


@pytest.mark.asyncio
async def test_login_success(test_session, owner):
    resp = await AuthService(test_session).login(
        LoginRequest(email="owner@example.com", password=PASSWORD)
    )

    assert resp.user.id == owner.id
    assert await _actions(test_session) == ["login"]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "email,password",
    [("owner@example.com", "wrong-password"), ("ghost@example.com", PASSWORD)],
)
async def test_login_bad_credentials(test_session, owner, email, password):
    with pytest.raises(HTTPException) as exc:
        await AuthService(test_session).login(LoginRequest(email=email, password=password))
    assert exc.value.status_code == 401
    assert await _actions(test_session) == []


@pytest.mark.asyncio
async def test_get_current_user(test_session, owner):
    svc = AuthService(test_session)

    assert (await svc.get_current_user(owner.id)).name == "Olivia Owner"
    with pytest.raises(NotFoundError):
        await svc.get_current_user(uuid.uuid4())


@pytest.mark.asyncio
async def test_logout_revokes_token(test_session, owner, fake_redis):
    svc = AuthService(test_session)
    token = (await svc.login(LoginRequest(email=owner.email, password=PASSWORD))).access_token

    assert await svc.logout(token) is True
    assert len(fake_redis.blacklist) == 1
    assert await decode_access_token(token) is None


@pytest.mark.asyncio
async def test_logout_with_garbage_token(test_session):
    assert await AuthService(test_session).logout("not-a-jwt") is False
