"""Shared pytest fixtures configured to use SQLite in-memory for tests."""

import logging
import os

# must be set before the application modules read their settings
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ["NOTESYNC_SKIP_LIFESPAN_DB"] = "1"

from typing import Optional  # noqa: E402
from uuid import uuid4  # noqa: E402

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy import event  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from notesync.core.models import BaseModel, Collaborator, Note, User  # noqa: E402
from notesync.database import get_db_session  # noqa: E402
from notesync.main import app  # noqa: E402
from notesync.security import jwt as jwt_module  # noqa: E402
from notesync.security.jwt import create_access_token  # noqa: E402
from notesync.security.password import hash_password  # noqa: E402

# Silence extremely verbose DEBUG logs from aiosqlite to keep test output readable
logging.getLogger("aiosqlite").setLevel(logging.WARNING)

TEST_PASSWORD = "TestPassword123!"
_PASSWORD_HASH = None


def _password_hash() -> str:
    # bcrypt is slow; hash the shared test password once
    global _PASSWORD_HASH
    if _PASSWORD_HASH is None:
        _PASSWORD_HASH = hash_password(TEST_PASSWORD)
    return _PASSWORD_HASH


class FakeRedisClient:
    """In-memory stand-in for the token blacklist."""

    def __init__(self):
        self.blacklist = {}

    async def connect(self):
        pass

    async def disconnect(self):
        pass

    async def add_to_blacklist(self, jti, expire):
        self.blacklist[jti] = expire
        return True

    async def is_token_blacklisted(self, jti):
        return jti in self.blacklist


@pytest.fixture(autouse=True)
def fake_redis(monkeypatch):
    """Keep every test away from a real Redis server."""
    client = FakeRedisClient()
    monkeypatch.setattr(jwt_module, "get_redis_client", lambda: client)
    return client


@pytest.fixture
async def test_engine():
    """A fresh in-memory database per test."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        poolclass=StaticPool,  # keep the same memory DB across connections
        connect_args={"check_same_thread": False},
    )

    # grant cascade and activity SET NULL rely on FK enforcement
    @event.listens_for(engine.sync_engine, "connect")
    def _set_sqlite_pragma(dbapi_connection, connection_record):  # noqa: ANN001
        cursor = dbapi_connection.cursor()
        try:
            cursor.execute("PRAGMA foreign_keys=ON")
        finally:
            cursor.close()

    async with engine.begin() as conn:
        await conn.run_sync(BaseModel.metadata.create_all)

    try:
        yield engine
    finally:
        await engine.dispose()


@pytest.fixture
def session_factory(test_engine):
    return async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def test_session(session_factory):
    async with session_factory() as session:
        try:
            yield session
        finally:
            await session.rollback()


@pytest.fixture
def test_app(test_session):
    """App wired to the per-test session."""

    async def _override_get_db():
        yield test_session

    app.dependency_overrides[get_db_session] = _override_get_db
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
async def async_client(test_app):
    async with AsyncClient(transport=ASGITransport(app=test_app), base_url="http://test") as ac:
        yield ac


@pytest.fixture
def make_user(test_session):
    """Factory creating committed users."""

    async def _make_user(name: str = "Test User", email: Optional[str] = None) -> User:
        user = User(
            name=name,
            email=email or f"user_{uuid4().hex[:8]}@example.com",
            password_hash=_password_hash(),
        )
        test_session.add(user)
        await test_session.commit()
        return user

    return _make_user


@pytest.fixture
def make_note(test_session):
    """Factory creating committed notes."""

    async def _make_note(owner: User, title: str = "Test Note", **fields) -> Note:
        note = Note(title=title, owner_id=owner.id, **fields)
        test_session.add(note)
        await test_session.commit()
        return note

    return _make_note


@pytest.fixture
def grant(test_session):
    """Factory adding a collaborator grant."""

    async def _grant(note: Note, user: User, permission: str) -> Collaborator:
        row = Collaborator(note_id=note.id, user_id=user.id, permission=permission)
        test_session.add(row)
        await test_session.commit()
        return row

    return _grant


@pytest.fixture
def auth_headers():
    """Build an Authorization header carrying a valid token for a user."""

    def _auth_headers(user: User) -> dict:
        token = create_access_token({"sub": str(user.id), "name": user.name, "email": user.email})
        return {"Authorization": f"Bearer {token}"}

    return _auth_headers


@pytest.fixture
async def owner(make_user):
    return await make_user("Olivia Owner", "owner@example.com")


@pytest.fixture
async def editor(make_user):
    return await make_user("Ed Editor", "editor@example.com")


@pytest.fixture
async def viewer(make_user):
    return await make_user("Vera Viewer", "viewer@example.com")


@pytest.fixture
async def stranger(make_user):
    return await make_user("Sam Stranger", "stranger@example.com")


@pytest.fixture
async def note(make_note, owner):
    return await make_note(owner, "Groceries", content="milk", tags="home")
