"""RedisClient token blacklist behaviour."""

from unittest.mock import AsyncMock

import pytest

from notesync.core import redis_client as redis_module
from notesync.core.redis_client import BLACKLIST_PREFIX, RedisClient


@pytest.fixture
def fake_backend():
    backend = AsyncMock()
    backend.setex = AsyncMock(return_value=True)
    backend.set = AsyncMock(return_value=True)
    backend.exists = AsyncMock(return_value=1)
    return backend


@pytest.mark.asyncio
async def test_blacklist_uses_prefixed_key_with_ttl(fake_backend):
    client = RedisClient()
    client.redis = fake_backend

    assert await client.add_to_blacklist("jti-1", 900) is True
    fake_backend.setex.assert_awaited_once_with(f"{BLACKLIST_PREFIX}jti-1", 900, "revoked")

    assert await client.is_token_blacklisted("jti-1") is True
    fake_backend.exists.assert_awaited_once_with(f"{BLACKLIST_PREFIX}jti-1")


@pytest.mark.asyncio
async def test_operations_are_noops_when_disconnected():
    client = RedisClient()

    assert client.connected is False
    assert await client.add_to_blacklist("jti", 60) is False
    assert await client.is_token_blacklisted("jti") is False


@pytest.mark.asyncio
async def test_backend_errors_are_swallowed(fake_backend):
    fake_backend.exists.side_effect = ConnectionError("gone")
    client = RedisClient()
    client.redis = fake_backend

    assert await client.is_token_blacklisted("jti") is False


@pytest.mark.asyncio
async def test_failed_connect_closes_and_raises(monkeypatch, fake_backend):
    fake_backend.ping.side_effect = ConnectionError("refused")
    monkeypatch.setattr(redis_module.redis, "from_url", lambda *a, **kw: fake_backend)
    client = RedisClient()

    with pytest.raises(ConnectionError):
        await client.connect()
    fake_backend.aclose.assert_awaited_once()
    assert client.connected is False


@pytest.mark.asyncio
async def test_connect_and_disconnect(monkeypatch, fake_backend):
    monkeypatch.setattr(redis_module.redis, "from_url", lambda *a, **kw: fake_backend)
    client = RedisClient()

    await client.connect()
    assert client.connected is True
    await client.disconnect()
    assert client.connected is False
    fake_backend.aclose.assert_awaited_once()


def test_singleton():
    assert redis_module.get_redis_client() is redis_module.get_redis_client()
