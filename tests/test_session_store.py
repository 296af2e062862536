from unittest import mock

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from files_manager.core.exceptions import InternalError
from files_manager.core.redis_client import SessionStore


def test_requires_url_or_client():
    with pytest.raises(ValueError):
        SessionStore()


async def test_set_get_delete(session_store, redis_client):
    await session_store.set("auth_x", "user-1", 60)
    assert await session_store.get("auth_x") == "user-1"
    await session_store.delete("auth_x")
    assert await session_store.get("auth_x") is None


async def test_bytes_values_are_decoded(session_store, redis_client):
    redis_client.data["k"] = b"user-1"
    assert await session_store.get("k") == "user-1"


async def test_backend_errors_become_internal_errors():
    client = mock.AsyncMock()
    client.get.side_effect = RedisConnectionError("down")
    client.set.side_effect = RedisConnectionError("down")
    client.delete.side_effect = RedisConnectionError("down")
    client.ping.side_effect = RedisConnectionError("down")
    store = SessionStore(client=client)

    with pytest.raises(InternalError):
        await store.get("k")
    with pytest.raises(InternalError):
        await store.set("k", "v", 10)
    with pytest.raises(InternalError):
        await store.delete("k")
    assert await store.is_alive() is False


async def test_close_releases_client(session_store, redis_client):
    await session_store.close()
    assert redis_client.closed
    assert await session_store.is_alive() is False
