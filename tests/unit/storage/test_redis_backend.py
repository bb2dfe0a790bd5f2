"""
Reactive Cache - Redis Storage Backend Tests

Requires Redis server running on localhost:6379 (or TEST_REDIS_URL env var).
"""

import socket
from collections.abc import AsyncGenerator

import pytest

from reactive_cache.errors import StorageError
from reactive_cache.storage.backends.redis import RedisStorageBackend

try:
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    sock.settimeout(1)
    redis_available = sock.connect_ex(("localhost", 6379)) == 0
    sock.close()
except OSError:
    redis_available = False

pytestmark = pytest.mark.skipif(not redis_available, reason="Redis server not available")


class TestRedisStorageBackend:
    """Test suite for RedisStorageBackend."""

    @pytest.fixture
    async def backend(self, test_redis_url: str) -> AsyncGenerator[RedisStorageBackend, None]:
        backend = RedisStorageBackend(
            redis_url=test_redis_url,
            namespace="test",
            max_connections=5,
            socket_timeout=2,
        )
        await backend.clear()
        yield backend
        await backend.clear()
        await backend.close()

    async def test_set_and_get(self, backend: RedisStorageBackend) -> None:
        payload = {"data": ["0", "1"], "timestamp": 1.0, "expirable": True, "encrypted": False}
        await backend.set("mocks$g$g$g$", payload)

        assert await backend.get("mocks$g$g$g$") == payload

    async def test_get_missing_key(self, backend: RedisStorageBackend) -> None:
        assert await backend.get("missing") is None

    async def test_delete(self, backend: RedisStorageBackend) -> None:
        await backend.set("key1", {"data": 1})

        assert await backend.delete("key1") is True
        assert await backend.delete("key1") is False

    async def test_delete_prefix_and_keys(self, backend: RedisStorageBackend) -> None:
        await backend.set("mocks$g$g$g$a", {"data": 1})
        await backend.set("mocks$g$g$g$b", {"data": 2})
        await backend.set("other$g$g$g$", {"data": 3})

        assert sorted(await backend.keys("mocks")) == ["mocks$g$g$g$a", "mocks$g$g$g$b"]
        assert await backend.delete_prefix("mocks$g$g$g$") == 2
        assert await backend.keys() == ["other$g$g$g$"]

    async def test_prefix_with_glob_characters_matches_literally(self, backend: RedisStorageBackend) -> None:
        await backend.set("page[1]*$g$g$g$", {"data": 1})
        await backend.set("page1x$g$g$g$", {"data": 2})

        assert await backend.keys("page[1]*") == ["page[1]*$g$g$g$"]
        assert await backend.delete_prefix("page[1]*") == 1

    async def test_get_many_and_delete_many(self, backend: RedisStorageBackend) -> None:
        await backend.set("key1", {"data": 1})
        await backend.set("key2", {"data": 2})

        assert await backend.get_many(["key1", "key2", "missing"]) == {"key1": {"data": 1}, "key2": {"data": 2}}
        assert await backend.delete_many(["key1", "key2"]) == 2

    async def test_unserializable_value_raises(self, backend: RedisStorageBackend) -> None:
        with pytest.raises(StorageError):
            await backend.set("key1", {"data": object()})

    async def test_stats(self, backend: RedisStorageBackend) -> None:
        stats = await backend.get_stats()
        assert stats["backend"] == "redis"
        assert stats["connected"] is True


def test_requires_url() -> None:
    with pytest.raises(ValueError):
        RedisStorageBackend(redis_url="")
