"""
Reactive Cache - Test Configuration and Shared Fixtures

Provides pytest configuration and shared fixtures for unit and integration tests.
"""

import os
import socket
from collections.abc import AsyncGenerator

import pytest

from reactive_cache import CacheProcessor, ReactiveCache
from reactive_cache.storage import close_all_storages
from reactive_cache.storage.backends.memory import MemoryStorageBackend

# Set test environment
os.environ["LOG_LEVEL"] = "DEBUG"


def is_redis_available() -> bool:
    """Check if Redis server is available for testing."""
    try:
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        sock.settimeout(1)
        result = sock.connect_ex(("localhost", 6379))
        sock.close()
        return result == 0
    except OSError:
        return False


# Skip marker for Redis tests
redis_available = pytest.mark.skipif(not is_redis_available(), reason="Redis server not available")


@pytest.fixture
def test_redis_url() -> str:
    """Get Redis URL for testing (database 15 for isolation)."""
    return os.environ.get("TEST_REDIS_URL", "redis://localhost:6379/15")


@pytest.fixture
def storage() -> MemoryStorageBackend:
    """Fresh in-memory persistence tier."""
    return MemoryStorageBackend(namespace="test")


@pytest.fixture
def engine(storage: MemoryStorageBackend) -> CacheProcessor:
    """Two layer engine over the in-memory storage fixture."""
    return CacheProcessor(storage)


@pytest.fixture
def cache(engine: CacheProcessor) -> ReactiveCache:
    """ReactiveCache over the engine fixture."""
    return ReactiveCache(engine)


@pytest.fixture
def mocks() -> list[str]:
    """Ten elements "0".."9"."""
    return [str(i) for i in range(10)]


@pytest.fixture  # type: ignore[misc]
def mock_env_memory(monkeypatch: pytest.MonkeyPatch) -> None:
    """Set environment variables for memory storage backend."""
    monkeypatch.delenv("REDIS_URL", raising=False)
    monkeypatch.setenv("CACHE_BACKEND", "memory")
    monkeypatch.setenv("CACHE_NAMESPACE", "test")


@pytest.fixture(autouse=True)  # type: ignore[misc]
async def close_storages() -> AsyncGenerator[None, None]:
    """Close storages opened by the test so namespaces never leak between tests."""
    yield
    await close_all_storages()


@pytest.fixture(autouse=True)  # type: ignore[misc]
def reset_config(monkeypatch: pytest.MonkeyPatch) -> None:
    """Drop the cached configuration so each test loads its own environment."""
    from reactive_cache.config import loader

    monkeypatch.setattr(loader, "_config_instance", None)
