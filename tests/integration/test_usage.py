"""
Reactive Cache - End to End Usage Tests

Exercises ReactiveCache built from settings: provider lifecycles, shared
storage between caches, expiry with real time and concurrent writers.
"""

import asyncio

import pytest

from reactive_cache import NotFoundError, ReactiveCache, Source, TimeUnit
from reactive_cache.config import ReactiveCacheSettings, StorageConfig
from reactive_cache.models import loader_of


async def failing_loader() -> list[str]:
    raise RuntimeError("network down")


def settings_for(**kwargs: object) -> ReactiveCacheSettings:
    return ReactiveCacheSettings(storage=StorageConfig(namespace="usage"), **kwargs)  # type: ignore[arg-type]


class TestReactiveCacheUsage:
    """Test suite for ReactiveCache end to end."""

    @pytest.fixture
    def cache(self) -> ReactiveCache:
        return ReactiveCache.from_settings(settings_for())

    async def test_from_global_settings(self, mock_env_memory: None) -> None:
        cache = ReactiveCache.from_settings()

        stats = await cache.get_stats()

        assert stats["engine"] == "two_layer"
        assert stats["storage"]["namespace"] == "test"

    async def test_list_lifecycle(self, cache: ReactiveCache, mocks: list[str]) -> None:
        provider = cache.provider_list().with_key("mocks")

        assert await provider.read_with_loader(loader_of(mocks)) == mocks
        await provider.entries().evict_first_n(4)
        await provider.entries().add_last("10")

        assert await provider.read() == ["4", "5", "6", "7", "8", "9", "10"]

        await provider.evict()
        assert await provider.read_nullable() is None

    async def test_caches_on_same_namespace_share_records(self, cache: ReactiveCache) -> None:
        await cache.provider().with_key("shared").replace(loader_of("value"))

        other = ReactiveCache.from_settings(settings_for())
        reply = await other.provider().with_key("shared").read_with_loader_as_reply(failing_loader)

        assert reply.data == "value"
        assert reply.source == Source.PERSISTENCE

    async def test_evict_all(self, cache: ReactiveCache) -> None:
        await cache.provider().with_key("one").replace(loader_of(1))
        await cache.provider_group().with_key("two").replace("g", loader_of(2))

        await cache.evict_all()

        assert await cache.provider().with_key("one").read_nullable() is None
        assert await cache.provider_group().with_key("two").read_nullable("g") is None
        stats = await cache.get_stats()
        assert stats["storage"]["size"] == 0

    async def test_lifetime_expires(self, cache: ReactiveCache) -> None:
        provider = cache.provider().with_lifetime(20, TimeUnit.MILLISECONDS).with_key("short")
        await provider.replace(loader_of("value"))

        await asyncio.sleep(0.05)

        with pytest.raises(NotFoundError):
            await provider.read()

    async def test_expired_data_served_when_loader_fails(self) -> None:
        cache = ReactiveCache.from_settings(settings_for(use_expired_data_if_loader_not_available=True))
        provider = cache.provider().with_lifetime(20, TimeUnit.MILLISECONDS).with_key("stale")
        await provider.replace(loader_of("old"))

        await asyncio.sleep(0.05)

        assert await provider.read_with_loader(failing_loader) == "old"

    async def test_concurrent_replaces_last_store_wins(self, cache: ReactiveCache) -> None:
        provider = cache.provider().with_key("race")

        async def slow() -> str:
            await asyncio.sleep(0.02)
            return "A"

        async def fast() -> str:
            await asyncio.sleep(0.01)
            return "B"

        await asyncio.gather(provider.replace(slow), provider.replace(fast))

        assert await provider.read() == "A"

    async def test_max_records_reclaims_expirable(self) -> None:
        cache = ReactiveCache.from_settings(settings_for(max_records=2))
        pinned = cache.provider().with_expirable(False).with_key("pinned")

        await pinned.replace(loader_of("keep"))
        for i in range(3):
            await cache.provider().with_key(f"loose_{i}").replace(loader_of(i))

        assert await pinned.read() == "keep"
        stats = await cache.get_stats()
        assert stats["storage"]["size"] == 2
