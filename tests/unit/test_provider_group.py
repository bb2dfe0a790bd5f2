"""
Reactive Cache - ProviderGroup Tests

Tests group-scoped reads, replaces and evictions.
"""

import pytest

from reactive_cache import NotFoundError, ProviderGroup, ReactiveCache, Source
from reactive_cache.models import loader_of


class TestProviderGroup:
    """Test suite for ProviderGroup."""

    @pytest.fixture
    def provider(self, cache: ReactiveCache) -> ProviderGroup[str]:
        return cache.provider_group().with_key("mocks")

    async def test_read_empty_group_raises_not_found(self, provider: ProviderGroup[str]) -> None:
        with pytest.raises(NotFoundError):
            await provider.read("page_1")

    async def test_groups_are_independent(self, provider: ProviderGroup[str]) -> None:
        await provider.replace("page_1", loader_of("one"))
        await provider.replace("page_2", loader_of("two"))

        assert await provider.read("page_1") == "one"
        assert await provider.read("page_2") == "two"
        assert await provider.read_nullable("page_3") is None

    async def test_group_is_stringified(self, provider: ProviderGroup[str]) -> None:
        await provider.replace(1, loader_of("one"))

        assert await provider.read("1") == "one"

    async def test_evict_one_group(self, provider: ProviderGroup[str]) -> None:
        await provider.replace("page_1", loader_of("one"))
        await provider.replace("page_2", loader_of("two"))

        await provider.evict("page_1")

        assert await provider.read_nullable("page_1") is None
        assert await provider.read("page_2") == "two"

    async def test_evict_whole_key(self, provider: ProviderGroup[str], cache: ReactiveCache) -> None:
        other = cache.provider_group().with_key("other")
        await other.replace("page_1", loader_of("kept"))
        await provider.replace("page_1", loader_of("one"))
        await provider.replace("page_2", loader_of("two"))

        await provider.evict()

        assert await provider.read_nullable("page_1") is None
        assert await provider.read_nullable("page_2") is None
        assert await other.read("page_1") == "kept"

    async def test_evict_empty_group_completes(self, provider: ProviderGroup[str]) -> None:
        await provider.evict("never_populated")

    async def test_replace_as_reply_is_fresh(self, provider: ProviderGroup[str]) -> None:
        await provider.replace("page_1", loader_of("old"))

        reply = await provider.replace_as_reply("page_1", loader_of("new"))

        assert reply.source == Source.CLOUD
        assert await provider.read("page_1") == "new"

    async def test_read_with_loader_per_group(self, provider: ProviderGroup[str]) -> None:
        first = await provider.read_with_loader_as_reply("page_1", loader_of("one"))
        cached = await provider.read_with_loader_as_reply("page_1", loader_of("ignored"))
        other = await provider.read_with_loader("page_2", loader_of("two"))

        assert first.source == Source.CLOUD
        assert cached.data == "one"
        assert cached.source == Source.MEMORY
        assert other == "two"
