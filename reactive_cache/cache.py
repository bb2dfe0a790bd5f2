"""
Reactive Cache - Entry Point

ReactiveCache hands out provider builders bound to one CacheEngine and
exposes engine-wide operations.

Usage:
    from reactive_cache import ReactiveCache, TimeUnit

    cache = ReactiveCache.from_settings()
    mocks = cache.provider_list().with_lifetime(1, TimeUnit.HOURS).with_key("mocks")

    await mocks.replace(load_mocks)
    await mocks.entries().add_first(new_mock)
    await cache.evict_all()
"""

from __future__ import annotations

import logging
from typing import Any, TypeVar

from .config import ReactiveCacheSettings, get_config
from .engine import CacheEngine, CacheProcessor
from .observability import configure_logging
from .provider import ProviderBuilder, ProviderGroupBuilder
from .provider_list import ProviderGroupListBuilder, ProviderListBuilder
from .storage import create_storage

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ReactiveCache:
    """Factory for providers sharing one cache engine."""

    def __init__(self, engine: CacheEngine):
        self._engine = engine

    @classmethod
    def from_settings(cls, settings: ReactiveCacheSettings | None = None) -> ReactiveCache:
        """
        Build a ReactiveCache backed by the configured storage.

        Args:
            settings: Cache settings (uses global config if not provided). Caches
                configured with the same storage namespace share their records.

        Returns:
            Configured ReactiveCache
        """
        if settings is None:
            settings = get_config()

        if settings.json_logs:
            configure_logging(level=str(settings.log_level), json_logs=True)

        storage = create_storage(settings.storage)
        engine = CacheProcessor(
            storage,
            use_expired_data_if_loader_not_available=settings.use_expired_data_if_loader_not_available,
            max_records=settings.max_records,
        )

        logger.info(
            "ReactiveCache ready on namespace '%s'",
            settings.storage.namespace,
            extra={
                "namespace": settings.storage.namespace,
                "backend": str(settings.storage.backend),
                "max_records": settings.max_records,
            },
        )
        return cls(engine)

    @property
    def engine(self) -> CacheEngine:
        return self._engine

    def provider(self) -> ProviderBuilder[T]:
        """Builder for a Provider caching a single value."""
        return ProviderBuilder(self._engine)

    def provider_list(self) -> ProviderListBuilder[T]:
        """Builder for a ProviderList caching a list of values."""
        return ProviderListBuilder(self._engine)

    def provider_group(self) -> ProviderGroupBuilder[T]:
        """Builder for a ProviderGroup caching one value per group."""
        return ProviderGroupBuilder(self._engine)

    def provider_group_list(self) -> ProviderGroupListBuilder[T]:
        """Builder for a ProviderGroupList caching one list per group."""
        return ProviderGroupListBuilder(self._engine)

    async def evict_all(self) -> None:
        """Evict all the cached data."""
        await self._engine.evict_all()

    async def get_stats(self) -> dict[str, Any]:
        return await self._engine.get_stats()

    async def close(self) -> None:
        await self._engine.close()
