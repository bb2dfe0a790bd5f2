"""
Reactive Cache - Providers

Handles bound to one cache key, exposing read / replace / evict over a
CacheEngine.

- ProviderGroup: one primary key partitioned into independent groups
- Provider: a single ungrouped slot

Builders are immutable: every with_* call returns a new builder, and
with_key() finalizes it into an operable handle.

Usage:
    cache = ReactiveCache.from_settings()
    users = cache.provider().with_lifetime(5, TimeUnit.MINUTES).with_key("users")

    fresh = await users.read_with_loader(fetch_users)
    cached = await users.read()
    await users.evict()
"""

import logging
from dataclasses import dataclass, replace
from typing import Generic, Self, TypeVar

from .engine.interface import CacheEngine
from .errors import ConfigurationError, NotFoundError
from .exception_adapter import (
    complete_on_loader_error,
    eviction_loader,
    placeholder_loader,
    strip_placeholder_loader_error,
)
from .models import CacheConfig, CacheKey, Eviction, EvictionScope, Loader, Reply, TimeUnit, loader_of

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ProviderGroup(Generic[T]):
    """
    Entry point to manage cache CRUD operations with groups.

    Groups are stringified, so any object with a stable str() works.
    """

    def __init__(self, engine: CacheEngine, config: CacheConfig):
        self._engine = engine
        self._config = config

    @property
    def config(self) -> CacheConfig:
        return self._config

    def _config_for(self, group: object) -> CacheConfig:
        return self._config.for_group(str(group))

    async def evict(self, group: object | None = None) -> None:
        """
        Evict cached data: one group, or every group of the key when group is None.

        Completes normally when there was nothing to evict.
        """
        if group is None:
            config = self._config
            eviction = Eviction(scope=EvictionScope.KEY, force=True)
        else:
            config = self._config_for(group)
            eviction = Eviction(scope=EvictionScope.GROUP, force=True)

        try:
            await self._engine.fetch(config, eviction_loader, eviction, use_expired_data=False)
        except Exception as error:
            complete_on_loader_error(error)

        logger.debug(
            "Evicted provider '%s'",
            config.key.primary,
            extra={"key": config.key.primary, "group": None if group is None else config.key.group},
        )

    async def replace(self, group: object, loader: Loader[T]) -> T:
        """Replace the cached data of a group with the value produced by the loader."""
        reply = await self.replace_as_reply(group, loader)
        return reply.data

    async def replace_as_reply(self, group: object, loader: Loader[T]) -> Reply[T]:
        """Same as replace() but wrap the data in a Reply for debugging purposes."""
        # Run the loader first so a failing loader leaves the slot untouched
        data = await loader()
        return await self._engine.fetch(
            self._config_for(group),
            loader_of(data),
            Eviction(scope=EvictionScope.GROUP, force=True),
        )

    async def read(self, group: object) -> T:
        """
        Read from cache by group.

        Raises:
            NotFoundError: No data is available for the group
        """
        try:
            reply = await self._engine.fetch(
                self._config_for(group),
                placeholder_loader,
                Eviction(scope=EvictionScope.GROUP),
            )
        except Exception as error:
            strip_placeholder_loader_error(error)
        return reply.data

    async def read_nullable(self, group: object) -> T | None:
        """Same as read() but return None when no data is available."""
        try:
            return await self.read(group)
        except NotFoundError:
            return None

    async def read_with_loader(self, group: object, loader: Loader[T]) -> T:
        """
        Read from cache by group, falling back to the loader and caching its
        value when no live data is available.
        """
        reply = await self.read_with_loader_as_reply(group, loader)
        return reply.data

    async def read_with_loader_as_reply(self, group: object, loader: Loader[T]) -> Reply[T]:
        """Same as read_with_loader() but wrap the data in a Reply for debugging purposes."""
        return await self._engine.fetch(self._config_for(group), loader, Eviction(scope=EvictionScope.GROUP))


class Provider(Generic[T]):
    """Entry point to manage cache CRUD operations on a single slot."""

    def __init__(self, engine: CacheEngine, config: CacheConfig):
        self._handle: ProviderGroup[T] = ProviderGroup(engine, config)

    @property
    def config(self) -> CacheConfig:
        return self._handle.config

    async def evict(self) -> None:
        """Evict all the cached data for this provider."""
        await self._handle.evict()

    async def replace(self, loader: Loader[T]) -> T:
        """Replace the cached data with the value produced by the loader."""
        return await self._handle.replace("", loader)

    async def replace_as_reply(self, loader: Loader[T]) -> Reply[T]:
        return await self._handle.replace_as_reply("", loader)

    async def read(self) -> T:
        """Read from cache and raise NotFoundError if no data is available."""
        return await self._handle.read("")

    async def read_nullable(self) -> T | None:
        return await self._handle.read_nullable("")

    async def read_with_loader(self, loader: Loader[T]) -> T:
        """
        Read from cache but if there is no data available then read from the
        loader and cache its value.
        """
        return await self._handle.read_with_loader("", loader)

    async def read_with_loader_as_reply(self, loader: Loader[T]) -> Reply[T]:
        return await self._handle.read_with_loader_as_reply("", loader)


@dataclass(frozen=True)
class ProviderBuilder(Generic[T]):
    """Immutable builder for Provider handles."""

    engine: CacheEngine
    encrypted: bool = False
    expirable: bool = True
    lifetime: tuple[float, TimeUnit] | None = None

    def with_encryption(self, encrypt: bool = True) -> Self:
        """Flag the handle's data as encrypted."""
        return replace(self, encrypted=encrypt)

    def with_expirable(self, expirable: bool) -> Self:
        """
        Make the data eligible to be reclaimed when the engine runs out of
        room. True by default.
        """
        return replace(self, expirable=expirable)

    def with_lifetime(self, duration: float, unit: TimeUnit | str = TimeUnit.SECONDS) -> Self:
        """
        Set the amount of time before the data expires. Without a lifetime the
        data is only removed by evict() or replaced by replace().
        """
        if duration < 0:
            raise ConfigurationError(
                "Provider lifetime must not be negative",
                details={"duration": duration, "unit": str(unit)},
            )
        try:
            time_unit = TimeUnit(unit)
        except ValueError as e:
            raise ConfigurationError(
                f"Unknown lifetime unit: {unit}",
                details={"unit": str(unit), "supported": [u.value for u in TimeUnit]},
            ) from e
        return replace(self, lifetime=(duration, time_unit))

    def build_config(self, key: object) -> CacheConfig:
        primary = "" if key is None else str(key)
        if not primary:
            raise ConfigurationError("Provider key must be a non-empty string", details={"key": repr(key)})

        lifetime_seconds = None
        if self.lifetime is not None:
            duration, unit = self.lifetime
            lifetime_seconds = unit.to_seconds(duration)

        return CacheConfig(
            key=CacheKey(primary=primary),
            lifetime_seconds=lifetime_seconds,
            expirable=self.expirable,
            encrypted=self.encrypted,
        )

    def with_key(self, key: object) -> Provider[T]:
        """Set the key and build the provider."""
        return Provider(self.engine, self.build_config(key))


@dataclass(frozen=True)
class ProviderGroupBuilder(ProviderBuilder[T]):
    """Immutable builder for ProviderGroup handles."""

    def with_key(self, key: object) -> ProviderGroup[T]:  # type: ignore[override]
        return ProviderGroup(self.engine, self.build_config(key))
