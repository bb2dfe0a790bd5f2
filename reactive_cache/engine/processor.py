"""
Reactive Cache - Two Layer Cache Processor

Reference CacheEngine: an in-process memory tier in front of a pluggable
persistence tier (see reactive_cache.storage).

Lookup order for a fetch:
1. memory tier            -> Source.MEMORY
2. persistence tier       -> Source.PERSISTENCE (promoted to memory)
3. loader                 -> Source.CLOUD (stored in both tiers)

Records expire according to the lifetime of the handle reading them. When the
persisted record count exceeds max_records, expirable records are reclaimed
oldest first; records built with expirable=False are never reclaimed.

A forced fetch writes its slot before pruning the rest of the eviction scope,
so a failed write leaves the previous value in place.

Values are deep-copied into the memory tier and again on every reply served
from it, so editing a returned value or a loader result never edits the cache.

The memory tier assumes this process is the only writer of its namespace.
"""

import copy
import logging
from typing import Any, TypeVar

from ..errors import NotFoundError, StorageError
from ..models import CacheConfig, CacheKey, Eviction, EvictionScope, Loader, Reply, Source
from ..storage.interface import StorageInterface
from .interface import CacheEngine
from .record import Record

logger = logging.getLogger(__name__)

T = TypeVar("T")

_GROUP_SEPARATOR = "$g$g$g$"


def storage_key(key: CacheKey) -> str:
    """Storage key for one (primary, group) slot."""
    return f"{key.primary}{_GROUP_SEPARATOR}{key.group}"


def key_prefix(primary: str) -> str:
    """Prefix shared by every group of a primary key."""
    return f"{primary}{_GROUP_SEPARATOR}"


class CacheProcessor(CacheEngine):
    """Two layer cache engine."""

    def __init__(
        self,
        storage: StorageInterface,
        use_expired_data_if_loader_not_available: bool = False,
        max_records: int | None = None,
    ):
        """
        Initialize the processor.

        Args:
            storage: Persistence tier
            use_expired_data_if_loader_not_available: Default for serving expired
                records when the loader fails
            max_records: Persisted record count that triggers reclaiming expirable
                records (None = unbounded)
        """
        self.use_expired_data_if_loader_not_available = use_expired_data_if_loader_not_available
        self.max_records = max_records

        self._storage = storage
        self._memory: dict[str, Record] = {}

    async def fetch(
        self,
        config: CacheConfig,
        loader: Loader[T],
        eviction: Eviction = Eviction(),
        use_expired_data: bool | None = None,
    ) -> Reply[T]:
        if use_expired_data is None:
            use_expired_data = self.use_expired_data_if_loader_not_available

        if eviction.force:
            return await self._load_forced(config, loader, eviction.scope)

        stale: tuple[Record, Source] | None = None

        cached = await self._retrieve(config.key)
        if cached is not None:
            record, source = cached
            if not record.has_expired(config.lifetime_seconds):
                return self._reply(config, record, source)

            logger.debug(
                "Record expired for '%s'",
                storage_key(config.key),
                extra={"key": config.key.primary, "group": config.key.group},
            )
            await self._evict(config.key, EvictionScope.GROUP)
            stale = cached

        try:
            data = await loader()
        except Exception as error:
            if use_expired_data and stale is not None:
                return self._stale_reply(config, stale, error)
            raise self._loader_failure(config, error)

        if data is None:
            if use_expired_data and stale is not None:
                return self._stale_reply(config, stale, None)
            raise NotFoundError(config.key.primary, {"group": config.key.group})

        await self._save(config, data)
        return Reply(data=data, source=Source.CLOUD, encrypted=config.encrypted)

    async def _load_forced(self, config: CacheConfig, loader: Loader[T], scope: EvictionScope) -> Reply[T]:
        """
        Load ignoring any cached value, then make the scope hold only the new value.

        The new value overwrites its slot before the rest of the scope is
        pruned, so a failed store leaves the slot as it was. When the loader
        fails the whole scope is cleared.
        """
        try:
            data = await loader()
        except Exception as error:
            await self._evict(config.key, scope)
            raise self._loader_failure(config, error)

        if data is None:
            await self._evict(config.key, scope)
            raise NotFoundError(config.key.primary, {"group": config.key.group})

        await self._save(config, data)
        await self._evict_siblings(config.key, scope)
        return Reply(data=data, source=Source.CLOUD, encrypted=config.encrypted)

    async def evict_all(self) -> None:
        await self._evict(None, EvictionScope.ALL)

    async def get_stats(self) -> dict[str, Any]:
        return {
            "engine": "two_layer",
            "memory_records": len(self._memory),
            "use_expired_data_if_loader_not_available": self.use_expired_data_if_loader_not_available,
            "max_records": self.max_records,
            "storage": await self._storage.get_stats(),
        }

    async def close(self) -> None:
        self._memory.clear()
        await self._storage.close()

    # ------------ Helpers ------------

    def _reply(self, config: CacheConfig, record: Record, source: Source) -> Reply[Any]:
        return Reply(data=copy.deepcopy(record.data), source=source, encrypted=config.encrypted)

    def _stale_reply(self, config: CacheConfig, stale: tuple[Record, Source], error: Exception | None) -> Reply[Any]:
        record, source = stale
        logger.info(
            "Serving expired data for '%s' because the loader returned no data",
            storage_key(config.key),
            extra={"key": config.key.primary, "group": config.key.group, "error": str(error) if error else None},
        )
        return self._reply(config, record, source)

    def _loader_failure(self, config: CacheConfig, error: Exception) -> ExceptionGroup:
        # NotFoundError first so callers can classify the failure as "no data"
        return ExceptionGroup(
            f"Loader failed for '{storage_key(config.key)}'",
            [NotFoundError(config.key.primary, {"group": config.key.group}), error],
        )

    async def _evict_siblings(self, key: CacheKey, scope: EvictionScope) -> None:
        """Remove every slot of the scope except the one addressed by key."""
        if scope == EvictionScope.GROUP:
            return

        keep = storage_key(key)
        prefix = "" if scope == EvictionScope.ALL else key_prefix(key.primary)

        for slot in [slot for slot in self._memory if slot.startswith(prefix) and slot != keep]:
            del self._memory[slot]

        siblings = [slot for slot in await self._storage.keys(prefix) if slot != keep]
        if siblings:
            await self._storage.delete_many(siblings)

        logger.debug(
            "Pruned %d sibling slot(s) of '%s'",
            len(siblings),
            keep,
            extra={"key": key.primary, "group": key.group, "scope": scope.value},
        )

    async def _retrieve(self, key: CacheKey) -> tuple[Record, Source] | None:
        slot = storage_key(key)

        record = self._memory.get(slot)
        if record is not None:
            return record, Source.MEMORY

        payload = await self._storage.get(slot)
        if payload is None:
            return None

        try:
            record = Record.from_payload(payload)
        except (KeyError, TypeError, ValueError) as e:
            logger.error(
                "Malformed record payload for '%s': %s",
                slot,
                e,
                extra={"key": key.primary, "group": key.group, "error": str(e)},
            )
            raise StorageError(f"Malformed record payload for '{slot}'", details={"key": slot}) from e

        self._memory[slot] = record
        return record, Source.PERSISTENCE

    async def _save(self, config: CacheConfig, data: Any) -> None:
        slot = storage_key(config.key)
        record = Record.now(copy.deepcopy(data), expirable=config.expirable, encrypted=config.encrypted)

        await self._storage.set(slot, record.to_payload())
        self._memory[slot] = record

        if self.max_records is not None:
            await self._reclaim_expirable_records(self.max_records)

    async def _evict(self, key: CacheKey | None, scope: EvictionScope) -> None:
        if scope == EvictionScope.ALL or key is None:
            self._memory.clear()
            await self._storage.clear()
            logger.info("Evicted all records")
            return

        if scope == EvictionScope.GROUP:
            slot = storage_key(key)
            self._memory.pop(slot, None)
            await self._storage.delete(slot)
        else:
            prefix = key_prefix(key.primary)
            for slot in [slot for slot in self._memory if slot.startswith(prefix)]:
                del self._memory[slot]
            await self._storage.delete_prefix(prefix)

        logger.debug(
            "Evicted %s scope for key '%s'",
            scope.value,
            key.primary,
            extra={"key": key.primary, "group": key.group, "scope": scope.value},
        )

    async def _reclaim_expirable_records(self, max_records: int) -> None:
        """Drop the oldest expirable records until the persisted count fits max_records."""
        slots = await self._storage.keys()
        overflow = len(slots) - max_records
        if overflow <= 0:
            return

        payloads = await self._storage.get_many(slots)
        candidates = sorted(
            (float(payload.get("timestamp", 0.0)), slot)
            for slot, payload in payloads.items()
            if payload.get("expirable", True)
        )
        victims = [slot for _, slot in candidates[:overflow]]
        if not victims:
            logger.warning(
                "Record count %d exceeds max_records %d but no record is expirable",
                len(slots),
                max_records,
                extra={"records": len(slots), "max_records": max_records},
            )
            return

        for slot in victims:
            self._memory.pop(slot, None)
        await self._storage.delete_many(victims)

        logger.info(
            "Reclaimed %d expirable record(s) under storage pressure",
            len(victims),
            extra={"reclaimed": len(victims), "max_records": max_records},
        )
