"""
Reactive Cache - Memory Storage Backend

In-process persistence tier. Payloads live for the lifetime of the process;
suitable for tests and single-process deployments.
"""

import asyncio
import logging
from typing import Any

from ..interface import StorageInterface

logger = logging.getLogger(__name__)


class MemoryStorageBackend(StorageInterface):
    """
    Dictionary-backed storage guarded by an asyncio lock.

    Payloads are held by reference; the engine stores fresh record dicts
    on every write.
    """

    def __init__(self, namespace: str = "reactive_cache"):
        """
        Initialize memory storage backend.

        Args:
            namespace: Storage key namespace/prefix
        """
        self.namespace = namespace

        self._store: dict[str, Any] = {}

        # Stats
        self._hits = 0
        self._misses = 0
        self._sets = 0
        self._deletes = 0

        self._lock = asyncio.Lock()

    def _make_key(self, key: str) -> str:
        """Create namespaced storage key."""
        return f"{self.namespace}:{key}"

    def _strip_key(self, ns_key: str) -> str:
        return ns_key[len(self.namespace) + 1 :]

    async def get(self, key: str) -> Any | None:
        """Retrieve payload from storage."""
        async with self._lock:
            value = self._store.get(self._make_key(key))
            if value is None:
                self._misses += 1
                return None

            self._hits += 1
            return value

    async def set(self, key: str, value: Any) -> None:
        """Store payload."""
        async with self._lock:
            self._store[self._make_key(key)] = value
            self._sets += 1

    async def delete(self, key: str) -> bool:
        """Delete key from storage."""
        async with self._lock:
            ns_key = self._make_key(key)
            if ns_key in self._store:
                del self._store[ns_key]
                self._deletes += 1
                return True

            return False

    async def delete_prefix(self, prefix: str) -> int:
        """Delete every key starting with prefix."""
        async with self._lock:
            ns_prefix = self._make_key(prefix)
            doomed = [ns_key for ns_key in self._store if ns_key.startswith(ns_prefix)]
            for ns_key in doomed:
                del self._store[ns_key]

            self._deletes += len(doomed)
            return len(doomed)

    async def keys(self, prefix: str = "") -> list[str]:
        """List stored keys, optionally filtered by prefix."""
        async with self._lock:
            ns_prefix = self._make_key(prefix)
            return [self._strip_key(ns_key) for ns_key in self._store if ns_key.startswith(ns_prefix)]

    async def clear(self) -> None:
        """Clear all entries from storage."""
        async with self._lock:
            size = len(self._store)
            self._store.clear()
            logger.info(f"Cleared {size} entries from memory storage namespace '{self.namespace}'")

    async def get_stats(self) -> dict[str, Any]:
        """Get storage statistics."""
        async with self._lock:
            total_requests = self._hits + self._misses
            hit_rate = (self._hits / total_requests * 100) if total_requests > 0 else 0.0

            return {
                "backend": "memory",
                "size": len(self._store),
                "hits": self._hits,
                "misses": self._misses,
                "hit_rate": round(hit_rate, 2),
                "sets": self._sets,
                "deletes": self._deletes,
                "namespace": self.namespace,
            }

    async def close(self) -> None:
        """Close storage and release resources."""
        # Nothing to release - data persists in-process
        logger.debug(f"Memory storage backend closed for namespace '{self.namespace}'")

    async def get_many(self, keys: list[str]) -> dict[str, Any]:
        """Retrieve multiple payloads under a single lock acquisition."""
        if not keys:
            return {}

        async with self._lock:
            result = {}
            for key in keys:
                value = self._store.get(self._make_key(key))
                if value is None:
                    self._misses += 1
                    continue

                self._hits += 1
                result[key] = value

            return result
