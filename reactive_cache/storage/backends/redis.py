"""
Reactive Cache - Redis Storage Backend

Asynchronous Redis persistence tier with:
- JSON serialization for payloads
- Namespace prefixing for safe multi-tenant usage
- SCAN-based prefix deletion and listing
- Batch reads via MGET and chunked DEL

Requires: redis>=5.0 with asyncio support

Example:
    storage = RedisStorageBackend(redis_url="redis://localhost:6379", namespace="reactive_cache")
    await storage.set("mocks$g$g$g$", {"data": [1, 2, 3]})
    payload = await storage.get("mocks$g$g$g$")
"""

from __future__ import annotations

import json
import logging
import re
from collections.abc import AsyncIterator
from typing import Any

from ...errors import StorageConnectionError, StorageError
from ..interface import StorageInterface

logger = logging.getLogger(__name__)

try:
    # redis-py asyncio client (v4+)
    from redis.asyncio import Redis
    from redis.exceptions import ConnectionError as RedisConnectionError
    from redis.exceptions import RedisError
except ImportError as e:  # pragma: no cover
    raise ImportError(
        "Redis async client is required but not installed. "
        "Install with: pip install 'redis>=5.0.0' or add 'redis' to your dependencies."
    ) from e


class RedisStorageBackend(StorageInterface):
    """
    Redis storage backend with JSON serialization.

    Notes:
    - Keys are prefixed with the configured namespace to avoid collisions.
    - Payloads are stored as UTF-8 JSON strings, so cached data must be JSON-serializable.
    - No Redis TTL is applied; record lifetime is enforced by the engine.
    """

    _SCAN_BATCH = 1000

    def __init__(
        self,
        redis_url: str,
        namespace: str = "reactive_cache",
        max_connections: int = 10,
        socket_timeout: int = 5,
    ) -> None:
        """
        Initialize Redis storage backend.

        Args:
            redis_url: Connection URL, e.g., redis://localhost:6379/0 or rediss:// for TLS
            namespace: Prefix for all keys
            max_connections: Connection pool size
            socket_timeout: Socket timeout in seconds
        """
        if not redis_url:
            raise ValueError("redis_url is required")

        self.namespace = namespace.strip() or "reactive_cache"
        self._hits = 0
        self._misses = 0
        self._sets = 0
        self._deletes = 0

        # Lazy connection; connects on first command
        self._client = Redis.from_url(  # type: ignore[call-overload]
            url=redis_url,
            decode_responses=True,
            max_connections=max_connections,
            socket_timeout=socket_timeout,
        )

    # ------------ Helpers ------------

    def _make_key(self, key: str) -> str:
        """Create namespaced key."""
        return f"{self.namespace}:{key}"

    def _strip_key(self, ns_key: str) -> str:
        return ns_key[len(self.namespace) + 1 :]

    @staticmethod
    def _to_json(value: Any) -> str:
        """Serialize payload to JSON string."""
        return json.dumps(value, ensure_ascii=False, separators=(",", ":"))

    @staticmethod
    def _from_json(data: str | bytes | None) -> Any | None:
        """Deserialize JSON string to Python object. Returns None if data is None."""
        if data is None:
            return None
        if isinstance(data, bytes):
            data = data.decode("utf-8")
        return json.loads(data)

    def _failure(self, operation: str, error: Exception, **extra: Any) -> StorageError:
        """Log a Redis failure and build the StorageError to raise."""
        details = {"operation": operation, "namespace": self.namespace, "error": str(error), **extra}
        logger.error(f"Redis {operation} failed: {error}", extra=details, exc_info=True)
        if isinstance(error, RedisConnectionError):
            return StorageConnectionError("redis", details)
        return StorageError(f"Redis {operation} failed: {error}", details)

    async def _scan(self, prefix: str) -> AsyncIterator[str]:
        # Glob metacharacters in user keys must match literally
        pattern = re.sub(r"([*?\[\]\\])", r"\\\1", self._make_key(prefix))
        async for ns_key in self._client.scan_iter(match=f"{pattern}*", count=self._SCAN_BATCH):
            yield ns_key

    # ------------ Core Interface ------------

    async def get(self, key: str) -> Any | None:
        """Retrieve a payload by key."""
        try:
            data = await self._client.get(self._make_key(key))
            if data is None:
                self._misses += 1
                return None

            self._hits += 1
            return self._from_json(data)
        except (RedisError, ValueError) as e:
            raise self._failure("get", e, key=key) from e

    async def set(self, key: str, value: Any) -> None:
        """Store a payload."""
        try:
            payload = self._to_json(value)
        except (TypeError, ValueError) as e:
            logger.error(
                f"Failed to serialize value for key '{key}': {e}",
                extra={"key": key, "value_type": type(value).__name__, "error": str(e)},
                exc_info=True,
            )
            raise StorageError(
                f"Value for key '{key}' is not JSON-serializable: {e}",
                details={"key": key, "value_type": type(value).__name__},
            ) from e

        try:
            await self._client.set(name=self._make_key(key), value=payload)
            self._sets += 1
        except RedisError as e:
            raise self._failure("set", e, key=key) from e

    async def delete(self, key: str) -> bool:
        """Delete a single key."""
        try:
            deleted = await self._client.delete(self._make_key(key))
            if deleted:
                self._deletes += 1
            return bool(deleted)
        except RedisError as e:
            raise self._failure("delete", e, key=key) from e

    async def delete_prefix(self, prefix: str) -> int:
        """Delete every key starting with prefix (SCAN + DEL in batches)."""
        try:
            batch: list[str] = []
            total_deleted = 0
            async for ns_key in self._scan(prefix):
                batch.append(ns_key)
                if len(batch) >= self._SCAN_BATCH:
                    total_deleted += int(await self._client.delete(*batch))
                    batch = []

            if batch:
                total_deleted += int(await self._client.delete(*batch))

            self._deletes += total_deleted
            return total_deleted
        except RedisError as e:
            raise self._failure("delete_prefix", e, prefix=prefix) from e

    async def keys(self, prefix: str = "") -> list[str]:
        """List stored keys, optionally filtered by prefix."""
        try:
            return [self._strip_key(ns_key) async for ns_key in self._scan(prefix)]
        except RedisError as e:
            raise self._failure("keys", e, prefix=prefix) from e

    async def clear(self) -> None:
        """Clear all entries under the namespace."""
        total_deleted = await self.delete_prefix("")
        logger.info(f"Cleared {total_deleted} keys from namespace '{self.namespace}'")

    async def get_stats(self) -> dict[str, Any]:
        """Return storage statistics and basic Redis info."""
        stats: dict[str, Any] = {
            "backend": "redis",
            "namespace": self.namespace,
            "hits": self._hits,
            "misses": self._misses,
            "hit_rate": 0.0,
            "sets": self._sets,
            "deletes": self._deletes,
            "connected": False,
        }

        total_requests = self._hits + self._misses
        stats["hit_rate"] = round((self._hits / total_requests) * 100, 2) if total_requests else 0.0

        try:
            stats["connected"] = bool(await self._client.ping())
            info = await self._client.info(section="server")
            stats["redis_version"] = info.get("redis_version")
            stats["redis_mode"] = info.get("redis_mode")
        except RedisError as e:
            # INFO may be restricted; keep minimal stats
            logger.warning(f"Failed to get Redis INFO (restricted or unavailable): {e}", extra={"error": str(e)})

        return stats

    async def close(self) -> None:
        """Close the Redis client and release resources."""
        try:
            await self._client.aclose()
            logger.info(f"Closed Redis storage backend for namespace '{self.namespace}'")
        except RedisError as e:
            logger.error(
                f"Error closing Redis client: {e}", extra={"namespace": self.namespace, "error": str(e)}, exc_info=True
            )
        finally:
            try:
                await self._client.connection_pool.disconnect()
            except RedisError as e:
                logger.warning(f"Error disconnecting Redis connection pool: {e}", extra={"error": str(e)})

    # ------------ Batch operations ------------

    async def get_many(self, keys: list[str]) -> dict[str, Any]:
        """
        Retrieve multiple payloads in one round-trip using MGET.
        Missing keys are omitted from the result.
        """
        if not keys:
            return {}

        try:
            values = await self._client.mget([self._make_key(k) for k in keys])

            result: dict[str, Any] = {}
            for k, raw in zip(keys, values, strict=True):
                if raw is None:
                    self._misses += 1
                    continue
                self._hits += 1
                result[k] = self._from_json(raw)

            return result
        except (RedisError, ValueError) as e:
            raise self._failure("get_many", e, key_count=len(keys)) from e

    async def delete_many(self, keys: list[str]) -> int:
        """Delete multiple keys with chunked DEL calls."""
        if not keys:
            return 0

        try:
            ns_keys = [self._make_key(k) for k in keys]
            deleted_total = 0
            for i in range(0, len(ns_keys), self._SCAN_BATCH):
                deleted_total += int(await self._client.delete(*ns_keys[i : i + self._SCAN_BATCH]))

            self._deletes += deleted_total
            return deleted_total
        except RedisError as e:
            raise self._failure("delete_many", e, key_count=len(keys)) from e
