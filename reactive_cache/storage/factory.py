"""
Reactive Cache - Storage Factory

Opens the persistence tier described by a StorageConfig.

Storages are shared per (backend, namespace): every ReactiveCache configured
with the same namespace reads and writes the same records, so the memory
backend behaves like a Redis namespace seen by several clients.

Example:
    from reactive_cache.config import StorageBackend, StorageConfig
    from reactive_cache.storage import close_all_storages, create_storage

    storage = create_storage(StorageConfig(backend=StorageBackend.MEMORY, namespace="mocks"))
    ...
    await close_all_storages()
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from ..config import StorageBackend, StorageConfig, get_config
from ..errors import ConfigurationError
from .backends.memory import MemoryStorageBackend
from .interface import StorageInterface

logger = logging.getLogger(__name__)

# Open storages keyed by (backend, namespace)
_open_storages: dict[tuple[StorageBackend, str], StorageInterface] = {}


def _open_memory(config: StorageConfig) -> StorageInterface:
    return MemoryStorageBackend(namespace=config.namespace)


def _open_redis(config: StorageConfig) -> StorageInterface:
    if not config.redis_url:
        raise ConfigurationError(
            "REDIS_URL must be set when CACHE_BACKEND=redis",
            details={"env": "REDIS_URL", "namespace": config.namespace},
        )

    # Imported here so memory-only deployments never load the redis client
    try:
        from .backends.redis import RedisStorageBackend
    except ImportError as e:
        raise ConfigurationError(
            "CACHE_BACKEND=redis needs the redis client: pip install 'redis>=5.0.0'",
            details={"package": "redis>=5.0.0", "error": str(e)},
        ) from e

    return RedisStorageBackend(
        redis_url=config.redis_url,
        namespace=config.namespace,
        max_connections=config.redis_max_connections,
        socket_timeout=config.redis_socket_timeout,
    )


_OPENERS: dict[StorageBackend, Callable[[StorageConfig], StorageInterface]] = {
    StorageBackend.MEMORY: _open_memory,
    StorageBackend.REDIS: _open_redis,
}


def create_storage(config: StorageConfig | None = None) -> StorageInterface:
    """
    Return the storage for config's backend and namespace, opening it on first use.

    Args:
        config: Storage configuration (uses global config if not provided)

    Raises:
        ConfigurationError: Unknown backend, or redis selected without a URL or client
    """
    if config is None:
        config = get_config().storage

    opener = _OPENERS.get(config.backend)
    if opener is None:
        raise ConfigurationError(
            f"Unknown storage backend: {config.backend}",
            details={"backend": str(config.backend), "supported": [backend.value for backend in StorageBackend]},
        )

    slot = (StorageBackend(config.backend), config.namespace)
    storage = _open_storages.get(slot)
    if storage is None:
        storage = opener(config)
        _open_storages[slot] = storage
        logger.info(
            "Opened %s storage for namespace '%s'",
            slot[0].value,
            config.namespace,
            extra={"backend": slot[0].value, "namespace": config.namespace},
        )

    return storage


async def close_all_storages() -> None:
    """
    Close every open storage and forget it.

    A storage whose close() fails is logged and skipped; the remaining ones
    are still closed.
    """
    opened = list(_open_storages.items())
    _open_storages.clear()

    for (backend, namespace), storage in opened:
        try:
            await storage.close()
        except Exception as e:
            logger.error(
                "Failed to close %s storage for namespace '%s': %s",
                backend.value,
                namespace,
                e,
                extra={"backend": backend.value, "namespace": namespace, "error": str(e)},
                exc_info=True,
            )
