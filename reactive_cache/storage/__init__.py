"""
Reactive Cache - Storage Module

Persistence tier used by the cache engine, with pluggable backends.

- factory.py: opens storages, shared per (backend, namespace)
- interface.py: abstract interface all backends implement
- backends/: memory backend (always available) and redis backend (lazy)

Usage:
    from reactive_cache.storage import create_storage

    storage = create_storage()
    await storage.set("key", {"data": "value"})
    payload = await storage.get("key")
"""

from .factory import close_all_storages, create_storage
from .interface import StorageInterface

__all__ = [
    "create_storage",
    "close_all_storages",
    "StorageInterface",
]
