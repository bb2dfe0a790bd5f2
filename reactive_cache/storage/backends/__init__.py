"""
Reactive Cache - Storage Backends

Exports available storage backend implementations.

Redis backend is lazy-loaded via factory.py to avoid import overhead.
"""

from .memory import MemoryStorageBackend

__all__ = [
    "MemoryStorageBackend",
]
