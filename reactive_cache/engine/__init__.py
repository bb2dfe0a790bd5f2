"""
Reactive Cache - Engine Module

- interface.py: CacheEngine contract consumed by providers
- processor.py: two layer reference engine (memory tier over a storage backend)
"""

from .interface import CacheEngine
from .processor import CacheProcessor
from .record import Record

__all__ = [
    "CacheEngine",
    "CacheProcessor",
    "Record",
]
