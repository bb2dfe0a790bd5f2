"""
Reactive Cache

Cache access facade: named, optionally grouped and time-limited cache slots
with read / replace / evict operations that fall back to a caller-supplied
loader, plus positional write actions on cached lists.
"""

__version__ = "1.0.0"

from .actions import ActionsList
from .cache import ReactiveCache
from .engine import CacheEngine, CacheProcessor
from .errors import (
    CacheError,
    ConfigurationError,
    ErrorCode,
    NotFoundError,
    ReactiveCacheError,
    StorageConnectionError,
    StorageError,
    ValidationError,
)
from .models import CacheConfig, CacheKey, Eviction, EvictionScope, Loader, Reply, Source, TimeUnit
from .provider import Provider, ProviderBuilder, ProviderGroup, ProviderGroupBuilder
from .provider_list import ProviderGroupList, ProviderGroupListBuilder, ProviderList, ProviderListBuilder

__all__ = [
    # Entry point
    "ReactiveCache",
    # Handles
    "Provider",
    "ProviderGroup",
    "ProviderList",
    "ProviderGroupList",
    "ActionsList",
    # Builders
    "ProviderBuilder",
    "ProviderGroupBuilder",
    "ProviderListBuilder",
    "ProviderGroupListBuilder",
    # Engine
    "CacheEngine",
    "CacheProcessor",
    # Models
    "CacheConfig",
    "CacheKey",
    "Eviction",
    "EvictionScope",
    "Loader",
    "Reply",
    "Source",
    "TimeUnit",
    # Errors
    "ReactiveCacheError",
    "ConfigurationError",
    "ValidationError",
    "CacheError",
    "NotFoundError",
    "StorageError",
    "StorageConnectionError",
    "ErrorCode",
]
