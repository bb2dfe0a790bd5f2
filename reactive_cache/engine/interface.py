"""
Reactive Cache - Engine Interface

Contract between handles and the component that actually stores, expires and
evicts cached values.
"""

from abc import ABC, abstractmethod
from typing import Any, TypeVar

from ..models import CacheConfig, Eviction, Loader, Reply

T = TypeVar("T")


class CacheEngine(ABC):
    """Abstract cache engine consumed by providers."""

    @abstractmethod
    async def fetch(
        self,
        config: CacheConfig,
        loader: Loader[T],
        eviction: Eviction = Eviction(),
        use_expired_data: bool | None = None,
    ) -> Reply[T]:
        """
        Return the value cached for config.key, or load and store a fresh one.

        A live cached value is returned without invoking the loader unless
        eviction.force is set, in which case the loader always runs. A forced
        fetch stores the new value first and then prunes the rest of the
        eviction scope; when the loader fails the whole scope is cleared.

        Args:
            config: Slot configuration (key, lifetime, flags)
            loader: Produces the value on miss, expiry or forced eviction
            eviction: Scope left holding only the loaded value
            use_expired_data: Serve an expired value when the loader fails
                (None = engine default)

        Returns:
            Reply with the value and where it came from

        Raises:
            NotFoundError: Loader produced no value
            ExceptionGroup: Loader failed; members are a NotFoundError and the loader error
            StorageError: Persistence tier failed
        """
        pass

    @abstractmethod
    async def evict_all(self) -> None:
        """Remove every slot managed by the engine."""
        pass

    @abstractmethod
    async def get_stats(self) -> dict[str, Any]:
        """Engine and storage statistics."""
        pass

    @abstractmethod
    async def close(self) -> None:
        """Release engine resources."""
        pass
