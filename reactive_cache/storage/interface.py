"""
Reactive Cache - Storage Interface

Defines the abstract interface that all persistence backends must implement.
Backends store plain record payloads (dicts) keyed by string; expiry and
record semantics belong to the engine, not to the backend.
"""

from abc import ABC, abstractmethod
from typing import Any


class StorageInterface(ABC):
    """
    Abstract base class for persistence backends.

    Backends raise StorageError on failure rather than reporting a miss, so
    the engine can tell "nothing stored" from "storage broken".
    """

    @abstractmethod
    async def get(self, key: str) -> Any | None:
        """
        Retrieve a payload.

        Args:
            key: Storage key

        Returns:
            Stored payload if found, None otherwise
        """
        pass

    @abstractmethod
    async def set(self, key: str, value: Any) -> None:
        """
        Store a payload, replacing any previous one.

        Args:
            key: Storage key
            value: Payload to store (must be serializable by the backend)
        """
        pass

    @abstractmethod
    async def delete(self, key: str) -> bool:
        """
        Delete a key.

        Returns:
            True if key was deleted, False if key didn't exist
        """
        pass

    @abstractmethod
    async def delete_prefix(self, prefix: str) -> int:
        """
        Delete every key starting with prefix.

        Returns:
            Number of keys deleted
        """
        pass

    @abstractmethod
    async def keys(self, prefix: str = "") -> list[str]:
        """
        List stored keys (without namespace), optionally filtered by prefix.
        """
        pass

    @abstractmethod
    async def clear(self) -> None:
        """Delete every key in the backend namespace."""
        pass

    @abstractmethod
    async def get_stats(self) -> dict[str, Any]:
        """
        Get backend statistics.

        Returns:
            Dictionary with statistics (hits, misses, size, etc.)
        """
        pass

    @abstractmethod
    async def close(self) -> None:
        """
        Close the backend and release resources.

        Should be called during graceful shutdown.
        """
        pass

    async def get_many(self, keys: list[str]) -> dict[str, Any]:
        """
        Retrieve multiple payloads.

        Default implementation calls get() for each key.
        Backends can override for better performance.

        Returns:
            Dictionary mapping keys to payloads (missing keys are omitted)
        """
        result = {}
        for key in keys:
            value = await self.get(key)
            if value is not None:
                result[key] = value
        return result

    async def delete_many(self, keys: list[str]) -> int:
        """
        Delete multiple keys.

        Default implementation calls delete() for each key.

        Returns:
            Number of keys deleted
        """
        count = 0
        for key in keys:
            if await self.delete(key):
                count += 1
        return count
