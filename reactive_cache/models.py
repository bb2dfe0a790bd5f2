"""
Reactive Cache - Data Models

Value types shared by handles and the engine: slot keys, per-handle cache
configuration, eviction scopes and the Reply wrapper.
"""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeAlias, TypeVar

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")

# Zero-argument coroutine factory producing the value to cache
Loader: TypeAlias = Callable[[], Awaitable[T]]


class TimeUnit(str, Enum):
    """Units accepted when configuring a handle lifetime."""

    MILLISECONDS = "milliseconds"
    SECONDS = "seconds"
    MINUTES = "minutes"
    HOURS = "hours"
    DAYS = "days"

    def to_seconds(self, duration: float) -> float:
        """Convert a duration expressed in this unit to seconds."""
        return duration * _SECONDS_PER_UNIT[self]


_SECONDS_PER_UNIT: dict[TimeUnit, float] = {
    TimeUnit.MILLISECONDS: 0.001,
    TimeUnit.SECONDS: 1.0,
    TimeUnit.MINUTES: 60.0,
    TimeUnit.HOURS: 3600.0,
    TimeUnit.DAYS: 86400.0,
}


class Source(str, Enum):
    """Where a value was finally obtained from."""

    MEMORY = "memory"
    PERSISTENCE = "persistence"
    CLOUD = "cloud"  # freshly produced by the loader


class CacheKey(BaseModel):
    """Identifies a cache slot. Ungrouped handles use the empty group."""

    model_config = ConfigDict(frozen=True)

    primary: str = Field(min_length=1, description="Provider key")
    group: str = Field(default="", description="Dynamic group within the provider key")


class CacheConfig(BaseModel):
    """Immutable per-handle configuration."""

    model_config = ConfigDict(frozen=True)

    key: CacheKey
    lifetime_seconds: float | None = Field(
        default=None,
        ge=0,
        description="Seconds before a stored value expires (None = never expires passively)",
    )
    expirable: bool = Field(default=True, description="Engine may reclaim the value under storage pressure")
    encrypted: bool = Field(default=False, description="Value is flagged as encrypted")

    def for_group(self, group: str) -> "CacheConfig":
        """Return the same configuration addressing another group of the key."""
        return self.model_copy(update={"key": CacheKey(primary=self.key.primary, group=group)})


class EvictionScope(str, Enum):
    """Scope targeted by a forced eviction."""

    KEY = "key"  # every group under the primary key
    GROUP = "group"  # the single (key, group) slot
    ALL = "all"  # every slot managed by the engine


@dataclass(frozen=True)
class Eviction:
    """Eviction request attached to a fetch. Nothing is evicted unless force is set."""

    scope: EvictionScope = EvictionScope.KEY
    force: bool = False


@dataclass(frozen=True)
class Reply(Generic[T]):
    """
    Value wrapper carrying provenance metadata.

    Purely informational: handles never branch on it.
    """

    data: T
    source: Source
    encrypted: bool = False


def loader_of(value: T) -> Loader[T]:
    """Loader that resolves to an already computed value."""

    async def loader() -> T:
        return value

    return loader
