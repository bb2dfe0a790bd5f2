"""
Reactive Cache - Configuration Schemas

Defines typed configuration models using Pydantic for validation and type safety.
Engine-wide settings live here; per-handle settings are built by the provider
builders (see models.CacheConfig).
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class StorageBackend(str, Enum):
    """Supported persistence backends."""

    MEMORY = "memory"
    REDIS = "redis"  # Requires the redis client


class LogLevel(str, Enum):
    """Log levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class StorageConfig(BaseModel):
    """Persistence tier configuration."""

    backend: StorageBackend = Field(default=StorageBackend.MEMORY, description="Storage backend to use")
    namespace: str = Field(default="reactive_cache", description="Storage key namespace/prefix")

    # Redis-specific settings (only used when backend=redis)
    redis_url: str | None = Field(default=None, description="Redis connection URL")
    redis_max_connections: int = Field(default=10, ge=1, description="Redis connection pool size")
    redis_socket_timeout: int = Field(default=5, ge=1, description="Redis socket timeout in seconds")

    @field_validator("redis_url")
    @classmethod
    def validate_redis_url(cls, v: str | None, info: Any) -> str | None:
        """Ensure redis_url is provided when backend is redis."""
        backend = info.data.get("backend")
        if backend == StorageBackend.REDIS and not v:
            raise ValueError("redis_url is required when storage backend is 'redis'")
        return v


class ReactiveCacheSettings(BaseModel):
    """Root configuration for a ReactiveCache instance."""

    log_level: LogLevel = Field(default=LogLevel.INFO, description="Logging level")
    json_logs: bool = Field(default=False, description="Install the structured JSON log handler")

    storage: StorageConfig = Field(default_factory=StorageConfig)

    use_expired_data_if_loader_not_available: bool = Field(
        default=False,
        description="Serve expired records instead of failing when the loader fails",
    )
    max_records: int | None = Field(
        default=None,
        ge=1,
        description="Persisted record count above which expirable records are reclaimed (None = unbounded)",
    )

    model_config = ConfigDict(use_enum_values=True, validate_assignment=True)
