"""
Reactive Cache - Configuration Loader

Loads and validates configuration from environment variables and .env files.
Provides a singleton configuration instance for the runtime.
"""

import logging
import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import ValidationError

from ..errors import ConfigurationError
from .schemas import ReactiveCacheSettings

logger = logging.getLogger(__name__)

_config_instance: ReactiveCacheSettings | None = None


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() == "true"


def load_config(
    env_file: str | None = None,
    reload: bool = False,
) -> ReactiveCacheSettings:
    """
    Load configuration from environment variables and .env file.

    Args:
        env_file: Path to .env file (default: .env in the working directory)
        reload: Force reload even if config already loaded

    Returns:
        Validated ReactiveCacheSettings instance

    Raises:
        ConfigurationError: If configuration is invalid
    """
    global _config_instance

    if _config_instance is not None and not reload:
        return _config_instance

    if env_file:
        env_path = Path(env_file)
    else:
        env_path = Path.cwd() / ".env"

    if env_path.exists():
        logger.info(f"Loading environment from {env_path}")
        try:
            load_dotenv(env_path, override=True)
        except Exception as e:
            logger.error(
                f"Failed to load .env file from {env_path}: {e}",
                extra={"path": str(env_path), "error": str(e)},
                exc_info=True,
            )
            raise ConfigurationError(
                f"Failed to load environment file: {e}",
                details={"path": str(env_path), "error": str(e)},
            ) from e
    else:
        logger.debug("No .env file found, using environment variables only")

    # Auto-detect storage backend: Redis if REDIS_URL is set, else memory
    redis_url = os.getenv("REDIS_URL")
    storage_backend = "redis" if redis_url else "memory"
    max_records = os.getenv("CACHE_MAX_RECORDS")

    config_dict = {
        "log_level": os.getenv("LOG_LEVEL", "INFO"),
        "json_logs": _env_flag("LOG_JSON"),
        "storage": {
            "backend": os.getenv("CACHE_BACKEND", storage_backend),
            "namespace": os.getenv("CACHE_NAMESPACE", "reactive_cache"),
            "redis_url": redis_url,
            "redis_max_connections": os.getenv("REDIS_MAX_CONNECTIONS", "10"),
            "redis_socket_timeout": os.getenv("REDIS_SOCKET_TIMEOUT", "5"),
        },
        "use_expired_data_if_loader_not_available": _env_flag("CACHE_USE_EXPIRED_DATA"),
        "max_records": max_records if max_records else None,
    }

    try:
        _config_instance = ReactiveCacheSettings(**config_dict)  # type: ignore[arg-type]
        logger.info(
            f"Configuration loaded successfully (storage backend: {_config_instance.storage.backend})",
            extra={
                "namespace": _config_instance.storage.namespace,
                "storage_backend": _config_instance.storage.backend,
            },
        )
        return _config_instance
    except ValidationError as e:
        logger.error(
            f"Configuration validation failed: {e}",
            extra={"validation_errors": e.errors(), "config_dict_keys": list(config_dict.keys())},
            exc_info=True,
        )
        raise ConfigurationError(
            "Configuration validation failed. Check your environment variables and configuration.",
            details={"validation_errors": e.errors()},
        ) from e


def get_config() -> ReactiveCacheSettings:
    """
    Get the current configuration instance, loading it on first access.

    Returns:
        Current ReactiveCacheSettings instance
    """
    if _config_instance is None:
        return load_config()

    return _config_instance


def reload_config(env_file: str | None = None) -> ReactiveCacheSettings:
    """
    Force reload configuration.

    Args:
        env_file: Optional path to .env file

    Returns:
        Reloaded ReactiveCacheSettings instance
    """
    return load_config(env_file=env_file, reload=True)
