"""
Reactive Cache - Core Error Types

Defines the exception hierarchy for the cache facade.
All exceptions raised by the package inherit from ReactiveCacheError, except
loader exceptions, which are propagated verbatim, and the ExceptionGroup the
engine raises when a loader fails on a cache miss.
"""

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """
    Standard error codes for structured error reporting.

    Used by callers that need to branch on a failure category without
    importing the concrete exception classes.
    """

    # Configuration errors
    INVALID_CONFIGURATION = "INVALID_CONFIGURATION"
    INVALID_INPUT = "INVALID_INPUT"

    # Cache errors
    CACHE_MISS = "CACHE_MISS"
    CACHE_FAILURE = "CACHE_FAILURE"

    # Storage errors
    STORAGE_FAILURE = "STORAGE_FAILURE"
    STORAGE_UNAVAILABLE = "STORAGE_UNAVAILABLE"

    # Loader errors
    LOADER_FAILURE = "LOADER_FAILURE"

    # Internal errors
    INTERNAL_ERROR = "INTERNAL_ERROR"


class ReactiveCacheError(Exception):
    """Base exception for all reactive cache errors."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for logging and error payloads."""
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
        }


class ConfigurationError(ReactiveCacheError):
    """Raised when configuration or builder input is invalid."""

    pass


class ValidationError(ReactiveCacheError):
    """Raised when arguments to a list action are invalid."""

    pass


class CacheError(ReactiveCacheError):
    """Base exception for conditions raised by the cache engine."""

    pass


class NotFoundError(CacheError):
    """Raised when a slot holds no usable value and no loader produced one."""

    def __init__(self, provider_key: str, details: dict[str, Any] | None = None):
        message = (
            "The loader provided did not return any data and there is no data to load from the cache: "
            f"{provider_key}"
        )
        error_details = details or {}
        error_details.setdefault("provider_key", provider_key)
        super().__init__(message, error_details)
        self.provider_key = provider_key


class StorageError(CacheError):
    """Raised when the persistence tier fails to read, write or delete."""

    pass


class StorageConnectionError(StorageError):
    """Raised when the storage backend connection fails."""

    def __init__(self, backend: str, details: dict[str, Any] | None = None):
        message = f"Failed to connect to storage backend: {backend}"
        super().__init__(message, details)


def extract_error_code(error: BaseException) -> ErrorCode:
    """
    Extract appropriate ErrorCode from an exception.

    Args:
        error: Exception to categorize

    Returns:
        Appropriate ErrorCode for the exception
    """
    if isinstance(error, NotFoundError):
        return ErrorCode.CACHE_MISS

    if isinstance(error, StorageConnectionError):
        return ErrorCode.STORAGE_UNAVAILABLE

    if isinstance(error, StorageError):
        return ErrorCode.STORAGE_FAILURE

    if isinstance(error, CacheError):
        return ErrorCode.CACHE_FAILURE

    if isinstance(error, ValidationError):
        return ErrorCode.INVALID_INPUT

    if isinstance(error, ConfigurationError):
        return ErrorCode.INVALID_CONFIGURATION

    if isinstance(error, ReactiveCacheError):
        return ErrorCode.INTERNAL_ERROR

    return ErrorCode.LOADER_FAILURE
