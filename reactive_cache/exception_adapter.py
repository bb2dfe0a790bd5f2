"""
Reactive Cache - Exception Adapter

Reclassifies failures coming out of the engine's fetch channel.

Handles reuse the fetch-with-loader path for pure reads and for evictions, so
the engine reports "nothing cached" the same way it reports a loader failure.
The helpers here tell the two apart:

- complete_on_loader_error(): after an eviction, a NotFoundError (alone or as a
  member of an ExceptionGroup) means the eviction ran and the placeholder loader
  failed as intended. Anything else is re-raised unchanged.
- strip_placeholder_loader_error(): after a read that used placeholder_loader(),
  removes the PlaceholderLoaderError sentinel from an ExceptionGroup so the
  caller sees NotFoundError (or the genuine remaining failures) instead.

None of these functions invent errors; they only filter what they are given.
"""

from typing import NoReturn

from .errors import NotFoundError


class PlaceholderLoaderError(Exception):
    """Sentinel raised by placeholder_loader(); never escapes a handle."""

    pass


class EvictionLoaderError(Exception):
    """Raised by eviction_loader() so a forced fetch always ends in failure."""

    pass


async def placeholder_loader() -> NoReturn:
    """Loader used by reads: it can never produce a value."""
    raise PlaceholderLoaderError()


async def eviction_loader() -> NoReturn:
    """Loader used by evictions: it can never produce a value."""
    raise EvictionLoaderError()


def complete_on_loader_error(error: Exception) -> None:
    """
    Treat a cache "no data" error as a completed eviction.

    A single error matches by type; an ExceptionGroup matches when any
    member is a NotFoundError. Non-matching errors are re-raised as is.

    Args:
        error: Error raised by the engine during a forced fetch

    Raises:
        The original error when it does not signal "nothing left to load"
    """
    if isinstance(error, ExceptionGroup):
        if any(isinstance(member, NotFoundError) for member in error.exceptions):
            return None

    if isinstance(error, NotFoundError):
        return None

    raise error


def strip_placeholder_loader_error(error: Exception) -> NoReturn:
    """
    Re-raise a read failure without the placeholder sentinel.

    A plain error is re-raised untouched. For an ExceptionGroup, every
    PlaceholderLoaderError member is dropped; a single survivor is raised
    on its own, several survivors are raised as a group in their original
    order.

    Args:
        error: Error raised by the engine during a placeholder read

    Raises:
        The curated error (always)
    """
    if not isinstance(error, ExceptionGroup):
        raise error

    curated = [member for member in error.exceptions if not isinstance(member, PlaceholderLoaderError)]

    if len(curated) == 1:
        raise curated[0]

    if not curated:
        # A sentinel is always grouped with the engine's NotFoundError
        raise AssertionError("ExceptionGroup contained only placeholder loader errors") from error

    raise error.derive(curated)
