"""
Reactive Cache - List Actions

Positional write operations over a cached list.

Every action is one read-mutate-store cycle: fetch a snapshot of the cached
list, compute a new list from a copy of it, then store that list through the
owning provider's replace(). A fetch failure aborts before anything is stored;
a store failure leaves the cached list as it was.

Positions are always compared against the count captured when the scan
starts, never against the length of the list being edited.

Concurrent actions on the same key are not serialized: each cycle stores its
own result and the last store wins. Callers that issue overlapping writes to
one key must serialize them (e.g. one asyncio.Lock per key).
"""

import functools
import logging
from collections.abc import Awaitable, Callable, Iterable
from typing import Generic, NamedTuple, TypeVar

from .errors import ValidationError

logger = logging.getLogger(__name__)

T = TypeVar("T")

# (position, count) -> bool
PositionPredicate = Callable[[int, int], bool]
# (element) -> bool
ElementPredicate = Callable[[T], bool]
# (position, count, element) -> bool
IndexedPredicate = Callable[[int, int, T], bool]
# (count) -> bool, evaluated against the count at scan start
CountGate = Callable[[int], bool]
# element -> replacement element
Replace = Callable[[T], T]


def _always(count: int) -> bool:
    return True


def _require_non_negative(n: int) -> None:
    if n < 0:
        raise ValidationError("n must be a non-negative integer", details={"n": n})


def insert_at(items: list[T], predicate: PositionPredicate, elements: Iterable[T]) -> list[T]:
    """Splice elements at the first position in 0..count (inclusive) accepted by predicate."""
    count = len(items)
    for position in range(count + 1):
        if predicate(position, count):
            items[position:position] = list(elements)
            break
    return items


def remove_first_match(items: list[T], predicate: IndexedPredicate[T]) -> list[T]:
    """Remove the first element accepted by predicate."""
    count = len(items)
    for position in range(count):
        if predicate(position, count, items[position]):
            del items[position]
            break
    return items


def remove_marked(items: list[T], marked: Iterable[int]) -> list[T]:
    """Drop the marked positions, keeping survivors in order."""
    doomed = set(marked)
    return [element for position, element in enumerate(items) if position not in doomed]


def mark_matches(items: list[T], predicate: IndexedPredicate[T]) -> list[int]:
    """Positions accepted by predicate, scanning every position once."""
    count = len(items)
    return [position for position, element in enumerate(items) if predicate(position, count, element)]


class WindowScan(NamedTuple):
    """Accumulator for the trailing-window scan used by evict_last_n."""

    entered: bool = False
    marked: tuple[int, ...] = ()


def mark_trailing_window(count: int, n: int, count_gate: CountGate) -> tuple[int, ...]:
    """
    Positions inside the trailing window of width n.

    The window is entered at the position where count - position equals
    min(n, count); from there on every position is marked as long as
    count_gate(count) holds.
    """
    width = min(n, count)

    def step(state: WindowScan, position: int) -> WindowScan:
        entered = state.entered or (width > 0 and count - position == width)
        if entered and count - position <= width and count_gate(count):
            return WindowScan(entered=True, marked=state.marked + (position,))
        return WindowScan(entered=entered, marked=state.marked)

    return functools.reduce(step, range(count), WindowScan()).marked


def update_matches(
    items: list[T],
    predicate: IndexedPredicate[T],
    replace: Replace[T],
    first_only: bool,
) -> list[T]:
    """Substitute replace(element) at matching positions (only the first one if first_only)."""
    count = len(items)
    for position in range(count):
        if predicate(position, count, items[position]):
            items[position] = replace(items[position])
            if first_only:
                break
    return items


class ActionsList(Generic[T]):
    """
    Write operations on a cached list.

    Obtained from ProviderList.entries() or ProviderGroupList.entries(group).
    """

    def __init__(
        self,
        fetch: Callable[[], Awaitable[list[T]]],
        store: Callable[[list[T]], Awaitable[list[T]]],
    ):
        """
        Args:
            fetch: Reads the current list from the cache
            store: Persists a list, replacing the cached one
        """
        self._fetch = fetch
        self._store = store

    async def _commit(self, mutate: Callable[[list[T]], list[T]]) -> None:
        snapshot = await self._fetch()
        items = mutate(list(snapshot))
        await self._store(items)
        logger.debug("List action stored %d element(s), was %d", len(items), len(snapshot))

    # ------------ Add ------------

    async def add(self, predicate: PositionPredicate, element: T) -> None:
        """
        Insert element at the first position, from 0 to count inclusive, for
        which predicate(position, count) is true. Nothing is inserted when no
        position matches.
        """
        await self.add_all(predicate, [element])

    async def add_first(self, element: T) -> None:
        await self.add_all(lambda position, count: position == 0, [element])

    async def add_last(self, element: T) -> None:
        await self.add_all(lambda position, count: position == count, [element])

    async def add_all_first(self, elements: list[T]) -> None:
        await self.add_all(lambda position, count: position == 0, elements)

    async def add_all_last(self, elements: list[T]) -> None:
        await self.add_all(lambda position, count: position == count, elements)

    async def add_all(self, predicate: PositionPredicate, elements: list[T]) -> None:
        """Same as add() but inserts elements as one contiguous block."""
        await self._commit(lambda items: insert_at(items, predicate, elements))

    # ------------ Evict ------------

    async def evict(self, predicate: IndexedPredicate[T]) -> None:
        """Remove the first element for which predicate(position, count, element) is true."""
        await self._commit(lambda items: remove_first_match(items, predicate))

    async def evict_element(self, predicate: ElementPredicate[T]) -> None:
        """Remove the first element for which predicate(element) is true."""
        await self.evict(lambda position, count, element: predicate(element))

    async def evict_first(self, count_gate: CountGate | None = None) -> None:
        """Remove the first element, if count_gate(count) allows it."""
        gate = count_gate or _always
        await self.evict(lambda position, count, element: position == 0 and gate(count))

    async def evict_last(self, count_gate: CountGate | None = None) -> None:
        """Remove the last element, if count_gate(count) allows it."""
        gate = count_gate or _always
        await self.evict(lambda position, count, element: position == count - 1 and gate(count))

    async def evict_first_n(self, n: int, count_gate: CountGate | None = None) -> None:
        """Remove the first min(n, count) elements, if count_gate(count) allows it."""
        _require_non_negative(n)
        gate = count_gate or _always
        await self.evict_iterable(lambda position, count, element: position < n and gate(count))

    async def evict_last_n(self, n: int, count_gate: CountGate | None = None) -> None:
        """Remove the last min(n, count) elements, if count_gate(count) allows it."""
        _require_non_negative(n)
        gate = count_gate or _always
        await self._commit(lambda items: remove_marked(items, mark_trailing_window(len(items), n, gate)))

    async def evict_all_keeping_first_n(self, n: int) -> None:
        """Keep the first n elements and remove the rest."""
        _require_non_negative(n)
        await self.evict_iterable(lambda position, count, element: position >= n)

    async def evict_all_keeping_last_n(self, n: int) -> None:
        """Keep the last n elements and remove the rest."""
        _require_non_negative(n)
        await self.evict_iterable(lambda position, count, element: position < count - n)

    async def evict_iterable(self, predicate: IndexedPredicate[T]) -> None:
        """Remove every element for which predicate(position, count, element) is true."""
        await self._commit(lambda items: remove_marked(items, mark_matches(items, predicate)))

    # ------------ Update ------------

    async def update(self, predicate: IndexedPredicate[T], replace: Replace[T]) -> None:
        """Replace the first matching element with replace(element)."""
        await self._commit(lambda items: update_matches(items, predicate, replace, first_only=True))

    async def update_element(self, predicate: ElementPredicate[T], replace: Replace[T]) -> None:
        await self.update(lambda position, count, element: predicate(element), replace)

    async def update_iterable(self, predicate: IndexedPredicate[T], replace: Replace[T]) -> None:
        """Replace every matching element with replace(element)."""
        await self._commit(lambda items: update_matches(items, predicate, replace, first_only=False))

    async def update_iterable_element(self, predicate: ElementPredicate[T], replace: Replace[T]) -> None:
        await self.update_iterable(lambda position, count, element: predicate(element), replace)
