"""
Reactive Cache - List Providers

Providers whose cached value is a list, exposing ActionsList for positional
writes on top of the plain read / replace / evict surface.
"""

from dataclasses import dataclass
from typing import TypeVar

from .actions import ActionsList
from .models import loader_of
from .provider import Provider, ProviderBuilder, ProviderGroup, ProviderGroupBuilder

T = TypeVar("T")


def _actions_for(handle: ProviderGroup[list[T]], group: str, missing_as_empty: bool) -> ActionsList[T]:
    async def fetch() -> list[T]:
        if missing_as_empty:
            items = await handle.read_nullable(group)
            return [] if items is None else items
        return await handle.read(group)

    async def store(items: list[T]) -> list[T]:
        return await handle.replace(group, loader_of(items))

    return ActionsList(fetch, store)


class ProviderList(Provider[list[T]]):
    """Provider caching a list."""

    def entries(self, missing_as_empty: bool = False) -> ActionsList[T]:
        """
        Write operations on the cached list.

        Args:
            missing_as_empty: Start from an empty list when nothing is cached,
                instead of failing with NotFoundError
        """
        return _actions_for(self._handle, "", missing_as_empty)


class ProviderGroupList(ProviderGroup[list[T]]):
    """ProviderGroup caching one list per group."""

    def entries(self, group: object, missing_as_empty: bool = False) -> ActionsList[T]:
        """
        Write operations on the list cached for group.

        Args:
            group: Group whose list is edited
            missing_as_empty: Start from an empty list when nothing is cached,
                instead of failing with NotFoundError
        """
        return _actions_for(self, str(group), missing_as_empty)


@dataclass(frozen=True)
class ProviderListBuilder(ProviderBuilder[list[T]]):
    """Immutable builder for ProviderList handles."""

    def with_key(self, key: object) -> ProviderList[T]:  # type: ignore[override]
        return ProviderList(self.engine, self.build_config(key))


@dataclass(frozen=True)
class ProviderGroupListBuilder(ProviderGroupBuilder[list[T]]):
    """Immutable builder for ProviderGroupList handles."""

    def with_key(self, key: object) -> ProviderGroupList[T]:  # type: ignore[override]
        return ProviderGroupList(self.engine, self.build_config(key))
