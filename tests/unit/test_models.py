"""
Reactive Cache - Model and Builder Tests

Tests value types and immutable provider builders.
"""

import pydantic
import pytest

from reactive_cache import (
    CacheKey,
    ConfigurationError,
    Provider,
    ProviderGroup,
    ProviderGroupList,
    ProviderList,
    ReactiveCache,
    TimeUnit,
)
from reactive_cache.models import CacheConfig, loader_of


class TestTimeUnit:
    @pytest.mark.parametrize(
        ("unit", "duration", "seconds"),
        [
            (TimeUnit.MILLISECONDS, 1500, 1.5),
            (TimeUnit.SECONDS, 3, 3.0),
            (TimeUnit.MINUTES, 2, 120.0),
            (TimeUnit.HOURS, 1, 3600.0),
            (TimeUnit.DAYS, 1, 86400.0),
        ],
    )
    def test_to_seconds(self, unit: TimeUnit, duration: float, seconds: float) -> None:
        assert unit.to_seconds(duration) == pytest.approx(seconds)


class TestCacheConfig:
    def test_is_immutable(self) -> None:
        config = CacheConfig(key=CacheKey(primary="mocks"))
        with pytest.raises(pydantic.ValidationError):
            config.expirable = False  # type: ignore[misc]

    def test_for_group_keeps_settings(self) -> None:
        config = CacheConfig(key=CacheKey(primary="mocks"), lifetime_seconds=60, encrypted=True)

        grouped = config.for_group("page_1")

        assert grouped.key == CacheKey(primary="mocks", group="page_1")
        assert grouped.lifetime_seconds == 60
        assert grouped.encrypted is True
        assert config.key.group == ""

    def test_equal_keys_address_same_slot(self) -> None:
        assert CacheKey(primary="mocks", group="a") == CacheKey(primary="mocks", group="a")
        assert CacheKey(primary="mocks") != CacheKey(primary="mocks", group="a")


class TestBuilders:
    def test_defaults(self, cache: ReactiveCache) -> None:
        provider = cache.provider().with_key("mocks")

        assert isinstance(provider, Provider)
        assert provider.config.key == CacheKey(primary="mocks")
        assert provider.config.lifetime_seconds is None
        assert provider.config.expirable is True
        assert provider.config.encrypted is False

    def test_with_calls_return_new_builders(self, cache: ReactiveCache) -> None:
        base = cache.provider()
        configured = base.with_encryption(True).with_expirable(False).with_lifetime(2, TimeUnit.MINUTES)

        assert configured is not base
        assert base.encrypted is False
        assert base.lifetime is None

        config = configured.with_key("mocks").config
        assert config.encrypted is True
        assert config.expirable is False
        assert config.lifetime_seconds == 120.0

    def test_builder_kinds(self, cache: ReactiveCache) -> None:
        assert isinstance(cache.provider_group().with_key("a"), ProviderGroup)
        assert isinstance(cache.provider_list().with_key("b"), ProviderList)
        assert isinstance(cache.provider_group_list().with_key("c"), ProviderGroupList)

    def test_key_is_stringified(self, cache: ReactiveCache) -> None:
        assert cache.provider().with_key(42).config.key.primary == "42"

    def test_empty_key_rejected(self, cache: ReactiveCache) -> None:
        with pytest.raises(ConfigurationError):
            cache.provider().with_key("")

    def test_negative_lifetime_rejected(self, cache: ReactiveCache) -> None:
        with pytest.raises(ConfigurationError):
            cache.provider().with_lifetime(-1, TimeUnit.SECONDS)

    def test_lifetime_unit_by_name(self, cache: ReactiveCache) -> None:
        config = cache.provider().with_lifetime(500, "milliseconds").with_key("mocks").config
        assert config.lifetime_seconds == pytest.approx(0.5)

    def test_unknown_lifetime_unit_rejected(self, cache: ReactiveCache) -> None:
        with pytest.raises(ConfigurationError) as exc_info:
            cache.provider().with_lifetime(5, "fortnights")

        assert exc_info.value.details["unit"] == "fortnights"
        assert "seconds" in exc_info.value.details["supported"]


async def test_loader_of_resolves_value() -> None:
    loader = loader_of([1, 2])
    assert await loader() == [1, 2]
