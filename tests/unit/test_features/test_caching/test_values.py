"""Tests for cache values and the strategy registry."""

from __future__ import annotations

from dataclasses import dataclass

import pytest

from graph_cache_service.features.graphql.caching import (
    CacheStrategyRegistry,
    CacheValue,
    EntityReference,
    FieldCacheValue,
    FieldContext,
    default_cache_value_factory,
)


@dataclass(frozen=True)
class FixedKeyValue:
    key: str

    def get_key(self) -> str:
        return self.key

    def is_private(self) -> bool:
        return False


def make_context(**overrides) -> FieldContext:
    defaults = {"entity": EntityReference.for_entity("User", 1), "field_name": "name"}
    return FieldContext(**{**defaults, **overrides})


@pytest.mark.unit
class TestFieldCacheValue:
    """Test suite for FieldCacheValue."""

    def test_default_key(self):
        value = FieldCacheValue.from_context(make_context(arguments={"count": 3}))
        assert value.get_key() == "user:1:name:count:3"
        assert not value.is_private()

    def test_private_value(self):
        value = FieldCacheValue.from_context(make_context(private=True, principal_id="9"))
        assert value.is_private()
        assert value.get_key() == "auth:9:user:1:name"

    def test_custom_key_function(self):
        value = FieldCacheValue.from_context(
            make_context(),
            key_function=lambda v: f"custom:{v.field_name}",
        )
        assert value.get_key() == "custom:name"

    def test_satisfies_protocol(self):
        assert isinstance(FieldCacheValue.from_context(make_context()), CacheValue)
        assert isinstance(FixedKeyValue("foo"), CacheValue)

    def test_arguments_are_read_only(self):
        context = make_context(arguments={"count": 3})
        with pytest.raises(TypeError):
            context.arguments["count"] = 4  # type: ignore[index]


@pytest.mark.unit
class TestCacheStrategyRegistry:
    """Test suite for CacheStrategyRegistry."""

    def test_default_factory(self):
        registry = CacheStrategyRegistry()
        assert registry.factory is default_cache_value_factory
        assert registry.create(make_context()).get_key() == "user:1:name"

    def test_set_factory_last_write_wins(self):
        registry = CacheStrategyRegistry()
        registry.set_factory(lambda context: FixedKeyValue("first"))
        registry.set_factory(lambda context: FixedKeyValue("foo"))
        assert registry.create(make_context()).get_key() == "foo"

    def test_reset(self):
        registry = CacheStrategyRegistry(lambda context: FixedKeyValue("foo"))
        registry.reset()
        assert registry.create(make_context()).get_key() == "user:1:name"

    def test_override_restores_previous(self):
        registry = CacheStrategyRegistry()
        with registry.override(lambda context: FixedKeyValue("foo")) as active:
            assert active.create(make_context()).get_key() == "foo"
        assert registry.create(make_context()).get_key() == "user:1:name"

    def test_override_restores_on_error(self):
        registry = CacheStrategyRegistry()
        with pytest.raises(RuntimeError), registry.override(lambda context: FixedKeyValue("foo")):
            raise RuntimeError("boom")
        assert registry.factory is default_cache_value_factory
