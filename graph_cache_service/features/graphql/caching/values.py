"""Per-invocation cache values.

The interceptor only needs ``get_key()`` and ``is_private()`` from a cache
value, so any object with those two methods can stand in for
:class:`FieldCacheValue`. The usual way to change keys is to keep
:class:`FieldCacheValue` and hand it a different key function:

    def tenant_key(value: FieldCacheValue) -> str:
        return f"tenant:{TENANT}:{derive_key(value.entity, value.field_name, value.arguments, value.scope)}"

    registry.set_factory(lambda context: FieldCacheValue.from_context(context, key_function=tenant_key))
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from graph_cache_service.features.graphql.caching.keys import derive_key

if TYPE_CHECKING:
    from graph_cache_service.features.graphql.caching.models import (
        EntityReference,
        FieldContext,
        PrivacyScope,
    )

__all__ = ["CacheValue", "FieldCacheValue", "KeyFunction", "default_key_function"]


@runtime_checkable
class CacheValue(Protocol):
    """What the interceptor asks of a cache value."""

    def get_key(self) -> str: ...

    def is_private(self) -> bool: ...


KeyFunction = Callable[["FieldCacheValue"], str]


def default_key_function(value: FieldCacheValue) -> str:
    return derive_key(value.entity, value.field_name, value.arguments, value.scope)


@dataclass(frozen=True)
class FieldCacheValue:
    """Cache value assembled from one field invocation."""

    entity: EntityReference
    field_name: str
    arguments: Mapping[str, Any]
    scope: PrivacyScope
    key_function: KeyFunction = default_key_function

    @classmethod
    def from_context(
        cls,
        context: FieldContext,
        key_function: KeyFunction | None = None,
    ) -> FieldCacheValue:
        return cls(
            entity=context.entity,
            field_name=context.field_name,
            arguments=context.arguments,
            scope=context.scope,
            key_function=key_function or default_key_function,
        )

    def get_key(self) -> str:
        return self.key_function(self)

    def is_private(self) -> bool:
        return self.scope.private
