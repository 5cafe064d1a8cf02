"""Strawberry annotations for cached fields.

Mark a field cacheable with :class:`CacheExtension` and, when the parent's
``ID`` field is not the right identity, mark the identifying attribute with
:func:`cache_key_field`:

    @strawberry.type
    class User:
        id: strawberry.ID
        email: str = cache_key_field()

        @strawberry.field(extensions=[CacheExtension()])
        async def name(self) -> str:
            ...

        @strawberry.field(extensions=[CacheExtension(private=True, ttl=300)])
        async def inbox(self, count: int = 10) -> Paginator[Message]:
            ...

Identifying attribute, in order of precedence:
1. the field declared with :func:`cache_key_field`
2. the first field typed ``strawberry.ID``
3. a field named ``id``

Fields on the root operation type key as ``query:<field>`` and need no
identity. The interceptor is taken from the request context
(``context.field_cache``); without one the field resolves uncached.
"""

from __future__ import annotations

from collections.abc import Mapping
import logging
from typing import TYPE_CHECKING, Any

import strawberry
from strawberry.extensions import FieldExtension

from graph_cache_service.core.exceptions import CacheKeyError
from graph_cache_service.features.graphql.caching.interceptor import materialize
from graph_cache_service.features.graphql.caching.models import EntityReference, FieldContext

if TYPE_CHECKING:
    from strawberry.extensions.field_extension import AsyncExtensionResolver
    from strawberry.types import Info

    from graph_cache_service.features.graphql.caching.interceptor import CacheInterceptor

logger = logging.getLogger(__name__)

__all__ = ["CACHE_KEY_METADATA", "CacheExtension", "cache_key_field"]

CACHE_KEY_METADATA = "graph_cache_service.cache_key"


def cache_key_field(*args: Any, metadata: Mapping[str, Any] | None = None, **kwargs: Any) -> Any:
    """``strawberry.field`` marking the parent type's identifying attribute."""
    return strawberry.field(*args, metadata={**(metadata or {}), CACHE_KEY_METADATA: True}, **kwargs)


def _is_id_type(field_type: Any) -> bool:
    if field_type is strawberry.ID:
        return True
    # ``strawberry.ID | None``
    return (
        type(field_type).__name__ == "StrawberryOptional"
        and getattr(field_type, "of_type", None) is strawberry.ID
    )


def find_identifying_attribute(info: Info) -> str | None:
    """Python attribute name identifying instances of the parent type."""
    definition = info.schema.get_type_by_name(parent_type_name(info))
    fields = getattr(definition, "fields", None) or []

    for field in fields:
        if field.metadata and field.metadata.get(CACHE_KEY_METADATA):
            return field.python_name
    for field in fields:
        if _is_id_type(field.type):
            return field.python_name
    for field in fields:
        if field.python_name == "id":
            return field.python_name
    return None


def parent_type_name(info: Info) -> str:
    """GraphQL name of the type declaring the field being resolved."""
    return info._raw_info.parent_type.name


def _read_attribute(source: Any, attribute: str) -> Any:
    if isinstance(source, Mapping):
        return source.get(attribute)
    return getattr(source, attribute, None)


def _lookup(context: Any, name: str) -> Any:
    if isinstance(context, Mapping):
        return context.get(name)
    return getattr(context, name, None)


class CacheExtension(FieldExtension):
    """Route a field through the field cache.

    Args:
        private: Fence entries to the requesting principal
        ttl: Entry TTL in seconds (defaults to the interceptor's)
    """

    def __init__(self, *, private: bool = False, ttl: int | None = None) -> None:
        self.private = private
        self.ttl = ttl
        self._identity_attributes: dict[str, str | None] = {}

    def _identity_attribute(self, info: Info) -> str | None:
        type_name = parent_type_name(info)
        if type_name not in self._identity_attributes:
            self._identity_attributes[type_name] = find_identifying_attribute(info)
        return self._identity_attributes[type_name]

    def entity_reference(self, source: Any, info: Info) -> EntityReference:
        """Build the parent reference for this invocation.

        Raises:
            CacheKeyError: The parent has no usable identifying attribute
        """
        type_name = parent_type_name(info)
        if info.path.prev is None:
            return EntityReference.for_root(type_name)

        attribute = self._identity_attribute(info)
        if attribute is None:
            msg = (
                f"Cannot cache {type_name}.{info.field_name}: {type_name} has no "
                "identifying attribute (declare an ID field or use cache_key_field())"
            )
            raise CacheKeyError(msg, extra={"type_name": type_name, "field_name": info.field_name})

        identity = _read_attribute(source, attribute)
        if callable(identity):
            msg = (
                f"Cannot cache {type_name}.{info.field_name}: identifying attribute "
                f"{attribute!r} is resolver-backed, use a stored attribute"
            )
            raise CacheKeyError(msg, extra={"type_name": type_name, "attribute": attribute})
        if identity is None:
            msg = f"Cannot cache {type_name}.{info.field_name}: {attribute!r} resolved to null"
            raise CacheKeyError(msg, extra={"type_name": type_name, "attribute": attribute})

        return EntityReference.for_entity(type_name, identity)

    def field_context(self, source: Any, info: Info, arguments: Mapping[str, Any]) -> FieldContext:
        principal_id = _lookup(info.context, "principal_id") if self.private else None
        return FieldContext(
            entity=self.entity_reference(source, info),
            field_name=info.field_name,
            arguments=arguments,
            private=self.private,
            principal_id=principal_id,
            ttl=self.ttl,
        )

    async def resolve_async(
        self,
        next_: AsyncExtensionResolver,
        source: Any,
        info: Info,
        **kwargs: Any,
    ) -> Any:
        interceptor: CacheInterceptor | None = _lookup(info.context, "field_cache")
        if interceptor is None:
            return await materialize(next_(source, info, **kwargs))

        try:
            context = self.field_context(source, info, kwargs)
        except CacheKeyError:
            logger.exception(
                "Field cache key could not be built",
                extra={"field": f"{parent_type_name(info)}.{info.field_name}"},
            )
            raise

        return await interceptor.intercept(context, lambda: next_(source, info, **kwargs))
