"""Field-level result caching for GraphQL operations.

Usage:
    from graph_cache_service.features.graphql.caching import (
        CacheExtension,
        cache_key_field,
        create_field_cache,
    )
    from graph_cache_service.infra.cache import create_cache_store

    @strawberry.type
    class User:
        id: strawberry.ID

        @strawberry.field(extensions=[CacheExtension()])
        async def name(self) -> str:
            return await load_name(self.id)

    store = await create_cache_store()
    context = GraphQLContext(field_cache=create_field_cache(store))
    await schema.execute("{ user { name } }", context_value=context)

    # Custom keys
    registry = CacheStrategyRegistry(lambda ctx: FieldCacheValue.from_context(ctx, key_function=my_key))
    interceptor = CacheInterceptor(store, registry)

    # Invalidation
    await invalidate_entity(store, "User", user_id)
"""

from __future__ import annotations

from graph_cache_service.features.graphql.caching.extension import (
    CACHE_KEY_METADATA,
    CacheExtension,
    cache_key_field,
)
from graph_cache_service.features.graphql.caching.interceptor import (
    CacheInterceptor,
    create_field_cache,
    materialize,
)
from graph_cache_service.features.graphql.caching.invalidation import (
    invalidate_entity,
    invalidate_field,
)
from graph_cache_service.features.graphql.caching.keys import (
    derive_key,
    serialize_argument,
    serialize_arguments,
)
from graph_cache_service.features.graphql.caching.models import (
    EntityReference,
    FieldContext,
    PrivacyScope,
)
from graph_cache_service.features.graphql.caching.registry import (
    CacheStrategyRegistry,
    CacheValueFactory,
    default_cache_value_factory,
)
from graph_cache_service.features.graphql.caching.tags import (
    DEFAULT_TAG_PREFIX,
    entity_tag,
    field_tag,
    tags_for,
)
from graph_cache_service.features.graphql.caching.values import (
    CacheValue,
    FieldCacheValue,
    KeyFunction,
    default_key_function,
)

__all__ = [
    "CACHE_KEY_METADATA",
    "DEFAULT_TAG_PREFIX",
    "CacheExtension",
    "CacheInterceptor",
    "CacheStrategyRegistry",
    "CacheValue",
    "CacheValueFactory",
    "EntityReference",
    "FieldCacheValue",
    "FieldContext",
    "KeyFunction",
    "PrivacyScope",
    "cache_key_field",
    "create_field_cache",
    "default_cache_value_factory",
    "default_key_function",
    "derive_key",
    "entity_tag",
    "field_tag",
    "invalidate_entity",
    "invalidate_field",
    "materialize",
    "serialize_argument",
    "serialize_arguments",
    "tags_for",
]
