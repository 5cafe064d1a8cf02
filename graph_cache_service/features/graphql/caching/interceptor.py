"""Cache interception around field resolvers.

The interceptor sits between the execution pipeline and a cache-annotated
field resolver:

1. build the cache value for this invocation and take its key
2. read the store (tag-scoped when tagging is on and the field has an entity)
3. on a hit return the stored value; the resolver is not called
4. on a miss call the resolver, await it until it yields a final value
   (DataLoader futures, coroutines), store it and return it

The store is an optimization: a failing read counts as a miss and a
failing write is skipped. Both are logged and counted, neither reaches the
query result. Errors raised while building the key (a custom key function,
a missing identifying attribute) propagate, so the pipeline reports them
against that one field.

Usage:
    from graph_cache_service.features.graphql.caching import CacheInterceptor
    from graph_cache_service.infra.cache import InMemoryCache

    interceptor = CacheInterceptor(InMemoryCache(), tagging_enabled=True)
    value = await interceptor.intercept(context, lambda: load_posts(user_id))
"""

from __future__ import annotations

from collections.abc import Callable
import inspect
import logging
from typing import TYPE_CHECKING, Any

from graph_cache_service.core.settings import get_field_cache_settings
from graph_cache_service.features.graphql.caching.registry import CacheStrategyRegistry
from graph_cache_service.features.graphql.caching.tags import DEFAULT_TAG_PREFIX, tags_for
from graph_cache_service.infra.metrics.tracking import track_field_cache, track_field_cache_error

if TYPE_CHECKING:
    from graph_cache_service.core.settings import FieldCacheSettings
    from graph_cache_service.features.graphql.caching.models import FieldContext
    from graph_cache_service.infra.cache.store import CacheStore

logger = logging.getLogger(__name__)

__all__ = ["CacheInterceptor", "create_field_cache", "materialize"]


async def materialize(result: Any) -> Any:
    """Await ``result`` until it is no longer awaitable."""
    while inspect.isawaitable(result):
        result = await result
    return result


class CacheInterceptor:
    """Short-circuits cached field resolvers against a store.

    Each call to :meth:`intercept` is self-contained; the store is the only
    shared state, so concurrent sibling fields need no locking here.
    """

    def __init__(
        self,
        store: CacheStore,
        registry: CacheStrategyRegistry | None = None,
        *,
        tagging_enabled: bool = False,
        tag_prefix: str = DEFAULT_TAG_PREFIX,
        default_ttl: int | None = None,
    ) -> None:
        """Initialize the interceptor.

        Args:
            store: Backend holding cached results
            registry: Cache value factory registry (default factory if None)
            tagging_enabled: Index writes under entity tags
            tag_prefix: Prefix applied to every tag
            default_ttl: TTL for entries whose field sets none (None = no expiry)
        """
        self.store = store
        self.registry = registry or CacheStrategyRegistry()
        self.tagging_enabled = tagging_enabled
        self.tag_prefix = tag_prefix
        self.default_ttl = default_ttl

    def tags_for(self, context: FieldContext) -> tuple[str, ...]:
        if not self.tagging_enabled:
            return ()
        return tags_for(context.entity, context.field_name, self.tag_prefix)

    async def intercept(self, context: FieldContext, resolver: Callable[[], Any]) -> Any:
        """Resolve a cacheable field through the store.

        Args:
            context: Invocation context for the field
            resolver: Zero-argument callable running the real resolver

        Returns:
            Cached or freshly resolved value
        """
        if not context.cacheable:
            return await materialize(resolver())

        cache_value = self.registry.create(context)
        key = cache_value.get_key()
        tags = self.tags_for(context)

        cached = await self._read(key, tags)
        if cached is not None:
            track_field_cache(context.qualified_name, hit=True)
            logger.debug(
                "Field cache hit",
                extra={"cache_key": key, "field": context.qualified_name},
            )
            return cached

        track_field_cache(context.qualified_name, hit=False)
        logger.debug(
            "Field cache miss",
            extra={"cache_key": key, "field": context.qualified_name},
        )

        result = await materialize(resolver())
        if result is not None:
            await self._write(key, result, tags, context.ttl or self.default_ttl)
        return result

    async def _read(self, key: str, tags: tuple[str, ...]) -> Any | None:
        try:
            if tags:
                return await self.store.get_tagged(tags, key)
            return await self.store.get(key)
        except Exception as e:
            track_field_cache_error("read")
            logger.exception(
                "Field cache read failed",
                extra={"cache_key": key, "error": str(e)},
            )
            return None

    async def _write(self, key: str, value: Any, tags: tuple[str, ...], ttl: int | None) -> None:
        try:
            await self.store.set(key, value, ttl=ttl, tags=tags or None)
        except Exception as e:
            track_field_cache_error("write")
            logger.exception(
                "Field cache write failed",
                extra={"cache_key": key, "error": str(e)},
            )
            return

        logger.debug(
            "Field cached",
            extra={"cache_key": key, "tags": list(tags), "ttl": ttl},
        )


def create_field_cache(
    store: CacheStore,
    settings: FieldCacheSettings | None = None,
    registry: CacheStrategyRegistry | None = None,
) -> CacheInterceptor | None:
    """Build the request-independent interceptor from settings.

    Returns None when the field cache is disabled; cached fields then
    resolve directly.
    """
    settings = settings or get_field_cache_settings()
    if not settings.enabled:
        logger.info("Field cache disabled")
        return None

    return CacheInterceptor(
        store,
        registry,
        tagging_enabled=settings.tagging_enabled,
        tag_prefix=settings.tag_prefix,
        default_ttl=settings.default_ttl,
    )
