"""Store construction from settings."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from graph_cache_service.core.settings import get_field_cache_settings, get_redis_settings
from graph_cache_service.infra.cache.redis import RedisCache
from graph_cache_service.infra.cache.serializers import get_serializer
from graph_cache_service.infra.cache.store import InMemoryCache

if TYPE_CHECKING:
    from graph_cache_service.core.settings import FieldCacheSettings, RedisSettings
    from graph_cache_service.infra.cache.store import CacheStore

logger = logging.getLogger(__name__)


async def create_cache_store(
    cache_settings: FieldCacheSettings | None = None,
    redis_settings: RedisSettings | None = None,
) -> CacheStore:
    """Build and connect the store selected by ``FIELD_CACHE_BACKEND``.

    A Redis backend that cannot be reached at startup falls back to the
    in-memory store; the field cache is an optimization and the service
    keeps running without it.
    """
    cache_settings = cache_settings or get_field_cache_settings()

    if cache_settings.backend == "memory":
        logger.info("Using in-memory field cache store")
        return InMemoryCache()

    store = RedisCache(
        settings=redis_settings or get_redis_settings(),
        serializer=get_serializer(cache_settings.serializer),
    )
    try:
        await store.connect()
    except Exception as e:
        logger.warning(
            "Redis unavailable, falling back to in-memory field cache store",
            extra={"error": str(e)},
        )
        return InMemoryCache()
    return store


__all__ = ["create_cache_store"]
