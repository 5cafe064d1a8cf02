"""Cache store infrastructure (in-memory and Redis)."""
from __future__ import annotations

from graph_cache_service.infra.cache.factory import create_cache_store
from graph_cache_service.infra.cache.redis import RedisCache
from graph_cache_service.infra.cache.serializers import (
    JSONSerializer,
    PickleSerializer,
    Serializer,
    get_serializer,
)
from graph_cache_service.infra.cache.store import CacheStore, InMemoryCache

__all__ = [
    "CacheStore",
    "InMemoryCache",
    "JSONSerializer",
    "PickleSerializer",
    "RedisCache",
    "Serializer",
    "create_cache_store",
    "get_serializer",
]
