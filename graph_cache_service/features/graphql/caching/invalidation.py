"""Invalidation helpers for cached field entries.

Mutations call these after changing an entity so later reads recompute:

    await invalidate_entity(store, "User", user.id)            # every cached field
    await invalidate_entity(store, "User", user.id, "posts")   # just ``posts``
    await invalidate_field(store, "user:1:name")

Tag-based invalidation only reaches entries written while tagging was on.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from graph_cache_service.features.graphql.caching.tags import (
    DEFAULT_TAG_PREFIX,
    entity_tag,
    field_tag,
)
from graph_cache_service.infra.metrics.tracking import track_field_cache_error

if TYPE_CHECKING:
    from graph_cache_service.infra.cache.store import CacheStore

logger = logging.getLogger(__name__)

__all__ = ["invalidate_entity", "invalidate_field"]


async def invalidate_entity(
    store: CacheStore,
    type_name: str,
    identity: Any,
    field_name: str | None = None,
    prefix: str = DEFAULT_TAG_PREFIX,
) -> int:
    """Drop cached fields of one entity through its tags.

    Args:
        store: Store holding the entries
        type_name: GraphQL type name of the entity
        identity: Value of the entity's identifying attribute
        field_name: Restrict to one field (all fields if None)
        prefix: Tag prefix the entries were written with

    Returns:
        Number of entries removed (0 on store failure)
    """
    if field_name is None:
        tag = entity_tag(type_name, identity, prefix)
    else:
        tag = field_tag(type_name, identity, field_name, prefix)

    try:
        deleted = await store.invalidate_tags([tag])
    except Exception as e:
        track_field_cache_error("invalidate")
        logger.exception(
            "Field cache invalidation failed",
            extra={"tag": tag, "error": str(e)},
        )
        return 0

    logger.info("Field cache invalidated", extra={"tag": tag, "deleted": deleted})
    return deleted


async def invalidate_field(store: CacheStore, key: str) -> bool:
    """Delete one cached entry by key."""
    try:
        return await store.delete(key)
    except Exception as e:
        track_field_cache_error("invalidate")
        logger.exception(
            "Field cache delete failed",
            extra={"cache_key": key, "error": str(e)},
        )
        return False
