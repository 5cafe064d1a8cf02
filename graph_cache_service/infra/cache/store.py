"""Cache store contract and the in-process implementation.

The field cache only talks to a store through :class:`CacheStore`. Two
implementations ship with the service:

- :class:`InMemoryCache` (this module): a dict with a tag index, used in
  tests and single-process deployments.
- :class:`~graph_cache_service.infra.cache.redis.RedisCache`: the shared
  Redis backend.

Absence is reported as ``None``; a stored ``None`` is indistinguishable
from a miss.
"""

from __future__ import annotations

from collections.abc import Iterable
import logging
import time
from typing import Any, Protocol, runtime_checkable

from graph_cache_service.infra.metrics.tracking import track_invalidation

logger = logging.getLogger(__name__)


@runtime_checkable
class CacheStore(Protocol):
    """Key-value store with optional tag indexing."""

    async def get(self, key: str) -> Any | None: ...

    async def set(
        self,
        key: str,
        value: Any,
        ttl: int | None = None,
        tags: Iterable[str] | None = None,
    ) -> bool: ...

    async def get_tagged(self, tags: Iterable[str], key: str) -> Any | None: ...

    async def delete(self, key: str) -> bool: ...

    async def invalidate_tags(self, tags: Iterable[str]) -> int: ...


class InMemoryCache:
    """Dict-backed store with TTL and tag index.

    Runs on a single event loop, so every write is visible to the next read.
    Expired entries are dropped when read, and every ``sweep_interval``
    writes a sweep drops the ones nobody reads again. Tags left without
    members are removed from the index.

    Example:
        cache = InMemoryCache()
        await cache.set("user:1:posts", page, tags=["graphql:user:1"])
        await cache.get_tagged(["graphql:user:1"], "user:1:posts")
        await cache.invalidate_tags(["graphql:user:1"])  # -> 1
    """

    cache_name = "memory"

    def __init__(self, sweep_interval: int = 256) -> None:
        self._data: dict[str, tuple[Any, float | None]] = {}
        self._tags: dict[str, set[str]] = {}
        self._key_tags: dict[str, set[str]] = {}
        self._sweep_interval = max(sweep_interval, 1)
        self._writes = 0

    async def get(self, key: str) -> Any | None:
        entry = self._data.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if expires_at is not None and expires_at <= time.monotonic():
            self._forget(key)
            return None
        return value

    async def set(
        self,
        key: str,
        value: Any,
        ttl: int | None = None,
        tags: Iterable[str] | None = None,
    ) -> bool:
        self._writes += 1
        if self._writes % self._sweep_interval == 0:
            self.purge_expired()

        expires_at = time.monotonic() + ttl if ttl else None
        self._data[key] = (value, expires_at)
        for tag in tags or ():
            self._tags.setdefault(tag, set()).add(key)
            self._key_tags.setdefault(key, set()).add(tag)
        return True

    async def get_tagged(self, tags: Iterable[str], key: str) -> Any | None:
        """Return the entry only while it is still indexed under every tag."""
        if not all(key in self._tags.get(tag, ()) for tag in tags):
            return None
        return await self.get(key)

    async def delete(self, key: str) -> bool:
        existed = key in self._data
        self._forget(key)
        return existed

    async def invalidate_tags(self, tags: Iterable[str]) -> int:
        deleted = 0
        for tag in tags:
            for key in list(self._tags.get(tag, ())):
                if key in self._data:
                    deleted += 1
                self._forget(key)
        track_invalidation(self.cache_name, "tag", deleted)
        logger.debug("Tag cache invalidation", extra={"deleted": deleted})
        return deleted

    async def clear(self) -> None:
        self._data.clear()
        self._tags.clear()
        self._key_tags.clear()
        self._writes = 0

    def purge_expired(self) -> int:
        """Drop every expired entry.

        Returns:
            Number of entries dropped
        """
        now = time.monotonic()
        expired = [
            key
            for key, (_, expires_at) in self._data.items()
            if expires_at is not None and expires_at <= now
        ]
        for key in expired:
            self._forget(key)
        if expired:
            logger.debug("Expired cache entries purged", extra={"purged": len(expired)})
        return len(expired)

    def keys(self) -> list[str]:
        """Keys currently held (expired entries included until read or purged)."""
        return list(self._data)

    def tags(self) -> list[str]:
        """Tags currently indexing at least one key."""
        return list(self._tags)

    def tags_for(self, key: str) -> set[str]:
        """Tags indexing ``key``."""
        return set(self._key_tags.get(key, ()))

    def _forget(self, key: str) -> None:
        self._data.pop(key, None)
        for tag in self._key_tags.pop(key, ()):
            keys = self._tags.get(tag)
            if keys is None:
                continue
            keys.discard(key)
            if not keys:
                del self._tags[tag]


__all__ = ["CacheStore", "InMemoryCache"]
