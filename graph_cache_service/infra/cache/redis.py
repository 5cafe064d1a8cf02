"""Redis cache store with retry, connection pooling and tag sets.

This module provides the shared backend for the field cache:
- Connection pooling
- Automatic retry with exponential backoff on connection/timeout errors
- Pluggable payload serialization (pickle by default)
- Tag index kept in Redis sets (``tag:<tag>`` -> member keys)
- Prometheus operation timings
"""

from __future__ import annotations

from collections.abc import Iterable
from contextlib import asynccontextmanager
import logging
import time
from typing import TYPE_CHECKING, Any, cast

from redis.asyncio import ConnectionPool, Redis
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import RedisError
from redis.exceptions import TimeoutError as RedisTimeoutError

from graph_cache_service.core.exceptions import CacheStoreError
from graph_cache_service.core.settings import get_redis_settings
from graph_cache_service.infra.cache.serializers import PickleSerializer
from graph_cache_service.infra.metrics.prometheus import cache_operation_duration_seconds
from graph_cache_service.infra.metrics.tracking import track_invalidation
from graph_cache_service.utils.retry import RetryError, retry

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Awaitable, Callable

    from redis.asyncio.client import Pipeline

    from graph_cache_service.core.settings import RedisSettings
    from graph_cache_service.infra.cache.serializers import Serializer

logger = logging.getLogger(__name__)

# Seconds a tag set outlives the entries indexed under it
TAG_TTL_GRACE = 60


def _extend_tag_expiry(pipe: Pipeline, tag_key: str, current: int, ttl: int | None) -> None:
    """Queue the expiry change keeping ``tag_key`` alive as long as its members.

    ``current`` is the tag set's TTL before the write: -2 when it does not
    exist, -1 when it never expires.
    """
    if current == -1:
        return
    if ttl is None:
        if current >= 0:
            pipe.persist(tag_key)
        return
    tag_ttl = ttl + TAG_TTL_GRACE
    if current == -2 or current < tag_ttl:
        pipe.expire(tag_key, tag_ttl)


class RedisCache:
    """Redis-backed :class:`~graph_cache_service.infra.cache.store.CacheStore`.

    Backend failures surface as :class:`CacheStoreError` after retries are
    exhausted; callers decide whether to degrade.

    Example:
        cache = RedisCache()
        await cache.connect()

        await cache.set("user:1:name", "foobar", tags=["graphql:user:1"])
        value = await cache.get("user:1:name")
        await cache.invalidate_tags(["graphql:user:1"])

        await cache.disconnect()
    """

    cache_name = "redis"

    def __init__(
        self,
        settings: RedisSettings | None = None,
        serializer: Serializer | None = None,
        client: Redis | None = None,
    ) -> None:
        """Initialize Redis cache client.

        Args:
            settings: Connection settings (defaults to get_redis_settings()).
            serializer: Payload serializer (defaults to pickle).
            client: Pre-built client, skips connect() (used in tests).
        """
        self.settings = settings or get_redis_settings()
        self.serializer = serializer or PickleSerializer()
        self._pool: ConnectionPool | None = None
        self._client: Redis | None = client
        self._retry_policy: dict[str, Any] = {
            "max_attempts": self.settings.max_retries,
            "initial_delay": self.settings.retry_delay,
            "exceptions": (RedisConnectionError, RedisTimeoutError),
            "stop_after_delay": self.settings.retry_timeout,
        }

    async def connect(self) -> None:
        """Establish connection to Redis with connection pooling.

        Raises:
            RedisConnectionError: If unable to connect to Redis.
        """
        logger.info(
            "Connecting to Redis",
            extra={
                "host": self.settings.host,
                "port": self.settings.port,
                "db": self.settings.db,
                "max_connections": self.settings.max_connections,
            },
        )

        try:
            self._pool = ConnectionPool.from_url(
                self.settings.url,
                **self.settings.connection_pool_kwargs(),
            )
            self._client = Redis(connection_pool=self._pool)
            await cast("Awaitable[bool]", self._client.ping())
            logger.info("Redis connection established successfully")
        except Exception as e:
            logger.exception("Failed to connect to Redis", extra={"error": str(e)})
            raise

    async def disconnect(self) -> None:
        """Close Redis connection and cleanup resources."""
        logger.info("Disconnecting from Redis")

        if self._client:
            await self._client.aclose()
            self._client = None

        if self._pool:
            await self._pool.aclose()
            self._pool = None

        logger.info("Redis connection closed")

    @property
    def client(self) -> Redis:
        """Get the Redis client instance.

        Raises:
            CacheStoreError: If not connected.
        """
        if self._client is None:
            msg = "Redis client not connected. Call connect() first."
            raise CacheStoreError(msg, extra={"backend": self.cache_name})
        return self._client

    def _key(self, key: str) -> str:
        return self.settings.get_prefixed_key(key)

    def _tag_key(self, tag: str) -> str:
        return self.settings.get_prefixed_key(f"tag:{tag}")

    @asynccontextmanager
    async def _operation(self, operation: str, key: str) -> AsyncIterator[None]:
        """Time an operation and translate backend errors into CacheStoreError."""
        start_time = time.perf_counter()
        try:
            yield
        except (RedisError, RetryError) as e:
            logger.exception(
                f"Redis {operation} failed",
                extra={"key": key, "error": str(e)},
            )
            msg = f"Redis {operation} failed for key {key!r}"
            raise CacheStoreError(msg, extra={"operation": operation, "key": key}) from e
        finally:
            cache_operation_duration_seconds.labels(
                operation=operation,
                cache_name=self.cache_name,
            ).observe(time.perf_counter() - start_time)

    async def _call(self, operation: str, command: Callable[[], Awaitable[Any]]) -> Any:
        """Run ``command`` under the connection retry policy."""
        return await retry(operation=f"redis.{operation}", **self._retry_policy)(command)()

    async def get(self, key: str) -> Any | None:
        """Get a value from cache.

        Args:
            key: Cache key.

        Returns:
            Deserialized value or None if not found.
        """
        async with self._operation("get", key):
            payload = await self._call("get", lambda: self.client.get(self._key(key)))
        if payload is None:
            return None
        return self.serializer.loads(payload)

    async def set(
        self,
        key: str,
        value: Any,
        ttl: int | None = None,
        tags: Iterable[str] | None = None,
    ) -> bool:
        """Store a value and index it under ``tags``.

        Tag sets outlive their longest-lived member by TAG_TTL_GRACE seconds.
        A write only ever extends a tag set's expiry, and an entry without
        TTL makes its tag sets persistent.

        Args:
            key: Cache key.
            value: Value to cache.
            ttl: Time to live in seconds (None = no expiry).
            tags: Invalidation tags.

        Returns:
            True if the value was written.
        """
        payload = self.serializer.dumps(value)
        full_key = self._key(key)
        tag_keys = [self._tag_key(tag) for tag in tags or ()]

        async def command() -> list[Any]:
            remaining: list[int] = []
            if tag_keys:
                lookup = self.client.pipeline(transaction=False)
                for tag_key in tag_keys:
                    lookup.ttl(tag_key)
                remaining = await lookup.execute()

            pipe = self.client.pipeline(transaction=True)
            pipe.set(full_key, payload, ex=ttl)
            for tag_key, current in zip(tag_keys, remaining, strict=True):
                pipe.sadd(tag_key, full_key)
                _extend_tag_expiry(pipe, tag_key, current, ttl)
            return await pipe.execute()

        async with self._operation("set", key):
            results = await self._call("set", command)
        return bool(results and results[0])

    async def get_tagged(self, tags: Iterable[str], key: str) -> Any | None:
        """Get a value only while it is still a member of every tag set.

        Args:
            tags: Tags the entry was written under.
            key: Cache key.

        Returns:
            Deserialized value, or None on a miss or a dropped tag.
        """
        full_key = self._key(key)
        tag_list = list(tags)

        async def command() -> list[Any]:
            pipe = self.client.pipeline(transaction=False)
            for tag in tag_list:
                pipe.sismember(self._tag_key(tag), full_key)
            pipe.get(full_key)
            return await pipe.execute()

        async with self._operation("get_tagged", key):
            *memberships, payload = await self._call("get_tagged", command)
        if payload is None or not all(memberships):
            return None
        return self.serializer.loads(payload)

    async def delete(self, key: str) -> bool:
        """Delete a value from cache.

        Returns:
            True if key was deleted, False if key didn't exist.
        """
        async with self._operation("delete", key):
            deleted = await self._call("delete", lambda: self.client.delete(self._key(key)))
        track_invalidation(self.cache_name, "key", int(deleted or 0))
        return bool(deleted)

    async def invalidate_tags(self, tags: Iterable[str]) -> int:
        """Delete every entry indexed under any of ``tags``.

        Returns:
            Total number of cache entries deleted.
        """
        total_deleted = 0
        for tag in tags:
            tag_key = self._tag_key(tag)
            async with self._operation("invalidate_tags", tag_key):
                members = await self._call("smembers", lambda tag_key=tag_key: self.client.smembers(tag_key))
                if members:
                    deleted = await self._call(
                        "delete",
                        lambda members=members: self.client.delete(*members),
                    )
                    total_deleted += int(deleted or 0)
                await self._call("delete", lambda tag_key=tag_key: self.client.delete(tag_key))
            logger.debug(
                "Tag cache invalidation",
                extra={"tag": tag, "keys": len(members or ())},
            )

        track_invalidation(self.cache_name, "tag", total_deleted)
        return total_deleted

    async def health_check(self) -> bool:
        """Check if Redis is healthy and responsive."""
        try:
            await cast("Awaitable[bool]", self.client.ping())
            return True
        except Exception as e:
            logger.exception("Redis health check failed", extra={"error": str(e)})
            return False


__all__ = ["RedisCache"]
