"""Tests for the in-memory cache store."""

from __future__ import annotations

from unittest.mock import patch

import pytest

from graph_cache_service.infra.cache import CacheStore, InMemoryCache


@pytest.mark.unit
class TestInMemoryCache:
    """Test suite for InMemoryCache."""

    def test_satisfies_protocol(self, memory_store):
        assert isinstance(memory_store, CacheStore)

    @pytest.mark.asyncio
    async def test_set_get_delete(self, memory_store):
        assert await memory_store.get("k") is None
        assert await memory_store.set("k", {"a": 1}) is True
        assert await memory_store.get("k") == {"a": 1}
        assert await memory_store.delete("k") is True
        assert await memory_store.delete("k") is False
        assert await memory_store.get("k") is None

    @pytest.mark.asyncio
    async def test_ttl_expiry(self, memory_store):
        with patch("graph_cache_service.infra.cache.store.time.monotonic", return_value=100.0):
            await memory_store.set("k", "v", ttl=10)
        with patch("graph_cache_service.infra.cache.store.time.monotonic", return_value=105.0):
            assert await memory_store.get("k") == "v"
        with patch("graph_cache_service.infra.cache.store.time.monotonic", return_value=110.0):
            assert await memory_store.get("k") is None
        assert memory_store.keys() == []

    @pytest.mark.asyncio
    async def test_invalidate_tags(self, memory_store):
        await memory_store.set("user:1:name", "a", tags=["graphql:user:1", "graphql:user:1:name"])
        await memory_store.set("user:1:posts", "b", tags=["graphql:user:1", "graphql:user:1:posts"])
        await memory_store.set("user:2:name", "c", tags=["graphql:user:2", "graphql:user:2:name"])

        assert await memory_store.invalidate_tags(["graphql:user:1:posts"]) == 1
        assert await memory_store.get("user:1:posts") is None
        assert await memory_store.get("user:1:name") == "a"

        assert await memory_store.invalidate_tags(["graphql:user:1"]) == 1
        assert sorted(memory_store.keys()) == ["user:2:name"]
        assert await memory_store.invalidate_tags(["graphql:user:1"]) == 0

    @pytest.mark.asyncio
    async def test_get_tagged_requires_every_tag(self, memory_store):
        await memory_store.set("user:1:name", "a", tags=["graphql:user:1", "graphql:user:1:name"])

        assert await memory_store.get_tagged(["graphql:user:1", "graphql:user:1:name"], "user:1:name") == "a"
        assert await memory_store.get_tagged(["graphql:user:2"], "user:1:name") is None

    @pytest.mark.asyncio
    async def test_get_tagged_untagged_write_misses(self, memory_store):
        await memory_store.set("user:1:name", "a")
        assert await memory_store.get_tagged(["graphql:user:1"], "user:1:name") is None

    @pytest.mark.asyncio
    async def test_delete_drops_tag_membership(self, memory_store):
        await memory_store.set("k", "v", tags=["t"])
        await memory_store.delete("k")
        assert memory_store.tags_for("k") == set()

    @pytest.mark.asyncio
    async def test_clear(self):
        cache = InMemoryCache()
        await cache.set("k", "v", tags=["t"])
        await cache.clear()
        assert cache.keys() == []
        assert await cache.invalidate_tags(["t"]) == 0


@pytest.mark.unit
class TestInMemoryCacheHousekeeping:
    """Test suite for index pruning and expired entry sweeps."""

    @pytest.mark.asyncio
    async def test_delete_prunes_empty_tags(self, memory_store):
        await memory_store.set("user:1:name", "a", tags=["graphql:user:1", "graphql:user:1:name"])
        await memory_store.set("user:1:posts", "b", tags=["graphql:user:1"])

        await memory_store.delete("user:1:name")
        assert memory_store.tags() == ["graphql:user:1"]

        await memory_store.delete("user:1:posts")
        assert memory_store.tags() == []

    @pytest.mark.asyncio
    async def test_invalidate_prunes_sibling_tags(self, memory_store):
        await memory_store.set("user:1:name", "a", tags=["graphql:user:1", "graphql:user:1:name"])

        assert await memory_store.invalidate_tags(["graphql:user:1"]) == 1
        assert memory_store.tags() == []
        assert memory_store.tags_for("user:1:name") == set()

    @pytest.mark.asyncio
    async def test_expired_read_prunes_tags(self, memory_store):
        with patch("graph_cache_service.infra.cache.store.time.monotonic", return_value=100.0):
            await memory_store.set("k", "v", ttl=10, tags=["t"])
        with patch("graph_cache_service.infra.cache.store.time.monotonic", return_value=120.0):
            assert await memory_store.get("k") is None
        assert memory_store.tags() == []

    @pytest.mark.asyncio
    async def test_writes_sweep_unread_expired_entries(self):
        cache = InMemoryCache(sweep_interval=3)
        with patch("graph_cache_service.infra.cache.store.time.monotonic", return_value=100.0):
            await cache.set("stale:1", "a", ttl=5, tags=["t"])
            await cache.set("fresh", "b")
        with patch("graph_cache_service.infra.cache.store.time.monotonic", return_value=200.0):
            await cache.set("stale:2", "c", ttl=5)

        assert sorted(cache.keys()) == ["fresh", "stale:2"]
        assert cache.tags() == []

    @pytest.mark.asyncio
    async def test_purge_expired(self, memory_store):
        with patch("graph_cache_service.infra.cache.store.time.monotonic", return_value=100.0):
            await memory_store.set("a", 1, ttl=5)
            await memory_store.set("b", 2, ttl=50)
            await memory_store.set("c", 3)
        with patch("graph_cache_service.infra.cache.store.time.monotonic", return_value=110.0):
            assert memory_store.purge_expired() == 1

        assert sorted(memory_store.keys()) == ["b", "c"]

    @pytest.mark.asyncio
    async def test_rewrite_keeps_tag_index_consistent(self, memory_store):
        await memory_store.set("k", "v1", tags=["t1"])
        await memory_store.set("k", "v2", tags=["t2"])

        assert memory_store.tags_for("k") == {"t1", "t2"}
        await memory_store.delete("k")
        assert memory_store.tags() == []
