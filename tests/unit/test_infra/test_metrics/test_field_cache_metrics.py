"""Tests for field cache metrics."""

from __future__ import annotations

import pytest

from graph_cache_service.features.graphql.caching import CacheInterceptor, EntityReference, FieldContext
from graph_cache_service.infra.metrics import REGISTRY, generate_latest


def sample(name: str, **labels) -> float:
    return REGISTRY.get_sample_value(name, labels) or 0.0


@pytest.mark.unit
class TestFieldCacheMetrics:
    """Hits, misses and store errors are counted per field."""

    @pytest.mark.asyncio
    async def test_hit_and_miss_counted(self, memory_store):
        interceptor = CacheInterceptor(memory_store)
        context = FieldContext(entity=EntityReference.for_entity("Metric", 1), field_name="hits")
        hits = sample("graphql_field_cache_hits_total", field="Metric.hits")
        misses = sample("graphql_field_cache_misses_total", field="Metric.hits")

        await interceptor.intercept(context, lambda: "v")
        await interceptor.intercept(context, lambda: "v")

        assert sample("graphql_field_cache_hits_total", field="Metric.hits") == hits + 1
        assert sample("graphql_field_cache_misses_total", field="Metric.hits") == misses + 1

    @pytest.mark.asyncio
    async def test_store_errors_counted(self, failing_store):
        interceptor = CacheInterceptor(failing_store)
        context = FieldContext(entity=EntityReference.for_entity("Metric", 2), field_name="errors")
        reads = sample("graphql_field_cache_errors_total", operation="read")
        writes = sample("graphql_field_cache_errors_total", operation="write")

        await interceptor.intercept(context, lambda: "v")

        assert sample("graphql_field_cache_errors_total", operation="read") == reads + 1
        assert sample("graphql_field_cache_errors_total", operation="write") == writes + 1

    def test_exposition(self):
        assert b"graphql_field_cache_hits_total" in generate_latest(REGISTRY)
