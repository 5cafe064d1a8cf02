"""Pytest configuration and shared fixtures.

Organization:
    - Settings Fixtures: environment isolation and cached settings reset
    - Cache Fixtures: in-memory store, failing store, interceptor
    - GraphQL Fixtures: request context

When adding new features:
    1. Add fixtures to the appropriate section below
    2. Use @pytest.fixture with clear docstrings
    3. Make fixtures composable (fixtures can depend on other fixtures)
"""

from __future__ import annotations

import os
from collections.abc import Iterator
from unittest.mock import AsyncMock

import pytest

from graph_cache_service.core.exceptions import CacheStoreError
from graph_cache_service.core.settings import clear_all_settings_caches
from graph_cache_service.features.graphql.caching import CacheInterceptor
from graph_cache_service.features.graphql.context import GraphQLContext
from graph_cache_service.infra.cache import InMemoryCache

# Ensure tests run without external infrastructure
os.environ.setdefault("FIELD_CACHE_BACKEND", "memory")
os.environ.setdefault("LOG_JSON", "false")


# ============================================================================
# Settings Fixtures
# ============================================================================


@pytest.fixture(autouse=True)
def _reset_settings() -> Iterator[None]:
    """Drop cached settings so env changes made by a test stay local to it."""
    clear_all_settings_caches()
    yield
    clear_all_settings_caches()


# ============================================================================
# Cache Fixtures
# ============================================================================


@pytest.fixture
def memory_store() -> InMemoryCache:
    """Fresh in-memory store per test."""
    return InMemoryCache()


@pytest.fixture
def failing_store() -> AsyncMock:
    """Store whose every operation raises CacheStoreError."""
    store = AsyncMock()
    error = CacheStoreError("backend down", extra={"backend": "mock"})
    store.get.side_effect = error
    store.get_tagged.side_effect = error
    store.set.side_effect = error
    store.delete.side_effect = error
    store.invalidate_tags.side_effect = error
    return store


@pytest.fixture
def interceptor(memory_store: InMemoryCache) -> CacheInterceptor:
    """Interceptor over the in-memory store, tagging off."""
    return CacheInterceptor(memory_store)


@pytest.fixture
def tagged_interceptor(memory_store: InMemoryCache) -> CacheInterceptor:
    """Interceptor over the in-memory store with tagging on."""
    return CacheInterceptor(memory_store, tagging_enabled=True)


# ============================================================================
# GraphQL Fixtures
# ============================================================================


@pytest.fixture
def graphql_context(interceptor: CacheInterceptor) -> GraphQLContext:
    """Anonymous request context carrying the interceptor."""
    return GraphQLContext(field_cache=interceptor)
