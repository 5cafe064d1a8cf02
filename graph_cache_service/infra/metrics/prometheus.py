"""Prometheus metrics for the field cache."""

from __future__ import annotations

from prometheus_client import CollectorRegistry, Counter, Histogram

# Dedicated registry so embedding applications control exposition
REGISTRY = CollectorRegistry()

# Store operations are expected to complete within a few milliseconds
CACHE_LATENCY_BUCKETS = (
    0.0005,
    0.001,
    0.0025,
    0.005,
    0.01,
    0.025,
    0.05,
    0.1,
    0.25,
    0.5,
    1.0,
)

# Field cache metrics
field_cache_hits_total = Counter(
    "graphql_field_cache_hits_total",
    "Cached field resolutions served from the store without calling the resolver",
    ["field"],
    registry=REGISTRY,
)

field_cache_misses_total = Counter(
    "graphql_field_cache_misses_total",
    "Cached field resolutions that invoked the resolver",
    ["field"],
    registry=REGISTRY,
)

field_cache_errors_total = Counter(
    "graphql_field_cache_errors_total",
    "Store failures absorbed by the field cache (read degraded to miss, write skipped)",
    ["operation"],
    registry=REGISTRY,
)

# Store metrics
cache_operation_duration_seconds = Histogram(
    "cache_operation_duration_seconds",
    "Cache store operation duration in seconds",
    ["operation", "cache_name"],
    buckets=CACHE_LATENCY_BUCKETS,
    registry=REGISTRY,
)

cache_invalidations_total = Counter(
    "cache_invalidations_total",
    "Cache entries removed through tag or key invalidation",
    ["cache_name", "method"],
    registry=REGISTRY,
)

# Retry metrics
retry_attempts_total = Counter(
    "retry_attempts_total",
    "Total retry attempts by operation",
    ["operation", "attempt_number"],
    registry=REGISTRY,
)

retry_exhausted_total = Counter(
    "retry_exhausted_total",
    "Operations that failed after exhausting all retry attempts",
    ["operation"],
    registry=REGISTRY,
)
