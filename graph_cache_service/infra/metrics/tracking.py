"""Helpers for recording field cache metrics.

Call sites use these functions instead of touching the counters directly so
label names stay consistent.
"""

from __future__ import annotations

from graph_cache_service.infra.metrics import prometheus


def track_field_cache(field: str, *, hit: bool) -> None:
    """Record a field cache hit or miss.

    Args:
        field: Qualified field name, e.g. ``User.name``
        hit: True when the value came from the store

    Example:
        track_field_cache("User.posts", hit=False)
    """
    if hit:
        prometheus.field_cache_hits_total.labels(field=field).inc()
    else:
        prometheus.field_cache_misses_total.labels(field=field).inc()


def track_field_cache_error(operation: str) -> None:
    """Record a store failure absorbed by the field cache.

    Args:
        operation: ``read``, ``write`` or ``invalidate``
    """
    prometheus.field_cache_errors_total.labels(operation=operation).inc()


def track_invalidation(cache_name: str, method: str, count: int) -> None:
    """Record invalidated entries.

    Args:
        cache_name: Store label (``memory`` or ``redis``)
        method: ``tag`` or ``key``
        count: Number of entries removed
    """
    if count > 0:
        prometheus.cache_invalidations_total.labels(cache_name=cache_name, method=method).inc(
            count,
        )


def track_retry_attempt(operation: str, attempt_number: int) -> None:
    """Track a retry attempt.

    Args:
        operation: Name of the operation being retried
        attempt_number: Current attempt number (1-indexed)
    """
    prometheus.retry_attempts_total.labels(
        operation=operation,
        attempt_number=str(attempt_number),
    ).inc()


def track_retry_exhausted(operation: str) -> None:
    """Track when all retry attempts are exhausted."""
    prometheus.retry_exhausted_total.labels(operation=operation).inc()
