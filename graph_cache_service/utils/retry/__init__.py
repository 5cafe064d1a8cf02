from __future__ import annotations

from graph_cache_service.utils.retry.decorator import retry
from graph_cache_service.utils.retry.exceptions import RetryError
from graph_cache_service.utils.retry.strategies import RetryStrategy

__all__ = ["RetryError", "RetryStrategy", "retry"]
