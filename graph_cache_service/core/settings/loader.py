"""LRU-cached settings loaders.

Settings are loaded and validated once, then cached for the lifetime of
the process.

Usage:
    from graph_cache_service.core.settings.loader import get_field_cache_settings

    settings = get_field_cache_settings()  # First call: loads and validates
    settings = get_field_cache_settings()  # Subsequent calls: cached instance

Testing:
    get_field_cache_settings.cache_clear()

    Or construct settings directly:
    settings = FieldCacheSettings(tagging_enabled=True)
"""

from __future__ import annotations

from functools import lru_cache

from .cache import FieldCacheSettings
from .logs import LoggingSettings
from .redis import RedisSettings


@lru_cache(maxsize=1)
def get_field_cache_settings() -> FieldCacheSettings:
    """Get cached field cache settings.

    Returns:
        Validated and frozen FieldCacheSettings instance.
    """
    return FieldCacheSettings()


@lru_cache(maxsize=1)
def get_redis_settings() -> RedisSettings:
    """Get cached Redis settings.

    Returns:
        Validated and frozen RedisSettings instance.
    """
    return RedisSettings()


@lru_cache(maxsize=1)
def get_logging_settings() -> LoggingSettings:
    """Get cached logging settings.

    Returns:
        Validated and frozen LoggingSettings instance.
    """
    return LoggingSettings()


def clear_all_settings_caches() -> None:
    """Clear every settings cache (useful in tests)."""
    get_field_cache_settings.cache_clear()
    get_redis_settings.cache_clear()
    get_logging_settings.cache_clear()
