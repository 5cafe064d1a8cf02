"""Pydantic Settings v2 configuration.

Settings are split by domain (field cache, Redis, logging), loaded from
environment variables and an optional ``.env`` file, frozen after
validation and cached by the loaders:

    from graph_cache_service.core.settings import get_field_cache_settings

    settings = get_field_cache_settings()
    print(settings.tagging_enabled)

Configuration precedence (highest to lowest):
    1. init kwargs (testing/overrides)
    2. Environment variables
    3. .env file
"""

from __future__ import annotations

from .cache import FieldCacheSettings
from .loader import (
    clear_all_settings_caches,
    get_field_cache_settings,
    get_logging_settings,
    get_redis_settings,
)
from .logs import LoggingSettings
from .redis import RedisSettings

__all__ = [
    "FieldCacheSettings",
    "LoggingSettings",
    "RedisSettings",
    "clear_all_settings_caches",
    "get_field_cache_settings",
    "get_logging_settings",
    "get_redis_settings",
]
