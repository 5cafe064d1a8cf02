"""Field cache configuration settings.

Controls whether cache-annotated GraphQL fields consult the store, which
backend holds the entries, and whether writes are indexed under
invalidation tags.
Environment variables use FIELD_CACHE_ prefix.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ._sanitizers import sanitize_inline_numeric

CacheBackend = Literal["memory", "redis"]
CacheSerializer = Literal["pickle", "json"]


class FieldCacheSettings(BaseSettings):
    """Field-level result cache settings.

    Environment variables use FIELD_CACHE_ prefix.
    Example: FIELD_CACHE_TAGGING_ENABLED=true, FIELD_CACHE_BACKEND=redis
    """

    enabled: bool = Field(
        default=True,
        description="Route cache-annotated fields through the cache interceptor",
    )

    backend: CacheBackend = Field(
        default="memory",
        description="Store holding cached field results: in-process memory or Redis",
    )

    serializer: CacheSerializer = Field(
        default="pickle",
        description="Payload encoding for the Redis backend (pickle keeps typed results intact)",
    )

    # ──────────────────────────────────────────────────────────────
    # Tagging
    # ──────────────────────────────────────────────────────────────

    tagging_enabled: bool = Field(
        default=False,
        description="Index every write under entity tags for bulk invalidation",
    )

    tag_prefix: str = Field(
        default="graphql",
        min_length=1,
        max_length=50,
        pattern=r"^[a-zA-Z0-9_-]+$",
        description="Prefix applied to every invalidation tag",
    )

    # ──────────────────────────────────────────────────────────────
    # Expiry
    # ──────────────────────────────────────────────────────────────

    default_ttl: int | None = Field(
        default=None,
        ge=1,
        description="Default entry TTL in seconds (None = keep until invalidated)",
    )

    @field_validator("default_ttl", mode="before")
    @classmethod
    def _normalize_ttl(cls, value: Any) -> Any:
        """Allow numeric env vars with inline comments (e.g., "3600  # 1 hour")."""
        return sanitize_inline_numeric(value)

    model_config = SettingsConfigDict(
        env_prefix="FIELD_CACHE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
        extra="ignore",
        env_ignore_empty=True,
    )
