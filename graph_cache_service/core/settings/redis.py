"""Redis connection settings for the field cache store."""

from __future__ import annotations

from typing import Any
from urllib.parse import quote, urlparse

from pydantic import Field, SecretStr, computed_field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class RedisSettings(BaseSettings):
    """Redis settings used when ``FIELD_CACHE_BACKEND=redis``.

    Environment variables use REDIS_ prefix.
    Example: REDIS_URL="redis://localhost:6379/0"

    Either provide REDIS_URL (components are parsed from it) or the
    individual components (the URL is built from them).
    """

    # ──────────────────────────────────────────────────────────────
    # Connection configuration
    # ──────────────────────────────────────────────────────────────

    redis_url: str | None = Field(
        default=None,
        alias="REDIS_URL",
        description="Redis connection URL (redis://[username:password@]host:port/db)",
    )

    host: str = Field(default="localhost", description="Redis server hostname or IP address")

    port: int = Field(default=6379, ge=1, le=65535, description="Redis server port")

    db: int = Field(default=0, ge=0, le=15, description="Redis database number (0-15)")

    username: str | None = Field(default=None, description="Redis username (Redis 6+ ACL)")

    password: SecretStr | None = Field(default=None, description="Redis password")

    ssl_enabled: bool = Field(default=False, description="Use rediss:// for the connection")

    # ──────────────────────────────────────────────────────────────
    # Connection pool settings
    # ──────────────────────────────────────────────────────────────

    max_connections: int = Field(
        default=50,
        ge=1,
        le=1000,
        description="Maximum Redis connection pool size",
    )

    socket_timeout: float = Field(
        default=5.0,
        ge=0.1,
        le=30.0,
        description="Redis socket timeout in seconds (for operations)",
    )

    socket_connect_timeout: float = Field(
        default=5.0,
        ge=0.1,
        le=30.0,
        description="Redis socket connection timeout in seconds",
    )

    # ──────────────────────────────────────────────────────────────
    # Retry settings
    # ──────────────────────────────────────────────────────────────

    max_retries: int = Field(
        default=3,
        ge=1,
        le=10,
        description="Maximum attempts for a store operation on connection errors",
    )

    retry_delay: float = Field(
        default=0.1,
        ge=0.01,
        le=5.0,
        description="Initial retry delay in seconds (with exponential backoff)",
    )

    retry_timeout: float = Field(
        default=2.0,
        ge=0.1,
        le=30.0,
        description="Give up retrying once this many seconds have elapsed",
    )

    key_prefix: str = Field(
        default="",
        max_length=100,
        pattern=r"^([a-zA-Z0-9_-]+:?)?$",
        description="Prefix for all cache keys written by this service",
    )

    @model_validator(mode="after")
    def _apply_url(self) -> RedisSettings:
        """Parse redis_url into component fields if provided."""
        if self.redis_url:
            parsed = urlparse(self.redis_url)
            if parsed.hostname:
                object.__setattr__(self, "host", parsed.hostname)
            if parsed.port:
                object.__setattr__(self, "port", parsed.port)
            if parsed.path and len(parsed.path) > 1:
                try:
                    object.__setattr__(self, "db", int(parsed.path.lstrip("/")))
                except ValueError:
                    pass
            if parsed.username:
                object.__setattr__(self, "username", parsed.username)
            if parsed.password:
                object.__setattr__(self, "password", SecretStr(parsed.password))
            if parsed.scheme == "rediss":
                object.__setattr__(self, "ssl_enabled", True)
        return self

    @computed_field
    @property
    def url(self) -> str:
        """Build Redis URL from component fields."""
        scheme = "rediss" if self.ssl_enabled else "redis"

        auth = ""
        if self.username or self.password:
            username_part = quote(self.username) if self.username else ""
            password_part = quote(self.password.get_secret_value()) if self.password else ""
            if username_part and password_part:
                auth = f"{username_part}:{password_part}@"
            elif password_part:
                auth = f":{password_part}@"

        return f"{scheme}://{auth}{self.host}:{self.port}/{self.db}"

    def connection_pool_kwargs(self) -> dict[str, Any]:
        """Return kwargs for redis.asyncio.ConnectionPool.from_url().

        Responses are left as bytes because cached payloads may be pickled.
        """
        return {
            "max_connections": self.max_connections,
            "socket_timeout": self.socket_timeout,
            "socket_connect_timeout": self.socket_connect_timeout,
            "decode_responses": False,
        }

    def get_prefixed_key(self, key: str) -> str:
        """Get cache key with configured prefix."""
        return f"{self.key_prefix}{key}"

    model_config = SettingsConfigDict(
        env_prefix="REDIS_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
        populate_by_name=True,
        extra="ignore",
        env_ignore_empty=True,
    )
