"""Authenticated principal consumed by the GraphQL layer.

Authentication itself happens upstream; the cache only needs a stable
identifier for the requesting user or service.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class AuthUser(BaseModel):
    """Authenticated user or service."""

    user_id: str | None = Field(default=None, max_length=255, description="User ID")
    service_id: str | None = Field(
        default=None, max_length=255, description="Service ID"
    )
    email: str | None = Field(default=None, max_length=320, description="User email")
    metadata: dict[str, Any] = Field(
        default_factory=dict, description="Additional user/service metadata"
    )

    model_config = ConfigDict(
        str_strip_whitespace=True,
        frozen=True,
    )

    @property
    def is_user(self) -> bool:
        """Check if authenticated as a user."""
        return self.user_id is not None

    @property
    def is_service(self) -> bool:
        """Check if authenticated as a service."""
        return self.service_id is not None

    @property
    def identifier(self) -> str | None:
        """Primary identifier (user_id, else service_id)."""
        return self.user_id or self.service_id


__all__ = ["AuthUser"]
