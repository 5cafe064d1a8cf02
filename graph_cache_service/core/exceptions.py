"""Custom exception classes for the field cache."""

from __future__ import annotations

from typing import Any


class AppException(Exception):
    """Base application exception.

    All custom exceptions should inherit from this class. The ``type`` and
    ``extra`` attributes travel into GraphQL error extensions and log records.

    Attributes:
        detail: Human-readable error message.
        type: Error type identifier.
        extra: Additional context-specific information about the error.

    Example:
        raise AppException(
            detail="Cache unavailable",
            type="cache-unavailable",
            extra={"backend": "redis"},
        )
    """

    def __init__(
        self,
        detail: str,
        type: str = "about:blank",
        extra: dict[str, Any] | None = None,
    ) -> None:
        """Initialize application exception.

        Args:
            detail: Human-readable error message.
            type: Error type identifier.
            extra: Additional context about the error.
        """
        self.detail = detail
        self.type = type
        self.extra = extra or {}
        super().__init__(detail)


class CacheKeyError(AppException):
    """Raised when a cache key cannot be built for a field.

    Covers parents without an identifying attribute and identifying
    attributes that resolve to ``None``. Both would otherwise collapse
    distinct entities onto one shared key.

    Example:
        raise CacheKeyError(
            detail="User has no identifying attribute",
            extra={"type_name": "User", "field_name": "name"},
        )
    """

    def __init__(
        self,
        detail: str,
        type: str = "cache-key-error",
        extra: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(detail=detail, type=type, extra=extra)


class CacheStoreError(AppException):
    """Raised by a cache store when the backend cannot serve a request."""

    def __init__(
        self,
        detail: str,
        type: str = "cache-store-error",
        extra: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(detail=detail, type=type, extra=extra)


__all__ = ["AppException", "CacheKeyError", "CacheStoreError"]
