"""Shared GraphQL types."""

from __future__ import annotations

from graph_cache_service.features.graphql.types.pagination import Paginator, paginate

__all__ = ["Paginator", "paginate"]
