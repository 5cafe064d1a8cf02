"""GraphQL context for request-scoped dependencies.

The context is created fresh for each GraphQL request and provides:
- Field cache interceptor (shared, built once at startup)
- Authenticated user (optional)
- DataLoaders (request-scoped)
- Correlation ID (for distributed tracing)

Pass it to ``schema.execute(..., context_value=GraphQLContext(...))`` or
return it from the HTTP integration's context getter.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from graph_cache_service.core.schemas.auth import AuthUser
    from graph_cache_service.features.graphql.caching.interceptor import CacheInterceptor


@dataclass
class GraphQLContext:
    """Request context for GraphQL operations.

    Example usage in resolver:
        @strawberry.field(extensions=[CacheExtension(private=True)])
        async def inbox(self, info: Info[GraphQLContext, None]) -> list[Message]:
            return await info.context.loaders["inbox"].load(info.context.principal_id)
    """

    field_cache: CacheInterceptor | None = None
    user: AuthUser | None = None
    loaders: dict[str, Any] = field(default_factory=dict)
    correlation_id: str | None = None

    @property
    def is_authenticated(self) -> bool:
        """Check if the request is authenticated."""
        return self.user is not None

    @property
    def principal_id(self) -> str | None:
        """Identifier private cache entries are fenced to."""
        if self.user is None:
            return None
        return self.user.identifier


__all__ = ["GraphQLContext"]
