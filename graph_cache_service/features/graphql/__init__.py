"""GraphQL feature module using Strawberry.

Provides field-result caching for strawberry schemas:
- ``caching``: key derivation, interceptor and the ``CacheExtension`` field extension
- ``context``: request context carrying the interceptor and principal
- ``types``: shared types such as ``Paginator``
"""

from __future__ import annotations

from graph_cache_service.features.graphql.context import GraphQLContext

__all__ = ["GraphQLContext"]
