"""Generic page type for paginated GraphQL fields.

A resolver returns a :class:`Paginator` holding one page of items plus the
counts clients need to render page controls:

    @strawberry.field(extensions=[CacheExtension()])
    async def users(self, count: int = 15, page: int = 1) -> Paginator[User]:
        rows, total = await fetch_users(limit=count, offset=(page - 1) * count)
        return paginate(rows, total=total, count=count, page=page)

Instances are plain dataclasses, so a cached page comes back from either
store with the same items and counts.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
import math
from typing import Generic, TypeVar

import strawberry

__all__ = ["Paginator", "paginate"]

T = TypeVar("T")


@strawberry.type(description="One page of a paginated list")
class Paginator(Generic[T]):
    data: list[T] = strawberry.field(description="Items on this page")
    total: int = strawberry.field(description="Total items across all pages")
    per_page: int = strawberry.field(description="Page size")
    current_page: int = strawberry.field(description="1-based page number")
    last_page: int = strawberry.field(description="Last 1-based page number")
    has_more_pages: bool = strawberry.field(description="Whether a later page exists")

    def __len__(self) -> int:
        return len(self.data)

    def __iter__(self) -> Iterator[T]:
        return iter(self.data)


def paginate(items: Sequence[T], total: int, count: int, page: int = 1) -> Paginator[T]:
    """Wrap one page of ``items`` with its page counts.

    Args:
        items: Items on the requested page
        total: Total number of items across all pages
        count: Page size requested by the client
        page: 1-based page number

    Raises:
        ValueError: ``count`` or ``page`` is not positive
    """
    if count < 1:
        msg = f"count must be positive, got {count}"
        raise ValueError(msg)
    if page < 1:
        msg = f"page must be positive, got {page}"
        raise ValueError(msg)

    last_page = max(math.ceil(total / count), 1)
    return Paginator(
        data=list(items),
        total=total,
        per_page=count,
        current_page=page,
        last_page=last_page,
        has_more_pages=page < last_page,
    )
