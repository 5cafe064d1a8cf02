"""Invalidation tags for cached field entries.

An entry for field ``posts`` of ``User`` 1 is indexed under

    graphql:user:1         every cached field of that user
    graphql:user:1:posts   just this field

so a mutation can drop either without knowing any argument-specific key.
Root-level fields have no entity and are never tagged.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from graph_cache_service.features.graphql.caching.models import EntityReference

__all__ = ["DEFAULT_TAG_PREFIX", "entity_tag", "field_tag", "tags_for"]

DEFAULT_TAG_PREFIX = "graphql"


def entity_tag(type_name: str, identity: Any, prefix: str = DEFAULT_TAG_PREFIX) -> str:
    return f"{prefix}:{type_name.lower()}:{identity}"


def field_tag(
    type_name: str,
    identity: Any,
    field_name: str,
    prefix: str = DEFAULT_TAG_PREFIX,
) -> str:
    return f"{entity_tag(type_name, identity, prefix)}:{field_name}"


def tags_for(
    entity: EntityReference,
    field_name: str,
    prefix: str = DEFAULT_TAG_PREFIX,
) -> tuple[str, ...]:
    """Tags for one entry, empty for root-level fields."""
    if not entity.has_identity:
        return ()
    return (
        entity_tag(entity.type_name, entity.identity, prefix),
        field_tag(entity.type_name, entity.identity, field_name, prefix),
    )
