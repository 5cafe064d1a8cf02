"""Value objects describing one cached field invocation."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from graph_cache_service.core.exceptions import CacheKeyError

__all__ = ["ROOT_SEGMENT", "EntityReference", "FieldContext", "PrivacyScope"]

# Entity segment used for fields on a root operation type
ROOT_SEGMENT = "query"


@dataclass(frozen=True)
class EntityReference:
    """The parent object a cached field belongs to.

    Root references stand for the operation root and carry no identity.
    Every other reference must carry a non-None identity value.
    """

    type_name: str
    identity: Any = None
    root: bool = False

    def __post_init__(self) -> None:
        if not self.root and self.identity is None:
            msg = f"{self.type_name} reference has no identity value"
            raise CacheKeyError(msg, extra={"type_name": self.type_name})

    @classmethod
    def for_root(cls, type_name: str = "Query") -> EntityReference:
        return cls(type_name=type_name, root=True)

    @classmethod
    def for_entity(cls, type_name: str, identity: Any) -> EntityReference:
        return cls(type_name=type_name, identity=identity)

    @property
    def has_identity(self) -> bool:
        return not self.root

    @property
    def segment(self) -> str:
        """Key segment naming this entity, e.g. ``user:1`` or ``query``."""
        if self.root:
            return ROOT_SEGMENT
        return f"{self.type_name.lower()}:{self.identity}"


@dataclass(frozen=True)
class PrivacyScope:
    """Public, or fenced to one principal.

    A private scope without a principal is its own scope (``auth:none:``);
    it never falls back to public.
    """

    private: bool = False
    principal_id: str | None = None

    @classmethod
    def public(cls) -> PrivacyScope:
        return cls()

    @classmethod
    def for_principal(cls, principal_id: Any) -> PrivacyScope:
        return cls(private=True, principal_id=None if principal_id is None else str(principal_id))

    @property
    def prefix(self) -> str:
        if not self.private:
            return ""
        return f"auth:{self.principal_id if self.principal_id is not None else 'none'}:"


@dataclass(frozen=True)
class FieldContext:
    """What the execution pipeline knows about one cacheable field invocation.

    Attributes:
        entity: Parent entity reference
        field_name: Field name as exposed in the schema
        arguments: Resolved arguments for this invocation
        cacheable: Whether the field is annotated cacheable
        private: Whether the cache entry is fenced to the principal
        principal_id: Identifier of the requesting principal, if any
        ttl: Per-field TTL override in seconds
    """

    entity: EntityReference
    field_name: str
    arguments: Mapping[str, Any] = field(default_factory=dict)
    cacheable: bool = True
    private: bool = False
    principal_id: str | None = None
    ttl: int | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "arguments", MappingProxyType(dict(self.arguments)))

    @property
    def scope(self) -> PrivacyScope:
        if self.private:
            return PrivacyScope.for_principal(self.principal_id)
        return PrivacyScope.public()

    @property
    def qualified_name(self) -> str:
        """``Type.field`` label used in logs and metrics."""
        return f"{self.entity.type_name}.{self.field_name}"
