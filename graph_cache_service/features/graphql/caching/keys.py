"""Cache key derivation for cached fields.

A key names one field of one entity under one argument set:

    user:1:name                  entity "User" with identity 1, field "name"
    user:foo@bar.com:name        same field keyed by a custom identifying attribute
    user:1:posts:count:3         arguments folded in, sorted by name
    query:users:count:5          root-level field, entity segment is "query"
    auth:7:user:1:name           private entry fenced to principal 7

Keys are plain strings built only from their inputs, so the same inputs
give the same key in every process.
"""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
import json
from typing import TYPE_CHECKING, Any

from graph_cache_service.features.graphql.caching.models import PrivacyScope

if TYPE_CHECKING:
    from graph_cache_service.features.graphql.caching.models import EntityReference

__all__ = ["derive_key", "serialize_argument", "serialize_arguments"]

KEY_SEPARATOR = ":"

_RESERVED_WORDS = frozenset({"", "null", "true", "false"})
# Strings opening like JSON documents are quoted so they never match a rendered input object
_JSON_OPENERS = frozenset({"\"", "{", "["})


def serialize_argument(value: Any) -> str:
    """Render one argument value as a key fragment.

    Numbers render bare, booleans as ``true``/``false`` and None as
    ``null``. Strings render as text unless they would read as one of
    those, in which case they are JSON-quoted. Enums render by their value;
    everything else as compact JSON with sorted keys so equal mappings
    render identically. The separator is backslash-escaped in every
    fragment, so no value can spill into the next ``name:value`` pair.
    """
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Enum):
        return serialize_argument(value.value)
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, str):
        return _escape(json.dumps(value) if _is_ambiguous(value) else value)
    return _escape(json.dumps(_plain(value), sort_keys=True, separators=(",", ":"), default=str))


def serialize_arguments(arguments: Mapping[str, Any]) -> str:
    """Fold an argument set into ``name:value`` pairs sorted by name."""
    return KEY_SEPARATOR.join(
        f"{name}{KEY_SEPARATOR}{serialize_argument(value)}"
        for name, value in sorted(arguments.items())
    )


def derive_key(
    entity: EntityReference,
    field_name: str,
    arguments: Mapping[str, Any] | None = None,
    scope: PrivacyScope | None = None,
) -> str:
    """Derive the cache key for one field invocation.

    Args:
        entity: Parent entity (root references key as ``query``)
        field_name: Field being resolved
        arguments: Resolved field arguments (order is irrelevant)
        scope: Privacy scope; private scopes prefix ``auth:<principal>:``

    Returns:
        Deterministic cache key
    """
    key = f"{entity.segment}{KEY_SEPARATOR}{field_name}"
    if arguments:
        key = f"{key}{KEY_SEPARATOR}{serialize_arguments(arguments)}"
    return f"{(scope or PrivacyScope.public()).prefix}{key}"


def _escape(fragment: str) -> str:
    return fragment.replace("\\", "\\\\").replace(KEY_SEPARATOR, f"\\{KEY_SEPARATOR}")


def _is_ambiguous(value: str) -> bool:
    """Whether a raw string could be mistaken for a non-string fragment."""
    if value in _RESERVED_WORDS or value[:1] in _JSON_OPENERS:
        return True
    try:
        float(value)
    except ValueError:
        return False
    return True


def _plain(value: Any) -> Any:
    """Convert input objects into JSON-friendly structures."""
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, Mapping):
        return {str(k): _plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        items = [_plain(v) for v in value]
        return sorted(items, key=str) if isinstance(value, (set, frozenset)) else items
    if hasattr(value, "__dict__") and not isinstance(value, type):
        return {k: _plain(v) for k, v in vars(value).items() if not k.startswith("_")}
    return value
