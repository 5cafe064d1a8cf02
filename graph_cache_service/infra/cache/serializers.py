"""Payload serializers for byte-oriented cache backends."""

from __future__ import annotations

import json
import pickle
from typing import Any, Protocol


class Serializer(Protocol):
    """Converts cached values to and from bytes."""

    def dumps(self, value: Any) -> bytes: ...

    def loads(self, payload: bytes) -> Any: ...


class JSONSerializer:
    """JSON encoding. Only plain data (dicts, lists, scalars) round-trips."""

    def dumps(self, value: Any) -> bytes:
        return json.dumps(value, default=str).encode("utf-8")

    def loads(self, payload: bytes) -> Any:
        return json.loads(payload)


class PickleSerializer:
    """Pickle encoding.

    Keeps strawberry types, dataclasses and paginators intact. Only use it
    against a Redis instance the service trusts.
    """

    def dumps(self, value: Any) -> bytes:
        return pickle.dumps(value, protocol=pickle.HIGHEST_PROTOCOL)

    def loads(self, payload: bytes) -> Any:
        return pickle.loads(payload)  # noqa: S301


def get_serializer(name: str) -> Serializer:
    """Return the serializer registered under ``name`` (``json`` or ``pickle``)."""
    if name == "json":
        return JSONSerializer()
    if name == "pickle":
        return PickleSerializer()
    msg = f"Unknown cache serializer: {name!r}"
    raise ValueError(msg)


__all__ = ["JSONSerializer", "PickleSerializer", "Serializer", "get_serializer"]
