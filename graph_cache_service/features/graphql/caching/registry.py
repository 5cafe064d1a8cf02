"""Factory registry producing one cache value per cached field invocation."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from contextlib import contextmanager
import logging

from graph_cache_service.features.graphql.caching.models import FieldContext
from graph_cache_service.features.graphql.caching.values import CacheValue, FieldCacheValue

logger = logging.getLogger(__name__)

__all__ = ["CacheStrategyRegistry", "CacheValueFactory", "default_cache_value_factory"]

CacheValueFactory = Callable[[FieldContext], CacheValue]


def default_cache_value_factory(context: FieldContext) -> CacheValue:
    return FieldCacheValue.from_context(context)


class CacheStrategyRegistry:
    """Holds the factory used to build cache values.

    One registry is created at startup and handed to the interceptor.
    Replacing the factory is last-write-wins and is meant for process init
    or test setup, not for live requests.

    Example:
        registry = CacheStrategyRegistry()
        registry.set_factory(lambda context: FixedKey("foo"))

        with registry.override(my_factory):
            ...  # my_factory active here only
    """

    def __init__(self, factory: CacheValueFactory | None = None) -> None:
        self._factory: CacheValueFactory = factory or default_cache_value_factory

    @property
    def factory(self) -> CacheValueFactory:
        return self._factory

    def set_factory(self, factory: CacheValueFactory) -> None:
        """Replace the active factory."""
        logger.debug(
            "Cache value factory replaced",
            extra={"factory": getattr(factory, "__qualname__", repr(factory))},
        )
        self._factory = factory

    def reset(self) -> None:
        """Restore the default factory."""
        self._factory = default_cache_value_factory

    def create(self, context: FieldContext) -> CacheValue:
        return self._factory(context)

    @contextmanager
    def override(self, factory: CacheValueFactory) -> Iterator[CacheStrategyRegistry]:
        """Install ``factory`` for the duration of the block."""
        previous = self._factory
        self._factory = factory
        try:
            yield self
        finally:
            self._factory = previous
