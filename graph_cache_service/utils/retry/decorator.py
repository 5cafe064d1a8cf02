from __future__ import annotations

import asyncio
from functools import wraps
import logging
import time
from typing import TYPE_CHECKING, ParamSpec, TypeVar

from graph_cache_service.infra.metrics.tracking import (
    track_retry_attempt,
    track_retry_exhausted,
)

from .exceptions import RetryError
from .strategies import RetryStrategy

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

logger = logging.getLogger(__name__)

P = ParamSpec("P")
R = TypeVar("R")


def retry(
    max_attempts: int = 3,
    initial_delay: float = 0.1,
    max_delay: float = 5.0,
    exponential_base: float = 2.0,
    jitter: bool = True,
    exceptions: tuple[type[Exception], ...] = (Exception,),
    stop_after_delay: float | None = None,
    operation: str | None = None,
) -> Callable[[Callable[P, Awaitable[R]]], Callable[P, Awaitable[R]]]:
    """Retry an async callable on the given exceptions with exponential backoff.

    Exceptions outside ``exceptions`` propagate immediately. Once attempts or
    ``stop_after_delay`` run out, the last error is wrapped in RetryError.
    ``operation`` labels logs and metrics (defaults to the function name).
    """
    strategy = RetryStrategy(
        max_attempts=max_attempts,
        initial_delay=initial_delay,
        max_delay=max_delay,
        exponential_base=exponential_base,
        jitter=jitter,
        exceptions=exceptions,
    )

    def decorator(func: Callable[P, Awaitable[R]]) -> Callable[P, Awaitable[R]]:
        name = operation or func.__name__

        @wraps(func)
        async def async_wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            start = time.monotonic()

            for attempt in range(max_attempts):
                try:
                    return await func(*args, **kwargs)
                except Exception as e:
                    if not strategy.should_retry(e):
                        raise

                    elapsed = time.monotonic() - start
                    exhausted = attempt >= max_attempts - 1
                    if exhausted or (stop_after_delay is not None and elapsed >= stop_after_delay):
                        track_retry_exhausted(name)
                        logger.error(
                            f"All retry attempts exhausted for {name}",
                            extra={
                                "operation": name,
                                "attempts": attempt + 1,
                                "last_exception": str(e),
                                "elapsed": elapsed,
                            },
                        )
                        raise RetryError(e, attempt + 1) from e

                    delay = strategy.calculate_delay(attempt)
                    track_retry_attempt(name, attempt + 2)
                    logger.warning(
                        f"Retrying {name} after {delay:.2f}s (attempt {attempt + 1}/{max_attempts})",
                        extra={
                            "operation": name,
                            "attempt": attempt + 1,
                            "delay": delay,
                            "exception": str(e),
                        },
                    )
                    await asyncio.sleep(delay)

            msg = "Retry logic error: exhausted all attempts"
            raise RuntimeError(msg)

        return async_wrapper

    return decorator
