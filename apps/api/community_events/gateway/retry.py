"""Retry for idempotent reads.

Writes are never retried: a repeated insert can repeat its side effects.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from functools import wraps
from typing import Any, TypeVar, cast

import structlog

from community_events.services.exceptions import PersistenceError

logger = structlog.get_logger(__name__)

T = TypeVar("T")


def with_retry(
    max_attempts: int = 3,
    delay: float = 0.5,
    backoff: float = 2.0,
    exceptions: tuple[type[BaseException], ...] = (PersistenceError,),
    sleep: Callable[[float], None] = time.sleep,
) -> Callable[[Callable[..., T]], Callable[..., T]]:
    if max_attempts < 1:
        raise ValueError("max_attempts must be at least 1")

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> T:
            current_delay = delay
            for attempt in range(1, max_attempts + 1):
                try:
                    return cast(T, func(*args, **kwargs))
                except exceptions as exc:
                    if attempt == max_attempts:
                        logger.error(
                            "read_retry_exhausted",
                            func=func.__name__,
                            attempts=max_attempts,
                            error=str(exc),
                        )
                        raise
                    logger.warning(
                        "read_retry",
                        func=func.__name__,
                        attempt=attempt,
                        max_attempts=max_attempts,
                        retry_in=current_delay,
                        error=str(exc),
                    )
                    sleep(current_delay)
                    current_delay *= backoff
            raise AssertionError("unreachable")

        return wrapper

    return decorator
