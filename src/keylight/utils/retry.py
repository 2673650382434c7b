"""Bounded retry with a fixed delay between attempts."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RetryExhausted(Exception):
    """Raised when every attempt failed; wraps the last underlying error."""

    def __init__(self, attempts: int, last_exception: Exception) -> None:
        self.attempts = attempts
        self.last_exception = last_exception
        super().__init__(f"failed after {attempts} attempts: {last_exception}")


async def retry_async(
    func: Callable[[], Awaitable[T]],
    *,
    attempts: int = 3,
    delay: float = 0.1,
    retryable_exceptions: tuple[type[Exception], ...] = (Exception,),
) -> T:
    """Await ``func()`` up to ``attempts`` times, sleeping ``delay`` between tries.

    Attempts run sequentially. The delay is only applied between attempts,
    never after the last one.

    Raises:
        RetryExhausted: If all attempts fail. The last error is chained as
            ``__cause__`` and kept on ``last_exception``.
    """
    if attempts < 1:
        raise ValueError(f"attempts must be at least 1, got {attempts}")

    last_exception: Exception | None = None
    for attempt in range(1, attempts + 1):
        try:
            return await func()
        except retryable_exceptions as exc:
            last_exception = exc
            if attempt == attempts:
                break
            logger.debug(
                "Attempt %d/%d failed: %s; retrying in %.2fs",
                attempt,
                attempts,
                exc,
                delay,
            )
            await asyncio.sleep(delay)

    assert last_exception is not None
    raise RetryExhausted(attempts, last_exception) from last_exception
