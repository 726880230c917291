"""Bounded retry for transient failures."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

_logger = logging.getLogger(__name__)

T = TypeVar("T")


async def with_retry(
    func: Callable[[], Awaitable[T]],
    *,
    attempts: int,
    delay_seconds: float,
    retry_on: tuple[type[BaseException], ...],
    action: str = "call",
) -> T:
    """Await func, retrying up to attempts times on the given exception types.

    Exceptions outside ``retry_on`` propagate immediately. After the last
    attempt the final exception is re-raised.
    """
    attempt = 0
    while True:
        try:
            return await func()
        except retry_on as exc:
            attempt += 1
            _logger.warning(
                "%s failed (attempt %s/%s): %s", action, attempt, attempts, exc
            )
            if attempt >= attempts:
                raise
            await asyncio.sleep(delay_seconds)
