"""Retry-with-exponential-backoff for async operations."""

from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, TypeVar

from loguru import logger

T = TypeVar("T")

Operation = Callable[[], Awaitable[T]]
RetryPredicate = Callable[[Exception], bool]


def always_retry(_: Exception) -> bool:
    return True


async def retry_with_backoff(
    operation: Operation[T],
    *,
    max_retries: int,
    is_retryable: RetryPredicate = always_retry,
    base_delay: float = 1.0,
    label: str = "operation",
) -> T:
    """Await *operation* up to ``max_retries + 1`` times.

    The delay before retry ``n`` (0-indexed) is ``base_delay * 2 ** n``.
    Non-retryable failures and the failure of the last attempt are re-raised
    unchanged.
    """
    if max_retries < 0:
        raise ValueError(f"max_retries must be >= 0, got {max_retries}")

    attempts = max_retries + 1
    for attempt in range(attempts):
        try:
            return await operation()
        except Exception as e:
            if attempt == attempts - 1 or not is_retryable(e):
                raise
            delay = base_delay * (2 ** attempt)
            logger.info(
                f"{label} failed (attempt {attempt + 1}/{attempts}), retrying in {delay}s: {e}"
            )
            await asyncio.sleep(delay)

    raise AssertionError("unreachable")
