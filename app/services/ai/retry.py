"""
Bounded retry with exponential backoff for AI service calls.

Only errors that carry `retryable=True` are retried; everything else
propagates on the first failure. The delay doubles per attempt and gets up
to MAX_JITTER_MS of random jitter so concurrently retrying clients spread out.
"""

import asyncio
import logging
import random
from collections.abc import Awaitable, Callable
from typing import TypeVar

from app.services.ai.constants import DEFAULT_BASE_DELAY_MS, DEFAULT_MAX_ATTEMPTS, MAX_JITTER_MS

logger = logging.getLogger(__name__)

T = TypeVar("T")


def backoff_delay(attempt: int, base_delay_ms: int = DEFAULT_BASE_DELAY_MS) -> float:
    """Seconds to wait after the given 0-based failed attempt."""
    delay_ms = base_delay_ms * (2**attempt) + random.random() * MAX_JITTER_MS
    return delay_ms / 1000


def is_retryable(error: BaseException) -> bool:
    """Whether an error is explicitly marked as safe to retry."""
    return getattr(error, "retryable", False) is True


async def call_with_retry(
    fn: Callable[[], Awaitable[T]],
    *,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    base_delay_ms: int = DEFAULT_BASE_DELAY_MS,
    operation_name: str = "AI request",
) -> T:
    """Execute an async function, retrying on errors marked retryable.

    Args:
        fn: Zero-arg async callable; called once per attempt.
        max_attempts: Total attempts including the first.
        base_delay_ms: Delay before the second attempt; doubles after that.
        operation_name: Label for log messages.

    Returns:
        The value returned by *fn* on a successful attempt.

    Raises:
        The first non-retryable exception, or the last retryable one once
        all attempts are used.
    """
    if max_attempts < 1:
        raise ValueError("max_attempts must be at least 1")

    for attempt in range(max_attempts):
        try:
            return await fn()
        except Exception as e:
            if not is_retryable(e):
                raise

            if attempt >= max_attempts - 1:
                logger.error(f"{operation_name} failed after {max_attempts} attempts: {e}")
                raise

            delay = backoff_delay(attempt, base_delay_ms)
            logger.warning(
                f"{operation_name} error (attempt {attempt + 1}/{max_attempts}), "
                f"retrying in {delay:.1f}s: {e}"
            )
            await asyncio.sleep(delay)

    # Unreachable: the loop either returns or raises
    raise RuntimeError(f"{operation_name} failed after retries")
