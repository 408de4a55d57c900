"""
Backoff helpers for retrying GoCardless API requests.
"""

import asyncio
from enum import Enum
from typing import Union


class BackoffStrategy(str, Enum):
    """Delay growth between retry attempts."""
    LINEAR = "linear"
    EXPONENTIAL = "exponential"


def calculate_backoff(
    attempt_number: int,
    strategy: Union[BackoffStrategy, str],
    initial_delay_ms: float,
    max_delay_ms: float,
) -> float:
    """
    Calculate the delay before a retry attempt.

    Linear grows as 1x, 2x, 3x the initial delay; exponential as
    1x, 2x, 4x. Attempt 0 yields 0 (linear) or half the initial
    delay (exponential).

    Args:
        attempt_number: Retry attempt (0-indexed)
        strategy: "linear" or "exponential"
        initial_delay_ms: Base delay in milliseconds
        max_delay_ms: Upper bound in milliseconds

    Returns:
        Delay in milliseconds, capped at max_delay_ms
    """
    if BackoffStrategy(strategy) is BackoffStrategy.EXPONENTIAL:
        delay = initial_delay_ms * (2 ** (attempt_number - 1))
    else:
        delay = initial_delay_ms * attempt_number

    return min(delay, max_delay_ms)


async def sleep(ms: float) -> None:
    """Suspend the current task for ms milliseconds."""
    await asyncio.sleep(ms / 1000)
