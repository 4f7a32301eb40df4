"""
Bounded polling primitive.

Every wait performed during a run (framework connection, loading-marker
clearance, URL-change detection, document readiness) is a single
condition polled against a deadline. This module implements that once.
"""

import asyncio
import time
from typing import Awaitable, Callable

from web_reader.utils.logging import get_logger

logger = get_logger(__name__)

Predicate = Callable[[], Awaitable[bool]]


async def wait_until(
    predicate: Predicate,
    timeout_ms: int,
    interval_ms: int = 100,
    description: str = "condition",
) -> bool:
    """
    Poll an async predicate until it holds or the deadline passes.

    The predicate is always checked at least once, even with a zero
    timeout. A predicate that raises counts as "not yet": pages being
    torn down by a navigation routinely fail evaluation mid-poll.

    Args:
        predicate: Coroutine function returning True when the wait is over
        timeout_ms: Maximum time to wait in milliseconds
        interval_ms: Delay between checks in milliseconds
        description: Human-readable name used in debug logs

    Returns:
        True if the predicate held before the deadline, False on timeout
    """
    deadline = time.monotonic() + timeout_ms / 1000
    attempts = 0

    while True:
        attempts += 1
        try:
            if await predicate():
                logger.debug(f"{description} satisfied after {attempts} checks")
                return True
        except Exception as e:
            logger.debug(f"{description} check failed: {e}")

        remaining = deadline - time.monotonic()
        if remaining <= 0:
            logger.debug(f"{description} not met within {timeout_ms}ms")
            return False

        await asyncio.sleep(min(interval_ms / 1000, remaining))
