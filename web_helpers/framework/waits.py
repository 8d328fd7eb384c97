# ================================================================================
# Wait Helpers Module
# ================================================================================
#
# Fixed-interval polling used by the UI helpers.
#
# Key Features:
#   - Bounded poll loop against a deadline captured when the wait starts
#   - Optional stop event so another thread can end a blocking wait
#   - Async variant for asyncio-based callers (cancellable via the task)
#   - Loguru logging of every wait outcome
#
# Timing contract:
#   The condition is checked first, then the caller sleeps one interval.
#   A condition never met with timeout T and interval P fails after an
#   elapsed time in [T, T + P).
#
# Usage:
#   poll_until(lambda: page_has_banner(), WaitConfig(poll_interval=250, timeout=5000))
#   await poll_until_async(check_fn, WaitConfig(timeout=10000))
#
# ================================================================================

import asyncio
import threading
import time
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional, Union

from loguru import logger

from .exceptions import WaitCancelledError, WaitTimeoutError


DEFAULT_POLL_INTERVAL_MS = 500
DEFAULT_TIMEOUT_MS = 3000


@dataclass(frozen=True)
class WaitConfig:
    """
    Configuration for wait operations.

    Attributes:
        poll_interval: Milliseconds between condition checks
        timeout: Milliseconds before giving up
    """
    poll_interval: int = DEFAULT_POLL_INTERVAL_MS
    timeout: int = DEFAULT_TIMEOUT_MS

    def __post_init__(self) -> None:
        if self.poll_interval <= 0:
            raise ValueError(f"poll_interval must be positive, got {self.poll_interval}")
        if self.timeout < 0:
            raise ValueError(f"timeout must not be negative, got {self.timeout}")


def sleep_ms(milliseconds: int) -> None:
    """Block the calling thread for the given number of milliseconds."""
    time.sleep(milliseconds / 1000)


def poll_until(
    check_fn: Callable[[], bool],
    config: Optional[WaitConfig] = None,
    description: str = "Waiting for condition",
    stop_event: Optional[threading.Event] = None,
) -> int:
    """
    Block until check_fn returns a truthy value.

    Args:
        check_fn: Zero-argument predicate evaluated once per interval
        config: Poll interval and timeout (defaults to WaitConfig())
        description: Human-readable description for logging
        stop_event: When set by another thread, the wait ends early

    Returns:
        Number of checks performed

    Raises:
        WaitTimeoutError: If the deadline passes without success
        WaitCancelledError: If stop_event is set while waiting
    """
    config = config or WaitConfig()
    start = time.monotonic()
    deadline = start + config.timeout / 1000
    interval = config.poll_interval / 1000
    attempts = 0

    logger.debug(
        f"Starting wait: {description} "
        f"(timeout={config.timeout}ms, poll_interval={config.poll_interval}ms)"
    )

    # Checked at least once, even with a zero timeout
    while True:
        attempts += 1
        if check_fn():
            elapsed = time.monotonic() - start
            logger.debug(f"Wait successful after {attempts} attempts ({elapsed:.2f}s): {description}")
            return attempts
        if time.monotonic() >= deadline:
            break

        if stop_event is not None:
            if stop_event.wait(interval):
                logger.warning(f"Wait cancelled after {attempts} attempts: {description}")
                raise WaitCancelledError(f"Wait cancelled: {description}")
        else:
            time.sleep(interval)

    elapsed = time.monotonic() - start
    message = f"Timeout after {elapsed:.2f}s ({attempts} attempts) waiting for: {description}"
    logger.warning(message)
    raise WaitTimeoutError(message)


async def poll_until_async(
    check_fn: Callable[[], Union[bool, Awaitable[bool]]],
    config: Optional[WaitConfig] = None,
    description: str = "Waiting for condition",
) -> int:
    """
    Suspending counterpart of poll_until.

    check_fn may be a plain or a coroutine function. Cancelling the awaiting
    task stops the wait at the next sleep.

    Returns:
        Number of checks performed

    Raises:
        WaitTimeoutError: If the deadline passes without success
    """
    config = config or WaitConfig()
    loop = asyncio.get_running_loop()
    start = loop.time()
    deadline = start + config.timeout / 1000
    interval = config.poll_interval / 1000
    attempts = 0

    while True:
        attempts += 1
        result = check_fn()
        if asyncio.iscoroutine(result):
            result = await result
        if result:
            logger.debug(f"Async wait successful after {attempts} attempts: {description}")
            return attempts
        if loop.time() >= deadline:
            break
        await asyncio.sleep(interval)

    message = f"Timeout after {loop.time() - start:.2f}s ({attempts} attempts) waiting for: {description}"
    logger.warning(message)
    raise WaitTimeoutError(message)


__all__ = [
    "WaitConfig",
    "poll_until",
    "poll_until_async",
    "sleep_ms",
    "DEFAULT_POLL_INTERVAL_MS",
    "DEFAULT_TIMEOUT_MS",
]
