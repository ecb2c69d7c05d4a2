"""
Fixed-delay retry wrapper for swap execution

Every failure from the wrapped operation is retried the same way - the
executor's errors are opaque here. No backoff and no jitter: the retries
exist to ride out transient RPC/network failures.
"""

import asyncio
import logging
from typing import Awaitable, Callable, Optional, TypeVar

from trailswap.exceptions import ExhaustedRetriesError, RetryCancelledError
from trailswap.services.shutdown_manager import ShutdownManager

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RetryingExecutor:
    """
    Runs an async operation up to `attempts` times, `delay_seconds` apart.

    The inter-attempt delay is the only place this wrapper waits, and it is
    cancellable through the ShutdownManager. An attempt that is already
    running is left to finish.
    """

    def __init__(
        self,
        attempts: int,
        delay_seconds: float,
        shutdown: Optional[ShutdownManager] = None,
    ):
        if attempts < 1:
            raise ValueError(f"attempts must be >= 1, got {attempts}")
        self.attempts = attempts
        self.delay_seconds = delay_seconds
        self.shutdown = shutdown

    async def run(self, operation: Callable[[], Awaitable[T]]) -> T:
        """
        Call `operation` until it succeeds or attempts run out.

        Returns:
            The operation's result from the first successful attempt

        Raises:
            ExhaustedRetriesError: All attempts failed (carries the last error)
            RetryCancelledError: Shutdown observed during a retry delay
        """
        last_error: Optional[Exception] = None

        for attempt in range(1, self.attempts + 1):
            logger.info(f"Swap attempt {attempt}/{self.attempts}")
            try:
                return await operation()
            except Exception as e:
                last_error = e
                logger.warning(f"Swap attempt {attempt}/{self.attempts} failed: {e}")

            if attempt < self.attempts:
                logger.info(f"Retrying in {self.delay_seconds} seconds...")
                if await self._sleep():
                    logger.info(f"Shutdown requested - abandoning retries after attempt {attempt}")
                    raise RetryCancelledError(attempt, last_error)

        raise ExhaustedRetriesError(self.attempts, last_error)

    async def _sleep(self) -> bool:
        """Wait out the retry delay; True if cancelled meanwhile"""
        if self.shutdown is not None:
            return await self.shutdown.wait(self.delay_seconds)
        await asyncio.sleep(self.delay_seconds)
        return False
