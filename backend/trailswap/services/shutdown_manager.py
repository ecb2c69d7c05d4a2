"""
Graceful Shutdown Manager

Carries the external cancellation signal into the monitor loop and tracks
in-flight swap attempts. A swap attempt that has started is never
interrupted; cancellation only prevents the next retry or the next tick.
"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Optional

logger = logging.getLogger(__name__)


class ShutdownManager:
    """
    Cancellation signal plus in-flight swap tracking.

    Usage:
        # Around each swap attempt
        async with shutdown_manager.swap_in_flight():
            await executor.swap(request)

        # Cancellable sleep - True if shutdown was requested meanwhile
        if await shutdown_manager.wait(delay):
            return

        # From a signal handler
        shutdown_manager.request_shutdown()
    """

    def __init__(self):
        self._shutting_down = False
        self._in_flight_count = 0
        self._cancel_event = asyncio.Event()
        self._idle_event = asyncio.Event()
        self._idle_event.set()
        self._shutdown_requested_at: Optional[datetime] = None

    @property
    def is_shutting_down(self) -> bool:
        """Check if shutdown has been requested"""
        return self._shutting_down

    @property
    def in_flight_count(self) -> int:
        """Number of swap attempts currently executing"""
        return self._in_flight_count

    def request_shutdown(self):
        """Signal cancellation. Safe to call more than once and from signal handlers."""
        if self._shutting_down:
            return
        self._shutting_down = True
        self._shutdown_requested_at = datetime.now(timezone.utc)
        self._cancel_event.set()
        if self._in_flight_count:
            logger.info(f"Shutdown requested - waiting for {self._in_flight_count} in-flight swap to finish")
        else:
            logger.info("Shutdown requested")

    async def wait(self, timeout: float) -> bool:
        """
        Sleep for up to `timeout` seconds, waking early on shutdown.

        Returns:
            True if shutdown was requested (before or during the wait)
        """
        if self._cancel_event.is_set():
            return True
        if timeout <= 0:
            return False
        try:
            await asyncio.wait_for(self._cancel_event.wait(), timeout=timeout)
            return True
        except asyncio.TimeoutError:
            return False

    def increment_in_flight(self):
        """Mark a swap attempt as starting"""
        self._in_flight_count += 1
        self._idle_event.clear()
        logger.debug(f"Swap started - in-flight count: {self._in_flight_count}")

    def decrement_in_flight(self):
        """Mark a swap attempt as finished"""
        self._in_flight_count = max(0, self._in_flight_count - 1)
        logger.debug(f"Swap completed - in-flight count: {self._in_flight_count}")
        if self._in_flight_count == 0:
            self._idle_event.set()

    class SwapInFlight:
        """Context manager for tracking an in-flight swap attempt"""
        def __init__(self, manager: 'ShutdownManager'):
            self.manager = manager

        async def __aenter__(self):
            self.manager.increment_in_flight()
            return self

        async def __aexit__(self, exc_type, exc_val, exc_tb):
            self.manager.decrement_in_flight()
            return False

    def swap_in_flight(self) -> 'SwapInFlight':
        """Get a context manager for tracking an in-flight swap attempt"""
        return self.SwapInFlight(self)

    async def wait_until_idle(self, timeout: float = 60.0) -> bool:
        """
        Wait for in-flight swaps to complete.

        Returns:
            True if nothing is in flight, False on timeout
        """
        if self._in_flight_count == 0:
            return True
        try:
            await asyncio.wait_for(self._idle_event.wait(), timeout=timeout)
            return True
        except asyncio.TimeoutError:
            logger.warning(
                f"Shutdown timeout after {timeout}s - {self._in_flight_count} swap still in-flight"
            )
            return False

    def get_status(self) -> dict:
        """Get current shutdown manager status"""
        return {
            "shutting_down": self._shutting_down,
            "in_flight_count": self._in_flight_count,
            "shutdown_requested_at": self._shutdown_requested_at.isoformat() if self._shutdown_requested_at else None,
        }
