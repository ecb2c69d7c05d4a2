"""
Stop-Loss Swap Monitor

Drives the periodic evaluation loop: sample price, update the trailing
threshold, consult the position state machine, execute the swap (with
retries) and commit the new position on success.

Exactly one cycle runs at a time. A cycle that overruns the check interval
delays the next one; cycles never overlap. Only startup errors escape
start() - everything in steady state is logged and absorbed.
"""

import logging
import time
from enum import Enum
from typing import Optional

from trailswap.exceptions import PriceUnavailableError, RetryCancelledError
from trailswap.exchange_clients.base import BalanceReader, SwapExecutor
from trailswap.price_feeds.base import PriceSource
from trailswap.services.shutdown_manager import ShutdownManager
from trailswap.trading_engine.models import (
    EvaluationResult,
    Position,
    StrategyConfig,
    SwapAction,
)
from trailswap.trading_engine.position_manager import PositionStateMachine, determine_initial_position
from trailswap.trading_engine.swap_executor import SwapExecutionService
from trailswap.trading_engine.swap_logger import SwapLogger
from trailswap.trading_engine.trailing_stops import ThresholdTracker

logger = logging.getLogger(__name__)


class MonitorState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    CANCELLED = "cancelled"


class SwapMonitor:
    """
    Background service that holds one position and flips it on stop-loss crossings.

    Usage:
        monitor = SwapMonitor(config, price_source, balance_reader, executor)
        await monitor.start(shutdown_manager)  # returns after shutdown is requested
    """

    def __init__(
        self,
        config: StrategyConfig,
        price_source: PriceSource,
        balance_reader: BalanceReader,
        executor: SwapExecutor,
        swap_logger: Optional[SwapLogger] = None,
    ):
        self.config = config
        self.price_source = price_source
        self.balance_reader = balance_reader
        self.executor = executor
        self.swap_logger = swap_logger or SwapLogger()

        self.tracker = ThresholdTracker(config)
        self.state = MonitorState.IDLE
        self.state_machine: Optional[PositionStateMachine] = None
        self.swap_service: Optional[SwapExecutionService] = None
        self.shutdown: Optional[ShutdownManager] = None
        self.last_result: Optional[EvaluationResult] = None
        self.cycles = 0

    @property
    def position(self) -> Optional[Position]:
        return self.state_machine.position if self.state_machine else None

    async def initialize(self, shutdown: ShutdownManager, initial_position: Optional[Position] = None):
        """
        One-time startup: validate config and determine the starting position.

        Args:
            shutdown: Cancellation signal shared with the retry wrapper
            initial_position: Skip the balance lookup and start from this position

        Raises:
            ConfigurationError: Invalid strategy config
            StartupError: Initial position could not be determined
        """
        self.config.validate()
        self.shutdown = shutdown

        if initial_position is None:
            initial_position = await determine_initial_position(
                self.balance_reader,
                self.config.asset_a,
                self.config.asset_b,
                self.config.materiality_threshold,
            )

        self.state_machine = PositionStateMachine(initial_position)
        self.swap_service = SwapExecutionService(
            config=self.config,
            balance_reader=self.balance_reader,
            executor=self.executor,
            shutdown=shutdown,
            swap_logger=self.swap_logger,
        )
        logger.info(f"Starting position: {self._describe(initial_position)}")

    async def start(self, shutdown: ShutdownManager):
        """
        Run until shutdown is requested.

        Raises:
            ConfigurationError, StartupError: Before the loop starts
            RuntimeError: If this monitor was already started
        """
        if self.state is not MonitorState.IDLE:
            raise RuntimeError(f"Monitor already {self.state.value}")

        if shutdown.is_shutting_down:
            self.state = MonitorState.CANCELLED
            logger.info("Shutdown requested before start - monitor not started")
            return

        await self.initialize(shutdown)
        self.state = MonitorState.RUNNING

        mode = (
            f"dynamic, trailing ${self.config.threshold_trail_gap:.2f} below the high"
            if self.config.dynamic_enabled else "static"
        )
        logger.info(
            f"Starting price monitoring. Stop loss set at ${self.config.initial_threshold:.2f} ({mode}), "
            f"checking every {self.config.check_interval_seconds}s"
        )

        try:
            await self._monitor_loop()
        finally:
            self.state = MonitorState.CANCELLED
            logger.info("Swap monitor stopped")

    async def _monitor_loop(self):
        """Fixed-period loop; waits are cancellable, cycles are sequential"""
        interval = float(self.config.check_interval_seconds)
        elapsed = 0.0

        while True:
            if await self.shutdown.wait(max(0.0, interval - elapsed)):
                break

            started = time.monotonic()
            try:
                await self.run_cycle()
            except RetryCancelledError as e:
                logger.info(f"Swap abandoned during shutdown: {e}")
                break
            except Exception as e:
                logger.error(f"Error in monitoring cycle: {e}", exc_info=True)
            elapsed = time.monotonic() - started

            if elapsed > interval:
                logger.debug(f"Cycle took {elapsed:.1f}s (interval {interval:.0f}s) - next cycle runs immediately")

    async def run_cycle(self) -> Optional[EvaluationResult]:
        """
        Evaluate once.

        Returns:
            EvaluationResult, or None if the price was unavailable (cycle skipped)

        Raises:
            RetryCancelledError: Shutdown interrupted a swap's retries
        """
        if self.state_machine is None or self.swap_service is None:
            raise RuntimeError("Monitor not initialized - call initialize() or start() first")

        symbol = self.config.asset_a.symbol
        try:
            price = await self.price_source.get_price()
        except PriceUnavailableError as e:
            logger.warning(f"Error getting {symbol} price: {e}. Skipping this cycle.")
            return None

        threshold = self.tracker.update(price)
        position = self.state_machine.position
        action = self.state_machine.decide(price, threshold)

        logger.info(
            f"Current {symbol} price: ${price:.2f}, Stop loss: ${threshold:.2f}, "
            f"Position: {self._describe(position)}"
        )

        swapped = False
        if action is not SwapAction.NONE:
            swapped = await self._act(action, price)

        result = EvaluationResult(
            price=price,
            effective_threshold=threshold,
            position=position,
            action=action,
            swapped=swapped,
        )
        self.last_result = result
        self.cycles += 1
        return result

    async def _act(self, action: SwapAction, price: float) -> bool:
        if self.shutdown is not None and self.shutdown.is_shutting_down:
            logger.info(f"Shutdown requested - not starting {action.value}")
            return False

        a, b = self.config.asset_a.symbol, self.config.asset_b.symbol
        if action is SwapAction.SWAP_A_TO_B:
            logger.info(f"Stop loss triggered at ${price:.2f}! Swapping {a} to {b}...")
        else:
            logger.info(f"Buy back triggered at ${price:.2f}! Swapping {b} to {a}...")

        result = await self.swap_service.execute(action)
        if result is None:
            logger.info(f"Position unchanged: {self._describe(self.state_machine.position)}")
            return False

        self.state_machine.commit(action)
        logger.info(f"Successfully swapped to {self._describe(self.state_machine.position)}")
        return True

    def _describe(self, position: Position) -> str:
        if position is Position.HOLDING_A:
            return self.config.asset_a.symbol
        return self.config.asset_b.symbol

    def get_status(self) -> dict:
        """Get monitor status"""
        return {
            "state": self.state.value,
            "position": self.position.value if self.position else None,
            "highest_price_seen": self.tracker.highest_price_seen,
            "cycles": self.cycles,
            "last_price": self.last_result.price if self.last_result else None,
            "last_threshold": self.last_result.effective_threshold if self.last_result else None,
        }
