"""
Swap execution for the trading engine

Turns a SwapAction into a concrete SwapRequest from fresh balances and runs
it through the retry wrapper:
- A -> B swaps everything above the minimum reserve of A
- B -> A swaps the entire B balance
- Nothing to swap is a local no-op, never retried
"""

import logging
from typing import Optional

from trailswap.exceptions import (
    BalanceUnavailableError,
    ExhaustedRetriesError,
    InsufficientBalanceError,
    RetryCancelledError,
)
from trailswap.exchange_clients.base import BalanceReader, SwapExecutor
from trailswap.services.shutdown_manager import ShutdownManager
from trailswap.trading_engine.models import StrategyConfig, SwapAction, SwapRequest, SwapResult
from trailswap.trading_engine.retry import RetryingExecutor
from trailswap.trading_engine.swap_logger import SwapLogger

logger = logging.getLogger(__name__)


class SwapExecutionService:
    """Computes swap amounts and executes swaps with retries"""

    def __init__(
        self,
        config: StrategyConfig,
        balance_reader: BalanceReader,
        executor: SwapExecutor,
        shutdown: Optional[ShutdownManager] = None,
        swap_logger: Optional[SwapLogger] = None,
    ):
        self.config = config
        self.balances = balance_reader
        self.executor = executor
        self.shutdown = shutdown
        self.swap_logger = swap_logger or SwapLogger()
        self.retrier = RetryingExecutor(
            attempts=config.retry_attempts,
            delay_seconds=config.retry_delay_seconds,
            shutdown=shutdown,
        )

    async def build_request(self, action: SwapAction) -> SwapRequest:
        """
        Build the swap request for an action from a fresh balance read.

        Raises:
            InsufficientBalanceError: Nothing left to swap
            BalanceUnavailableError: Balance could not be read
            ValueError: action is NONE
        """
        cfg = self.config

        if action is SwapAction.SWAP_A_TO_B:
            balance = await self.balances.get_balance(cfg.asset_a)
            swap_amount = balance - cfg.minimum_reserve
            if swap_amount <= 0:
                raise InsufficientBalanceError(
                    f"Not enough {cfg.asset_a.symbol} to swap while keeping "
                    f"{cfg.minimum_reserve} as minimum (balance {balance:.4f})",
                    available=balance,
                )
            logger.info(
                f"Swapping {swap_amount:.4f} {cfg.asset_a.symbol} to {cfg.asset_b.symbol} "
                f"(keeping {cfg.minimum_reserve:.4f} {cfg.asset_a.symbol} as minimum)"
            )
            from_asset, to_asset = cfg.asset_a, cfg.asset_b

        elif action is SwapAction.SWAP_B_TO_A:
            balance = await self.balances.get_balance(cfg.asset_b)
            swap_amount = balance
            if swap_amount <= 0:
                raise InsufficientBalanceError(f"Not enough {cfg.asset_b.symbol} to swap", available=balance)
            logger.info(f"Swapping {swap_amount:.2f} {cfg.asset_b.symbol} to {cfg.asset_a.symbol}")
            from_asset, to_asset = cfg.asset_b, cfg.asset_a

        else:
            raise ValueError("No swap to build for action NONE")

        amount = from_asset.to_smallest_unit(swap_amount)
        if amount <= 0:
            raise InsufficientBalanceError(
                f"{swap_amount} {from_asset.symbol} is below one base unit", available=balance
            )

        return SwapRequest(
            from_asset=from_asset,
            to_asset=to_asset,
            amount=amount,
            slippage_bps=cfg.slippage_for(action),
        )

    async def execute(self, action: SwapAction) -> Optional[SwapResult]:
        """
        Execute a swap action end to end.

        Returns:
            SwapResult on success, None if skipped or failed (position must not change)

        Raises:
            RetryCancelledError: Shutdown interrupted the retry sequence
        """
        try:
            request = await self.build_request(action)
        except InsufficientBalanceError as e:
            logger.info(f"Skipping {action.value}: {e}")
            from_asset, to_asset = self._assets_for(action)
            self.swap_logger.log_skipped(
                from_asset.symbol, to_asset.symbol, str(e), self.config.slippage_for(action)
            )
            return None
        except BalanceUnavailableError as e:
            logger.warning(f"Skipping {action.value}: balance unavailable: {e}")
            return None

        self.swap_logger.log_attempt(request)

        try:
            result = await self.retrier.run(lambda: self._attempt(request))
        except ExhaustedRetriesError as e:
            logger.error(f"Failed to {action.value}: {e}")
            self.swap_logger.log_failure(request, e)
            return None
        except RetryCancelledError as e:
            self.swap_logger.log_cancelled(request, e)
            raise

        self.swap_logger.log_success(request, result.signature)
        logger.info(
            f"Successfully swapped {request.ui_amount} {request.from_asset.symbol} "
            f"to {request.to_asset.symbol} (signature {result.signature})"
        )
        return result

    async def _attempt(self, request: SwapRequest) -> SwapResult:
        if self.shutdown is None:
            return await self.executor.swap(request)
        async with self.shutdown.swap_in_flight():
            return await self.executor.swap(request)

    def _assets_for(self, action: SwapAction):
        if action is SwapAction.SWAP_A_TO_B:
            return self.config.asset_a, self.config.asset_b
        return self.config.asset_b, self.config.asset_a
