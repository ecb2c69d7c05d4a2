"""
Paper Trading Exchange Client

Simulates balances and swap fills for dry runs without touching the chain.
Uses the real price feed for fills; applies the full slippage tolerance as
the execution cost so simulated results are never better than live ones.
"""

import asyncio
import logging
import uuid
from typing import Dict, Optional

from trailswap.exceptions import ExecutionError, PriceUnavailableError
from trailswap.exchange_clients.base import BalanceReader, SwapExecutor
from trailswap.price_feeds.base import PriceSource
from trailswap.trading_engine.models import Asset, SwapRequest, SwapResult

logger = logging.getLogger(__name__)


class PaperTradingClient(BalanceReader, SwapExecutor):
    """
    Simulated wallet for paper trading.

    Prices are quoted as asset_b per one asset_a (e.g. USDC per SOL).
    """

    def __init__(
        self,
        price_source: PriceSource,
        asset_a: Asset,
        asset_b: Asset,
        balance_a: float = 10.0,
        balance_b: float = 0.0,
    ):
        """
        Initialize paper trading client.

        Args:
            price_source: Live price feed used for simulated fills
            asset_a: Tracked asset
            asset_b: Quote asset
            balance_a: Starting virtual balance of asset_a
            balance_b: Starting virtual balance of asset_b
        """
        self.price_source = price_source
        self.asset_a = asset_a
        self.asset_b = asset_b
        self.balances: Dict[str, float] = {
            asset_a.mint: balance_a,
            asset_b.mint: balance_b,
        }
        self._lock = asyncio.Lock()
        self.swaps_executed = 0

        logger.info(
            f"Paper trading enabled - virtual balances: {balance_a} {asset_a.symbol}, {balance_b} {asset_b.symbol}"
        )

    async def get_balance(self, asset: Asset) -> float:
        return self.balances.get(asset.mint, 0.0)

    async def swap(self, request: SwapRequest) -> SwapResult:
        try:
            price = await self.price_source.get_price()
        except PriceUnavailableError as e:
            raise ExecutionError(f"Paper swap has no price to fill at: {e}") from e

        async with self._lock:
            available = self.balances.get(request.from_asset.mint, 0.0)
            amount_in = request.ui_amount
            if amount_in > available + 1e-12:
                raise ExecutionError(
                    f"Insufficient {request.from_asset.symbol}: need {amount_in}, have {available}"
                )

            amount_out = self._simulate_fill(request, amount_in, price)

            self.balances[request.from_asset.mint] = max(0.0, available - amount_in)
            self.balances[request.to_asset.mint] = self.balances.get(request.to_asset.mint, 0.0) + amount_out
            self.swaps_executed += 1

        signature = f"paper-{uuid.uuid4().hex}"
        logger.info(
            f"📝 Paper swap filled: {amount_in} {request.from_asset.symbol} -> "
            f"{amount_out:.6f} {request.to_asset.symbol} @ ${price:.4f}"
        )
        return SwapResult(
            signature=signature,
            in_amount=request.amount,
            out_amount=request.to_asset.to_smallest_unit(amount_out),
            details={"price": price, "paper": True},
        )

    def _simulate_fill(self, request: SwapRequest, amount_in: float, price: float) -> float:
        cost = 1 - request.slippage_bps / 10_000
        if request.from_asset.mint == self.asset_a.mint:
            return amount_in * price * cost
        if request.from_asset.mint == self.asset_b.mint:
            return amount_in / price * cost
        raise ExecutionError(f"Unknown asset for paper trading: {request.from_asset.symbol}")

    def get_status(self) -> dict:
        return {
            "balances": {
                self.asset_a.symbol: self.balances.get(self.asset_a.mint, 0.0),
                self.asset_b.symbol: self.balances.get(self.asset_b.mint, 0.0),
            },
            "swaps_executed": self.swaps_executed,
        }
