"""
Position management for the trading engine

Handles the two-state position machine:
- Deciding whether a price/threshold pair calls for a swap
- Committing the new position after a confirmed swap
- Determining the starting position from actual wallet balances
"""

import logging

from trailswap.exceptions import BalanceUnavailableError, StartupError
from trailswap.exchange_clients.base import BalanceReader
from trailswap.trading_engine.models import Asset, Position, SwapAction

logger = logging.getLogger(__name__)


def decide(position: Position, price: float, threshold: float) -> SwapAction:
    """
    Pure transition function.

    HOLDING_A below the threshold sells A; HOLDING_B above it buys A back.
    Exactly at the threshold nothing happens in either state.
    """
    if position is Position.HOLDING_A and price < threshold:
        return SwapAction.SWAP_A_TO_B
    if position is Position.HOLDING_B and price > threshold:
        return SwapAction.SWAP_B_TO_A
    return SwapAction.NONE


class PositionStateMachine:
    """Holds the current position; mutated only through commit()"""

    def __init__(self, initial_position: Position):
        self._position = initial_position

    @property
    def position(self) -> Position:
        return self._position

    def decide(self, price: float, threshold: float) -> SwapAction:
        return decide(self._position, price, threshold)

    def commit(self, action: SwapAction) -> Position:
        """
        Apply a successfully executed action.

        Raises:
            ValueError: If the action is NONE or does not start from the current position
        """
        target = action.target_position
        if target is None:
            raise ValueError("Cannot commit a no-op action")
        if target is self._position:
            raise ValueError(f"Action {action.value} does not apply to position {self._position.value}")

        previous = self._position
        self._position = target
        logger.info(f"Position changed: {previous.value} -> {target.value}")
        return target


async def determine_initial_position(
    balance_reader: BalanceReader,
    asset_a: Asset,
    asset_b: Asset,
    materiality_threshold: float = 1.0,
) -> Position:
    """
    Work out which asset is held from live balances.

    Holding B requires more than materiality_threshold of it (filters dust);
    anything else starts as HOLDING_A.

    Raises:
        StartupError: If either balance cannot be read
    """
    try:
        balance_a = await balance_reader.get_balance(asset_a)
        balance_b = await balance_reader.get_balance(asset_b)
    except BalanceUnavailableError as e:
        raise StartupError(f"Failed to determine current position: {e}") from e

    logger.info(
        f"Current balances: {balance_a:.4f} {asset_a.symbol}, {balance_b:.2f} {asset_b.symbol}"
    )

    if balance_b > materiality_threshold:
        return Position.HOLDING_B
    return Position.HOLDING_A
