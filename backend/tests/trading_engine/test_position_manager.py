"""
Tests for backend/trailswap/trading_engine/position_manager.py

Covers:
- decide(): exhaustive grid over position x price x threshold
- PositionStateMachine.commit(): valid and invalid transitions
- determine_initial_position(): materiality threshold, balance failures
"""

import itertools

import pytest
from unittest.mock import AsyncMock, MagicMock

from trailswap.exceptions import BalanceUnavailableError, StartupError
from trailswap.trading_engine.models import SOL, USDC, Position, SwapAction
from trailswap.trading_engine.position_manager import (
    PositionStateMachine,
    decide,
    determine_initial_position,
)


PRICES = [0.5, 100.0, 129.99, 130.0, 130.01, 145.0, 200.0]
THRESHOLDS = [100.0, 130.0, 145.0]


class TestDecide:
    """Tests for the pure transition function."""

    @pytest.mark.parametrize("price,threshold", list(itertools.product(PRICES, THRESHOLDS)))
    def test_holding_a(self, price, threshold):
        expected = SwapAction.SWAP_A_TO_B if price < threshold else SwapAction.NONE
        assert decide(Position.HOLDING_A, price, threshold) is expected

    @pytest.mark.parametrize("price,threshold", list(itertools.product(PRICES, THRESHOLDS)))
    def test_holding_b(self, price, threshold):
        expected = SwapAction.SWAP_B_TO_A if price > threshold else SwapAction.NONE
        assert decide(Position.HOLDING_B, price, threshold) is expected

    def test_equal_price_never_swaps(self):
        """Edge case: exactly at the threshold is a no-op in both states."""
        assert decide(Position.HOLDING_A, 130.0, 130.0) is SwapAction.NONE
        assert decide(Position.HOLDING_B, 130.0, 130.0) is SwapAction.NONE


class TestPositionStateMachine:
    """Tests for commit()."""

    def test_decide_uses_current_position(self):
        machine = PositionStateMachine(Position.HOLDING_A)
        assert machine.decide(120.0, 130.0) is SwapAction.SWAP_A_TO_B
        assert machine.decide(140.0, 130.0) is SwapAction.NONE

    def test_commit_a_to_b(self):
        machine = PositionStateMachine(Position.HOLDING_A)
        assert machine.commit(SwapAction.SWAP_A_TO_B) is Position.HOLDING_B
        assert machine.position is Position.HOLDING_B

    def test_commit_b_to_a(self):
        machine = PositionStateMachine(Position.HOLDING_B)
        machine.commit(SwapAction.SWAP_B_TO_A)
        assert machine.position is Position.HOLDING_A

    def test_commit_none_raises(self):
        machine = PositionStateMachine(Position.HOLDING_A)
        with pytest.raises(ValueError):
            machine.commit(SwapAction.NONE)
        assert machine.position is Position.HOLDING_A

    def test_commit_redundant_action_raises(self):
        """Failure: an action that lands in the current position is rejected."""
        machine = PositionStateMachine(Position.HOLDING_A)
        with pytest.raises(ValueError):
            machine.commit(SwapAction.SWAP_B_TO_A)
        assert machine.position is Position.HOLDING_A


def _reader(balances):
    reader = MagicMock()
    reader.get_balance = AsyncMock(side_effect=lambda asset: balances[asset.mint])
    return reader


class TestDetermineInitialPosition:
    """Tests for determine_initial_position()."""

    @pytest.mark.asyncio
    async def test_no_usdc_starts_holding_a(self):
        reader = _reader({SOL.mint: 3.0, USDC.mint: 0.0})
        assert await determine_initial_position(reader, SOL, USDC) is Position.HOLDING_A

    @pytest.mark.asyncio
    async def test_usdc_above_materiality_starts_holding_b(self):
        reader = _reader({SOL.mint: 0.1, USDC.mint: 250.0})
        assert await determine_initial_position(reader, SOL, USDC) is Position.HOLDING_B

    @pytest.mark.asyncio
    async def test_dust_usdc_is_ignored(self):
        """Edge case: balance equal to the materiality threshold is still dust."""
        reader = _reader({SOL.mint: 2.0, USDC.mint: 1.0})
        assert await determine_initial_position(reader, SOL, USDC, 1.0) is Position.HOLDING_A

    @pytest.mark.asyncio
    async def test_custom_materiality_threshold(self):
        reader = _reader({SOL.mint: 2.0, USDC.mint: 5.0})
        assert await determine_initial_position(reader, SOL, USDC, 10.0) is Position.HOLDING_A

    @pytest.mark.asyncio
    async def test_balance_failure_is_startup_error(self):
        reader = MagicMock()
        reader.get_balance = AsyncMock(side_effect=BalanceUnavailableError("rpc down"))
        with pytest.raises(StartupError, match="rpc down"):
            await determine_initial_position(reader, SOL, USDC)
