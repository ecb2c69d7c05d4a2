"""
Shared test fixtures for TrailSwap tests.

Provides reusable fixtures for:
- Strategy configs (factory with overrides)
- Mock collaborators (price source, balance reader, swap executor)
- A fresh ShutdownManager per test
"""

import pytest
from unittest.mock import AsyncMock, MagicMock

from trailswap.services.shutdown_manager import ShutdownManager
from trailswap.trading_engine.models import SOL, USDC, StrategyConfig, SwapResult


# ---------------------------------------------------------------------------
# Config
# ---------------------------------------------------------------------------


@pytest.fixture
def make_config():
    """Build a StrategyConfig with fast, test-friendly defaults."""
    def _make(**overrides):
        values = {
            "initial_threshold": 130.0,
            "threshold_trail_gap": 5.0,
            "dynamic_enabled": False,
            "minimum_reserve": 0.1,
            "retry_attempts": 3,
            "retry_delay_seconds": 0,
            "check_interval_seconds": 1,
            "slippage_bps_a_to_b": 50,
            "slippage_bps_b_to_a": 50,
        }
        values.update(overrides)
        return StrategyConfig(**values)
    return _make


# ---------------------------------------------------------------------------
# Mock collaborators
# ---------------------------------------------------------------------------


@pytest.fixture
def mock_price_source():
    """Price source whose get_price is an AsyncMock (set side_effect per test)."""
    source = MagicMock()
    source.name = "mock"
    source.get_price = AsyncMock(return_value=135.0)
    return source


@pytest.fixture
def mock_balance_reader():
    """Balance reader with 2 SOL and 0 USDC by default."""
    balances = {SOL.mint: 2.0, USDC.mint: 0.0}
    reader = MagicMock()
    reader.balances = balances
    reader.get_balance = AsyncMock(side_effect=lambda asset: balances[asset.mint])
    return reader


@pytest.fixture
def mock_executor():
    """Swap executor that succeeds on every call."""
    executor = MagicMock()
    executor.swap = AsyncMock(return_value=SwapResult(signature="sig-123", in_amount=1, out_amount=1))
    return executor


@pytest.fixture
def shutdown():
    return ShutdownManager()
