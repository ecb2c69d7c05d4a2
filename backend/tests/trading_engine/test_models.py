"""
Tests for backend/trailswap/trading_engine/models.py

Covers:
- Asset unit conversion (rounding down, decimals)
- SwapAction target positions
- StrategyConfig validation
"""

import math

import pytest

from trailswap.exceptions import ConfigurationError
from trailswap.trading_engine.models import (
    SOL,
    USDC,
    Asset,
    Position,
    StrategyConfig,
    SwapAction,
    SwapRequest,
)


class TestAsset:

    def test_sol_to_lamports(self):
        assert SOL.to_smallest_unit(1.5) == 1_500_000_000

    def test_usdc_to_base_units(self):
        assert USDC.to_smallest_unit(180.25) == 180_250_000

    def test_rounds_down(self):
        """Edge case: never round up past the actual balance."""
        assert USDC.to_smallest_unit(0.0000019) == 1

    def test_from_smallest_unit(self):
        assert SOL.from_smallest_unit(250_000_000) == pytest.approx(0.25)
        assert USDC.from_smallest_unit(1_000_000) == pytest.approx(1.0)

    def test_custom_asset(self):
        bonk = Asset(symbol="BONK", mint="DezX", decimals=5)
        assert bonk.to_smallest_unit(2) == 200_000
        assert bonk.native is False


class TestSwapAction:

    def test_target_positions(self):
        assert SwapAction.SWAP_A_TO_B.target_position is Position.HOLDING_B
        assert SwapAction.SWAP_B_TO_A.target_position is Position.HOLDING_A
        assert SwapAction.NONE.target_position is None


class TestSwapRequest:

    def test_ui_amount(self):
        request = SwapRequest(from_asset=SOL, to_asset=USDC, amount=1_900_000_000, slippage_bps=50)
        assert request.ui_amount == pytest.approx(1.9)


class TestStrategyConfigValidate:

    def test_defaults_are_valid(self):
        config = StrategyConfig()
        assert config.validate() is config
        assert config.initial_threshold == 130.0
        assert config.minimum_reserve == 0.1

    @pytest.mark.parametrize("overrides", [
        {"check_interval_seconds": 0},
        {"check_interval_seconds": -5},
        {"retry_attempts": 0},
        {"retry_delay_seconds": -1},
        {"threshold_trail_gap": -0.5},
        {"initial_threshold": 0.0},
        {"initial_threshold": math.nan},
        {"initial_threshold": math.inf},
        {"minimum_reserve": -1.0},
        {"slippage_bps_a_to_b": -1},
        {"slippage_bps_b_to_a": -1},
        {"materiality_threshold": -1.0},
        {"asset_b": SOL},
    ])
    def test_invalid_values_raise(self, overrides):
        with pytest.raises(ConfigurationError):
            StrategyConfig(**overrides).validate()

    def test_slippage_for(self):
        config = StrategyConfig(slippage_bps_a_to_b=30, slippage_bps_b_to_a=80)
        assert config.slippage_for(SwapAction.SWAP_A_TO_B) == 30
        assert config.slippage_for(SwapAction.SWAP_B_TO_A) == 80

    def test_is_immutable(self):
        config = StrategyConfig()
        with pytest.raises(Exception):
            config.initial_threshold = 1.0
