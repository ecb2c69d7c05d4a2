"""
Shared types for the trading engine.

Plain dataclasses and enums passed between the monitor loop, the decision
components and the exchange adapters. None of them are persisted.
"""

import math
from dataclasses import dataclass, field
from decimal import ROUND_DOWN, Decimal
from enum import Enum
from typing import Optional

from trailswap.constants import SOL_MINT, USDC_MINT
from trailswap.exceptions import ConfigurationError


@dataclass(frozen=True)
class Asset:
    """One side of the tracked pair."""
    symbol: str
    mint: str
    decimals: int
    native: bool = False  # Held as the chain's native coin rather than a token account

    def to_smallest_unit(self, amount: float) -> int:
        """Convert a human amount to integer base units, rounding down."""
        scaled = Decimal(str(amount)) * (Decimal(10) ** self.decimals)
        return int(scaled.to_integral_value(rounding=ROUND_DOWN))

    def from_smallest_unit(self, amount: int) -> float:
        return float(Decimal(amount) / (Decimal(10) ** self.decimals))


SOL = Asset(symbol="SOL", mint=SOL_MINT, decimals=9, native=True)
USDC = Asset(symbol="USDC", mint=USDC_MINT, decimals=6)


class Position(str, Enum):
    """Which asset is currently held"""
    HOLDING_A = "holding_a"
    HOLDING_B = "holding_b"


class SwapAction(str, Enum):
    """Decision emitted for one evaluation cycle"""
    NONE = "none"
    SWAP_A_TO_B = "swap_a_to_b"
    SWAP_B_TO_A = "swap_b_to_a"

    @property
    def target_position(self) -> Optional[Position]:
        """Position held after this action succeeds"""
        if self is SwapAction.SWAP_A_TO_B:
            return Position.HOLDING_B
        if self is SwapAction.SWAP_B_TO_A:
            return Position.HOLDING_A
        return None


@dataclass(frozen=True)
class StrategyConfig:
    """
    Immutable strategy parameters, fixed at startup.

    Defaults describe the standard deployment: SOL/USDC with a $130 stop loss
    trailing $5 below the highest price seen.
    """
    initial_threshold: float = 130.0
    threshold_trail_gap: float = 5.0
    dynamic_enabled: bool = True
    minimum_reserve: float = 0.1
    retry_attempts: int = 3
    retry_delay_seconds: int = 2
    check_interval_seconds: int = 2
    slippage_bps_a_to_b: int = 50
    slippage_bps_b_to_a: int = 50
    materiality_threshold: float = 1.0
    asset_a: Asset = SOL
    asset_b: Asset = USDC

    def validate(self) -> "StrategyConfig":
        """
        Reject configurations the engine cannot run with.

        Raises:
            ConfigurationError: On the first invalid field found
        """
        if not math.isfinite(self.initial_threshold) or self.initial_threshold <= 0:
            raise ConfigurationError(f"initial_threshold must be a positive price, got {self.initial_threshold}")
        if not math.isfinite(self.threshold_trail_gap) or self.threshold_trail_gap < 0:
            raise ConfigurationError(f"threshold_trail_gap must be >= 0, got {self.threshold_trail_gap}")
        if self.minimum_reserve < 0:
            raise ConfigurationError(f"minimum_reserve must be >= 0, got {self.minimum_reserve}")
        if self.retry_attempts < 1:
            raise ConfigurationError(f"retry_attempts must be >= 1, got {self.retry_attempts}")
        if self.retry_delay_seconds < 0:
            raise ConfigurationError(f"retry_delay_seconds must be >= 0, got {self.retry_delay_seconds}")
        if self.check_interval_seconds <= 0:
            raise ConfigurationError(f"check_interval_seconds must be > 0, got {self.check_interval_seconds}")
        if self.slippage_bps_a_to_b < 0 or self.slippage_bps_b_to_a < 0:
            raise ConfigurationError("slippage bps must be >= 0")
        if self.materiality_threshold < 0:
            raise ConfigurationError(f"materiality_threshold must be >= 0, got {self.materiality_threshold}")
        if self.asset_a.mint == self.asset_b.mint:
            raise ConfigurationError("asset_a and asset_b must be different mints")
        return self

    def slippage_for(self, action: SwapAction) -> int:
        if action is SwapAction.SWAP_A_TO_B:
            return self.slippage_bps_a_to_b
        return self.slippage_bps_b_to_a


@dataclass
class ThresholdState:
    """Mutable trailing state, owned by a single ThresholdTracker"""
    highest_price_seen: float = 0.0


@dataclass(frozen=True)
class EvaluationResult:
    """Outcome of one monitor cycle (logged, never stored)"""
    price: float
    effective_threshold: float
    position: Position
    action: SwapAction
    swapped: bool = False


@dataclass(frozen=True)
class SwapRequest:
    """One trade handed to a SwapExecutor"""
    from_asset: Asset
    to_asset: Asset
    amount: int  # Smallest unit of from_asset
    slippage_bps: int

    @property
    def ui_amount(self) -> float:
        return self.from_asset.from_smallest_unit(self.amount)


@dataclass
class SwapResult:
    """Confirmed swap, as reported by a SwapExecutor"""
    signature: str
    in_amount: int
    out_amount: Optional[int] = None
    details: dict = field(default_factory=dict)
