"""
Trailing Stop Loss Management

Computes the effective stop-loss trigger price for the monitor loop:
- Static mode: the configured stop loss, always
- Dynamic mode: activates once price clears stop loss + trail gap, then
  trails the highest price seen by exactly the trail gap
- Never drops below the configured stop loss
"""

import logging

from trailswap.trading_engine.models import StrategyConfig, ThresholdState

logger = logging.getLogger(__name__)


class ThresholdTracker:
    """
    Owns the trailing state (highest price seen) for one asset pair.

    The state is private to this instance; the monitor loop is the only
    caller, one cycle at a time.
    """

    def __init__(self, config: StrategyConfig):
        self.config = config
        self._state = ThresholdState()

    @property
    def highest_price_seen(self) -> float:
        return self._state.highest_price_seen

    @property
    def state(self) -> ThresholdState:
        """Copy of the trailing state, for status reporting"""
        return ThresholdState(highest_price_seen=self._state.highest_price_seen)

    def update(self, current_price: float) -> float:
        """
        Feed one price sample and return the effective stop-loss price.

        TSL Logic:
        - Inactive until price > stop loss + gap (returns stop loss)
        - First activation, or price > highest + gap: record new high,
          return high - gap
        - Otherwise keep the trail at highest - gap, floored at stop loss

        Args:
            current_price: Validated, finite, non-negative price

        Returns:
            Effective threshold, always >= config.initial_threshold
        """
        initial = self.config.initial_threshold
        gap = self.config.threshold_trail_gap

        if not self.config.dynamic_enabled:
            return initial

        activation_price = initial + gap
        if current_price <= activation_price:
            return initial

        highest = self._state.highest_price_seen
        if highest == 0 or current_price > highest + gap:
            self._state.highest_price_seen = current_price
            new_threshold = current_price - gap
            logger.info(
                f"New high ${current_price:.4f} - stop loss trailed to ${new_threshold:.4f}"
                + (f" (previous high ${highest:.4f})" if highest else "")
            )
            return new_threshold

        if highest > activation_price:
            return max(highest - gap, initial)

        return initial
