"""
Base Price Feed Interface

Defines the abstract interface the monitor loop reads prices through.
"""

import math
from abc import ABC, abstractmethod

from trailswap.exceptions import PriceUnavailableError


class PriceSource(ABC):
    """
    Abstract base class for price feed implementations.

    A price source quotes one tracked asset in quote-currency units.
    """

    def __init__(self, name: str):
        """
        Initialize price feed.

        Args:
            name: Feed name (e.g., "jupiter", "paper")
        """
        self.name = name

    @abstractmethod
    async def get_price(self) -> float:
        """
        Get the current price of the tracked asset.

        Returns:
            Positive, finite price

        Raises:
            PriceUnavailableError: If no valid price could be fetched
        """
        pass

    def validate_price(self, price: float) -> float:
        """Reject prices the engine must never see (zero, negative, NaN, inf)"""
        if not math.isfinite(price) or price <= 0:
            raise PriceUnavailableError(f"{self.name} returned invalid price: {price}")
        return price
