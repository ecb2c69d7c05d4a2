"""
Exchange client interfaces

The trading engine only sees these two contracts. Implementations must
translate their library errors into the agent's exception types and enforce
their own timeouts.
"""

from abc import ABC, abstractmethod

from trailswap.trading_engine.models import Asset, SwapRequest, SwapResult


class BalanceReader(ABC):
    """Reads current holdings of an asset"""

    @abstractmethod
    async def get_balance(self, asset: Asset) -> float:
        """
        Get the current balance of an asset in its natural (human) unit.

        Args:
            asset: Asset to look up

        Returns:
            Balance as float (e.g. 1.25 SOL, 180.5 USDC)

        Raises:
            BalanceUnavailableError: If the balance cannot be read
        """
        pass


class SwapExecutor(ABC):
    """Executes one trade between two assets"""

    @abstractmethod
    async def swap(self, request: SwapRequest) -> SwapResult:
        """
        Attempt one swap. Not idempotent.

        Args:
            request: Assets, amount in smallest units of the input asset, slippage bps

        Returns:
            SwapResult for a confirmed swap

        Raises:
            ExecutionError: If the attempt failed or its outcome is unknown
        """
        pass
