"""
Exchange Clients Module

Adapters the trading engine uses for balances and trade execution.

Components:
- BalanceReader / SwapExecutor: Abstract interfaces consumed by the engine
- SolanaWalletClient: Native and SPL token balances over Solana RPC
- JupiterSwapClient: Swap execution through the Jupiter aggregator
- PaperTradingClient: Simulated balances and fills for dry runs
"""

from trailswap.exchange_clients.base import BalanceReader, SwapExecutor

__all__ = [
    "BalanceReader",
    "SwapExecutor",
]
