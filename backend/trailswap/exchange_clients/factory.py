"""
Exchange Client Factory

Builds the price source, balance reader and swap executor the monitor loop
needs, for either live trading (Solana + Jupiter) or paper trading.
"""

import logging
from typing import NamedTuple, Optional

from trailswap.config import Settings
from trailswap.exchange_clients.base import BalanceReader, SwapExecutor
from trailswap.exchange_clients.jupiter_client import JupiterSwapClient
from trailswap.exchange_clients.paper_trading_client import PaperTradingClient
from trailswap.exchange_clients.solana_wallet import SolanaWalletClient
from trailswap.price_feeds.base import PriceSource
from trailswap.price_feeds.jupiter_feed import JupiterPriceFeed
from trailswap.trading_engine.models import StrategyConfig

logger = logging.getLogger(__name__)


class Collaborators(NamedTuple):
    price_source: PriceSource
    balance_reader: BalanceReader
    executor: SwapExecutor
    wallet: Optional[SolanaWalletClient] = None  # Live mode only, needs close()


def create_collaborators(settings: Settings, config: StrategyConfig) -> Collaborators:
    """
    Factory function for the monitor loop's collaborators.

    Args:
        settings: Loaded settings (endpoints, keys, dry-run flag)
        config: Validated strategy config (assets)

    Returns:
        Collaborators for paper trading when settings.dry_run is set,
        otherwise for the live wallet

    Raises:
        ConfigurationError: If the live wallet key is missing or invalid
    """
    price_source = JupiterPriceFeed(
        mint=config.asset_a.mint,
        api_url=settings.price_api_url,
        api_key=settings.jupiter_api_key,
        timeout=settings.http_timeout_seconds,
    )

    if settings.dry_run:
        paper = PaperTradingClient(
            price_source=price_source,
            asset_a=config.asset_a,
            asset_b=config.asset_b,
            balance_a=settings.paper_balance_a,
            balance_b=settings.paper_balance_b,
        )
        return Collaborators(price_source=price_source, balance_reader=paper, executor=paper)

    wallet = SolanaWalletClient(rpc_url=settings.rpc_endpoint, private_key=settings.private_key)
    executor = JupiterSwapClient(
        wallet=wallet,
        quote_url=settings.jupiter_quote_url,
        swap_url=settings.jupiter_swap_url,
        api_key=settings.jupiter_api_key,
        timeout=settings.http_timeout_seconds,
        confirmation_attempts=settings.confirmation_attempts,
        confirmation_delay=settings.confirmation_delay_seconds,
    )
    return Collaborators(price_source=price_source, balance_reader=wallet, executor=executor, wallet=wallet)
