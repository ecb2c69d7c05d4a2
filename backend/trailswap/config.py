from pydantic import field_validator
from pydantic_settings import BaseSettings

from trailswap.constants import (
    CONFIRMATION_MAX_ATTEMPTS,
    CONFIRMATION_POLL_SECONDS,
    DEFAULT_RPC_ENDPOINT,
    JUPITER_PRICE_URL,
    JUPITER_QUOTE_URL,
    JUPITER_SWAP_URL,
    SOL_MINT,
    USDC_MINT,
)
from trailswap.trading_engine.models import Asset, StrategyConfig


class Settings(BaseSettings):
    # Wallet (base58 private key)
    private_key: str = ""

    @field_validator("private_key")
    @classmethod
    def strip_quotes(cls, v: str) -> str:
        """Drop surrounding quotes some .env editors leave in place"""
        return v.strip().strip("'\"") if v else v

    # Solana RPC
    rpc_endpoint: str = DEFAULT_RPC_ENDPOINT

    # Jupiter APIs
    price_api_url: str = JUPITER_PRICE_URL
    jupiter_quote_url: str = JUPITER_QUOTE_URL
    jupiter_swap_url: str = JUPITER_SWAP_URL
    jupiter_api_key: str = ""
    http_timeout_seconds: float = 10.0

    # Tracked pair - asset A is priced, asset B is the quote currency
    asset_a_symbol: str = "SOL"
    asset_a_mint: str = SOL_MINT
    asset_a_decimals: int = 9
    asset_a_native: bool = True
    asset_b_symbol: str = "USDC"
    asset_b_mint: str = USDC_MINT
    asset_b_decimals: int = 6

    # Stop loss
    stop_loss_price: float = 130.0
    dynamic_stop_loss: bool = True
    stop_loss_trail_gap: float = 5.0  # Keep stop loss $5 below the highest price

    # Position sizing
    minimum_reserve: float = 0.1  # Asset A never swapped away (gas)
    materiality_threshold: float = 1.0  # Asset B above this means we hold B at startup

    # Execution
    retry_attempts: int = 3
    retry_delay_seconds: int = 2
    check_interval_seconds: int = 2
    slippage_bps_a_to_b: int = 50  # 0.5%
    slippage_bps_b_to_a: int = 50
    confirmation_attempts: int = CONFIRMATION_MAX_ATTEMPTS
    confirmation_delay_seconds: float = CONFIRMATION_POLL_SECONDS

    # Paper trading
    dry_run: bool = False
    paper_balance_a: float = 10.0
    paper_balance_b: float = 0.0

    # Logging
    log_dir: str = "logs"
    log_level: str = "INFO"

    @field_validator("log_level")
    @classmethod
    def upper_log_level(cls, v: str) -> str:
        return v.upper()

    class Config:
        env_file = ".env"
        case_sensitive = False
        extra = "ignore"


def build_strategy_config(settings: Settings) -> StrategyConfig:
    """
    Build the immutable strategy parameters from settings.

    Raises:
        ConfigurationError: If any value is out of range
    """
    asset_a = Asset(
        symbol=settings.asset_a_symbol,
        mint=settings.asset_a_mint,
        decimals=settings.asset_a_decimals,
        native=settings.asset_a_native,
    )
    asset_b = Asset(
        symbol=settings.asset_b_symbol,
        mint=settings.asset_b_mint,
        decimals=settings.asset_b_decimals,
    )
    return StrategyConfig(
        initial_threshold=settings.stop_loss_price,
        threshold_trail_gap=settings.stop_loss_trail_gap,
        dynamic_enabled=settings.dynamic_stop_loss,
        minimum_reserve=settings.minimum_reserve,
        retry_attempts=settings.retry_attempts,
        retry_delay_seconds=settings.retry_delay_seconds,
        check_interval_seconds=settings.check_interval_seconds,
        slippage_bps_a_to_b=settings.slippage_bps_a_to_b,
        slippage_bps_b_to_a=settings.slippage_bps_b_to_a,
        materiality_threshold=settings.materiality_threshold,
        asset_a=asset_a,
        asset_b=asset_b,
    ).validate()
