"""
Application Constants

Token mints and public API endpoints used by the Solana adapters.
"""

# Wrapped SOL mint (Jupiter uses it to denote native SOL)
SOL_MINT = "So11111111111111111111111111111111111111112"

# USDC on mainnet
USDC_MINT = "EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v"

# Public endpoints
DEFAULT_RPC_ENDPOINT = "https://api.mainnet-beta.solana.com"
JUPITER_PRICE_URL = "https://api.jup.ag/price/v2"
JUPITER_QUOTE_URL = "https://quote-api.jup.ag/v6/quote"
JUPITER_SWAP_URL = "https://quote-api.jup.ag/v6/swap"

# Transaction confirmation polling
CONFIRMATION_MAX_ATTEMPTS = 20
CONFIRMATION_POLL_SECONDS = 2.0

# Swap audit log statuses
SWAP_STATUS_ATTEMPT = "ATTEMPT"
SWAP_STATUS_SUCCESS = "SUCCESS"
SWAP_STATUS_FAILED = "FAILED"
SWAP_STATUS_SKIPPED = "SKIPPED"
SWAP_STATUS_CANCELLED = "CANCELLED"

# Logger name for the dedicated swap audit log
SWAP_LOGGER_NAME = "trailswap.swaps"
