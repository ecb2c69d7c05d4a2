"""
Solana Wallet Client

Implements BalanceReader for a single Solana wallet.

Architecture:
- Keypair loaded from a base58 private key (solders)
- Native SOL balance via getBalance, converted from lamports
- SPL token balances via the wallet's associated token account
- All reads at finalized commitment through solana-py's AsyncClient
"""

import logging
from typing import Dict, Optional

from solana.rpc.async_api import AsyncClient
from solana.rpc.commitment import Finalized
from solders.keypair import Keypair
from solders.pubkey import Pubkey
from spl.token.instructions import get_associated_token_address

from trailswap.exceptions import BalanceUnavailableError, ConfigurationError
from trailswap.exchange_clients.base import BalanceReader
from trailswap.trading_engine.models import Asset

logger = logging.getLogger(__name__)


def load_keypair(private_key: str) -> Keypair:
    """
    Load a wallet keypair from a base58 private key.

    Raises:
        ConfigurationError: If the key is missing or malformed
    """
    key = (private_key or "").strip().strip("'\"")
    if not key:
        raise ConfigurationError("PRIVATE_KEY is not set")
    try:
        return Keypair.from_base58_string(key)
    except Exception as e:
        raise ConfigurationError(f"Failed to parse private key: {e}") from e


class SolanaWalletClient(BalanceReader):
    """
    Balance reader for one wallet.

    Usage:
        wallet = SolanaWalletClient(rpc_url, private_key)
        sol = await wallet.get_balance(SOL)
        usdc = await wallet.get_balance(USDC)
        await wallet.close()
    """

    def __init__(
        self,
        rpc_url: str,
        private_key: str,
        rpc_client: Optional[AsyncClient] = None,
    ):
        """
        Initialize wallet client.

        Args:
            rpc_url: Solana RPC endpoint
            private_key: Base58 wallet private key
            rpc_client: Optional pre-built AsyncClient (shared with the swap client)
        """
        self.rpc_url = rpc_url
        self.keypair = load_keypair(private_key)
        self.public_key: Pubkey = self.keypair.pubkey()
        self.rpc = rpc_client or AsyncClient(rpc_url)
        self._token_accounts: Dict[str, Pubkey] = {}

        logger.info(f"Using wallet: {self.public_key}")

    def token_account(self, asset: Asset) -> Pubkey:
        """Associated token account of this wallet for an SPL asset (cached)"""
        if asset.mint not in self._token_accounts:
            try:
                mint = Pubkey.from_string(asset.mint)
            except Exception as e:
                raise ConfigurationError(f"Invalid {asset.symbol} mint address: {e}") from e
            ata = get_associated_token_address(self.public_key, mint)
            self._token_accounts[asset.mint] = ata
            logger.info(f"{asset.symbol} token account: {ata}")
        return self._token_accounts[asset.mint]

    async def get_balance(self, asset: Asset) -> float:
        if asset.native:
            return await self._get_native_balance(asset)
        return await self._get_token_balance(asset)

    async def _get_native_balance(self, asset: Asset) -> float:
        try:
            resp = await self.rpc.get_balance(self.public_key, commitment=Finalized)
        except Exception as e:
            raise BalanceUnavailableError(f"Failed to get {asset.symbol} balance: {e}") from e
        return asset.from_smallest_unit(resp.value)

    async def _get_token_balance(self, asset: Asset) -> float:
        """
        Read an SPL balance. A token account that does not exist yet reads as
        zero - the first swap into the asset creates it.
        """
        ata = self.token_account(asset)
        try:
            info = await self.rpc.get_account_info(ata, commitment=Finalized)
            if info.value is None:
                logger.debug(f"{asset.symbol} token account does not exist yet - balance is 0")
                return 0.0
            resp = await self.rpc.get_token_account_balance(ata, commitment=Finalized)
        except Exception as e:
            raise BalanceUnavailableError(f"Failed to get {asset.symbol} balance: {e}") from e

        if resp.value is None:
            raise BalanceUnavailableError(f"{asset.symbol} account not found or empty")
        try:
            raw_amount = int(resp.value.amount)
        except (TypeError, ValueError) as e:
            raise BalanceUnavailableError(f"Failed to parse {asset.symbol} amount: {e}") from e
        return asset.from_smallest_unit(raw_amount)

    async def close(self):
        await self.rpc.close()
