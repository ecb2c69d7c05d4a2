"""
Jupiter Swap Client

Implements SwapExecutor through the Jupiter aggregator. One call to swap()
is one attempt:

1. GET a quote for the exact input amount and slippage tolerance
2. POST the quote to build a swap transaction for our wallet
3. Decode and sign the versioned transaction with the wallet keypair
4. Send it through Solana RPC (with preflight)
5. Poll the signature status until confirmed, failed or timed out

Retries are the engine's job, not this client's.
"""

import asyncio
import base64
import logging
from typing import Any, Dict

import httpx
from solana.rpc.commitment import Confirmed
from solana.rpc.types import TxOpts
from solders.signature import Signature
from solders.transaction import VersionedTransaction
from solders.transaction_status import TransactionConfirmationStatus

from trailswap.constants import (
    CONFIRMATION_MAX_ATTEMPTS,
    CONFIRMATION_POLL_SECONDS,
    JUPITER_QUOTE_URL,
    JUPITER_SWAP_URL,
)
from trailswap.exceptions import ConfirmationTimeoutError, ExecutionError
from trailswap.exchange_clients.base import SwapExecutor
from trailswap.exchange_clients.solana_wallet import SolanaWalletClient
from trailswap.trading_engine.models import SwapRequest, SwapResult

logger = logging.getLogger(__name__)

# Processed transactions can still be dropped; only these count as landed
CONFIRMED_STATUSES = (
    TransactionConfirmationStatus.Confirmed,
    TransactionConfirmationStatus.Finalized,
)


class JupiterSwapClient(SwapExecutor):
    """Swap executor for one wallet via Jupiter quote/swap APIs"""

    def __init__(
        self,
        wallet: SolanaWalletClient,
        quote_url: str = JUPITER_QUOTE_URL,
        swap_url: str = JUPITER_SWAP_URL,
        api_key: str = "",
        timeout: float = 10.0,
        confirmation_attempts: int = CONFIRMATION_MAX_ATTEMPTS,
        confirmation_delay: float = CONFIRMATION_POLL_SECONDS,
    ):
        """
        Initialize Jupiter swap client.

        Args:
            wallet: Wallet providing the keypair and the RPC connection
            quote_url: Jupiter quote endpoint
            swap_url: Jupiter swap-transaction endpoint
            api_key: Optional Jupiter API key (sent as x-api-key)
            timeout: HTTP timeout in seconds
            confirmation_attempts: Signature status polls before giving up
            confirmation_delay: Seconds between polls
        """
        self.wallet = wallet
        self.quote_url = quote_url
        self.swap_url = swap_url
        self.api_key = api_key
        self.timeout = timeout
        self.confirmation_attempts = confirmation_attempts
        self.confirmation_delay = confirmation_delay

    def _headers(self) -> Dict[str, str]:
        headers = {"accept": "application/json"}
        if self.api_key:
            headers["x-api-key"] = self.api_key
        return headers

    async def swap(self, request: SwapRequest) -> SwapResult:
        quote = await self.get_quote(request)
        logger.info(
            f"Got swap quote - Input: {quote.get('inAmount')} {request.from_asset.symbol}, "
            f"Output: {quote.get('outAmount')} {request.to_asset.symbol}"
        )

        swap_tx = await self.build_swap_transaction(quote)
        signed_tx = self._sign(swap_tx)

        signature = await self._send(signed_tx)
        logger.info(f"Swap transaction sent: {signature}")

        await self.wait_for_confirmation(signature)
        logger.info("Swap transaction confirmed!")

        return SwapResult(
            signature=str(signature),
            in_amount=_as_int(quote.get("inAmount"), request.amount),
            out_amount=_as_int(quote.get("outAmount"), None),
            details={"quote": quote},
        )

    async def get_quote(self, request: SwapRequest) -> Dict[str, Any]:
        """
        Fetch a quote for the exact input amount.

        Raises:
            ExecutionError: On HTTP or payload errors
        """
        params = {
            "inputMint": request.from_asset.mint,
            "outputMint": request.to_asset.mint,
            "amount": str(request.amount),
            "slippageBps": request.slippage_bps,
        }
        quote = await self._request("GET", self.quote_url, params=params)
        if "error" in quote or "outAmount" not in quote:
            raise ExecutionError(f"Failed to get Jupiter quote: {quote.get('error', quote)}")
        return quote

    async def build_swap_transaction(self, quote: Dict[str, Any]) -> str:
        """
        Ask Jupiter for a serialized swap transaction for this wallet.

        Returns:
            Base64-encoded versioned transaction
        """
        payload = {
            "userPublicKey": str(self.wallet.public_key),
            "quoteResponse": quote,
            "wrapAndUnwrapSol": True,
        }
        swap_data = await self._request("POST", self.swap_url, json=payload)
        swap_tx = swap_data.get("swapTransaction")
        if not swap_tx:
            raise ExecutionError(f"Failed to build swap transaction: {swap_data.get('error', swap_data)}")
        return swap_tx

    def _sign(self, swap_tx: str) -> VersionedTransaction:
        try:
            raw_tx = base64.b64decode(swap_tx)
            tx = VersionedTransaction.from_bytes(raw_tx)
            return VersionedTransaction(tx.message, [self.wallet.keypair])
        except Exception as e:
            raise ExecutionError(f"Failed to decode transaction: {e}") from e

    async def _send(self, signed_tx: VersionedTransaction) -> Signature:
        opts = TxOpts(skip_preflight=False, preflight_commitment=Confirmed)
        try:
            resp = await self.wallet.rpc.send_raw_transaction(bytes(signed_tx), opts=opts)
        except Exception as e:
            raise ExecutionError(f"Failed to send transaction: {e}") from e
        return resp.value

    async def wait_for_confirmation(self, signature: Signature):
        """
        Poll the signature status until it lands.

        Raises:
            ExecutionError: Transaction failed on chain, or status lookup failed
            ConfirmationTimeoutError: Sent, but not confirmed within the polling window
        """
        for attempt in range(self.confirmation_attempts):
            await asyncio.sleep(self.confirmation_delay)
            try:
                resp = await self.wallet.rpc.get_signature_statuses([signature])
            except Exception as e:
                raise ExecutionError(
                    f"Failed while waiting for confirmation: {e}", signature=str(signature)
                ) from e

            status = resp.value[0] if resp.value else None
            if status is not None:
                if status.err is not None:
                    raise ExecutionError(f"Transaction failed: {status.err}", signature=str(signature))
                if (status.confirmations or 0) > 0 or status.confirmation_status in CONFIRMED_STATUSES:
                    return

            logger.info(
                f"Waiting for transaction confirmation... Attempt {attempt + 1}/{self.confirmation_attempts}"
            )

        raise ConfirmationTimeoutError("Transaction confirmation timed out", signature=str(signature))

    async def _request(self, method: str, url: str, **kwargs) -> Dict[str, Any]:
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                if method == "GET":
                    resp = await client.get(url, headers=self._headers(), **kwargs)
                else:
                    resp = await client.post(url, headers=self._headers(), **kwargs)
            resp.raise_for_status()
            data = resp.json()
        except httpx.HTTPStatusError as e:
            raise ExecutionError(
                f"Jupiter API error (HTTP {e.response.status_code}): {e.response.text[:200]}"
            ) from e
        except httpx.HTTPError as e:
            raise ExecutionError(f"Jupiter request failed: {e}") from e
        except ValueError as e:
            raise ExecutionError(f"Failed to parse Jupiter response: {e}") from e

        if not isinstance(data, dict):
            raise ExecutionError(f"Unexpected Jupiter response: {data!r}")
        return data


def _as_int(value: Any, default):
    try:
        return int(value)
    except (TypeError, ValueError):
        return default
