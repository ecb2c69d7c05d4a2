"""
Tests for backend/trailswap/exchange_clients/jupiter_client.py

Covers:
- Quote request parameters and quote validation
- Swap transaction build, sign, send, confirm happy path
- On-chain failure, confirmation timeout and RPC errors
- HTTP errors mapped to ExecutionError
"""

import base64

import httpx
import pytest
from solders.transaction_status import TransactionConfirmationStatus
from unittest.mock import AsyncMock, MagicMock, patch

from trailswap.exceptions import ConfirmationTimeoutError, ExecutionError
from trailswap.exchange_clients.jupiter_client import JupiterSwapClient
from trailswap.trading_engine.models import SOL, USDC, SwapRequest

QUOTE = {
    "inputMint": SOL.mint,
    "outputMint": USDC.mint,
    "inAmount": "1900000000",
    "outAmount": "246810000",
    "slippageBps": 50,
}
SWAP_TX = base64.b64encode(b"unsigned-tx").decode()


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

class _SignedTx:
    def __bytes__(self):
        return b"signed-tx"


def _request():
    return SwapRequest(from_asset=SOL, to_asset=USDC, amount=1_900_000_000, slippage_bps=50)


def _status(err=None, confirmations=1, confirmation_status=TransactionConfirmationStatus.Confirmed):
    status = MagicMock()
    status.err = err
    status.confirmations = confirmations
    status.confirmation_status = confirmation_status
    return status


def _make_wallet(statuses=None):
    wallet = MagicMock()
    wallet.public_key = "WalletPubkey1111111111111111111111111111111"
    wallet.keypair = MagicMock()
    wallet.rpc = MagicMock()
    wallet.rpc.send_raw_transaction = AsyncMock(return_value=MagicMock(value="5xSignature"))
    statuses = statuses if statuses is not None else [_status()]
    wallet.rpc.get_signature_statuses = AsyncMock(
        side_effect=[MagicMock(value=[s]) for s in statuses]
    )
    return wallet


def _json_response(payload):
    resp = MagicMock()
    resp.json.return_value = payload
    resp.raise_for_status = MagicMock()
    return resp


def _patch_http(quote=QUOTE, swap=None, get_side_effect=None):
    client = MagicMock()
    client.get = AsyncMock(return_value=_json_response(quote), side_effect=get_side_effect)
    client.post = AsyncMock(return_value=_json_response(swap or {"swapTransaction": SWAP_TX}))
    mock_cls = MagicMock()
    mock_cls.return_value.__aenter__ = AsyncMock(return_value=client)
    mock_cls.return_value.__aexit__ = AsyncMock(return_value=False)
    return patch("trailswap.exchange_clients.jupiter_client.httpx.AsyncClient", mock_cls), client


def _patch_tx():
    mock_tx = MagicMock()
    mock_tx.from_bytes.return_value = MagicMock(message="message")
    mock_tx.return_value = _SignedTx()
    return patch("trailswap.exchange_clients.jupiter_client.VersionedTransaction", mock_tx), mock_tx


def _client(wallet, attempts=3):
    return JupiterSwapClient(
        wallet=wallet,
        quote_url="https://quote",
        swap_url="https://swap",
        confirmation_attempts=attempts,
        confirmation_delay=0,
    )


# ---------------------------------------------------------------------------
# Tests
# ---------------------------------------------------------------------------

class TestGetQuote:

    @pytest.mark.asyncio
    async def test_quote_params(self):
        http, client = _patch_http()
        with http:
            quote = await _client(_make_wallet()).get_quote(_request())

        assert quote == QUOTE
        params = client.get.await_args.kwargs["params"]
        assert params == {
            "inputMint": SOL.mint,
            "outputMint": USDC.mint,
            "amount": "1900000000",
            "slippageBps": 50,
        }

    @pytest.mark.asyncio
    async def test_quote_error_field(self):
        http, _ = _patch_http(quote={"error": "No routes found"})
        with http:
            with pytest.raises(ExecutionError, match="No routes found"):
                await _client(_make_wallet()).get_quote(_request())

    @pytest.mark.asyncio
    async def test_quote_http_error(self):
        http, _ = _patch_http(get_side_effect=httpx.ReadTimeout("timed out"))
        with http:
            with pytest.raises(ExecutionError, match="request failed"):
                await _client(_make_wallet()).get_quote(_request())


class TestSwap:

    @pytest.mark.asyncio
    async def test_happy_path(self):
        wallet = _make_wallet()
        http, client = _patch_http()
        tx, mock_tx = _patch_tx()
        with http, tx:
            result = await _client(wallet).swap(_request())

        assert result.signature == "5xSignature"
        assert result.in_amount == 1_900_000_000
        assert result.out_amount == 246_810_000

        body = client.post.await_args.kwargs["json"]
        assert body["userPublicKey"] == wallet.public_key
        assert body["quoteResponse"] == QUOTE
        assert body["wrapAndUnwrapSol"] is True

        mock_tx.from_bytes.assert_called_once_with(b"unsigned-tx")
        mock_tx.assert_called_once_with("message", [wallet.keypair])

        sent = wallet.rpc.send_raw_transaction.await_args
        assert sent.args[0] == b"signed-tx"
        assert sent.kwargs["opts"].skip_preflight is False

    @pytest.mark.asyncio
    async def test_missing_swap_transaction(self):
        http, _ = _patch_http(swap={"error": "bad quote"})
        with http:
            with pytest.raises(ExecutionError, match="bad quote"):
                await _client(_make_wallet()).swap(_request())

    @pytest.mark.asyncio
    async def test_undecodable_transaction(self):
        http, _ = _patch_http()
        tx, mock_tx = _patch_tx()
        mock_tx.from_bytes.side_effect = ValueError("bad bytes")
        with http, tx:
            with pytest.raises(ExecutionError, match="Failed to decode"):
                await _client(_make_wallet()).swap(_request())

    @pytest.mark.asyncio
    async def test_send_failure(self):
        wallet = _make_wallet()
        wallet.rpc.send_raw_transaction.side_effect = RuntimeError("preflight failed")
        http, _ = _patch_http()
        tx, _ = _patch_tx()
        with http, tx:
            with pytest.raises(ExecutionError, match="Failed to send"):
                await _client(wallet).swap(_request())


class TestWaitForConfirmation:

    @pytest.mark.asyncio
    async def test_confirms_after_pending(self):
        wallet = _make_wallet(statuses=[None, _status(confirmations=0, confirmation_status=None), _status()])
        await _client(wallet, attempts=5).wait_for_confirmation("sig")
        assert wallet.rpc.get_signature_statuses.await_count == 3

    @pytest.mark.asyncio
    async def test_on_chain_error(self):
        wallet = _make_wallet(statuses=[_status(err="InstructionError")])
        with pytest.raises(ExecutionError, match="Transaction failed") as exc_info:
            await _client(wallet).wait_for_confirmation("sig")
        assert exc_info.value.signature == "sig"

    @pytest.mark.asyncio
    async def test_timeout(self):
        wallet = _make_wallet(statuses=[None, None])
        with pytest.raises(ConfirmationTimeoutError):
            await _client(wallet, attempts=2).wait_for_confirmation("sig")

    @pytest.mark.asyncio
    async def test_status_lookup_error(self):
        wallet = _make_wallet()
        wallet.rpc.get_signature_statuses = AsyncMock(side_effect=RuntimeError("rpc down"))
        with pytest.raises(ExecutionError, match="waiting for confirmation"):
            await _client(wallet).wait_for_confirmation("sig")

    @pytest.mark.asyncio
    async def test_processed_only_is_not_confirmed(self):
        """Failure: a processed transaction with no confirmations can still be dropped."""
        processed = _status(confirmations=0, confirmation_status=TransactionConfirmationStatus.Processed)
        wallet = _make_wallet(statuses=[processed, processed, processed])
        with pytest.raises(ConfirmationTimeoutError):
            await _client(wallet, attempts=3).wait_for_confirmation("sig")
        assert wallet.rpc.get_signature_statuses.await_count == 3

    @pytest.mark.asyncio
    async def test_finalized_without_confirmation_count(self):
        """Edge case: finalized statuses report confirmations as None."""
        finalized = _status(confirmations=None, confirmation_status=TransactionConfirmationStatus.Finalized)
        wallet = _make_wallet(statuses=[finalized])
        await _client(wallet).wait_for_confirmation("sig")
        assert wallet.rpc.get_signature_statuses.await_count == 1
