"""
Jupiter Price Feed

Implements PriceSource on top of the Jupiter price API, quoting one mint in
USD. Handles both response layouts Jupiter has served:
- v2: {"data": {"<mint>": {"id": ..., "price": "123.45"}}}
- v3: {"<mint>": {"usdPrice": 123.45, ...}}
"""

import logging
from typing import Any, Dict, Optional

import httpx

from trailswap.constants import JUPITER_PRICE_URL, SOL_MINT
from trailswap.exceptions import PriceUnavailableError
from trailswap.price_feeds.base import PriceSource

logger = logging.getLogger(__name__)


class JupiterPriceFeed(PriceSource):
    """Price feed for a single mint via the Jupiter price API"""

    def __init__(
        self,
        mint: str = SOL_MINT,
        api_url: str = JUPITER_PRICE_URL,
        api_key: str = "",
        timeout: float = 10.0,
    ):
        """
        Initialize Jupiter price feed.

        Args:
            mint: Mint address of the tracked asset
            api_url: Price endpoint (v2 or v3 layout)
            api_key: Optional Jupiter API key (sent as x-api-key)
            timeout: HTTP timeout in seconds
        """
        super().__init__(name="jupiter")
        self.mint = mint
        self.api_url = api_url
        self.api_key = api_key
        self.timeout = timeout

    async def get_price(self) -> float:
        """
        Fetch the current USD price of the tracked mint.

        Raises:
            PriceUnavailableError: On HTTP errors, bad payloads or invalid prices
        """
        logger.debug(f"Fetching price for {self.mint}")
        headers = {"accept": "application/json"}
        if self.api_key:
            headers["x-api-key"] = self.api_key

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                resp = await client.get(self.api_url, params={"ids": self.mint}, headers=headers)
            resp.raise_for_status()
            payload = resp.json()
        except httpx.HTTPStatusError as e:
            raise PriceUnavailableError(
                f"Jupiter price API returned HTTP {e.response.status_code}: {e.response.text[:200]}"
            ) from e
        except httpx.HTTPError as e:
            raise PriceUnavailableError(f"Jupiter price request failed: {e}") from e
        except ValueError as e:
            raise PriceUnavailableError(f"Failed to parse price data: {e}") from e

        price = self._extract_price(payload)
        if price is None:
            raise PriceUnavailableError(f"Price for {self.mint} not found in response")
        return self.validate_price(price)

    def _extract_price(self, payload: Any) -> Optional[float]:
        """Pull the mint's price out of a v2 or v3 payload"""
        if not isinstance(payload, dict):
            return None

        entry: Optional[Dict[str, Any]] = None
        data = payload.get("data")
        if isinstance(data, dict):
            entry = data.get(self.mint)
        if entry is None:
            entry = payload.get(self.mint)
        if not isinstance(entry, dict):
            return None

        raw = entry.get("price", entry.get("usdPrice"))
        if raw is None:
            return None
        try:
            return float(raw)
        except (TypeError, ValueError) as e:
            raise PriceUnavailableError(f"Failed to parse price {raw!r}: {e}") from e
