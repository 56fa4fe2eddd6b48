# Filename: market_data.py

import logging
from typing import Any, Optional

import aiohttp

from errors import EnrichmentUnavailable
from models import MarketSnapshot

logger = logging.getLogger("market_data")


def _as_number(value: Any) -> Optional[float]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return float(value)


class MarketEnricher:
    """
    Price / market cap lookup on Birdeye's token overview endpoint.
    Best effort: every failure yields an empty MarketSnapshot.
    """

    def __init__(self, session: aiohttp.ClientSession, api_key: str = "",
                 base_url: str = "https://public-api.birdeye.so",
                 chain: str = "solana", timeout: float = 10):
        self.session = session
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.chain = chain
        self.timeout = aiohttp.ClientTimeout(total=timeout)

    async def fetch(self, token_address: str) -> MarketSnapshot:
        try:
            data = await self._get_overview(token_address)
        except EnrichmentUnavailable as e:
            logger.warning(f"[MARKET] {e}")
            return MarketSnapshot()

        return MarketSnapshot(
            price=_as_number(data.get("price")),
            market_cap=_as_number(data.get("mc")),
        )

    async def _get_overview(self, token_address: str) -> dict:
        url = f"{self.base_url}/defi/token_overview"
        headers = {"accept": "application/json", "x-chain": self.chain}
        if self.api_key:
            headers["X-API-KEY"] = self.api_key

        try:
            async with self.session.get(url, params={"address": token_address},
                                        headers=headers, timeout=self.timeout) as response:
                if response.status < 200 or response.status >= 300:
                    raise EnrichmentUnavailable("market data request failed",
                                                {"token": token_address, "status": response.status})
                body = await response.json(content_type=None)
        except EnrichmentUnavailable:
            raise
        except Exception as e:
            raise EnrichmentUnavailable("market data request error",
                                        {"token": token_address, "error": repr(e)}) from e

        data = body.get("data") if isinstance(body, dict) else None
        if not isinstance(data, dict):
            raise EnrichmentUnavailable("market data response has no data object", {"token": token_address})
        return data
