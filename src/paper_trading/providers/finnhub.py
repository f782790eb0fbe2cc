"""Finnhub price source."""
import os

import httpx
from pydantic import BaseModel

from paper_trading.core.exceptions import UpstreamUnavailable
from paper_trading.core.utils import round2
from paper_trading.providers.price_source_abc import PriceSourceABC


class FinnhubQuoteParams(BaseModel):
    """Params for /quote. The API key travels as the ``token`` query param."""

    symbol: str
    token: str


class FinnhubQuote(BaseModel):
    """Subset of the /quote response: c=current, pc=previous close, t=unix time."""

    c: float | None = None
    pc: float | None = None
    t: int | None = None


class FinnhubProvider(PriceSourceABC):
    """Price source for stocks via the Finnhub REST API.

    Finnhub answers unknown symbols with HTTP 200 and a zero current price,
    so a zero/missing ``c`` is treated as "no price".
    """

    name = "finnhub"
    BASE_URL = "https://finnhub.io/api/v1"

    def __init__(
        self,
        api_key: str | None = None,
        *,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the Finnhub provider.

        Args:
            api_key: Finnhub API key. Defaults to FINNHUB_API_KEY env var.
            client: Preconfigured client (tests); must carry the base URL.
        """
        self._api_key = api_key or os.getenv("FINNHUB_API_KEY")
        self._client = client or httpx.AsyncClient(
            base_url=self.BASE_URL,
            headers={"Accept": "application/json"},
        )

    async def fetch_price(self, symbol: str) -> float:
        if not self._api_key:
            raise UpstreamUnavailable("Finnhub API key is not configured")
        params = FinnhubQuoteParams(symbol=symbol, token=self._api_key).model_dump()
        response = await self._client.get("/quote", params=params)
        response.raise_for_status()
        quote = FinnhubQuote.model_validate(response.json())
        if not quote.c:
            raise UpstreamUnavailable(f"Stock '{symbol}' not found or has no price data")
        return round2(quote.c)

    async def close(self) -> None:
        await self._client.aclose()
