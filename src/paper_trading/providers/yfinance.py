"""Yahoo Finance price source."""
import asyncio

import yfinance as yf

from paper_trading.core.exceptions import UpstreamUnavailable
from paper_trading.core.utils import round2
from paper_trading.providers.price_source_abc import PriceSourceABC


class YFinanceProvider(PriceSourceABC):
    """Price source for stocks via Yahoo Finance.

    Uses the yfinance library; no API key required. yfinance is synchronous,
    so lookups run in a worker thread.
    """

    name = "yfinance"

    def _extract_price(self, ticker: yf.Ticker, symbol: str) -> float:
        """Extract last price from ticker; raises if price unavailable."""
        info = getattr(ticker, "fast_info", None)
        if info and (price := info.get("lastPrice") or info.get("regularMarketPrice")):
            return float(price)
        full = ticker.info
        price = full.get("currentPrice") or full.get("regularMarketPrice")
        if price is None:
            raise UpstreamUnavailable(f"Stock '{symbol}' not found or has no price data")
        return float(price)

    def _fetch_price_sync(self, symbol: str) -> float:
        """Fetch a single price synchronously (run in thread)."""
        ticker = yf.Ticker(symbol)
        try:
            return round2(self._extract_price(ticker, symbol))
        except UpstreamUnavailable:
            raise
        except Exception as e:
            raise UpstreamUnavailable(f"Failed to fetch price for '{symbol}': {e}") from e

    async def fetch_price(self, symbol: str) -> float:
        return await asyncio.to_thread(self._fetch_price_sync, symbol)
