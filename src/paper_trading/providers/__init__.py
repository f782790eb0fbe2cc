"""External price sources.

All sources implement PriceSourceABC: ``fetch_price`` raises on upstream
failure, ``get_price`` degrades any upstream failure to None.

- YFinanceProvider: Yahoo Finance via the yfinance library (default, no key)
- FinnhubProvider: Finnhub REST quote API (requires FINNHUB_API_KEY)
- SimulatedProvider: offline random walk for demos

Example:
    async with YFinanceProvider() as source:
        price = await source.get_price("AAPL")
"""
from paper_trading.providers.factory import create_price_source
from paper_trading.providers.finnhub import FinnhubProvider
from paper_trading.providers.price_source_abc import PriceSourceABC
from paper_trading.providers.simulated import SimulatedProvider
from paper_trading.providers.yfinance import YFinanceProvider

__all__ = [
    "FinnhubProvider",
    "PriceSourceABC",
    "SimulatedProvider",
    "YFinanceProvider",
    "create_price_source",
]
