"""Factory for the configured price source."""
from paper_trading.config import Settings
from paper_trading.providers.finnhub import FinnhubProvider
from paper_trading.providers.price_source_abc import PriceSourceABC
from paper_trading.providers.simulated import SimulatedProvider
from paper_trading.providers.yfinance import YFinanceProvider


def create_price_source(settings: Settings) -> PriceSourceABC:
    """Create the price source named by settings.price_provider.

    Raises:
        ValueError: unknown provider name.
    """
    name = settings.price_provider
    if name == "yfinance":
        return YFinanceProvider()
    if name == "finnhub":
        return FinnhubProvider(api_key=settings.finnhub_api_key)
    if name == "simulated":
        return SimulatedProvider()
    raise ValueError(
        f"Unknown price provider: {name}. Available: yfinance, finnhub, simulated"
    )
