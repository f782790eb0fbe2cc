"""Stocks service: static catalogue and current prices."""
from paper_trading.core.exceptions import ValidationError
from paper_trading.core.utils import normalize_symbol
from paper_trading.providers import PriceSourceABC
from paper_trading.schemas import PriceQuote, StockInfo

CATALOGUE: tuple[StockInfo, ...] = (
    StockInfo(symbol="AAPL", name="Apple Inc."),
    StockInfo(symbol="MSFT", name="Microsoft Corporation"),
    StockInfo(symbol="GOOGL", name="Alphabet Inc."),
    StockInfo(symbol="AMZN", name="Amazon.com Inc."),
    StockInfo(symbol="TSLA", name="Tesla Inc."),
    StockInfo(symbol="META", name="Meta Platforms Inc."),
    StockInfo(symbol="NVDA", name="NVIDIA Corporation"),
    StockInfo(symbol="NFLX", name="Netflix Inc."),
    StockInfo(symbol="ADBE", name="Adobe Inc."),
    StockInfo(symbol="INTC", name="Intel Corporation"),
)


class StocksService:
    """Thin service over the price source."""

    def __init__(self, price_source: PriceSourceABC) -> None:
        self._price_source = price_source

    def list_stocks(self) -> list[StockInfo]:
        return list(CATALOGUE)

    async def get_price(self, symbol: str) -> PriceQuote:
        """Current price; price is None (not an error) when the upstream fails."""
        sym = normalize_symbol(symbol)
        if not sym:
            raise ValidationError("Symbol is required")
        return PriceQuote(symbol=sym, price=await self._price_source.get_price(sym))
