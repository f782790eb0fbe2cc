"""Stock catalogue and price routes."""
from fastapi import APIRouter

from paper_trading.deps import StocksServiceDep
from paper_trading.schemas import PriceQuote, StockInfo

router = APIRouter(prefix="/stocks", tags=["stocks"])


@router.get("", response_model=list[StockInfo])
async def list_stocks(service: StocksServiceDep) -> list[StockInfo]:
    """Get the tradable stock catalogue."""
    return service.list_stocks()


@router.get("/{symbol}", response_model=PriceQuote)
async def get_stock_price(symbol: str, service: StocksServiceDep) -> PriceQuote:
    """Get the current price for a stock symbol.

    Args:
        symbol: Stock ticker (e.g., "AAPL", "MSFT").

    Returns:
        {symbol, price}; price is null when the price source is unavailable.
    """
    return await service.get_price(symbol)
