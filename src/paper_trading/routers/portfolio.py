"""Portfolio routes. All require a bearer token."""
from fastapi import APIRouter, Query

from paper_trading.deps import CurrentUserId, PortfolioServiceDep
from paper_trading.schemas import (PortfolioOut, PortfolioSummary, TradeOut,
                                   TradeRequest, TradeResponse)
from paper_trading.services.portfolio import DEFAULT_TRADES_LIMIT

router = APIRouter(prefix="/portfolio", tags=["portfolio"])


@router.get("", response_model=PortfolioOut)
async def get_portfolio(user_id: CurrentUserId, service: PortfolioServiceDep) -> PortfolioOut:
    """Get the caller's cash and open positions."""
    return await service.get_portfolio(user_id)


@router.post("/trade", response_model=TradeResponse)
async def trade(
    body: TradeRequest, user_id: CurrentUserId, service: PortfolioServiceDep
) -> TradeResponse:
    """Buy or sell at the current price.

    Rejections come back as {"error": kind, "detail": message}:
    InsufficientFunds, NoPosition, InsufficientShares (400) or
    UpstreamUnavailable (503) when no price is available.
    """
    portfolio = await service.trade(user_id, body.symbol, body.side, body.qty)
    return TradeResponse(portfolio=portfolio)


@router.get("/trades", response_model=list[TradeOut])
async def list_trades(
    user_id: CurrentUserId,
    service: PortfolioServiceDep,
    limit: int = Query(default=DEFAULT_TRADES_LIMIT, ge=1, le=500, description="Max trades"),
) -> list[TradeOut]:
    """Get the caller's trade history, newest first."""
    return await service.list_trades(user_id, limit)


@router.get("/summary", response_model=PortfolioSummary)
async def get_summary(user_id: CurrentUserId, service: PortfolioServiceDep) -> PortfolioSummary:
    """Value the portfolio at current prices.

    Positions whose price is unknown have current_price=null and are counted
    at average cost; priced is false in that case.
    """
    return await service.summary(user_id)
