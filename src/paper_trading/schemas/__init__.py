"""Pydantic schemas for the HTTP API and the live price channel. Not persisted to DB."""
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from paper_trading.ledger import PortfolioState, Side
from paper_trading.ledger.valuation import PortfolioValuation

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class Credentials(BaseModel):
    """Register/login body."""

    email: str = Field(pattern=EMAIL_PATTERN, max_length=254)
    password: str = Field(min_length=1)


class TokenResponse(BaseModel):
    token: str


class MessageResponse(BaseModel):
    message: str


class TradeRequest(BaseModel):
    """Trade body. The execution price always comes from the price source."""

    symbol: str = Field(min_length=1, max_length=15)
    side: Side
    qty: int = Field(gt=0)


class PositionOut(BaseModel):
    symbol: str
    qty: int
    avg_price: float


class PortfolioOut(BaseModel):
    cash: float
    positions: list[PositionOut]

    @classmethod
    def from_state(cls, state: PortfolioState) -> "PortfolioOut":
        return cls(
            cash=state.cash,
            positions=[
                PositionOut(symbol=p.symbol, qty=p.qty, avg_price=p.avg_price)
                for p in state.positions
            ],
        )


class TradeResponse(BaseModel):
    message: str = "Trade executed"
    portfolio: PortfolioOut


class TradeOut(BaseModel):
    """Trade log entry."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    symbol: str
    side: Side
    qty: int
    price: float
    realized_pnl: float | None = None
    timestamp: datetime


class PositionValuationOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    symbol: str
    qty: int
    avg_price: float
    current_price: float | None  # None when the price source is unavailable
    invested: float
    market_value: float
    unrealized_pnl: float | None


class PortfolioSummary(BaseModel):
    """Portfolio valued at current prices; unknown prices are carried at cost."""

    model_config = ConfigDict(from_attributes=True)

    cash: float
    invested: float
    market_value: float
    total_value: float
    profit_loss: float
    priced: bool
    positions: list[PositionValuationOut]

    @classmethod
    def from_valuation(cls, valuation: PortfolioValuation) -> "PortfolioSummary":
        return cls(
            cash=valuation.cash,
            invested=valuation.invested,
            market_value=valuation.market_value,
            total_value=valuation.total_value,
            profit_loss=valuation.profit_loss,
            priced=valuation.priced,
            positions=[PositionValuationOut.model_validate(p) for p in valuation.positions],
        )


class StockInfo(BaseModel):
    symbol: str
    name: str


class PriceQuote(BaseModel):
    """Current price of a symbol; price is None when unknown."""

    symbol: str
    price: float | None


class ClientCommand(BaseModel):
    """Message a live client sends: subscribe to one symbol or stop updates."""

    event: Literal["subscribe", "unsubscribe"]
    symbol: str | None = None


class LiveMessage(BaseModel):
    """Server push on the live channel."""

    event: Literal["priceUpdate", "error"]
    data: PriceQuote | None = None
    detail: str | None = None


__all__ = [
    "ClientCommand",
    "Credentials",
    "LiveMessage",
    "MessageResponse",
    "PortfolioOut",
    "PortfolioSummary",
    "PositionOut",
    "PositionValuationOut",
    "PriceQuote",
    "StockInfo",
    "TokenResponse",
    "TradeOut",
    "TradeRequest",
    "TradeResponse",
]
