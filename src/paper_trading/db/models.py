"""Database models for the paper trading service.

Portfolio and Position rows are only written by PortfolioService. Trade rows
are append-only and never updated or deleted.
"""
from datetime import datetime

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, SQLModel

from paper_trading.core.utils import utcnow
from paper_trading.ledger.models import STARTING_CASH


class User(SQLModel, table=True):
    """User account. Immutable after registration."""

    id: int | None = Field(default=None, primary_key=True)
    email: str = Field(unique=True, index=True)
    hashed_password: str
    created_at: datetime = Field(default_factory=utcnow)


class Portfolio(SQLModel, table=True):
    """Cash balance of a user; one per user."""

    id: int | None = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", unique=True, index=True)
    cash: float = Field(default=STARTING_CASH)


class Position(SQLModel, table=True):
    """Open holding in one symbol. Deleted when qty reaches zero."""

    __table_args__ = (UniqueConstraint("portfolio_id", "symbol"),)

    id: int | None = Field(default=None, primary_key=True)
    portfolio_id: int = Field(foreign_key="portfolio.id", index=True)
    symbol: str
    qty: int
    avg_price: float


class Trade(SQLModel, table=True):
    """Executed trade (append-only log)."""

    id: int | None = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", index=True)
    symbol: str = Field(index=True)
    side: str  # buy | sell
    qty: int
    price: float
    realized_pnl: float | None = None  # sells only
    timestamp: datetime = Field(default_factory=utcnow)
