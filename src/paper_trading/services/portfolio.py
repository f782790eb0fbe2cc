"""Portfolio service: loads portfolios, applies ledger trades, persists results.

A trade's portfolio update and its Trade log row are written in one database
transaction, so either both land or neither does. Trades for the same user are
serialized with a per-user lock; trades for different users run concurrently.
"""
import asyncio
import logging

from sqlmodel import Session, col, select

from paper_trading.core.exceptions import NotFound
from paper_trading.core.utils import normalize_symbol
from paper_trading.db import Database, Portfolio, Position, Trade
from paper_trading.ledger import (Fill, PortfolioState, PositionState, Side,
                                  apply_trade, value_portfolio)
from paper_trading.ledger.models import STARTING_CASH
from paper_trading.providers import PriceSourceABC
from paper_trading.schemas import PortfolioOut, PortfolioSummary, TradeOut
from paper_trading.services.locks import KeyedLocks

logger = logging.getLogger(__name__)

DEFAULT_TRADES_LIMIT = 50


def create_portfolio(
    session: Session, user_id: int, starting_cash: float = STARTING_CASH
) -> Portfolio:
    """Create an empty portfolio for a new user in the caller's transaction."""
    portfolio = Portfolio(user_id=user_id, cash=starting_cash)
    session.add(portfolio)
    session.flush()
    return portfolio


def _require_portfolio(session: Session, user_id: int) -> Portfolio:
    portfolio = session.exec(select(Portfolio).where(Portfolio.user_id == user_id)).first()
    if portfolio is None:
        raise NotFound(f"No portfolio for user {user_id}")
    return portfolio


def _position_rows(session: Session, portfolio_id: int) -> list[Position]:
    return list(
        session.exec(
            select(Position)
            .where(Position.portfolio_id == portfolio_id)
            .order_by(Position.id)
        ).all()
    )


def _to_state(portfolio: Portfolio, rows: list[Position]) -> PortfolioState:
    return PortfolioState(
        cash=portfolio.cash,
        positions=tuple(PositionState(r.symbol, r.qty, r.avg_price) for r in rows),
    )


def _write_state(
    session: Session,
    portfolio: Portfolio,
    rows: list[Position],
    state: PortfolioState,
) -> None:
    """Reconcile stored rows with the new ledger state."""
    portfolio.cash = state.cash
    session.add(portfolio)
    by_symbol = {r.symbol: r for r in rows}
    for p in state.positions:
        row = by_symbol.pop(p.symbol, None)
        if row is None:
            row = Position(portfolio_id=portfolio.id, symbol=p.symbol)
        row.qty = p.qty
        row.avg_price = p.avg_price
        session.add(row)
    for closed in by_symbol.values():
        session.delete(closed)


class PortfolioService:
    """Owns all portfolio mutations (the ledger's persistence side)."""

    def __init__(
        self,
        database: Database,
        price_source: PriceSourceABC,
        *,
        locks: KeyedLocks | None = None,
    ) -> None:
        self._db = database
        self._price_source = price_source
        self._locks = locks or KeyedLocks()

    def _load_sync(self, user_id: int) -> PortfolioState:
        with self._db.session() as session:
            portfolio = _require_portfolio(session, user_id)
            return _to_state(portfolio, _position_rows(session, portfolio.id))

    async def get_state(self, user_id: int) -> PortfolioState:
        """Current ledger state. Raises NotFound if the user has no portfolio."""
        return await asyncio.to_thread(self._load_sync, user_id)

    async def get_portfolio(self, user_id: int) -> PortfolioOut:
        return PortfolioOut.from_state(await self.get_state(user_id))

    def _record_trade(self, session: Session, user_id: int, fill: Fill) -> Trade:
        trade = Trade(
            user_id=user_id,
            symbol=fill.symbol,
            side=fill.side.value,
            qty=fill.qty,
            price=fill.price,
            realized_pnl=fill.realized_pnl,
        )
        session.add(trade)
        return trade

    def _execute_sync(
        self, user_id: int, symbol: str, side: Side | str, qty: int, price: float | None
    ) -> PortfolioState:
        with self._db.session() as session:
            portfolio = _require_portfolio(session, user_id)
            rows = _position_rows(session, portfolio.id)
            result = apply_trade(_to_state(portfolio, rows), symbol, side, qty, price)
            _write_state(session, portfolio, rows, result.portfolio)
            self._record_trade(session, user_id, result.fill)
            session.flush()
        logger.info(
            "User %s %s %s %s @ %s",
            user_id,
            result.fill.side.value,
            result.fill.qty,
            result.fill.symbol,
            result.fill.price,
        )
        return result.portfolio

    async def trade(
        self, user_id: int, symbol: str, side: Side | str, qty: int
    ) -> PortfolioOut:
        """Execute a trade at the current price.

        Raises:
            UpstreamUnavailable: no price for symbol.
            InsufficientFunds, NoPosition, InsufficientShares, ValidationError:
                rejected by the ledger; nothing is written.
            NotFound: user has no portfolio.
        """
        sym = normalize_symbol(symbol)
        price = await self._price_source.get_price(sym)
        async with self._locks.hold(user_id):
            state = await asyncio.to_thread(
                self._execute_sync, user_id, sym, side, qty, price
            )
        return PortfolioOut.from_state(state)

    def _trades_sync(self, user_id: int, limit: int) -> list[TradeOut]:
        with self._db.session() as session:
            trades = session.exec(
                select(Trade)
                .where(Trade.user_id == user_id)
                .order_by(col(Trade.id).desc())
                .limit(limit)
            ).all()
            return [TradeOut.model_validate(t) for t in trades]

    async def list_trades(self, user_id: int, limit: int = DEFAULT_TRADES_LIMIT) -> list[TradeOut]:
        """Trade history, newest first."""
        return await asyncio.to_thread(self._trades_sync, user_id, limit)

    async def summary(self, user_id: int) -> PortfolioSummary:
        """Value the portfolio at current prices (one lookup per position)."""
        state = await self.get_state(user_id)
        symbols = [p.symbol for p in state.positions]
        prices = await asyncio.gather(*(self._price_source.get_price(s) for s in symbols))
        return PortfolioSummary.from_valuation(
            value_portfolio(state, dict(zip(symbols, prices)))
        )
