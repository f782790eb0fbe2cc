"""Mark-to-market valuation of a portfolio against current prices."""
from dataclasses import dataclass

from paper_trading.ledger.models import PortfolioState


@dataclass(frozen=True)
class PositionValuation:
    symbol: str
    qty: int
    avg_price: float
    current_price: float | None
    invested: float
    market_value: float
    unrealized_pnl: float | None


@dataclass(frozen=True)
class PortfolioValuation:
    cash: float
    invested: float
    market_value: float
    total_value: float
    profit_loss: float
    priced: bool
    positions: tuple[PositionValuation, ...]


def value_portfolio(
    portfolio: PortfolioState, prices: dict[str, float | None]
) -> PortfolioValuation:
    """Value each position at its current price.

    A position with an unknown price is carried at average cost for the
    totals, its unrealized_pnl is None and the result is flagged priced=False.
    """
    rows: list[PositionValuation] = []
    for p in portfolio.positions:
        current = prices.get(p.symbol)
        invested = p.avg_price * p.qty
        mark = current if current is not None else p.avg_price
        rows.append(
            PositionValuation(
                symbol=p.symbol,
                qty=p.qty,
                avg_price=p.avg_price,
                current_price=current,
                invested=invested,
                market_value=mark * p.qty,
                unrealized_pnl=None if current is None else (current - p.avg_price) * p.qty,
            )
        )
    invested = sum(r.invested for r in rows)
    market_value = sum(r.market_value for r in rows)
    total_value = market_value + portfolio.cash
    return PortfolioValuation(
        cash=portfolio.cash,
        invested=invested,
        market_value=market_value,
        total_value=total_value,
        profit_loss=total_value - (invested + portfolio.cash),
        priced=all(r.current_price is not None for r in rows),
        positions=tuple(rows),
    )
