"""Buy/sell application with weighted-average cost accounting.

apply_trade never mutates its input; it returns a new PortfolioState and the
Fill to record, or raises a TradingError subclass.
"""
import math

from paper_trading.core.exceptions import (InsufficientFunds,
                                           InsufficientShares, NoPosition,
                                           UpstreamUnavailable,
                                           ValidationError)
from paper_trading.core.utils import normalize_symbol, round2
from paper_trading.ledger.models import (Fill, PortfolioState, PositionState,
                                         Side, TradeResult)


def _validate_symbol(symbol: str) -> str:
    if not isinstance(symbol, str) or not symbol.strip():
        raise ValidationError("Symbol is required")
    return normalize_symbol(symbol)


def _validate_side(side: Side | str) -> Side:
    try:
        return Side(side)
    except ValueError as e:
        raise ValidationError(f"Side must be 'buy' or 'sell', got {side!r}") from e


def _validate_qty(qty: int) -> int:
    if isinstance(qty, bool) or not isinstance(qty, int) or qty <= 0:
        raise ValidationError(f"Quantity must be a positive whole number, got {qty!r}")
    return qty


def _validate_price(price: float | None, symbol: str) -> float:
    if price is None:
        raise UpstreamUnavailable(f"Price for '{symbol}' is unavailable")
    price = float(price)
    if not math.isfinite(price) or price <= 0:
        raise ValidationError(f"Price for '{symbol}' must be positive, got {price!r}")
    return price


def _buy(portfolio: PortfolioState, symbol: str, qty: int, price: float) -> TradeResult:
    # Cash moves in whole cents
    cash = round2(portfolio.cash)
    cost = round2(qty * price)
    if cash < cost:
        raise InsufficientFunds(
            f"Not enough cash: buying {qty} {symbol} costs {cost:.2f}, "
            f"available {cash:.2f}"
        )

    existing = portfolio.find(symbol)
    if existing is None:
        positions = portfolio.positions + (PositionState(symbol, qty, price),)
    else:
        new_qty = existing.qty + qty
        avg_price = (existing.avg_price * existing.qty + price * qty) / new_qty
        updated = PositionState(symbol, new_qty, avg_price)
        positions = tuple(updated if p is existing else p for p in portfolio.positions)

    return TradeResult(
        portfolio=PortfolioState(cash=round2(cash - cost), positions=positions),
        fill=Fill(symbol, Side.BUY, qty, price),
    )


def _sell(portfolio: PortfolioState, symbol: str, qty: int, price: float) -> TradeResult:
    existing = portfolio.find(symbol)
    if existing is None:
        raise NoPosition(f"No open position in {symbol}")
    if existing.qty < qty:
        raise InsufficientShares(
            f"Not enough shares: holding {existing.qty} {symbol}, tried to sell {qty}"
        )

    remaining = existing.qty - qty
    if remaining == 0:
        positions = tuple(p for p in portfolio.positions if p is not existing)
    else:
        updated = PositionState(symbol, remaining, existing.avg_price)
        positions = tuple(updated if p is existing else p for p in portfolio.positions)

    return TradeResult(
        portfolio=PortfolioState(
            cash=round2(round2(portfolio.cash) + round2(qty * price)), positions=positions
        ),
        fill=Fill(
            symbol,
            Side.SELL,
            qty,
            price,
            realized_pnl=round2(qty * (price - existing.avg_price)),
        ),
    )


def apply_trade(
    portfolio: PortfolioState,
    symbol: str,
    side: Side | str,
    qty: int,
    price: float | None,
) -> TradeResult:
    """Apply a buy or sell to a portfolio.

    Args:
        portfolio: Current cash and positions.
        symbol: Ticker; normalized to upper case.
        side: "buy" or "sell".
        qty: Positive whole number of shares.
        price: Execution price per share; None when the price source is down.

    Returns:
        TradeResult with the updated portfolio and the executed fill.

    Raises:
        ValidationError: bad symbol, side, quantity or price.
        UpstreamUnavailable: price is None.
        InsufficientFunds: buy cost exceeds cash.
        NoPosition: sell with no open position in symbol.
        InsufficientShares: sell quantity exceeds the position.
    """
    symbol = _validate_symbol(symbol)
    side = _validate_side(side)
    qty = _validate_qty(qty)
    price = _validate_price(price, symbol)
    if side is Side.BUY:
        return _buy(portfolio, symbol, qty, price)
    return _sell(portfolio, symbol, qty, price)
