"""Immutable ledger state passed into and out of apply_trade."""
from dataclasses import dataclass
from enum import Enum

STARTING_CASH = 10000.0


class Side(str, Enum):
    """Trade direction."""

    BUY = "buy"
    SELL = "sell"


@dataclass(frozen=True)
class PositionState:
    """Holding in one symbol. qty is always > 0."""

    symbol: str
    qty: int
    avg_price: float


@dataclass(frozen=True)
class PortfolioState:
    """Cash plus open positions, in the order they were opened."""

    cash: float = STARTING_CASH
    positions: tuple[PositionState, ...] = ()

    def find(self, symbol: str) -> PositionState | None:
        """Return the open position for symbol, if any."""
        return next((p for p in self.positions if p.symbol == symbol), None)


@dataclass(frozen=True)
class Fill:
    """What a successful trade executed; becomes the Trade log entry."""

    symbol: str
    side: Side
    qty: int
    price: float
    realized_pnl: float | None = None


@dataclass(frozen=True)
class TradeResult:
    portfolio: PortfolioState
    fill: Fill
