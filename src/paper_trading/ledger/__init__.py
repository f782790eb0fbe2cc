"""Portfolio ledger: cash and position accounting, independent of storage."""
from paper_trading.ledger.ledger import apply_trade
from paper_trading.ledger.models import (Fill, PortfolioState, PositionState,
                                         Side, TradeResult)
from paper_trading.ledger.valuation import value_portfolio

__all__ = [
    "Fill",
    "PortfolioState",
    "PositionState",
    "Side",
    "TradeResult",
    "apply_trade",
    "value_portfolio",
]
