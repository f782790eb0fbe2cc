"""Service layer: ledger persistence, auth, stocks and live price subscriptions."""
from paper_trading.services.auth import AuthService
from paper_trading.services.broker import PriceBroker, PriceSubscription
from paper_trading.services.portfolio import PortfolioService
from paper_trading.services.stocks import StocksService

__all__ = [
    "AuthService",
    "PortfolioService",
    "PriceBroker",
    "PriceSubscription",
    "StocksService",
]
