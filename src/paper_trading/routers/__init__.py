"""API routers.

Includes routes for:
- /auth - registration and login
- /portfolio - portfolio, trades, valuation (bearer token required)
- /stocks - stock catalogue and current prices
- /ws/prices - WebSocket live price subscriptions
"""
from paper_trading.routers.auth import router as auth_router
from paper_trading.routers.live import router as live_router
from paper_trading.routers.portfolio import router as portfolio_router
from paper_trading.routers.stocks import router as stocks_router

__all__ = [
    "auth_router",
    "live_router",
    "portfolio_router",
    "stocks_router",
]
