"""Database package: models and session management."""
from paper_trading.db.models import Portfolio, Position, Trade, User
from paper_trading.db.sessions import Database, create_db_engine

__all__ = ["Database", "Portfolio", "Position", "Trade", "User", "create_db_engine"]
