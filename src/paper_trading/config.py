"""Runtime settings read from environment variables."""
import os
from dataclasses import dataclass

from paper_trading.ledger.models import STARTING_CASH

DEFAULT_DATABASE_URL = "sqlite:///./paper_trading.db"
DEV_JWT_SECRET = "dev-secret-change-me"


def _env_bool(name: str, default: str = "0") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    """Service configuration. Build with Settings.from_env() outside tests."""

    database_url: str = DEFAULT_DATABASE_URL
    sql_echo: bool = False
    jwt_secret: str = DEV_JWT_SECRET
    jwt_expires_minutes: int = 60
    price_provider: str = "yfinance"  # yfinance | finnhub | simulated
    finnhub_api_key: str | None = None
    price_poll_interval: float = 5.0
    starting_cash: float = STARTING_CASH
    frontend_origin: str | None = None
    log_level: str = "INFO"
    host: str = "127.0.0.1"
    port: int = 8000

    def __post_init__(self) -> None:
        if not self.price_poll_interval > 0:
            raise ValueError(
                f"PRICE_POLL_INTERVAL must be positive, got {self.price_poll_interval}"
            )

    @classmethod
    def from_env(cls) -> "Settings":
        """Read settings from the process environment, falling back to defaults."""
        return cls(
            database_url=os.getenv("DATABASE_URL", DEFAULT_DATABASE_URL),
            sql_echo=_env_bool("SQL_ECHO"),
            jwt_secret=os.getenv("JWT_SECRET", DEV_JWT_SECRET),
            jwt_expires_minutes=int(os.getenv("JWT_EXPIRES_MINUTES", "60")),
            price_provider=os.getenv("PRICE_PROVIDER", "yfinance").strip().lower(),
            # STOCK_API_KEY kept for compatibility with older .env files
            finnhub_api_key=os.getenv("FINNHUB_API_KEY") or os.getenv("STOCK_API_KEY"),
            price_poll_interval=float(os.getenv("PRICE_POLL_INTERVAL", "5.0")),
            starting_cash=float(os.getenv("STARTING_CASH", str(STARTING_CASH))),
            frontend_origin=os.getenv("FRONTEND_ORIGIN") or None,
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            host=os.getenv("HOST", "127.0.0.1"),
            port=int(os.getenv("PORT", "8000")),
        )
