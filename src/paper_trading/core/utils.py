"""Shared utilities for the paper trading service."""
from datetime import datetime, timezone

DECIMALS = 2


def normalize_symbol(symbol: str) -> str:
    """Normalize a stock ticker (strip whitespace, uppercase)."""
    return symbol.strip().upper()


def round2(x: float | None) -> float | None:
    """Round a value to 2 decimal places; preserve None."""
    if x is None:
        return None
    return round(float(x), DECIMALS)


def utcnow() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)
