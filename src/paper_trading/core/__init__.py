"""Core abstractions shared by the ledger, services and routers."""
from paper_trading.core.error_mapper import ErrorMapper
from paper_trading.core.exceptions import (AuthError, InsufficientFunds,
                                           InsufficientShares, NoPosition,
                                           NotFound, TradingError,
                                           UpstreamUnavailable,
                                           ValidationError)
from paper_trading.core.utils import normalize_symbol, round2, utcnow

__all__ = [
    "AuthError",
    "ErrorMapper",
    "InsufficientFunds",
    "InsufficientShares",
    "NoPosition",
    "NotFound",
    "TradingError",
    "UpstreamUnavailable",
    "ValidationError",
    "normalize_symbol",
    "round2",
    "utcnow",
]
