"""Domain errors raised by the ledger and services.

Every error carries a ``kind`` (the class name) and a human-readable message.
Routers never catch these; ErrorMapper turns them into HTTP responses.
"""


class TradingError(Exception):
    """Base class for all domain errors."""

    default_message = "Operation rejected"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)

    @property
    def kind(self) -> str:
        return type(self).__name__


class ValidationError(TradingError):
    """Bad or missing input."""

    default_message = "Invalid input"


class AuthError(TradingError):
    """Bad credentials or a missing/invalid/expired token."""

    default_message = "Not authenticated"


class NotFound(TradingError):
    """No user or portfolio record."""

    default_message = "Not found"


class InsufficientFunds(TradingError):
    default_message = "Not enough cash"


class InsufficientShares(TradingError):
    default_message = "Not enough shares"


class NoPosition(TradingError):
    default_message = "No open position"


class UpstreamUnavailable(TradingError):
    """The external price source failed or returned no price."""

    default_message = "Price source unavailable"
