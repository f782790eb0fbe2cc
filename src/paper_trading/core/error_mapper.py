"""Maps domain errors to HTTP responses."""
import logging
from dataclasses import dataclass, field

from fastapi import Request
from fastapi.responses import JSONResponse

from paper_trading.core.exceptions import (AuthError, InsufficientFunds,
                                           InsufficientShares, NoPosition,
                                           NotFound, TradingError,
                                           UpstreamUnavailable,
                                           ValidationError)

logger = logging.getLogger(__name__)

_DEFAULT_STATUS_CODES: dict[type[TradingError], int] = {
    ValidationError: 400,
    InsufficientFunds: 400,
    InsufficientShares: 400,
    NoPosition: 400,
    AuthError: 401,
    NotFound: 404,
    UpstreamUnavailable: 503,
}


@dataclass(frozen=True)
class ErrorMapper:
    """Maps TradingError subclasses to (status_code, body).

    Registered once as the FastAPI exception handler for TradingError, so
    services raise domain errors and never build HTTP responses themselves.
    """

    status_codes: dict[type[TradingError], int] = field(
        default_factory=lambda: dict(_DEFAULT_STATUS_CODES)
    )
    default_status: int = 400

    def status_for(self, exc: TradingError) -> int:
        """Resolve the status code, walking the MRO so subclasses inherit."""
        for cls in type(exc).__mro__:
            if cls in self.status_codes:
                return self.status_codes[cls]
        return self.default_status

    def to_http(self, exc: TradingError) -> tuple[int, dict[str, str]]:
        """Map a domain error to (status_code, body) for a JSON response.

        Args:
            exc: The domain error raised by a service or the ledger.

        Returns:
            (status_code, {"error": kind, "detail": message}).
        """
        return self.status_for(exc), {"error": exc.kind, "detail": exc.message}

    async def handle(self, request: Request, exc: TradingError) -> JSONResponse:
        """FastAPI exception handler."""
        status_code, body = self.to_http(exc)
        if status_code >= 500:
            logger.warning("%s %s failed: %s", request.method, request.url.path, exc)
        else:
            logger.info("%s %s rejected (%s): %s", request.method, request.url.path, exc.kind, exc)
        headers = {"WWW-Authenticate": "Bearer"} if status_code == 401 else None
        return JSONResponse(status_code=status_code, content=body, headers=headers)
