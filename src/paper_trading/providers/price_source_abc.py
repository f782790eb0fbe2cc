"""Abstract base class for price sources."""
import asyncio
import logging
from abc import ABC, abstractmethod

import httpx

from paper_trading.core.exceptions import UpstreamUnavailable
from paper_trading.core.utils import normalize_symbol

logger = logging.getLogger(__name__)

# Upstream failures that degrade to a None price; anything else is a bug and propagates.
_UPSTREAM_EXCEPTIONS: tuple[type[Exception], ...] = (
    UpstreamUnavailable,
    ValueError,
    KeyError,
    TypeError,
    TimeoutError,
    OSError,
    asyncio.TimeoutError,
    httpx.HTTPError,
)


class PriceSourceABC(ABC):
    """Base interface for all price sources.

    Latency and availability are outside this service's control, so callers
    use get_price() and treat None as "price unknown", never as zero.
    """

    name = "price-source"

    @abstractmethod
    async def fetch_price(self, symbol: str) -> float:
        """Fetch the current price for a normalized symbol.

        Args:
            symbol: Upper-case ticker (e.g. "AAPL").

        Returns:
            Last traded price.

        Raises:
            UpstreamUnavailable: the source has no price for symbol.
        """

    async def get_price(self, symbol: str) -> float | None:
        """Current price for symbol, or None if the upstream failed."""
        sym = normalize_symbol(symbol)
        try:
            return await self.fetch_price(sym)
        except _UPSTREAM_EXCEPTIONS as exc:
            logger.warning("%s price lookup failed for %s: %s", self.name, sym, exc)
            return None

    async def close(self) -> None:
        """Clean up resources (connections, clients).

        Override in subclasses if cleanup is needed.
        """

    async def __aenter__(self) -> "PriceSourceABC":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:  # noqa: ANN001
        await self.close()
