"""Offline random-walk price source for demos without network access."""
import random
import zlib

from paper_trading.core.utils import round2
from paper_trading.providers.price_source_abc import PriceSourceABC

MIN_PRICE = 0.01


class SimulatedProvider(PriceSourceABC):
    """Gaussian random walk per symbol, starting from a symbol-derived base price."""

    name = "simulated"

    def __init__(
        self,
        *,
        seed: int | None = None,
        volatility: float = 0.01,
        base_prices: dict[str, float] | None = None,
    ) -> None:
        self._rng = random.Random(seed)
        self._volatility = volatility
        self._prices: dict[str, float] = dict(base_prices or {})

    @staticmethod
    def base_price(symbol: str) -> float:
        """Stable starting price between 20 and 420 derived from the ticker."""
        return float(20 + zlib.crc32(symbol.encode("utf-8")) % 400)

    async def fetch_price(self, symbol: str) -> float:
        last = self._prices.get(symbol, self.base_price(symbol))
        step = self._rng.gauss(0.0, self._volatility)
        price = max(MIN_PRICE, round2(last * (1.0 + step)))
        self._prices[symbol] = price
        return price
