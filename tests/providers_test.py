"""Tests for the price sources and the provider factory."""

from __future__ import annotations

import httpx
import pytest

from paper_trading.config import Settings
from paper_trading.core.exceptions import UpstreamUnavailable
from paper_trading.providers import (FinnhubProvider, PriceSourceABC,
                                     SimulatedProvider, YFinanceProvider,
                                     create_price_source)


def finnhub_with(handler) -> FinnhubProvider:
    transport = httpx.MockTransport(handler)
    client = httpx.AsyncClient(transport=transport, base_url=FinnhubProvider.BASE_URL)
    return FinnhubProvider(api_key="test-key", client=client)


class TestFinnhub:
    """Finnhub /quote parsing."""

    @pytest.mark.asyncio
    async def test_current_price(self):
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"c": 187.25, "pc": 185.0, "t": 1700000000})

        async with finnhub_with(handler) as source:
            assert await source.get_price("aapl") == 187.25

        assert seen[0].url.path == "/api/v1/quote"
        assert seen[0].url.params["symbol"] == "AAPL"
        assert seen[0].url.params["token"] == "test-key"

    @pytest.mark.asyncio
    async def test_zero_price_means_unknown(self):
        source = finnhub_with(lambda _: httpx.Response(200, json={"c": 0, "pc": 0, "t": 0}))
        with pytest.raises(UpstreamUnavailable):
            await source.fetch_price("NOPE")
        assert await source.get_price("NOPE") is None
        await source.close()

    @pytest.mark.asyncio
    async def test_http_error_degrades_to_none(self):
        source = finnhub_with(lambda _: httpx.Response(429, json={"error": "limit"}))
        assert await source.get_price("AAPL") is None
        await source.close()

    @pytest.mark.asyncio
    async def test_missing_key(self, monkeypatch):
        monkeypatch.delenv("FINNHUB_API_KEY", raising=False)
        source = FinnhubProvider(
            client=httpx.AsyncClient(transport=httpx.MockTransport(lambda _: httpx.Response(500)))
        )
        with pytest.raises(UpstreamUnavailable, match="API key"):
            await source.fetch_price("AAPL")
        await source.close()


class FakeTicker:
    def __init__(self, fast_info=None, info=None) -> None:
        self.fast_info = fast_info
        self.info = info or {}


class TestYFinance:
    """Price extraction from yfinance tickers."""

    @pytest.mark.asyncio
    async def test_fast_info_last_price(self, monkeypatch):
        monkeypatch.setattr(
            "paper_trading.providers.yfinance.yf.Ticker",
            lambda symbol: FakeTicker(fast_info={"lastPrice": 101.234}),
        )
        assert await YFinanceProvider().get_price("AAPL") == 101.23

    @pytest.mark.asyncio
    async def test_falls_back_to_info(self, monkeypatch):
        monkeypatch.setattr(
            "paper_trading.providers.yfinance.yf.Ticker",
            lambda symbol: FakeTicker(fast_info={}, info={"currentPrice": 55.5}),
        )
        assert await YFinanceProvider().get_price("MSFT") == 55.5

    @pytest.mark.asyncio
    async def test_no_price_is_unknown(self, monkeypatch):
        monkeypatch.setattr(
            "paper_trading.providers.yfinance.yf.Ticker",
            lambda symbol: FakeTicker(fast_info={}, info={}),
        )
        with pytest.raises(UpstreamUnavailable):
            await YFinanceProvider().fetch_price("ZZZZ")

    @pytest.mark.asyncio
    async def test_library_errors_degrade_to_none(self, monkeypatch):
        def explode(symbol):
            raise ConnectionError("no network")

        monkeypatch.setattr("paper_trading.providers.yfinance.yf.Ticker", explode)
        assert await YFinanceProvider().get_price("AAPL") is None


class TestSimulated:
    """Offline random walk."""

    @pytest.mark.asyncio
    async def test_seeded_walk_is_reproducible(self):
        a = SimulatedProvider(seed=7)
        b = SimulatedProvider(seed=7)
        assert [await a.get_price("AAPL") for _ in range(5)] == [
            await b.get_price("AAPL") for _ in range(5)
        ]

    @pytest.mark.asyncio
    async def test_prices_stay_positive(self):
        source = SimulatedProvider(seed=1, volatility=0.5, base_prices={"PENNY": 0.02})
        for _ in range(50):
            assert await source.get_price("PENNY") >= 0.01

    def test_base_price_is_stable(self):
        assert SimulatedProvider.base_price("AAPL") == SimulatedProvider.base_price("AAPL")
        assert 20 <= SimulatedProvider.base_price("AAPL") < 420


class Broken(PriceSourceABC):
    def __init__(self, exc: Exception) -> None:
        self.exc = exc

    async def fetch_price(self, symbol: str) -> float:
        raise self.exc


@pytest.mark.asyncio
async def test_get_price_only_swallows_upstream_failures():
    assert await Broken(httpx.ConnectError("down")).get_price("AAPL") is None
    assert await Broken(TimeoutError()).get_price("AAPL") is None
    with pytest.raises(RuntimeError):
        await Broken(RuntimeError("bug")).get_price("AAPL")


@pytest.mark.parametrize(
    "name,cls",
    [("yfinance", YFinanceProvider), ("finnhub", FinnhubProvider), ("simulated", SimulatedProvider)],
)
def test_factory(name, cls):
    assert isinstance(create_price_source(Settings(price_provider=name)), cls)


def test_factory_unknown():
    with pytest.raises(ValueError, match="Unknown price provider"):
        create_price_source(Settings(price_provider="bloomberg"))
