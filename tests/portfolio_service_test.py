"""Tests for PortfolioService persistence, atomicity and per-user serialization."""

from __future__ import annotations

import asyncio

import pytest

from paper_trading.core.exceptions import (InsufficientShares, NoPosition,
                                           NotFound, UpstreamUnavailable)
from paper_trading.ledger import Side
from paper_trading.services import PortfolioService


@pytest.fixture
def service(database, price_source) -> PortfolioService:
    return PortfolioService(database, price_source)


class TestTrade:
    """Trades are priced by the price source and persisted."""

    @pytest.mark.asyncio
    async def test_walkthrough_persists(self, service, price_source, user_id):
        for price, side, qty in [(100.0, "buy", 10), (200.0, "buy", 10), (180.0, "sell", 15)]:
            price_source.prices["AAPL"] = price
            await service.trade(user_id, "AAPL", side, qty)

        portfolio = await service.get_portfolio(user_id)
        assert portfolio.cash == pytest.approx(9700.0)
        assert len(portfolio.positions) == 1
        assert portfolio.positions[0].qty == 5
        assert portfolio.positions[0].avg_price == pytest.approx(150.0)

        price_source.prices["AAPL"] = 160.0
        result = await service.trade(user_id, "AAPL", Side.SELL, 5)
        assert result.cash == pytest.approx(10500.0)
        assert result.positions == []
        assert (await service.get_portfolio(user_id)).positions == []

        with pytest.raises(NoPosition):
            await service.trade(user_id, "AAPL", "sell", 1)

    @pytest.mark.asyncio
    async def test_trade_log(self, service, user_id):
        await service.trade(user_id, "AAPL", "buy", 3)
        await service.trade(user_id, "msft", "buy", 1)
        await service.trade(user_id, "AAPL", "sell", 2)

        trades = await service.list_trades(user_id)
        assert [(t.symbol, t.side, t.qty) for t in trades] == [
            ("AAPL", Side.SELL, 2),
            ("MSFT", Side.BUY, 1),
            ("AAPL", Side.BUY, 3),
        ]
        assert trades[0].price == 100.0
        assert trades[0].realized_pnl == pytest.approx(0.0)
        assert trades[1].realized_pnl is None
        assert len(await service.list_trades(user_id, limit=1)) == 1

    @pytest.mark.asyncio
    async def test_missing_price_rejects_without_writing(self, service, user_id):
        with pytest.raises(UpstreamUnavailable):
            await service.trade(user_id, "ZZZZ", "buy", 1)
        assert (await service.get_portfolio(user_id)).cash == 10000.0
        assert await service.list_trades(user_id) == []

    @pytest.mark.asyncio
    async def test_unknown_user(self, service):
        with pytest.raises(NotFound):
            await service.get_portfolio(424242)
        with pytest.raises(NotFound):
            await service.trade(424242, "AAPL", "buy", 1)


class TestAtomicity:
    """Portfolio update and trade log commit or roll back together."""

    @pytest.mark.asyncio
    async def test_failed_log_write_rolls_back_portfolio(self, database, price_source, user_id):
        class FailingLog(PortfolioService):
            def _record_trade(self, session, user_id, fill):
                raise RuntimeError("trade log unavailable")

        service = FailingLog(database, price_source)
        with pytest.raises(RuntimeError):
            await service.trade(user_id, "AAPL", "buy", 10)

        portfolio = await service.get_portfolio(user_id)
        assert portfolio.cash == 10000.0
        assert portfolio.positions == []
        assert await service.list_trades(user_id) == []


class TestConcurrency:
    """Concurrent trades for one user do not lose updates."""

    @pytest.mark.asyncio
    async def test_concurrent_buys(self, service, price_source, user_id):
        price_source.delay = 0.001
        await asyncio.gather(*(service.trade(user_id, "AAPL", "buy", 1) for _ in range(10)))

        portfolio = await service.get_portfolio(user_id)
        assert portfolio.cash == pytest.approx(9000.0)
        assert portfolio.positions[0].qty == 10
        assert len(await service.list_trades(user_id)) == 10

    @pytest.mark.asyncio
    async def test_concurrent_sells_never_oversell(self, service, user_id):
        await service.trade(user_id, "AAPL", "buy", 6)
        results = await asyncio.gather(
            *(service.trade(user_id, "AAPL", "sell", 2) for _ in range(5)),
            return_exceptions=True,
        )
        failures = [r for r in results if isinstance(r, Exception)]
        assert len(failures) == 2
        assert all(isinstance(f, (InsufficientShares, NoPosition)) for f in failures)
        portfolio = await service.get_portfolio(user_id)
        assert portfolio.positions == []
        assert portfolio.cash == pytest.approx(10000.0)


class TestSummary:
    """Valuation at current prices."""

    @pytest.mark.asyncio
    async def test_summary(self, service, price_source, user_id):
        await service.trade(user_id, "AAPL", "buy", 10)
        await service.trade(user_id, "MSFT", "buy", 1)
        price_source.prices["AAPL"] = 110.0
        del price_source.prices["MSFT"]

        summary = await service.summary(user_id)
        assert summary.cash == pytest.approx(8700.0)
        assert summary.priced is False
        aapl, msft = summary.positions
        assert aapl.current_price == 110.0
        assert aapl.unrealized_pnl == pytest.approx(100.0)
        assert msft.current_price is None
        assert msft.market_value == pytest.approx(300.0)
        assert summary.profit_loss == pytest.approx(100.0)
