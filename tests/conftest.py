"""Shared pytest fixtures for paper trading tests."""

from __future__ import annotations

import asyncio

import pytest
from dependency_injector import providers
from fastapi.testclient import TestClient

from paper_trading.config import Settings
from paper_trading.container import Container
from paper_trading.core.exceptions import UpstreamUnavailable
from paper_trading.db import Database
from paper_trading.main import create_app
from paper_trading.providers import PriceSourceABC
from paper_trading.services.auth import create_account


class FakePriceSource(PriceSourceABC):
    """In-memory price source. Symbols missing from ``prices`` have no price."""

    name = "fake"

    def __init__(self, prices: dict[str, float] | None = None) -> None:
        self.prices = dict(prices or {})
        self.calls: list[str] = []
        self.delay = 0.0
        self.closed = False

    async def fetch_price(self, symbol: str) -> float:
        self.calls.append(symbol)
        if self.delay:
            await asyncio.sleep(self.delay)
        if symbol not in self.prices:
            raise UpstreamUnavailable(f"No price for {symbol}")
        return self.prices[symbol]

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        database_url=f"sqlite:///{tmp_path / 'test.db'}",
        jwt_secret="test-secret",
        price_poll_interval=0.02,
    )


@pytest.fixture
def price_source() -> FakePriceSource:
    return FakePriceSource({"AAPL": 100.0, "MSFT": 300.0})


@pytest.fixture
def database(settings):
    db = Database(settings.database_url)
    db.init()
    yield db
    db.dispose()


@pytest.fixture
def user_id(database) -> int:
    """A registered user with a fresh 10000 cash portfolio."""
    with database.session() as session:
        user = create_account(session, "trader@example.com", "hunter22", 10000.0)
        return user.id


@pytest.fixture
def container(settings, database, price_source):
    c = Container()
    c.settings.override(providers.Object(settings))
    c.database.override(providers.Object(database))
    c.price_source.override(providers.Object(price_source))
    yield c
    c.reset_override()


@pytest.fixture
def client(container):
    with TestClient(create_app(container)) as test_client:
        yield test_client


@pytest.fixture
def auth_headers(client) -> dict[str, str]:
    creds = {"email": "trader@example.com", "password": "hunter22"}
    assert client.post("/auth/register", json=creds).status_code == 200
    token = client.post("/auth/login", json=creds).json()["token"]
    return {"Authorization": f"Bearer {token}"}
