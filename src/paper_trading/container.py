"""DI container. Created by create_app() and stored on app.state.container.

Tests override providers before the app starts, e.g.
``container.price_source.override(providers.Object(fake))``.
"""
from dependency_injector import containers, providers

from paper_trading.config import Settings
from paper_trading.db import Database
from paper_trading.providers import create_price_source
from paper_trading.services import (AuthService, PortfolioService,
                                    PriceBroker, StocksService)


class Container(containers.DeclarativeContainer):
    settings = providers.Singleton(Settings.from_env)

    database = providers.Singleton(
        Database,
        settings.provided.database_url,
        echo=settings.provided.sql_echo,
    )

    price_source = providers.Singleton(create_price_source, settings)

    auth_service = providers.Singleton(AuthService, database, settings)
    portfolio_service = providers.Singleton(PortfolioService, database, price_source)
    stocks_service = providers.Singleton(StocksService, price_source)

    broker = providers.Singleton(
        PriceBroker,
        price_source,
        interval=settings.provided.price_poll_interval,
    )
