"""Main module for the paper trading service."""
import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from paper_trading.config import DEV_JWT_SECRET, Settings
from paper_trading.container import Container
from paper_trading.core import ErrorMapper, TradingError
from paper_trading.routers import (auth_router, live_router, portfolio_router,
                                   stocks_router)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(fastapi_app: FastAPI):
    """Create tables at startup; stop live subscriptions and close the price source on shutdown."""
    container: Container = fastapi_app.state.container
    settings = container.settings()
    if settings.jwt_secret == DEV_JWT_SECRET:
        logger.warning("JWT_SECRET is not set; using the development secret")
    container.database().init()
    logger.info("Using %s price source", container.price_source().name)

    yield

    await container.broker().shutdown()
    try:
        await container.price_source().close()
    except Exception as exc:  # pylint: disable=broad-except
        logger.warning("Error closing price source: %s", exc)
    container.database().dispose()


def health() -> dict[str, str]:
    """Return health check status."""
    return {"status": "ok"}


def create_app(container: Container | None = None) -> FastAPI:
    """Build the FastAPI app around a DI container (a fresh one by default)."""
    container = container or Container()
    settings = container.settings()

    fastapi_app = FastAPI(
        title="Paper Trading",
        description="Virtual portfolios, simulated trades and live stock prices",
        version="0.1.0",
        lifespan=lifespan,
    )
    fastapi_app.state.container = container

    if settings.frontend_origin:
        fastapi_app.add_middleware(
            CORSMiddleware,
            allow_origins=[o.strip() for o in settings.frontend_origin.split(",")],
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    fastapi_app.add_exception_handler(TradingError, ErrorMapper().handle)

    fastapi_app.include_router(auth_router)
    fastapi_app.include_router(portfolio_router)
    fastapi_app.include_router(stocks_router)
    fastapi_app.include_router(live_router)
    fastapi_app.get("/")(health)
    return fastapi_app


app = create_app()


def run() -> None:
    """Run the server (uvicorn). Entry point for `paper-trading`."""
    settings = Settings.from_env()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run(
        "paper_trading.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


def run_dev() -> None:
    """Run the development server with auto-reload."""
    settings = Settings.from_env()
    logging.basicConfig(level=logging.DEBUG)
    uvicorn.run("paper_trading.main:app", host="0.0.0.0", port=settings.port, reload=True)
