"""FastAPI dependency getters: resolve services from app.state.container."""
from typing import Annotated

from fastapi import Depends, Request, WebSocket
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from paper_trading.container import Container
from paper_trading.services import (AuthService, PortfolioService,
                                    PriceBroker, StocksService)

bearer_scheme = HTTPBearer(auto_error=False)


def get_container(request: Request) -> Container:
    return request.app.state.container


def get_auth_service(request: Request) -> AuthService:
    return get_container(request).auth_service()


def get_portfolio_service(request: Request) -> PortfolioService:
    return get_container(request).portfolio_service()


def get_stocks_service(request: Request) -> StocksService:
    return get_container(request).stocks_service()


def get_broker_ws(websocket: WebSocket) -> PriceBroker:
    """Resolve the PriceBroker for a WebSocket route."""
    return websocket.scope["app"].state.container.broker()


AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]
PortfolioServiceDep = Annotated[PortfolioService, Depends(get_portfolio_service)]
StocksServiceDep = Annotated[StocksService, Depends(get_stocks_service)]
BrokerWs = Annotated[PriceBroker, Depends(get_broker_ws)]


def get_current_user_id(
    auth: AuthServiceDep,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
) -> int:
    """User id from the Authorization: Bearer token; AuthError (401) otherwise."""
    return auth.authenticate(credentials.credentials if credentials else None)


CurrentUserId = Annotated[int, Depends(get_current_user_id)]
