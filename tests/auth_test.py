"""Tests for AuthService registration and login."""

from __future__ import annotations

import pytest

from paper_trading.core.exceptions import AuthError, ValidationError
from paper_trading.services import AuthService, PortfolioService


@pytest.fixture
def auth(database, settings) -> AuthService:
    return AuthService(database, settings)


class TestRegister:
    """Account creation."""

    @pytest.mark.asyncio
    async def test_register_creates_portfolio(self, auth, database, price_source):
        user_id = await auth.register("New@Example.com", "secret")
        portfolio = await PortfolioService(database, price_source).get_portfolio(user_id)
        assert portfolio.cash == 10000.0
        assert portfolio.positions == []

    @pytest.mark.asyncio
    async def test_duplicate_email(self, auth):
        await auth.register("dup@example.com", "secret")
        with pytest.raises(ValidationError, match="already exists"):
            await auth.register("DUP@example.com ", "other")

    @pytest.mark.asyncio
    async def test_password_too_long(self, auth):
        with pytest.raises(ValidationError):
            await auth.register("long@example.com", "x" * 73)


class TestLogin:
    """Credential checks and token issue."""

    @pytest.mark.asyncio
    async def test_login_token_identifies_user(self, auth):
        user_id = await auth.register("me@example.com", "secret")
        token = await auth.login("ME@example.com", "secret")
        assert auth.authenticate(token) == user_id

    @pytest.mark.asyncio
    async def test_wrong_password(self, auth):
        await auth.register("me@example.com", "secret")
        with pytest.raises(AuthError):
            await auth.login("me@example.com", "wrong")

    @pytest.mark.asyncio
    async def test_unknown_email(self, auth):
        with pytest.raises(AuthError):
            await auth.login("ghost@example.com", "secret")

    @pytest.mark.parametrize("token", [None, ""])
    def test_missing_token(self, auth, token):
        with pytest.raises(AuthError, match="Missing"):
            auth.authenticate(token)
