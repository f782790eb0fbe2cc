"""Registration, login and token verification."""
import asyncio
import logging

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from paper_trading.config import Settings
from paper_trading.core.exceptions import AuthError, ValidationError
from paper_trading.db import Database, User
from paper_trading.services.portfolio import create_portfolio
from paper_trading.services.security import (MAX_PASSWORD_BYTES,
                                             create_access_token,
                                             decode_access_token,
                                             hash_password, verify_password)

logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    return email.strip().lower()


def find_user_by_email(session: Session, email: str) -> User | None:
    return session.exec(select(User).where(User.email == normalize_email(email))).first()


def create_account(
    session: Session, email: str, password: str, starting_cash: float
) -> User:
    """Create a user and its portfolio in the caller's transaction.

    Raises:
        ValidationError: email already registered or password too long.
    """
    if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValidationError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")
    email = normalize_email(email)
    if find_user_by_email(session, email) is not None:
        raise ValidationError("Email already exists")
    user = User(email=email, hashed_password=hash_password(password))
    session.add(user)
    try:
        session.flush()
    except IntegrityError as e:
        raise ValidationError("Email already exists") from e
    create_portfolio(session, user.id, starting_cash)
    return user


class AuthService:
    """Credential store and token issuer."""

    def __init__(self, database: Database, settings: Settings) -> None:
        self._db = database
        self._settings = settings

    def _register_sync(self, email: str, password: str) -> int:
        with self._db.session() as session:
            user = create_account(session, email, password, self._settings.starting_cash)
            return user.id

    async def register(self, email: str, password: str) -> int:
        """Create a user with a fresh portfolio; returns the user id."""
        user_id = await asyncio.to_thread(self._register_sync, email, password)
        logger.info("Registered user %s", user_id)
        return user_id

    def _login_sync(self, email: str, password: str) -> int:
        with self._db.session() as session:
            user = find_user_by_email(session, email)
            # Same error for unknown email and wrong password
            if user is None or not verify_password(password, user.hashed_password):
                raise AuthError("Invalid email or password")
            return user.id

    async def login(self, email: str, password: str) -> str:
        """Verify credentials and issue an access token."""
        user_id = await asyncio.to_thread(self._login_sync, email, password)
        return self.issue_token(user_id)

    def issue_token(self, user_id: int) -> str:
        return create_access_token(
            user_id, self._settings.jwt_secret, self._settings.jwt_expires_minutes
        )

    def authenticate(self, token: str | None) -> int:
        """Return the user id carried by token; AuthError if missing/invalid/expired."""
        if not token:
            raise AuthError("Missing bearer token")
        return decode_access_token(token, self._settings.jwt_secret)
