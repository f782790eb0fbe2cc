"""Password hashing (bcrypt) and access tokens (JWT)."""
from datetime import datetime, timedelta

import bcrypt
import jwt

from paper_trading.core.exceptions import AuthError
from paper_trading.core.utils import utcnow

ALGORITHM = "HS256"
# bcrypt only considers the first 72 bytes of a password
MAX_PASSWORD_BYTES = 72


def hash_password(password: str) -> str:
    """One-way salted hash."""
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, hashed_password: str) -> bool:
    """Constant-time check of password against a stored hash."""
    try:
        return bcrypt.checkpw(password.encode("utf-8"), hashed_password.encode("utf-8"))
    except ValueError:
        # Malformed stored hash or over-long password
        return False


def create_access_token(
    user_id: int,
    secret: str,
    expires_minutes: int,
    *,
    now: datetime | None = None,
) -> str:
    """Issue a signed token identifying user_id, valid for expires_minutes."""
    issued_at = now or utcnow()
    payload = {
        "sub": str(user_id),
        "iat": issued_at,
        "exp": issued_at + timedelta(minutes=expires_minutes),
    }
    return jwt.encode(payload, secret, algorithm=ALGORITHM)


def decode_access_token(token: str, secret: str) -> int:
    """Verify token and return the user id. Fails closed with AuthError."""
    try:
        payload = jwt.decode(
            token, secret, algorithms=[ALGORITHM], options={"require": ["exp", "sub"]}
        )
    except jwt.ExpiredSignatureError as e:
        raise AuthError("Token expired") from e
    except jwt.InvalidTokenError as e:
        raise AuthError("Invalid token") from e
    try:
        return int(payload["sub"])
    except (TypeError, ValueError) as e:
        raise AuthError("Invalid token") from e
