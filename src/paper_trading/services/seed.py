"""Idempotent demo-account seeding. Run explicitly via ``paper-trading-db seed``."""
import logging

from paper_trading.db import Database
from paper_trading.ledger.models import STARTING_CASH
from paper_trading.services.auth import create_account, find_user_by_email

logger = logging.getLogger(__name__)

DEMO_EMAIL = "test@example.com"
DEMO_PASSWORD = "password123"


def seed_demo_user(
    database: Database,
    *,
    email: str = DEMO_EMAIL,
    password: str = DEMO_PASSWORD,
    starting_cash: float = STARTING_CASH,
) -> bool:
    """Create the demo user and portfolio if absent. Returns True if created."""
    with database.session() as session:
        if find_user_by_email(session, email) is not None:
            logger.info("Demo user %s already exists", email)
            return False
        create_account(session, email, password, starting_cash)
    logger.info("Demo user created: %s", email)
    return True
