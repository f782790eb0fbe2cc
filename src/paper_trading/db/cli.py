"""Operator CLI for the database: create tables and seed the demo account.

Usage:
  paper-trading-db init
  paper-trading-db seed
  paper-trading-db --database-url sqlite:///./demo.db seed --email me@example.com --password secret
"""
import argparse
import logging
import sys

from paper_trading.config import Settings
from paper_trading.db.sessions import Database
from paper_trading.services.seed import (DEMO_EMAIL, DEMO_PASSWORD,
                                         seed_demo_user)


def cmd_init(database: Database, _: argparse.Namespace, __: Settings) -> int:
    database.init()
    print(f"Tables ready in {database.url}")
    return 0


def cmd_seed(database: Database, args: argparse.Namespace, settings: Settings) -> int:
    database.init()
    created = seed_demo_user(
        database,
        email=args.email,
        password=args.password,
        starting_cash=settings.starting_cash,
    )
    if created:
        print(f"Demo user created: {args.email} / {args.password}")
    else:
        print(f"Demo user already exists: {args.email}")
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Manage the paper trading database.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "--database-url",
        default=None,
        help="SQLAlchemy URL (default: DATABASE_URL env var or sqlite:///./paper_trading.db)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True, help="Command")
    subparsers.add_parser("init", help="Create tables (idempotent)")
    p = subparsers.add_parser("seed", help="Create the demo user if absent (idempotent)")
    p.add_argument("--email", default=DEMO_EMAIL, help=f"Demo email (default: {DEMO_EMAIL})")
    p.add_argument(
        "--password", default=DEMO_PASSWORD, help=f"Demo password (default: {DEMO_PASSWORD})"
    )

    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.INFO)
    settings = Settings.from_env()
    database = Database(args.database_url or settings.database_url, echo=settings.sql_echo)
    handlers = {"init": cmd_init, "seed": cmd_seed}
    try:
        return handlers[args.command](database, args, settings)
    finally:
        database.dispose()


if __name__ == "__main__":
    sys.exit(main())
