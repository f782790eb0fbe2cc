"""CLI to exercise a running paper trading API and its live price channel.

Usage:
  paper-trading-cli health
  paper-trading-cli register me@example.com secret
  paper-trading-cli login me@example.com secret
  export PAPER_TRADING_TOKEN=...
  paper-trading-cli trade buy AAPL 10
  paper-trading-cli portfolio
  paper-trading-cli stream AAPL --messages 5
"""
import argparse
import asyncio
import json
import os
import sys

import httpx
import websockets

LIVE_PATH = "/ws/prices"


def print_json(data: object) -> None:
    print(json.dumps(data, indent=2, default=str))


def ws_url(base_url: str) -> str:
    """Map the HTTP base URL to the live channel URL (http->ws, https->wss)."""
    base = base_url.rstrip("/")
    if base.startswith("https://"):
        base = "wss://" + base[len("https://"):]
    elif base.startswith("http://"):
        base = "ws://" + base[len("http://"):]
    return base + LIVE_PATH


def _auth_headers(args: argparse.Namespace) -> dict[str, str]:
    token = args.token or os.getenv("PAPER_TRADING_TOKEN")
    if not token:
        raise SystemExit("A token is required: pass --token or set PAPER_TRADING_TOKEN")
    return {"Authorization": f"Bearer {token}"}


def cmd_health(client: httpx.Client, _: argparse.Namespace) -> int:
    r = client.get("/")
    r.raise_for_status()
    print_json(r.json())
    return 0


def cmd_register(client: httpx.Client, args: argparse.Namespace) -> int:
    r = client.post("/auth/register", json={"email": args.email, "password": args.password})
    r.raise_for_status()
    print_json(r.json())
    return 0


def cmd_login(client: httpx.Client, args: argparse.Namespace) -> int:
    r = client.post("/auth/login", json={"email": args.email, "password": args.password})
    r.raise_for_status()
    print(r.json()["token"])
    return 0


def cmd_portfolio(client: httpx.Client, args: argparse.Namespace) -> int:
    r = client.get("/portfolio", headers=_auth_headers(args))
    r.raise_for_status()
    print_json(r.json())
    return 0


def cmd_summary(client: httpx.Client, args: argparse.Namespace) -> int:
    r = client.get("/portfolio/summary", headers=_auth_headers(args))
    r.raise_for_status()
    print_json(r.json())
    return 0


def cmd_trades(client: httpx.Client, args: argparse.Namespace) -> int:
    r = client.get("/portfolio/trades", params={"limit": args.limit}, headers=_auth_headers(args))
    r.raise_for_status()
    data = r.json()
    print(f"Found {len(data)} trades")
    print_json(data)
    return 0


def cmd_trade(client: httpx.Client, args: argparse.Namespace) -> int:
    body = {"symbol": args.symbol.upper(), "side": args.side, "qty": args.qty}
    r = client.post("/portfolio/trade", json=body, headers=_auth_headers(args))
    r.raise_for_status()
    print_json(r.json())
    return 0


def cmd_price(client: httpx.Client, args: argparse.Namespace) -> int:
    r = client.get(f"/stocks/{args.symbol}")
    r.raise_for_status()
    print_json(r.json())
    return 0


def cmd_stocks(client: httpx.Client, _: argparse.Namespace) -> int:
    r = client.get("/stocks")
    r.raise_for_status()
    print_json(r.json())
    return 0


def _stream_run(
    base_url: str,
    symbol: str,
    duration: float | None,
    max_messages: int | None,
) -> int:
    """Subscribe to symbol on the live channel and print price updates."""
    count = 0
    url = ws_url(base_url)

    async def run() -> None:
        nonlocal count
        async with websockets.connect(url) as ws:
            await ws.send(json.dumps({"event": "subscribe", "symbol": symbol}))
            print(
                f"Streaming {symbol} from {url} "
                f"(duration={duration}s, max_messages={max_messages or '∞'})",
                file=sys.stderr,
            )
            async for raw in ws:
                count += 1
                print_json(json.loads(raw))
                if max_messages and count >= max_messages:
                    return

    async def run_with_timeout() -> None:
        if duration and duration > 0:
            try:
                await asyncio.wait_for(run(), timeout=duration)
            except asyncio.TimeoutError:
                print(f"Stopped after {duration}s ({count} messages)", file=sys.stderr)
        else:
            await run()

    try:
        asyncio.run(run_with_timeout())
    except KeyboardInterrupt:
        print(f"\nStopped by user ({count} messages)", file=sys.stderr)
        return 130
    except (OSError, websockets.WebSocketException) as e:
        print(f"Stream error: {e}", file=sys.stderr)
        return 1
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Exercise the paper trading API and live price channel.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "--base-url",
        default="http://localhost:8000",
        help="API base URL (default: http://localhost:8000)",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=30.0,
        help="Request timeout in seconds (default: 30)",
    )
    parser.add_argument(
        "--token",
        default=None,
        help="Bearer token (default: PAPER_TRADING_TOKEN env var)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True, help="Command")

    subparsers.add_parser("health", help="GET / health check")
    for name in ("register", "login"):
        p = subparsers.add_parser(name, help=f"POST /auth/{name}")
        p.add_argument("email")
        p.add_argument("password")
    subparsers.add_parser("portfolio", help="GET /portfolio")
    subparsers.add_parser("summary", help="GET /portfolio/summary")
    p = subparsers.add_parser("trades", help="GET /portfolio/trades")
    p.add_argument("--limit", type=int, default=50, help="Max trades (default: 50)")
    p = subparsers.add_parser("trade", help="POST /portfolio/trade")
    p.add_argument("side", choices=["buy", "sell"])
    p.add_argument("symbol", help="Ticker (e.g. AAPL)")
    p.add_argument("qty", type=int, help="Whole number of shares")
    p = subparsers.add_parser("price", help="GET /stocks/{symbol}")
    p.add_argument("symbol", help="Ticker (e.g. AAPL)")
    subparsers.add_parser("stocks", help="GET /stocks")

    p = subparsers.add_parser("stream", help=f"Subscribe on {LIVE_PATH} and print updates")
    p.add_argument("symbol", help="Ticker to subscribe to")
    p.add_argument(
        "--duration",
        type=float,
        default=None,
        metavar="SECS",
        help="Stop after SECS seconds (default: run until Ctrl+C)",
    )
    p.add_argument(
        "--messages",
        type=int,
        default=None,
        metavar="N",
        help="Stop after N messages (default: no limit)",
    )
    return parser


HANDLERS = {
    "health": cmd_health,
    "register": cmd_register,
    "login": cmd_login,
    "portfolio": cmd_portfolio,
    "summary": cmd_summary,
    "trades": cmd_trades,
    "trade": cmd_trade,
    "price": cmd_price,
    "stocks": cmd_stocks,
}


def run_command(client: httpx.Client, args: argparse.Namespace) -> int:
    """Dispatch a REST command, printing HTTP errors instead of raising."""
    try:
        return HANDLERS[args.command](client, args)
    except httpx.HTTPStatusError as e:
        print(f"HTTP error: {e.response.status_code}", file=sys.stderr)
        if e.response.content:
            try:
                print(e.response.json(), file=sys.stderr)
            except ValueError:
                print(e.response.text, file=sys.stderr)
        return 1


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    base_url = args.base_url.rstrip("/")

    if args.command == "stream":
        return _stream_run(base_url, args.symbol.upper(), args.duration, args.messages)

    try:
        with httpx.Client(base_url=base_url, timeout=args.timeout) as client:
            return run_command(client, args)
    except httpx.RequestError as e:
        print(f"Request error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
