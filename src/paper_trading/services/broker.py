"""Live price subscriptions: one polling task per connection.

Each connection owns a PriceSubscription holding a single task handle. Calling
subscribe() cancels the running task and starts the replacement in the same
synchronous step, so a connection never has two pollers. close() cancels the
task and is safe to call more than once.

Every connection polls the price source on its own; nothing is shared between
connections subscribed to the same symbol.
"""
import asyncio
import logging
from collections.abc import Awaitable, Callable

from paper_trading.core.exceptions import ValidationError
from paper_trading.core.utils import normalize_symbol
from paper_trading.providers import PriceSourceABC
from paper_trading.schemas import PriceQuote

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL = 5.0

SendUpdate = Callable[[PriceQuote], Awaitable[None]]


class PriceSubscription:
    """Subscription state of one live connection: current symbol + poll task."""

    def __init__(
        self,
        connection_id: str,
        send: SendUpdate,
        price_source: PriceSourceABC,
        interval: float = DEFAULT_POLL_INTERVAL,
    ) -> None:
        self.connection_id = connection_id
        self.symbol: str | None = None
        self.closed = False
        self._send = send
        self._price_source = price_source
        self._interval = interval
        self._task: asyncio.Task[None] | None = None

    @property
    def task(self) -> asyncio.Task[None] | None:
        return self._task

    @property
    def active(self) -> bool:
        return self._task is not None and not self._task.done()

    def subscribe(self, symbol: str) -> None:
        """Replace the current subscription with symbol. Must run on the event loop."""
        if self.closed:
            raise RuntimeError(f"Subscription {self.connection_id} is closed")
        sym = normalize_symbol(symbol or "")
        if not sym:
            raise ValidationError("Symbol is required")
        self._cancel()
        self.symbol = sym
        self._task = asyncio.create_task(
            self._poll(sym), name=f"price-poll:{self.connection_id}:{sym}"
        )
        logger.debug("Connection %s subscribed to %s", self.connection_id, sym)

    def unsubscribe(self) -> None:
        """Stop updates without subscribing to anything else."""
        self._cancel()
        self.symbol = None

    def close(self) -> None:
        """Cancel the poll task for good (disconnect). Idempotent."""
        self.unsubscribe()
        self.closed = True

    async def wait_closed(self) -> None:
        """Close and wait until the cancelled task has finished."""
        task = self._task
        self.close()
        if task is not None:
            await asyncio.gather(task, return_exceptions=True)

    def _cancel(self) -> None:
        task, self._task = self._task, None
        if task is not None and not task.done():
            task.cancel()

    async def _poll(self, symbol: str) -> None:
        while True:
            price = await self._price_source.get_price(symbol)
            try:
                await self._send(PriceQuote(symbol=symbol, price=price))
            except Exception as exc:  # pylint: disable=broad-except
                logger.info(
                    "Stopping %s updates for connection %s: send failed: %s",
                    symbol,
                    self.connection_id,
                    exc,
                )
                return
            await asyncio.sleep(self._interval)


class PriceBroker:
    """Registry of live connections and their subscriptions."""

    def __init__(
        self, price_source: PriceSourceABC, interval: float = DEFAULT_POLL_INTERVAL
    ) -> None:
        self._price_source = price_source
        self._interval = interval
        self._subscriptions: dict[str, PriceSubscription] = {}

    @property
    def active_connections(self) -> int:
        return len(self._subscriptions)

    def get(self, connection_id: str) -> PriceSubscription | None:
        return self._subscriptions.get(connection_id)

    def connect(self, connection_id: str, send: SendUpdate) -> PriceSubscription:
        """Register a connection. A reused id closes the previous subscription."""
        previous = self._subscriptions.pop(connection_id, None)
        if previous is not None:
            previous.close()
        subscription = PriceSubscription(
            connection_id, send, self._price_source, self._interval
        )
        self._subscriptions[connection_id] = subscription
        return subscription

    def disconnect(self, connection_id: str) -> None:
        """Cancel the connection's poll task and forget it. Idempotent."""
        subscription = self._subscriptions.pop(connection_id, None)
        if subscription is not None:
            subscription.close()

    async def shutdown(self) -> None:
        """Close every subscription and wait for their tasks (app shutdown)."""
        subscriptions = list(self._subscriptions.values())
        self._subscriptions.clear()
        await asyncio.gather(*(s.wait_closed() for s in subscriptions))
        if subscriptions:
            logger.info("Closed %d live price subscriptions", len(subscriptions))
