"""WebSocket live price channel.

Client messages:  {"event": "subscribe", "symbol": "AAPL"} | {"event": "unsubscribe"}
Server messages:  {"event": "priceUpdate", "data": {"symbol": "AAPL", "price": 187.3}}
                  {"event": "error", "detail": "..."}

A connection follows at most one symbol; subscribing again replaces it.
"""
import logging
from uuid import uuid4

import pydantic
from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from paper_trading.core.exceptions import TradingError
from paper_trading.deps import BrokerWs
from paper_trading.schemas import ClientCommand, LiveMessage, PriceQuote

logger = logging.getLogger(__name__)
router = APIRouter(tags=["live"])


def _price_update(quote: PriceQuote) -> dict:
    return LiveMessage(event="priceUpdate", data=quote).model_dump(
        mode="json", exclude={"detail"}
    )


def _error(detail: str) -> dict:
    return LiveMessage(event="error", detail=detail).model_dump(mode="json", exclude={"data"})


@router.websocket("/ws/prices")
async def price_feed(websocket: WebSocket, broker: BrokerWs) -> None:
    """Push price updates for the subscribed symbol every poll interval."""
    await websocket.accept()
    connection_id = uuid4().hex

    async def send_update(quote: PriceQuote) -> None:
        await websocket.send_json(_price_update(quote))

    subscription = broker.connect(connection_id, send_update)
    logger.info("Client connected: %s", connection_id)
    try:
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                raise WebSocketDisconnect(message.get("code", 1000))
            raw = message.get("text")
            if raw is None:
                await websocket.send_json(_error("Expected a text frame"))
                continue
            try:
                command = ClientCommand.model_validate_json(raw)
                if command.event == "subscribe":
                    subscription.subscribe(command.symbol or "")
                else:
                    subscription.unsubscribe()
            except (pydantic.ValidationError, TradingError) as exc:
                detail = exc.message if isinstance(exc, TradingError) else "Invalid message"
                await websocket.send_json(_error(detail))
    except WebSocketDisconnect:
        logger.info("Client disconnected: %s", connection_id)
    finally:
        broker.disconnect(connection_id)
