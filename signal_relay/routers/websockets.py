from __future__ import annotations

import asyncio
import logging

from fastapi import APIRouter, WebSocket

from ..lifecycle import connect, disconnect
from ..registry import RoomRegistry
from ..relay_logic import handle_ws_message
from ..transport import WebSocketConnection

logger = logging.getLogger(__name__)

router = APIRouter(prefix="", tags=["ws"])


@router.websocket("/ws")
async def relay_ws_endpoint(ws: WebSocket):
    await ws.accept()
    registry: RoomRegistry = ws.app.state.registry
    connection = WebSocketConnection(ws)
    session = connect(registry, connection)
    writer = asyncio.create_task(connection.pump())

    try:
        while True:
            message = await ws.receive()
            if message["type"] == "websocket.disconnect":
                break
            frame = message.get("text")
            if frame is None:
                frame = message.get("bytes") or b""
            handle_ws_message(registry, session, frame)
    except Exception:
        # A fatal transport error counts as a close.
        logger.exception("WS error on client %s", session.client_id)
    finally:
        # No awaits before cleanup; this also runs when the task is cancelled.
        disconnect(registry, session)
        connection.close()
    await writer


__all__ = ["router", "relay_ws_endpoint"]
