"""Binding between the relay core and a Starlette/FastAPI websocket.

The core only ever talks to a :class:`Connection`: it enqueues text frames
and asks whether the peer is still writable. :class:`WebSocketConnection`
implements that contract with an outbound queue drained by a writer task,
so handlers never await a network write.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Optional, Protocol

from fastapi import WebSocket
from starlette.websockets import WebSocketState

logger = logging.getLogger(__name__)

# Frames queued for one client before it counts as unwritable.
MAX_PENDING_FRAMES = 1024


class Connection(Protocol):
    """Transport side of one client session."""

    def send_text(self, frame: str) -> None:
        ...

    def is_writable(self) -> bool:
        ...


class WebSocketConnection:
    """Queue-backed :class:`Connection` over an accepted ``WebSocket``."""

    def __init__(self, ws: WebSocket, max_pending: int = MAX_PENDING_FRAMES):
        self.ws = ws
        # ``None`` is the stop sentinel for the writer
        self._outbox: "asyncio.Queue[Optional[str]]" = asyncio.Queue(maxsize=max_pending)
        self._open = True

    def is_writable(self) -> bool:
        return (
            self._open
            and not self._outbox.full()
            and self.ws.client_state == WebSocketState.CONNECTED
            and self.ws.application_state == WebSocketState.CONNECTED
        )

    def send_text(self, frame: str) -> None:
        if not self._open:
            return
        try:
            self._outbox.put_nowait(frame)
        except asyncio.QueueFull:
            # Client is not reading; best-effort delivery drops the frame
            logger.debug("Outbox full, dropping frame")

    def close(self) -> None:
        """Stop accepting frames and let the writer exit."""
        if not self._open:
            return
        self._open = False
        # A full queue needs no sentinel: the writer stops at its next frame
        if not self._outbox.full():
            self._outbox.put_nowait(None)

    async def pump(self) -> None:
        """Drain queued frames to the websocket in order until closed."""
        while True:
            frame = await self._outbox.get()
            if frame is None or not self._open:
                return
            try:
                await self.ws.send_text(frame)
            except Exception as exc:
                # Peer went away mid-write; later frames are dropped
                logger.debug("Dropping frames for closed websocket: %s", exc)
                self._open = False
                return


__all__ = ["Connection", "WebSocketConnection"]
