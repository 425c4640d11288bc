"""Server-side state for one live client connection."""
from __future__ import annotations

from typing import Optional

from .schemas import OutboundMessage
from .transport import Connection


class Session:
    """Identity, room membership and outbound channel of one connection."""

    def __init__(self, client_id: int, connection: Connection):
        self.client_id = client_id
        self.connection = connection
        # Name of the room this session belongs to, set only by a successful join
        self.room: Optional[str] = None
        self.closed = False

    def is_writable(self) -> bool:
        return not self.closed and self.connection.is_writable()

    def send_frame(self, frame: str) -> bool:
        """Enqueue an already serialised frame. Returns *False* if unreachable."""
        if not self.is_writable():
            return False
        self.connection.send_text(frame)
        return True

    def send(self, message: OutboundMessage) -> bool:
        return self.send_frame(message.to_frame())

    def __repr__(self) -> str:
        return f"Session(client_id={self.client_id}, room={self.room!r})"


__all__ = ["Session"]
