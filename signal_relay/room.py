from __future__ import annotations

import logging
from typing import Dict, List, Optional

from .schemas import OutboundMessage
from .session import Session

logger = logging.getLogger(__name__)


class Room:
    """Members of one named room and delivery to them.

    Membership changes go through :mod:`signal_relay.lifecycle`, which keeps
    ``Session.room`` in step with this mapping.
    """

    def __init__(self, name: str):
        self.name = name
        # client_id -> session, in join order
        self.members: Dict[int, Session] = {}

    # -------------------- Member management -------------------- #

    def add_member(self, session: Session) -> None:
        self.members[session.client_id] = session

    def remove_member(self, client_id: int) -> Optional[Session]:
        return self.members.pop(client_id, None)

    def member_ids(self, exclude: Optional[int] = None) -> List[int]:
        return [cid for cid in self.members if cid != exclude]

    def is_empty(self) -> bool:
        return not self.members

    def __contains__(self, client_id: object) -> bool:
        return client_id in self.members

    def __len__(self) -> int:
        return len(self.members)

    # -------------------- Delivery -------------------- #

    def broadcast(self, message: OutboundMessage, exclude: Optional[int] = None) -> int:
        """Send *message* to every writable member except *exclude*.

        Returns the number of members the frame was handed to.
        """
        frame = message.to_frame()
        delivered = 0
        for cid, session in list(self.members.items()):
            if cid == exclude:
                continue
            if session.send_frame(frame):
                delivered += 1
        return delivered

    def send_to(self, target_id: int, message: OutboundMessage) -> bool:
        """Send *message* to one member. Unknown or unwritable targets are skipped."""
        target = self.members.get(target_id)
        if target is None or not target.is_writable():
            return False
        return target.send(message)

    def __repr__(self) -> str:
        return f"Room(name={self.name!r}, members={list(self.members)})"


__all__ = ["Room"]
