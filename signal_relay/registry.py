"""In-memory registry of live sessions and rooms.

One :class:`RoomRegistry` is created per application and stored on
``app.state``; handlers receive it explicitly instead of importing a
module-level singleton.
"""
from __future__ import annotations

import itertools
import logging
from typing import Dict, List, Optional

from .room import Room
from .schemas import RoomSummary
from .session import Session
from .transport import Connection

logger = logging.getLogger(__name__)


class RoomRegistry:
    """Room name -> :class:`Room`, plus client id allocation."""

    def __init__(self) -> None:
        self.rooms: Dict[str, Room] = {}
        self.sessions: Dict[int, Session] = {}
        self._ids = itertools.count(1)

    # -------------------- Sessions -------------------- #

    def new_session(self, connection: Connection) -> Session:
        session = Session(next(self._ids), connection)
        self.sessions[session.client_id] = session
        return session

    def forget_session(self, session: Session) -> None:
        self.sessions.pop(session.client_id, None)

    # -------------------- Rooms -------------------- #

    def get(self, name: Optional[str]) -> Optional[Room]:
        if name is None:
            return None
        return self.rooms.get(name)

    def get_or_create(self, name: str) -> Room:
        room = self.rooms.get(name)
        if room is None:
            room = self.rooms[name] = Room(name)
            logger.debug("Room %s created", name)
        return room

    def discard_if_empty(self, room: Room) -> bool:
        """Drop *room* from the registry once its last member is gone."""
        if not room.is_empty():
            return False
        if self.rooms.get(room.name) is room:
            del self.rooms[room.name]
            logger.info("Room %s removed (empty)", room.name)
        return True

    # -------------------- Listing -------------------- #

    def summaries(self) -> List[RoomSummary]:
        return [
            RoomSummary(room=name, member_count=len(room), members=room.member_ids())
            for name, room in self.rooms.items()
        ]

    def __contains__(self, name: object) -> bool:
        return name in self.rooms


__all__ = ["RoomRegistry"]
