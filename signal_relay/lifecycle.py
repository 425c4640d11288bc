"""Session and room lifecycle.

These are the only functions that create or destroy rooms. Each one is
synchronous so that a membership change and the notices it triggers are
applied without any other message being processed in between.
"""
from __future__ import annotations

import logging
from typing import Tuple

from .registry import RoomRegistry
from .room import Room
from .schemas import PeerLeft
from .session import Session
from .transport import Connection

logger = logging.getLogger(__name__)


def connect(registry: RoomRegistry, connection: Connection) -> Session:
    """Allocate a client id and session for a newly accepted connection."""
    session = registry.new_session(connection)
    logger.info("Client connected: %s", session.client_id)
    return session


def enter_room(registry: RoomRegistry, session: Session, name: str) -> Tuple[Room, bool]:
    """Put *session* into room *name*, creating the room if needed.

    A session already in another room leaves it first. Returns the room and
    whether the session is a new member (``False`` for a repeated join of
    the room it is already in).
    """
    current = registry.get(session.room)
    if current is not None and current.name == name and session.client_id in current:
        return current, False

    if session.room is not None:
        leave_room(registry, session)

    room = registry.get_or_create(name)
    room.add_member(session)
    session.room = name
    logger.info("Client %s joined room %s", session.client_id, name)
    return room, True


def leave_room(registry: RoomRegistry, session: Session) -> None:
    """Remove *session* from its room, notify the rest, collect empty rooms."""
    room = registry.get(session.room)
    session.room = None
    if room is None or room.remove_member(session.client_id) is None:
        return
    logger.info("Client %s left room %s", session.client_id, room.name)
    room.broadcast(PeerLeft(id=session.client_id))
    registry.discard_if_empty(room)


def disconnect(registry: RoomRegistry, session: Session) -> None:
    """Tear down *session* after its transport closed. Safe to call twice."""
    if session.closed:
        return
    session.closed = True
    logger.info("Client disconnected: %s", session.client_id)
    leave_room(registry, session)
    registry.forget_session(session)


__all__ = ["connect", "enter_room", "leave_room", "disconnect"]
