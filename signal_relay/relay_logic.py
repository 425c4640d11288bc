"""Message routing and the four relay handlers.

This module is framework-agnostic: every function operates on a
:class:`~signal_relay.registry.RoomRegistry` and a
:class:`~signal_relay.session.Session` and writes replies through
``Session.send``/``Room.broadcast``, which only enqueue frames. None of the
functions await, so each inbound message is handled to completion before
the next one is looked at.

Routine failures (not joined yet, unknown target, empty chat) return early
without telling the sender. The only client-visible error is a join with an
empty room name.
"""
from __future__ import annotations

import json
import logging
from typing import Any, Optional, Union

from pydantic import ValidationError

from .constants import (
    CHAT_NAME_LIMIT,
    CHAT_TEXT_LIMIT,
    DEFAULT_CHAT_NAME,
    ROOM_NAME_REQUIRED,
)
from .lifecycle import enter_room
from .registry import RoomRegistry
from .schemas import (
    ChatBroadcast,
    ChatRequest,
    ControlRelay,
    ControlRequest,
    ErrorMessage,
    Joined,
    JoinRequest,
    PeerJoined,
    SignalRelay,
    SignalRequest,
    UnrecognizedMessage,
    inbound_adapter,
)
from .session import Session

logger = logging.getLogger(__name__)

Inbound = Union[JoinRequest, SignalRequest, ChatRequest, ControlRequest, UnrecognizedMessage]

# ---------------------------------------------------------------------------
# Parsing & normalisation helpers
# ---------------------------------------------------------------------------


def parse_frame(frame: Union[str, bytes]) -> Optional[Inbound]:
    """Decode one raw frame into an inbound message.

    Returns ``None`` for frames that are not a JSON object with a truthy
    ``type``; unknown kinds come back as :class:`UnrecognizedMessage`.
    """
    if isinstance(frame, bytes):
        frame = frame.decode("utf-8", errors="replace")
    try:
        data = json.loads(frame, parse_constant=_reject_constant)
    except (ValueError, RecursionError):
        logger.warning("Invalid JSON: %.200r", frame)
        return None

    if not isinstance(data, dict) or not data.get("type"):
        return None

    try:
        return inbound_adapter.validate_python(data)
    except ValidationError:
        return UnrecognizedMessage(type=data.get("type"))


def _reject_constant(name: str) -> Any:
    # NaN and Infinity are not JSON; such frames count as malformed
    raise ValueError(f"invalid JSON constant {name}")


def as_client_id(value: Any) -> Optional[int]:
    """Return *value* as a client id if it is a JSON integer, else ``None``."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return None


def _is_missing(value: Any) -> bool:
    """True for values a client may send to mean "no value": null, false, 0 and "".

    Empty lists and objects are values, not gaps.
    """
    if value is None or value is False or value == "":
        return True
    return isinstance(value, (int, float)) and not isinstance(value, bool) and value == 0


def _render(value: Any) -> str:
    """String form of a JSON value as it reads in a browser chat box.

    Arrays are joined with commas and objects collapse to ``[object Object]``.
    """
    if isinstance(value, str):
        return value
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if value.is_integer():
            return str(int(value))
        if value in (float("inf"), float("-inf")):
            return "Infinity" if value > 0 else "-Infinity"
        return repr(value)
    if isinstance(value, list):
        return ",".join(_render(item) for item in value)
    if isinstance(value, dict):
        return "[object Object]"
    return str(value)


def as_text(value: Any, default: str, limit: int) -> str:
    """Coerce a loosely typed field to a string of at most *limit* characters."""
    if _is_missing(value):
        value = default
    return _render(value)[:limit]

# ---------------------------------------------------------------------------
# Handlers
# ---------------------------------------------------------------------------


def handle_join(registry: RoomRegistry, session: Session, msg: JoinRequest) -> None:
    room_name = msg.room.strip() if isinstance(msg.room, str) else ""
    if not room_name:
        session.send(ErrorMessage(message=ROOM_NAME_REQUIRED))
        return

    room, is_new_member = enter_room(registry, session, room_name)
    session.send(
        Joined(
            id=session.client_id,
            room=room.name,
            peers=room.member_ids(exclude=session.client_id),
        )
    )
    if is_new_member:
        room.broadcast(PeerJoined(id=session.client_id), exclude=session.client_id)


def handle_signal(registry: RoomRegistry, session: Session, msg: SignalRequest) -> None:
    room = registry.get(session.room)
    target_id = as_client_id(msg.target_id)
    if room is None or target_id is None:
        return
    room.send_to(target_id, SignalRelay(from_id=session.client_id, payload=msg.payload))


def handle_chat(registry: RoomRegistry, session: Session, msg: ChatRequest) -> None:
    room = registry.get(session.room)
    if room is None:
        return
    text = as_text(msg.text, "", CHAT_TEXT_LIMIT)
    name = as_text(msg.name, DEFAULT_CHAT_NAME, CHAT_NAME_LIMIT)
    if not text.strip():
        return
    # The sender gets its own message back as delivery confirmation.
    room.broadcast(ChatBroadcast(from_id=session.client_id, name=name, text=text))


def handle_control(registry: RoomRegistry, session: Session, msg: ControlRequest) -> None:
    room = registry.get(session.room)
    target_id = as_client_id(msg.target_id)
    if room is None or target_id is None:
        return
    room.send_to(
        target_id,
        ControlRelay(from_id=session.client_id, target_id=target_id, action=msg.action),
    )


def handle_ws_message(registry: RoomRegistry, session: Session, frame: Union[str, bytes]) -> None:
    msg = parse_frame(frame)
    if msg is None:
        return
    if isinstance(msg, JoinRequest):
        handle_join(registry, session, msg)
    elif isinstance(msg, SignalRequest):
        handle_signal(registry, session, msg)
    elif isinstance(msg, ChatRequest):
        handle_chat(registry, session, msg)
    elif isinstance(msg, ControlRequest):
        handle_control(registry, session, msg)
    else:
        logger.debug("Ignoring message type %r from client %s", msg.type, session.client_id)


__all__ = [
    "parse_frame",
    "as_client_id",
    "as_text",
    "handle_join",
    "handle_signal",
    "handle_chat",
    "handle_control",
    "handle_ws_message",
]
