"""Shared fixtures: an in-memory registry and fake transport connections."""
from __future__ import annotations

import json
from typing import Any, Dict, List

import pytest

from signal_relay.lifecycle import connect
from signal_relay.registry import RoomRegistry
from signal_relay.relay_logic import handle_ws_message
from signal_relay.session import Session


class FakeConnection:
    """Records every frame handed to it instead of writing to a socket."""

    def __init__(self) -> None:
        self.frames: List[str] = []
        self.open = True

    def send_text(self, frame: str) -> None:
        self.frames.append(frame)

    def is_writable(self) -> bool:
        return self.open

    def messages(self) -> List[Dict[str, Any]]:
        return [json.loads(f) for f in self.frames]

    def drain(self) -> List[Dict[str, Any]]:
        msgs = self.messages()
        self.frames.clear()
        return msgs


@pytest.fixture
def registry() -> RoomRegistry:
    return RoomRegistry()


@pytest.fixture
def new_client(registry):
    """Factory returning a connected :class:`Session` backed by a FakeConnection."""

    def _new_client() -> Session:
        return connect(registry, FakeConnection())

    return _new_client


@pytest.fixture
def send(registry):
    """Feed a message (dict, or raw str/bytes frame) through the router."""

    def _send(session: Session, message) -> None:
        frame = message if isinstance(message, (str, bytes)) else json.dumps(message)
        handle_ws_message(registry, session, frame)

    return _send


@pytest.fixture
def join(send):
    def _join(session: Session, room: str, name: str = "tester") -> None:
        send(session, {"type": "join", "room": room, "name": name})

    return _join


