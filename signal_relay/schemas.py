"""Pydantic data schemas for the relay wire protocol and HTTP surface.

Inbound frames are modelled as a closed discriminated union keyed by the
``type`` field. Anything that does not match one of the known kinds is
represented by :class:`UnrecognizedMessage` and ignored by the router.

Inbound fields are typed ``Any`` on purpose: the relay forwards payloads
verbatim and applies its own lenient normalisation in the handlers, so a
field of the "wrong" type must never turn a known message into an unknown
one.
"""
from __future__ import annotations

from typing import Annotated, Any, List, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

# -----------------------------
# Inbound (client -> server)
# -----------------------------


class JoinRequest(BaseModel):
    type: Literal["join"]
    room: Any = None
    name: Any = None  # display name, informational only


class SignalRequest(BaseModel):
    type: Literal["signal"]
    target_id: Any = Field(default=None, alias="targetId")
    payload: Any = None


class ChatRequest(BaseModel):
    type: Literal["chat"]
    name: Any = None
    text: Any = None


class ControlRequest(BaseModel):
    type: Literal["control"]
    target_id: Any = Field(default=None, alias="targetId")
    action: Any = None


class UnrecognizedMessage(BaseModel):
    """Fallthrough for frames with a ``type`` the relay does not handle."""

    type: Any = None


InboundMessage = Annotated[
    Union[JoinRequest, SignalRequest, ChatRequest, ControlRequest],
    Field(discriminator="type"),
]

inbound_adapter: TypeAdapter = TypeAdapter(InboundMessage)

# -----------------------------
# Outbound (server -> client)
# -----------------------------


class OutboundMessage(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    def to_frame(self) -> str:
        """Serialise to the JSON text frame sent over the wire."""
        return self.model_dump_json(by_alias=True)


class Joined(OutboundMessage):
    type: Literal["joined"] = "joined"
    id: int
    room: str
    peers: List[int] = []


class PeerJoined(OutboundMessage):
    type: Literal["peer-joined"] = "peer-joined"
    id: int


class PeerLeft(OutboundMessage):
    type: Literal["peer-left"] = "peer-left"
    id: int


class SignalRelay(OutboundMessage):
    type: Literal["signal"] = "signal"
    from_id: int = Field(alias="fromId")
    payload: Any = None


class ChatBroadcast(OutboundMessage):
    type: Literal["chat"] = "chat"
    from_id: int = Field(alias="fromId")
    name: str
    text: str


class ControlRelay(OutboundMessage):
    type: Literal["control"] = "control"
    from_id: int = Field(alias="fromId")
    target_id: int = Field(alias="targetId")
    action: Any = None


class ErrorMessage(OutboundMessage):
    type: Literal["error"] = "error"
    message: str

# -----------------------------
# HTTP response models
# -----------------------------


class RoomSummary(BaseModel):
    room: str
    member_count: int
    members: List[int]


class HealthResponse(BaseModel):
    status: str = "ok"
    rooms: int
    sessions: int


__all__ = [
    # inbound
    "JoinRequest",
    "SignalRequest",
    "ChatRequest",
    "ControlRequest",
    "UnrecognizedMessage",
    "InboundMessage",
    "inbound_adapter",
    # outbound
    "OutboundMessage",
    "Joined",
    "PeerJoined",
    "PeerLeft",
    "SignalRelay",
    "ChatBroadcast",
    "ControlRelay",
    "ErrorMessage",
    # http
    "RoomSummary",
    "HealthResponse",
]
