"""Pydantic models for the relay's JSON wire envelope.

Inbound frames decode into a closed tagged union keyed on ``type``. Any frame
whose ``type`` is missing or unknown becomes an :class:`UnrecognizedMessage`
so the router can ignore it explicitly. Outbound events are built by the
server only and always serialise to exactly their declared (camelCase) keys.
"""
from __future__ import annotations

import json
from typing import Any, Dict, List, Literal, Optional, Type, Union

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator
from pydantic.alias_generators import to_camel

from .constants import ACTION_COMPLETE, CHAT, GAME_OVER, JOIN_ROOM


class MessageDecodeError(ValueError):
    """Raised when an inbound frame is not a usable JSON message."""


class WireModel(BaseModel):
    """Base for every wire model: snake_case in Python, camelCase on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


# -----------------------------
# Inbound (client -> server)
# -----------------------------

class JoinRoomRequest(WireModel):
    type: Literal["join_room"] = "join_room"
    # Both are required by the join handler; absence is a protocol violation,
    # not a decode error.
    room_id: Optional[str] = None
    player_id: Optional[str] = None


class ChatRequest(WireModel):
    type: Literal["chat"] = "chat"
    display_name: str = ""
    message: str = ""

    @field_validator("display_name", "message", mode="before")
    @classmethod
    def _as_text(cls, v: Any) -> str:
        # Chat content is relayed, not validated: null is empty, other JSON
        # values go out as their JSON text.
        if v is None:
            return ""
        if isinstance(v, str):
            return v
        return json.dumps(v)


class ActionCompleteRequest(WireModel):
    type: Literal["action_complete"] = "action_complete"


class GameOverRequest(WireModel):
    type: Literal["game_over"] = "game_over"


class UnrecognizedMessage(WireModel):
    """Anything with a missing or unknown ``type``."""

    type: Any = None


InboundMessage = Union[
    JoinRoomRequest,
    ChatRequest,
    ActionCompleteRequest,
    GameOverRequest,
    UnrecognizedMessage,
]

INBOUND_MODELS: Dict[str, Type[WireModel]] = {
    JOIN_ROOM: JoinRoomRequest,
    CHAT: ChatRequest,
    ACTION_COMPLETE: ActionCompleteRequest,
    GAME_OVER: GameOverRequest,
}


# -----------------------------
# Outbound (server -> clients)
# -----------------------------

class GameStartedEvent(WireModel):
    type: Literal["game_started"] = "game_started"


class ChatEvent(WireModel):
    type: Literal["chat"] = "chat"
    player_id: str
    display_name: str
    message: str


class ActionCompleteEvent(WireModel):
    type: Literal["action_complete"] = "action_complete"
    player_id: str


class GameOverEvent(WireModel):
    type: Literal["game_over"] = "game_over"
    player_id: str


class DisconnectEvent(WireModel):
    type: Literal["disconnect"] = "disconnect"
    player_id: str


OutboundEvent = Union[
    GameStartedEvent,
    ChatEvent,
    ActionCompleteEvent,
    GameOverEvent,
    DisconnectEvent,
]


# -----------------------------
# REST response models
# -----------------------------

class RoomSummary(BaseModel):
    room_id: str
    player_ids: List[str]
    player_count: int
    is_full: bool


class HealthResponse(BaseModel):
    status: str = "ok"
    rooms: int
    clients: int


def decode_message(frame: str) -> InboundMessage:
    """Parse a text frame into one of the inbound variants.

    Raises
    ------
    MessageDecodeError
        If *frame* is not JSON, is not a JSON object, or a recognised message
        carries fields of the wrong type.
    """
    try:
        payload = json.loads(frame)
    except json.JSONDecodeError as exc:
        raise MessageDecodeError(f"Invalid JSON: {exc.msg}") from exc

    if not isinstance(payload, dict):
        raise MessageDecodeError("Message must be a JSON object")

    msg_type = payload.get("type")
    model = INBOUND_MODELS.get(msg_type) if isinstance(msg_type, str) else None
    if model is None:
        return UnrecognizedMessage(type=msg_type)

    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        raise MessageDecodeError(f"Invalid {msg_type} message: {exc.error_count()} field error(s)") from exc


def encode_message(event: OutboundEvent) -> str:
    """Serialise an outbound event to its wire form."""
    return event.model_dump_json(by_alias=True)


__all__ = [
    "MessageDecodeError",
    "WireModel",
    # inbound
    "JoinRoomRequest",
    "ChatRequest",
    "ActionCompleteRequest",
    "GameOverRequest",
    "UnrecognizedMessage",
    "InboundMessage",
    "INBOUND_MODELS",
    # outbound
    "GameStartedEvent",
    "ChatEvent",
    "ActionCompleteEvent",
    "GameOverEvent",
    "DisconnectEvent",
    "OutboundEvent",
    # REST
    "RoomSummary",
    "HealthResponse",
    # codec
    "decode_message",
    "encode_message",
]
