import json

import pytest

from duel_relay.schemas import (
    ActionCompleteEvent,
    ActionCompleteRequest,
    ChatEvent,
    ChatRequest,
    DisconnectEvent,
    GameOverEvent,
    GameOverRequest,
    GameStartedEvent,
    JoinRoomRequest,
    MessageDecodeError,
    UnrecognizedMessage,
    decode_message,
    encode_message,
)


def test_decode_join_room():
    msg = decode_message('{"type": "join_room", "roomId": "r1", "playerId": "p1"}')
    assert isinstance(msg, JoinRoomRequest)
    assert msg.room_id == "r1"
    assert msg.player_id == "p1"


def test_decode_join_room_missing_fields_is_not_a_decode_error():
    msg = decode_message('{"type": "join_room"}')
    assert isinstance(msg, JoinRoomRequest)
    assert msg.room_id is None
    assert msg.player_id is None


def test_decode_chat_ignores_untrusted_player_id():
    msg = decode_message('{"type": "chat", "displayName": "Al", "message": "hi", "playerId": "spoofed"}')
    assert isinstance(msg, ChatRequest)
    assert msg.display_name == "Al"
    assert msg.message == "hi"
    assert not hasattr(msg, "player_id")


def test_decode_chat_null_fields_become_empty():
    msg = decode_message('{"type": "chat", "displayName": null}')
    assert msg.display_name == ""
    assert msg.message == ""


@pytest.mark.parametrize(
    "display_name,message,expected_name,expected_message",
    [
        (5, True, "5", "true"),
        ({"a": 1}, [1, 2], '{"a": 1}', "[1, 2]"),
        ("Al", 1.5, "Al", "1.5"),
    ],
)
def test_decode_chat_relays_non_string_fields_as_text(display_name, message, expected_name, expected_message):
    msg = decode_message(json.dumps({"type": "chat", "displayName": display_name, "message": message}))
    assert msg.display_name == expected_name
    assert msg.message == expected_message


@pytest.mark.parametrize(
    "frame,expected",
    [
        ('{"type": "action_complete"}', ActionCompleteRequest),
        ('{"type": "game_over", "extra": 1}', GameOverRequest),
    ],
)
def test_decode_payloadless_messages(frame, expected):
    assert isinstance(decode_message(frame), expected)


@pytest.mark.parametrize("frame", ['{"type": "dance"}', '{"roomId": "r1"}', '{"type": ["join_room"]}'])
def test_unknown_or_missing_type_is_unrecognized(frame):
    assert isinstance(decode_message(frame), UnrecognizedMessage)


@pytest.mark.parametrize(
    "frame",
    [
        "not json",
        "",
        "[1, 2, 3]",
        '"join_room"',
        '{"type": "join_room", "roomId": 5, "playerId": "p1"}',
    ],
)
def test_malformed_frames_raise_decode_error(frame):
    with pytest.raises(MessageDecodeError):
        decode_message(frame)


@pytest.mark.parametrize(
    "event,keys",
    [
        (GameStartedEvent(), {"type"}),
        (ChatEvent(player_id="p1", display_name="Al", message="hi"), {"type", "playerId", "displayName", "message"}),
        (ActionCompleteEvent(player_id="p1"), {"type", "playerId"}),
        (GameOverEvent(player_id="p1"), {"type", "playerId"}),
        (DisconnectEvent(player_id="p1"), {"type", "playerId"}),
    ],
)
def test_outbound_events_have_exact_wire_keys(event, keys):
    decoded = json.loads(encode_message(event))
    assert set(decoded) == keys
    assert decoded["type"] == event.type


def test_chat_event_wire_form():
    decoded = json.loads(encode_message(ChatEvent(player_id="p1", display_name="Al", message="hi")))
    assert decoded == {"type": "chat", "playerId": "p1", "displayName": "Al", "message": "hi"}
