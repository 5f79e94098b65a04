# Wire type discriminators (inbound)
JOIN_ROOM = "join_room"
CHAT = "chat"
ACTION_COMPLETE = "action_complete"
GAME_OVER = "game_over"

# A room is "full" (and the game starts) once this many players have joined.
ROOM_CAPACITY = 2

DEFAULT_PORT = 8080

__all__ = [
    "JOIN_ROOM",
    "CHAT",
    "ACTION_COMPLETE",
    "GAME_OVER",
    "ROOM_CAPACITY",
    "DEFAULT_PORT",
]
