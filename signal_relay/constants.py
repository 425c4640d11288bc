ROOM_NAME_REQUIRED = "Room name required"

# Chat normalisation limits (in characters).
CHAT_TEXT_LIMIT = 500
CHAT_NAME_LIMIT = 40
DEFAULT_CHAT_NAME = "Guest"

__all__ = [
    "ROOM_NAME_REQUIRED",
    "CHAT_TEXT_LIMIT",
    "CHAT_NAME_LIMIT",
    "DEFAULT_CHAT_NAME",
]
