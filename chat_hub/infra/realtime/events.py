from enum import Enum


class RealtimeEvent(str, Enum):
    CHAT_MESSAGE = "chat.message"
    SYSTEM_CONNECTED = "system.connected"
    SYSTEM_PONG = "system.pong"
    SYSTEM_ERROR = "system.error"
