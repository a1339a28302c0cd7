"""Realtime fan-out hub and its websocket transport."""

from chat_hub.infra.realtime.hub import BroadcastHub
from chat_hub.infra.realtime.transport import SessionTransport, WebSocketTransport

__all__ = ["BroadcastHub", "SessionTransport", "WebSocketTransport"]
