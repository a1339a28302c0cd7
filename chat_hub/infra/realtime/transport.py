from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any, Protocol
from uuid import uuid4

from fastapi import WebSocket
from starlette.websockets import WebSocketDisconnect

from chat_hub.domain.exceptions import DeliveryError
from chat_hub.domain.messages import ChatMessage, SessionId
from chat_hub.infra.realtime.events import RealtimeEvent


class SessionTransport(Protocol):
    async def deliver(self, session_id: SessionId, message: ChatMessage) -> None: ...


def build_envelope(event: RealtimeEvent, payload: Mapping[str, Any]) -> dict[str, Any]:
    return {
        "event": event.value,
        "payload": dict(payload),
        "sent_at": datetime.now(UTC).isoformat(),
    }


class WebSocketTransport:
    """Owns the live websocket per session and frames outbound events as JSON."""

    def __init__(self) -> None:
        self._sockets: dict[SessionId, WebSocket] = {}

    async def open(self, websocket: WebSocket) -> SessionId:
        await websocket.accept()
        session_id = uuid4().hex
        self._sockets[session_id] = websocket
        return session_id

    def close(self, session_id: SessionId) -> None:
        self._sockets.pop(session_id, None)

    async def deliver(self, session_id: SessionId, message: ChatMessage) -> None:
        await self.send_event(
            session_id,
            RealtimeEvent.CHAT_MESSAGE,
            {"name": message.sender, "text": message.text},
        )

    async def send_event(
        self,
        session_id: SessionId,
        event: RealtimeEvent,
        payload: Mapping[str, Any],
    ) -> None:
        websocket = self._sockets.get(session_id)
        if websocket is None:
            raise DeliveryError(session_id, "session has no open websocket")

        try:
            await websocket.send_json(build_envelope(event, payload))
        except (RuntimeError, WebSocketDisconnect) as exc:
            raise DeliveryError(session_id, f"websocket closed ({exc!r})") from exc
        except (TypeError, ValueError) as exc:
            raise DeliveryError(session_id, f"serialization failed ({exc})") from exc
