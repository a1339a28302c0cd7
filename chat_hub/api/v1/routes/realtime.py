import json
import logging
from typing import Any

from fastapi import APIRouter, WebSocket
from pydantic import ValidationError
from starlette.websockets import WebSocketDisconnect

from chat_hub.domain.exceptions import DeliveryError, SessionStateError
from chat_hub.infra.realtime.events import RealtimeEvent
from chat_hub.schemas.message import SendMessageRequest

router = APIRouter()
logger = logging.getLogger(__name__)


@router.websocket("/ws")
async def realtime_ws(websocket: WebSocket) -> None:
    hub = getattr(websocket.app.state, "chat_hub", None)
    transport = getattr(websocket.app.state, "realtime_transport", None)
    if hub is None or transport is None:
        await websocket.close(code=1011, reason="Chat hub not initialized")
        return

    session_id = await transport.open(websocket)

    async def reply(event: RealtimeEvent, payload: dict[str, Any]) -> None:
        await transport.send_event(session_id, event, payload)

    try:
        await reply(
            RealtimeEvent.SYSTEM_CONNECTED,
            {"session_id": session_id, "hub": hub.name},
        )
        await hub.connect(session_id)

        while True:
            frame = await websocket.receive()
            if frame["type"] == "websocket.disconnect":
                raise WebSocketDisconnect(frame.get("code", 1000), frame.get("reason"))

            raw_message = frame.get("text")
            if raw_message is None:
                await reply(RealtimeEvent.SYSTEM_ERROR, {"detail": "Expected text frame"})
                continue

            if raw_message.strip().lower() == "ping":
                await reply(RealtimeEvent.SYSTEM_PONG, {})
                continue

            try:
                message = json.loads(raw_message)
            except json.JSONDecodeError:
                await reply(RealtimeEvent.SYSTEM_ERROR, {"detail": "Expected JSON payload"})
                continue

            if not isinstance(message, dict):
                await reply(RealtimeEvent.SYSTEM_ERROR, {"detail": "Expected JSON object"})
                continue

            action = message.get("action")
            if action == "ping":
                await reply(RealtimeEvent.SYSTEM_PONG, {})
                continue

            if action == "send_message":
                try:
                    request = SendMessageRequest.model_validate(message)
                except ValidationError:
                    await reply(
                        RealtimeEvent.SYSTEM_ERROR,
                        {"detail": "send_message requires non-empty name and text"},
                    )
                    continue

                await hub.broadcast(request.name, request.text)
                continue

            await reply(RealtimeEvent.SYSTEM_ERROR, {"detail": "Unsupported action"})
    except (WebSocketDisconnect, DeliveryError):
        return
    finally:
        try:
            await hub.disconnect(session_id)
        except SessionStateError as exc:
            logger.warning("Ignoring disconnect for %s: %s", session_id, exc)
        transport.close(session_id)
