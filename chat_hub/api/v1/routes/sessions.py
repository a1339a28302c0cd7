from fastapi import APIRouter, Depends

from chat_hub.api.deps import get_chat_hub
from chat_hub.infra.realtime import BroadcastHub
from chat_hub.schemas.message import SessionListResponse

router = APIRouter()


@router.get("", response_model=SessionListResponse)
async def list_sessions(hub: BroadcastHub = Depends(get_chat_hub)):
    sessions = await hub.connected_sessions()
    return SessionListResponse(hub=hub.name, sessions=list(sessions), count=len(sessions))
