from fastapi import APIRouter, Depends

from chat_hub.api.deps import get_chat_hub
from chat_hub.infra.realtime import BroadcastHub
from chat_hub.schemas.message import BroadcastResponse, SendMessageRequest

router = APIRouter()


@router.post("", response_model=BroadcastResponse)
async def send_message(
    payload: SendMessageRequest,
    hub: BroadcastHub = Depends(get_chat_hub),
):
    result = await hub.broadcast(payload.name, payload.text)
    return BroadcastResponse.from_result(result)
