from fastapi import HTTPException, Request, status

from chat_hub.infra.realtime import BroadcastHub


def get_chat_hub(request: Request) -> BroadcastHub:
    hub = getattr(request.app.state, "chat_hub", None)
    if hub is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Chat hub not initialized",
        )
    return hub
