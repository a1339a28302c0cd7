from fastapi import APIRouter

from chat_hub.api.v1.routes import health, messages, realtime, sessions

api_router = APIRouter()
api_router.include_router(health.router, prefix="/v1", tags=["health"])
api_router.include_router(sessions.router, prefix="/v1/sessions", tags=["sessions"])
api_router.include_router(messages.router, prefix="/v1/messages", tags=["messages"])
api_router.include_router(realtime.router, prefix="/v1/realtime", tags=["realtime"])
