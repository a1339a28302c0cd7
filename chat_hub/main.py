import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.httpsredirect import HTTPSRedirectMiddleware
from starlette.middleware.trustedhost import TrustedHostMiddleware

from chat_hub.api.router import api_router
from chat_hub.core.config import Settings, get_settings
from chat_hub.core.logging import configure_logging
from chat_hub.infra.realtime import BroadcastHub, WebSocketTransport

logger = logging.getLogger(__name__)

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "strict-origin-when-cross-origin",
}
HSTS_HEADER = ("Strict-Transport-Security", "max-age=31536000; includeSubDomains")


def _install_middleware(app: FastAPI, settings: Settings) -> None:
    headers = dict(SECURITY_HEADERS)
    if settings.force_https:
        app.add_middleware(HTTPSRedirectMiddleware)
        headers.setdefault(*HSTS_HEADER)

    if settings.trusted_hosts:
        app.add_middleware(TrustedHostMiddleware, allowed_hosts=settings.trusted_hosts)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allowed_origins,
        allow_methods=["GET", "POST"],
        allow_headers=["Content-Type"],
    )

    @app.middleware("http")
    async def add_security_headers(request: Request, call_next):
        response = await call_next(request)
        for name, value in headers.items():
            response.headers.setdefault(name, value)
        return response


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    settings.validate_security_settings()
    configure_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        transport = WebSocketTransport()
        app.state.realtime_transport = transport
        app.state.chat_hub = BroadcastHub(
            transport,
            name=settings.hub_name,
            delivery_timeout=settings.delivery_timeout,
        )
        logger.info("Chat hub '%s' ready", settings.hub_name)

        yield

        app.state.chat_hub = None
        app.state.realtime_transport = None

    show_docs = not settings.is_production
    app = FastAPI(
        title="Chat Hub API",
        version="0.1.0",
        docs_url="/docs" if show_docs else None,
        redoc_url="/redoc" if show_docs else None,
        lifespan=lifespan,
    )
    _install_middleware(app, settings)
    app.include_router(api_router, prefix="/api")

    @app.get("/", tags=["meta"])
    async def root() -> dict[str, str]:
        return {"service": "chat-hub", "status": "ok"}

    return app
