import asyncio
import logging
from collections.abc import Sequence

from chat_hub.domain.exceptions import (
    DeliveryError,
    SessionAlreadyConnectedError,
    SessionNotConnectedError,
)
from chat_hub.domain.messages import (
    BroadcastResult,
    ChatMessage,
    DeliveryFailure,
    SessionId,
    started_message,
)
from chat_hub.infra.realtime.transport import SessionTransport

logger = logging.getLogger(__name__)


class BroadcastHub:
    """In-process hub that fans chat messages out to every connected session.

    Mutations and broadcast snapshots of the session set happen under
    ``_lock``. ``session_count`` and ``is_connected`` read it unlocked and
    assume callers share the hub's event loop. Deliveries run after the
    lock is released, against the snapshot taken while it was held, so a
    session that connects mid-broadcast never receives that broadcast.
    """

    def __init__(
        self,
        transport: SessionTransport,
        *,
        name: str = "Hub",
        delivery_timeout: float | None = None,
    ) -> None:
        self._transport = transport
        self._name = name
        self._delivery_timeout = delivery_timeout
        self._sessions: set[SessionId] = set()
        self._lock = asyncio.Lock()

    @property
    def name(self) -> str:
        return self._name

    @property
    def session_count(self) -> int:
        return len(self._sessions)

    def is_connected(self, session_id: SessionId) -> bool:
        return session_id in self._sessions

    async def connected_sessions(self) -> tuple[SessionId, ...]:
        async with self._lock:
            return tuple(sorted(self._sessions))

    async def connect(self, session_id: SessionId) -> BroadcastResult:
        async with self._lock:
            if session_id in self._sessions:
                raise SessionAlreadyConnectedError(session_id)
            self._sessions.add(session_id)
            recipients = tuple(self._sessions)

        logger.info("Session %s connected (%d online)", session_id, len(recipients))
        return await self._fan_out(started_message(self._name, session_id), recipients)

    async def disconnect(self, session_id: SessionId) -> None:
        async with self._lock:
            if session_id not in self._sessions:
                raise SessionNotConnectedError(session_id)
            self._sessions.discard(session_id)
            remaining = len(self._sessions)

        logger.info("Session %s disconnected (%d online)", session_id, remaining)

    async def broadcast(self, sender: str, text: str) -> BroadcastResult:
        async with self._lock:
            recipients = tuple(self._sessions)

        return await self._fan_out(ChatMessage(sender=sender, text=text), recipients)

    async def _fan_out(
        self,
        message: ChatMessage,
        recipients: Sequence[SessionId],
    ) -> BroadcastResult:
        if not recipients:
            return BroadcastResult(message=message, recipients=())

        outcomes = await asyncio.gather(
            *(self._deliver_one(session_id, message) for session_id in recipients)
        )
        failures = tuple(failure for failure in outcomes if failure is not None)
        return BroadcastResult(
            message=message,
            recipients=tuple(recipients),
            failures=failures,
        )

    async def _deliver_one(
        self,
        session_id: SessionId,
        message: ChatMessage,
    ) -> DeliveryFailure | None:
        try:
            if self._delivery_timeout is None:
                await self._transport.deliver(session_id, message)
            else:
                await asyncio.wait_for(
                    self._transport.deliver(session_id, message),
                    timeout=self._delivery_timeout,
                )
        except DeliveryError as exc:
            reason = exc.reason
        except TimeoutError:
            reason = f"delivery timed out after {self._delivery_timeout}s"
        except Exception as exc:
            # Transports outside this package may raise their own errors.
            reason = repr(exc)
            logger.warning(
                "Unexpected error delivering to session %s", session_id, exc_info=True
            )
            return DeliveryFailure(session_id=session_id, reason=reason)
        else:
            return None

        logger.warning("Delivery to session %s failed: %s", session_id, reason)
        return DeliveryFailure(session_id=session_id, reason=reason)
