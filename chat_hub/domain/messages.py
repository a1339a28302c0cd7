from dataclasses import dataclass

SessionId = str


@dataclass(frozen=True, slots=True)
class ChatMessage:
    sender: str
    text: str


@dataclass(frozen=True, slots=True)
class DeliveryFailure:
    session_id: SessionId
    reason: str


@dataclass(frozen=True, slots=True)
class BroadcastResult:
    """Outcome of one fan-out: the recipient snapshot and per-session failures."""

    message: ChatMessage
    recipients: tuple[SessionId, ...]
    failures: tuple[DeliveryFailure, ...] = ()

    @property
    def delivered_count(self) -> int:
        return len(self.recipients) - len(self.failures)


def started_message(hub_name: str, session_id: SessionId) -> ChatMessage:
    return ChatMessage(sender=hub_name, text=f"{session_id} has started.")
