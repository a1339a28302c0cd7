from chat_hub.domain.messages import SessionId


class SessionStateError(ValueError):
    def __init__(self, session_id: SessionId, message: str) -> None:
        super().__init__(message)
        self.session_id = session_id


class SessionAlreadyConnectedError(SessionStateError):
    def __init__(self, session_id: SessionId) -> None:
        super().__init__(session_id, f"Session '{session_id}' is already connected")


class SessionNotConnectedError(SessionStateError):
    def __init__(self, session_id: SessionId) -> None:
        super().__init__(session_id, f"Session '{session_id}' is not connected")


class DeliveryError(RuntimeError):
    def __init__(self, session_id: SessionId, reason: str) -> None:
        super().__init__(f"Delivery to session '{session_id}' failed: {reason}")
        self.session_id = session_id
        self.reason = reason
