import pytest
from fastapi.testclient import TestClient

from chat_hub.core.config import Settings
from chat_hub.main import create_app

WS_PATH = "/api/v1/realtime/ws"


@pytest.fixture
def settings() -> Settings:
    return Settings(
        app_env="test",
        hub_name="Hub",
        delivery_timeout_seconds=1.0,
        trusted_hosts_raw="",
    )


@pytest.fixture
def client(settings: Settings):
    with TestClient(create_app(settings)) as test_client:
        yield test_client


def _open_session(websocket) -> str:
    connected = websocket.receive_json()
    assert connected["event"] == "system.connected"
    return connected["payload"]["session_id"]


def test_root_and_health(client: TestClient) -> None:
    assert client.get("/").json() == {"service": "chat-hub", "status": "ok"}
    assert client.get("/api/v1/health").json() == {"status": "ok"}


def test_sessions_require_running_hub(settings: Settings) -> None:
    # No lifespan without the context manager, so no hub on app.state.
    response = TestClient(create_app(settings)).get("/api/v1/sessions")

    assert response.status_code == 503


def test_new_session_is_announced_to_all_clients(client: TestClient) -> None:
    with client.websocket_connect(WS_PATH) as first:
        first_id = _open_session(first)
        started = first.receive_json()
        assert started["event"] == "chat.message"
        assert started["payload"] == {"name": "Hub", "text": f"{first_id} has started."}

        with client.websocket_connect(WS_PATH) as second:
            second_id = _open_session(second)
            expected = {"name": "Hub", "text": f"{second_id} has started."}

            assert second.receive_json()["payload"] == expected
            assert first.receive_json()["payload"] == expected

            sessions = client.get("/api/v1/sessions").json()
            assert sessions["hub"] == "Hub"
            assert sessions["count"] == 2
            assert set(sessions["sessions"]) == {first_id, second_id}


def test_send_message_action_reaches_every_client(client: TestClient) -> None:
    with client.websocket_connect(WS_PATH) as first:
        _open_session(first)
        first.receive_json()

        with client.websocket_connect(WS_PATH) as second:
            _open_session(second)
            second.receive_json()
            first.receive_json()

            second.send_json({"action": "send_message", "name": "Alice", "text": "hi"})

            for websocket in (first, second):
                message = websocket.receive_json()
                assert message["event"] == "chat.message"
                assert message["payload"] == {"name": "Alice", "text": "hi"}


def test_http_producer_broadcasts_to_connected_clients(client: TestClient) -> None:
    with client.websocket_connect(WS_PATH) as websocket:
        _open_session(websocket)
        websocket.receive_json()

        response = client.post("/api/v1/messages", json={"name": "Bob", "text": "hello"})

        assert response.status_code == 200
        assert response.json() == {"recipients": 1, "delivered": 1, "failures": []}
        assert websocket.receive_json()["payload"] == {"name": "Bob", "text": "hello"}


def test_http_producer_with_no_clients(client: TestClient) -> None:
    response = client.post("/api/v1/messages", json={"name": "Bob", "text": "hello"})

    assert response.json() == {"recipients": 0, "delivered": 0, "failures": []}


def test_http_producer_rejects_empty_fields(client: TestClient) -> None:
    response = client.post("/api/v1/messages", json={"name": "", "text": "hello"})

    assert response.status_code == 422


def test_ping_and_protocol_errors(client: TestClient) -> None:
    with client.websocket_connect(WS_PATH) as websocket:
        _open_session(websocket)
        websocket.receive_json()

        websocket.send_text("ping")
        assert websocket.receive_json()["event"] == "system.pong"

        websocket.send_json({"action": "ping"})
        assert websocket.receive_json()["event"] == "system.pong"

        websocket.send_text("{not json")
        error = websocket.receive_json()
        assert error["event"] == "system.error"
        assert error["payload"] == {"detail": "Expected JSON payload"}

        websocket.send_json({"action": "send_message", "name": "Alice"})
        assert websocket.receive_json()["event"] == "system.error"

        websocket.send_json({"action": "dance"})
        assert websocket.receive_json()["payload"] == {"detail": "Unsupported action"}


def test_binary_frame_gets_error_reply_and_keeps_connection(client: TestClient) -> None:
    with client.websocket_connect(WS_PATH) as websocket:
        _open_session(websocket)
        websocket.receive_json()

        websocket.send_bytes(b"\x00\x01")
        error = websocket.receive_json()
        assert error["event"] == "system.error"
        assert error["payload"] == {"detail": "Expected text frame"}

        websocket.send_text("ping")
        assert websocket.receive_json()["event"] == "system.pong"


def test_security_headers_are_set(settings: Settings) -> None:
    https_settings = settings.model_copy(update={"force_https": True})
    with TestClient(create_app(https_settings), base_url="https://testserver") as client:
        response = client.get("/api/v1/health")

    assert response.headers["X-Frame-Options"] == "DENY"
    assert response.headers["X-Content-Type-Options"] == "nosniff"
    assert response.headers["Strict-Transport-Security"].startswith("max-age=")
