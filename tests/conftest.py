import os
from contextlib import contextmanager
from datetime import datetime, timezone

import pytest

# Keep the event log out of the working tree while testing
os.environ.setdefault("EVENT_LOG_FILE", "")

from fastapi.testclient import TestClient  # noqa: E402

from imposter.app import app  # noqa: E402
from imposter.registry import LobbyRegistry  # noqa: E402


# ---------------------------------------------------------------------------
# Mock WebSocket
# ---------------------------------------------------------------------------


class MockWebSocket:
    """Lightweight stand-in for fastapi.WebSocket used by the unit tests."""

    def __init__(self, fail: bool = False):
        self.sent_messages: list[dict] = []
        self.closed = False
        self.close_code = None
        self.fail = fail

    async def send_json(self, data: dict):
        if self.fail or self.closed:
            raise RuntimeError("socket is gone")
        self.sent_messages.append(data)

    async def close(self, code: int = 1000, reason=None):
        if self.closed:
            raise RuntimeError("already closed")
        self.closed = True
        self.close_code = code

    def last(self, msg_type: str):
        for msg in reversed(self.sent_messages):
            if msg.get("type") == msg_type:
                return msg
        return None

    def all(self, msg_type: str) -> list[dict]:
        return [m for m in self.sent_messages if m.get("type") == msg_type]


class FakeClock:
    def __init__(self):
        self.now = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def registry(clock):
    return LobbyRegistry(clock=clock)


# ---------------------------------------------------------------------------
# HTTP / websocket helpers
# ---------------------------------------------------------------------------


@pytest.fixture()
def client():
    # Entering the client runs the lifespan, so every test gets a fresh registry
    with TestClient(app) as test_client:
        yield test_client


def create_lobby(client) -> str:
    res = client.post("/api/v1/lobbies")
    assert res.status_code == 200
    return res.json()["code"]


def recv_until(ws, msg_type, max_messages=20):
    """Receive WS messages until one of the expected type shows up."""
    for _ in range(max_messages):
        data = ws.receive_json()
        if data.get("type") == msg_type:
            return data
    raise AssertionError(f"never received {msg_type} after {max_messages} messages")


@contextmanager
def joined(client, code, name):
    """Open a websocket as *name* and wait until the join has been broadcast."""
    with client.websocket_connect(f"/api/v1/ws/{code}?name={name}") as ws:
        if name == "Host":
            assert ws.receive_json() == {"type": "host_ready", "code": code}
            recv_until(ws, "lobby_state")
        else:
            while True:
                msg = recv_until(ws, "lobby_state")
                if name in msg["players"]:
                    break
        yield ws
