"""Tests for the WebSocket routes."""

import asyncio
import json
import random
import time
from types import SimpleNamespace

import pytest
from fastapi import WebSocketDisconnect
from prometheus_client import REGISTRY
from structlog.testing import capture_logs

from chatsurfer_server.models.chat import ChatMessage
from chatsurfer_server.routers.websocket import push_messages


def test_push_frames_are_chat_messages(test_client):
    """Every pushed frame is a JSON ChatMessage from the configured sender."""
    with test_client.websocket_connect("/ws/Test_Room") as ws:
        frames = [ws.receive_text() for _ in range(3)]

    for frame in frames:
        message = ChatMessage.model_validate(json.loads(frame))
        assert message.sender == "Austin"
        assert message.classification == "UNCLASSIFIED"
        assert message.timestamp == "2024-03-14T15:09:26Z"
        assert len(message.geo_tags) == 1


def test_push_frames_have_fresh_ids(test_client):
    """Each tick builds a brand-new message."""
    with test_client.websocket_connect("/ws/Test_Room") as ws:
        first = json.loads(ws.receive_text())
        second = json.loads(ws.receive_text())
    assert first["id"] != second["id"]


def test_push_cadence(test_client, settings):
    """Frames are spaced by the configured interval."""
    frames = 3
    with test_client.websocket_connect("/ws/Test_Room") as ws:
        start = time.monotonic()
        for _ in range(frames):
            ws.receive_text()
        elapsed = time.monotonic() - start

    # Each frame is preceded by one full interval of waiting
    assert elapsed >= frames * settings.WS_PUSH_INTERVAL * 0.9


def test_push_any_room(test_client):
    """The room segment is free-form."""
    with test_client.websocket_connect("/ws/another-room") as ws:
        assert json.loads(ws.receive_text())["sender"] == "Austin"


def test_echo_text_and_bytes(test_client):
    """Echo returns frames verbatim, preserving the frame type."""
    with test_client.websocket_connect("/ws/echo") as ws:
        ws.send_text("hello")
        assert ws.receive_text() == "hello"

        ws.send_text('{"keywordFilter": {"query": "x"}}')
        assert ws.receive_text() == '{"keywordFilter": {"query": "x"}}'

        ws.send_bytes(b"\x00\x01\x02")
        assert ws.receive_bytes() == b"\x00\x01\x02"


def test_server_survives_disconnects(test_client):
    """Closing a push session leaves the server serving requests."""
    for _ in range(2):
        with test_client.websocket_connect("/ws/Test_Room") as ws:
            ws.receive_text()
    assert test_client.get("/health").status_code == 200


class FailingWebSocket:
    """Accepts the upgrade, then fails every write with ``error``."""

    def __init__(self, settings, generator, error):
        self.app = SimpleNamespace(state=SimpleNamespace(
            settings=settings,
            fixture_generator=generator,
            seed_source=random.Random(7),
        ))
        self.headers = {}
        self.error = error
        self.accepted = False
        self.writes = 0

    async def accept(self):
        self.accepted = True

    async def send_text(self, data):
        self.writes += 1
        raise self.error


def _open_push_sessions():
    return REGISTRY.get_sample_value("chatsurfer_websocket_sessions", {"route": "push"}) or 0.0


@pytest.mark.parametrize("error", [
    WebSocketDisconnect(code=1001),
    OSError("connection reset"),
])
def test_push_loop_ends_on_failed_write(settings, generator, error):
    """A failed write ends the loop quietly and releases the session."""
    ws = FailingWebSocket(settings, generator, error)
    sessions_before = _open_push_sessions()

    with capture_logs() as logs:
        asyncio.run(asyncio.wait_for(push_messages(ws, "Test_Room"), timeout=5))

    assert ws.accepted
    assert ws.writes == 1
    assert _open_push_sessions() == sessions_before
    events = [e["event"] for e in logs]
    assert "Push peer went away" in events
    assert "Push session closed" in events
    assert all(e["log_level"] == "info" for e in logs if e["event"] == "Push peer went away")


@pytest.mark.parametrize("path", ["/ws/Test_Room", "/ws/echo"])
def test_api_key_header_logged_on_upgrade(test_client, path):
    """The api-key header on an upgrade request is logged, not checked."""
    with capture_logs() as logs:
        with test_client.websocket_connect(path, headers={"api-key": "ws-key"}) as ws:
            if path == "/ws/echo":
                ws.send_text("ping")
                assert ws.receive_text() == "ping"
            else:
                ws.receive_text()

    logged = [e["api_key"] for e in logs if e["event"] == "api-key header received"]
    assert logged == ["ws-key"]
