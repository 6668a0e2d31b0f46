"""Pytest fixtures for ChatSurfer test server tests."""

import itertools
import os
import random
from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

# Set test environment
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["OTEL_ENABLED"] = "false"

from chatsurfer_server.services.config import Settings  # noqa: E402
from chatsurfer_server.services.fixtures import FixtureGenerator  # noqa: E402

FIXED_TIME = datetime(2024, 3, 14, 15, 9, 26, tzinfo=timezone.utc)
PUSH_INTERVAL = 0.05


@pytest.fixture
def fixed_clock():
    """Clock that always reads FIXED_TIME."""
    return lambda: FIXED_TIME


@pytest.fixture
def counting_ids():
    """Id source yielding id-0001, id-0002, ..."""
    counter = itertools.count(1)
    return lambda: f"id-{next(counter):04d}"


@pytest.fixture
def settings():
    """Settings with a short WebSocket push interval."""
    return Settings(WS_PUSH_INTERVAL=PUSH_INTERVAL)


@pytest.fixture
def generator(settings, fixed_clock, counting_ids):
    """Fixture generator with pinned clock and ids."""
    return FixtureGenerator(settings, clock=fixed_clock, id_factory=counting_ids)


@pytest.fixture
def test_client(settings, generator):
    """Create test client for FastAPI app with deterministic services."""
    from chatsurfer_server.main import app

    with TestClient(app) as client:
        app.state.settings = settings
        app.state.fixture_generator = generator
        app.state.seed_source = random.Random(1234)
        yield client


@pytest.fixture
def keyword_search_body():
    """The search body used by the consuming application's integration tests."""
    return {
        "keywordFilter": {"query": "Antediluvian"},
        "UserHighClassification": "Test",
    }


@pytest.fixture
def send_message_body():
    """A well-formed SendChatMessageRequest."""
    return {
        "classification": "UNCLASSIFIED",
        "domainId": "chatsurferxmppunclass",
        "message": "A brand new message",
        "nickname": "Edge View",
        "roomName": "Test_Room",
    }
