"""Shared fixtures: an in-memory channel and a fresh router / app per test."""
from __future__ import annotations

import json
from typing import Any, Dict, List

import pytest
from fastapi.testclient import TestClient

from duel_relay.app import create_app
from duel_relay.config import Settings
from duel_relay.session_router import SessionRouter


class FakeChannel:
    """Records everything sent to it while open."""

    def __init__(self, name: str = "fake"):
        self.name = name
        self.is_open = True
        self.sent: List[str] = []

    async def send(self, text: str) -> None:
        if self.is_open:
            self.sent.append(text)

    def close(self) -> None:
        self.is_open = False

    def messages(self) -> List[Dict[str, Any]]:
        return [json.loads(text) for text in self.sent]

    def __repr__(self) -> str:
        return f"FakeChannel({self.name})"


@pytest.fixture
def channel_factory():
    def _make(name: str = "fake") -> FakeChannel:
        return FakeChannel(name)

    return _make


@pytest.fixture
def session_router() -> SessionRouter:
    return SessionRouter()


@pytest.fixture
def app():
    return create_app(Settings(port=8080, log_level="WARNING"))


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client
