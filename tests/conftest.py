"""Pytest bootstrap configuration.

Ensure environment variables are set before test collection and module
imports that depend on application settings: the registry runs in
memory and no real AWS endpoint is ever contacted.
"""
import os

os.environ.setdefault("REGISTRY_BACKEND", "memory")
os.environ.setdefault("TABLE_NAME", "")
os.environ.setdefault("AWS__REGION", "us-east-1")
os.environ.setdefault("AWS_DEFAULT_REGION", "us-east-1")
os.environ.setdefault("WEBSOCKET_ENDPOINT", "wss://abc123.execute-api.us-east-1.amazonaws.com/dev")
os.environ.pop("QUEUE_URL", None)

import json
from typing import Any

import pytest

from api.dependencies import RelayServices, build_relay_services
from core.config import Settings
from infrastructure.repositories.inmemory_connection_repository import InMemoryConnectionRepository


BROADCAST_ENDPOINT = "https://abc123.execute-api.us-east-1.amazonaws.com/dev"


class FakePushClient:
    def __init__(self, endpoint: str, hub: "FakePushHub") -> None:
        self.endpoint = endpoint
        self._hub = hub

    async def post_to_connection(self, connection_id: str, data: bytes) -> None:
        self._hub.calls.append((self.endpoint, connection_id, json.loads(data.decode("utf-8"))))
        failure = self._hub.failures.get(connection_id)
        if failure is not None:
            raise failure


class FakePushHub:
    """Records every push attempt; ``failures`` maps connection id -> exception."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, str, Any]] = []
        self.failures: dict[str, BaseException] = {}
        self.clients: dict[str, FakePushClient] = {}

    def factory(self, endpoint: str) -> FakePushClient:
        client = self.clients.get(endpoint)
        if client is None:
            client = FakePushClient(endpoint, self)
            self.clients[endpoint] = client
        return client

    def recipients(self) -> list[str]:
        return [cid for _, cid, _ in self.calls]


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        REGISTRY_BACKEND="memory",
        TABLE_NAME="",
        WEBSOCKET_ENDPOINT="wss://abc123.execute-api.us-east-1.amazonaws.com/dev",
        QUEUE_URL=None,
        FANOUT_MAX_CONCURRENCY=4,
    )


@pytest.fixture
def repository() -> InMemoryConnectionRepository:
    return InMemoryConnectionRepository()


@pytest.fixture
def push_hub() -> FakePushHub:
    return FakePushHub()


@pytest.fixture
def relay(test_settings, repository, push_hub) -> RelayServices:
    return build_relay_services(
        test_settings,
        repository=repository,
        client_factory=push_hub.factory,
    )
