"""
Shared pytest fixtures for device locator tests.
"""
import os
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Tuple
from unittest.mock import patch

import pytest

from locator.application.services.device_registry import DeviceRegistry
from locator.application.services.location_coordinator import LocationCoordinator
from locator.application.services.rendezvous_store import RendezvousStore
from locator.domain.exceptions import PushDeliveryFailedError
from locator.domain.services.push_sender import PushSender
from locator.infrastructure.db.memory_repositories import (
    InMemoryDeviceRepository,
    InMemoryTrackingSessionRepository,
)


class FakeClock:
    """Manually advanced UTC clock"""

    def __init__(self, start: datetime = datetime(2025, 1, 15, 12, 0, 0, tzinfo=timezone.utc)):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now = self.now + timedelta(seconds=seconds)


class FakePushSender(PushSender):
    """Records sends; raises PushDeliveryFailedError while fail is set"""

    def __init__(self) -> None:
        self.sent: List[Tuple[str, Dict[str, str], str]] = []
        self.fail = False

    async def send(self, token: str, data: Dict[str, str], priority: str = "high") -> str:
        if self.fail:
            raise PushDeliveryFailedError("Requested entity was not found.")
        self.sent.append((token, data, priority))
        return f"projects/test/messages/{len(self.sent)}"


@pytest.fixture
def mock_env():
    """Fixture to set common test environment variables."""
    env_vars = {
        "STORE_BACKEND": "memory",
        "MONGO_URI": "mongodb://localhost:27017",
        "MONGO_DB_NAME": "test_device_locator",
        "FIREBASE_KEY_PATH": "/nonexistent/firebase-key.json",
        "REQUEST_STALE_AFTER_SECONDS": "120",
        "LOG_LEVEL": "DEBUG",
    }
    with patch.dict(os.environ, env_vars, clear=False):
        yield env_vars


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def push_sender():
    return FakePushSender()


@pytest.fixture
def device_repository():
    return InMemoryDeviceRepository()


@pytest.fixture
def session_repository():
    return InMemoryTrackingSessionRepository()


@pytest.fixture
def device_registry(device_repository, clock):
    return DeviceRegistry(device_repository, clock=clock)


@pytest.fixture
def rendezvous_store(session_repository, clock):
    return RendezvousStore(session_repository, clock=clock)


@pytest.fixture
def coordinator(device_registry, rendezvous_store, push_sender, clock):
    return LocationCoordinator(
        device_registry=device_registry,
        rendezvous_store=rendezvous_store,
        push_sender=push_sender,
        stale_after=timedelta(seconds=120),
        clock=clock,
    )
