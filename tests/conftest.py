"""Shared fixtures: an isolated service context per test."""
from datetime import datetime, timedelta, timezone

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from secretstore.adapters.memory import InMemoryBackend
from secretstore.auth.clients import ClientRegistry
from secretstore.config import Settings
from secretstore.context import SecretsContext
from secretstore.main import create_app
from secretstore.services.crypto import CryptoService

CLIENT_KEYS = {
    "captain-write": "key-captain-write",
    "captain-read": "key-captain-read",
    "captain-read-write": "key-captain-read-write",
    "captain-read-limited": "key-captain-read-limited",
}

CLIENT_SCOPES = {
    "captain-write": ["secrets:set:captain:*", "secrets:remove:captain:*"],
    "captain-read": ["secrets:get:captain:*"],
    "captain-read-write": [
        "secrets:get:captain:*",
        "secrets:set:captain:*",
        "secrets:remove:captain:*",
    ],
    "captain-read-limited": ["secrets:get:captain:limited/*"],
}


class FakeClock:
    """Controllable UTC clock."""

    def __init__(self, now: datetime | None = None):
        self.now = now or datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, delta: timedelta) -> None:
        self.now += delta


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def backend():
    return InMemoryBackend()


@pytest.fixture
def clients():
    registry = ClientRegistry()
    for client_id, key in CLIENT_KEYS.items():
        registry.add_client(key, client_id, CLIENT_SCOPES[client_id])
    return registry


@pytest.fixture
def context(backend, clients, clock):
    settings = Settings(SWEEP_INTERVAL_SECONDS=0, EXPIRATION_DELAY_SECONDS=0)
    return SecretsContext(
        settings=settings,
        backend=backend,
        crypto=CryptoService(CryptoService.generate_fernet_key()),
        clients=clients,
        clock=clock,
    )


@pytest.fixture
def app(context):
    return create_app(context)


@pytest_asyncio.fixture
async def http(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def headers():
    """Request headers authenticating as one of the configured clients."""
    def _headers(client_id: str) -> dict:
        return {"X-Secrets-Key": CLIENT_KEYS[client_id]}
    return _headers
