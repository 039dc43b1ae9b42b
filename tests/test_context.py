"""Tests for service context wiring."""
from datetime import timedelta

import pytest

from secretstore.adapters import InMemoryBackend
from secretstore.auth import ClientRegistry
from secretstore.config import Settings
from secretstore.context import SecretsContext
from secretstore.metrics import Metrics


def test_injected_empty_collaborators_are_kept():
    """Test empty collaborators are used as given, not replaced."""
    backend = InMemoryBackend()
    clients = ClientRegistry()
    metrics = Metrics()
    context = SecretsContext(
        settings=Settings(SWEEP_INTERVAL_SECONDS=0),
        backend=backend,
        clients=clients,
        metrics=metrics,
    )

    assert len(backend) == 0
    assert context.backend is backend
    assert context.clients is clients
    assert context.metrics is metrics


@pytest.mark.asyncio
async def test_store_writes_reach_injected_backend(context, backend, clock):
    """Test the store reads and writes through the backend it was given."""
    await context.store.set("captain:foo", {"a": 1}, clock.now + timedelta(hours=1))

    assert len(backend) == 1
    assert await backend.get("captain:foo") is not None
