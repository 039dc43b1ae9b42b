"""Tests for middleware components."""
import pytest
from httpx import ASGITransport, AsyncClient

from secretstore.config import Settings
from secretstore.context import SecretsContext
from secretstore.main import create_app


@pytest.mark.asyncio
async def test_correlation_id_injection(http):
    """Test that correlation ID is auto-generated if not provided."""
    response = await http.get("/v1/secrets")
    assert response.status_code == 200
    assert "X-Correlation-ID" in response.headers


@pytest.mark.asyncio
async def test_correlation_id_preserved(http):
    """Test that provided correlation ID is preserved."""
    correlation_id = "test-correlation-123"
    response = await http.get("/v1/secrets", headers={"X-Correlation-ID": correlation_id})
    assert response.headers["X-Correlation-ID"] == correlation_id


@pytest.mark.asyncio
async def test_correlation_id_in_error_body(http):
    """Test error bodies carry the request's correlation ID."""
    response = await http.get("/v1/secret/captain:foo", headers={"X-Correlation-ID": "corr-1"})
    assert response.status_code == 403
    assert response.json()["correlation_id"] == "corr-1"


@pytest.mark.asyncio
async def test_payload_too_large_rejection(backend, clients, clock):
    """Test that oversized payloads are rejected."""
    context = SecretsContext(
        settings=Settings(MAX_PAYLOAD_SIZE=100, SWEEP_INTERVAL_SECONDS=0),
        backend=backend,
        clients=clients,
        clock=clock,
    )
    transport = ASGITransport(app=create_app(context))
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.put(
            "/v1/secret/captain:foo",
            json={"secret": "x" * 200, "expires": "2030-01-01T00:00:00Z"},
        )

    assert response.status_code == 413
    data = response.json()
    assert data["code"] == "PayloadTooLarge"
    assert "x" * 200 not in response.text


@pytest.mark.asyncio
async def test_invalid_json_rejection(http, headers):
    """Test that invalid JSON is rejected without echoing the body."""
    response = await http.put(
        "/v1/secret/captain:foo",
        content=b'{"secret": "hunter2", ',
        headers={"Content-Type": "application/json", **headers("captain-write")},
    )
    assert response.status_code == 400
    data = response.json()
    assert data["code"] == "InputValidationError"
    assert data["requestInfo"]["payload"] is None
    assert "hunter2" not in response.text


@pytest.mark.asyncio
async def test_unhandled_exception_is_structured(http, headers, backend, monkeypatch):
    """Test unexpected failures become a generic 500 body."""
    async def broken_get(key):
        raise RuntimeError("backend exploded")

    monkeypatch.setattr(backend, "get", broken_get)
    response = await http.get("/v1/secret/captain:foo", headers=headers("captain-read"))

    assert response.status_code == 500
    data = response.json()
    assert data["code"] == "InternalServerError"
    assert data["message"] == "An unexpected error occurred"
    assert "exploded" not in response.text
