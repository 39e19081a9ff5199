"""Unit tests for request middleware."""

import pytest
from httpx import ASGITransport, AsyncClient

from discoverzim.core.middleware import redact
from discoverzim.main import create_app


def test_redact_contact_fields():
    body = {
        "destination_id": "d-1",
        "contact_name": "Tendai Moyo",
        "contact_email": "tendai@example.com",
        "items": [{"phone": "+263771234567", "quantity": 2}],
    }

    assert redact(body) == {
        "destination_id": "d-1",
        "contact_name": "***",
        "contact_email": "***",
        "items": [{"phone": "***", "quantity": 2}],
    }


@pytest.mark.asyncio
async def test_request_id_and_traceparent_echoed():
    transport = ASGITransport(app=create_app())
    trace_id = "4bf92f3577b34da6a3ce929d0e0e4736"

    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.post(
            "/v1/health/ping",
            json={},
            headers={"X-Request-ID": "req-42", "traceparent": f"00-{trace_id}-00f067aa0ba902b7-01"},
        )

    assert response.headers["X-Request-ID"] == "req-42"
    assert response.headers["traceparent"].startswith(f"00-{trace_id}-")


@pytest.mark.asyncio
async def test_request_id_generated_when_missing():
    transport = ASGITransport(app=create_app())

    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.get("/health")

    assert response.headers["X-Request-ID"]
