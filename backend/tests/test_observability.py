"""
Tests for request middleware and the structlog processors.
"""

from datetime import date, datetime, timezone
from decimal import Decimal

import pytest
from httpx import AsyncClient

from hotel_business.core.logging import SERVICE_NAME, add_service_context, render_domain_values
from hotel_business.models.booking import BookingStatus


@pytest.mark.asyncio
async def test_malformed_request_id_is_replaced(client: AsyncClient):
    response = await client.get("/health", headers={"X-Request-ID": "not a valid id!"})

    request_id = response.headers["X-Request-ID"]
    assert request_id != "not a valid id!"
    assert len(request_id) == 12
    assert response.headers["X-Response-Time"].endswith("ms")


@pytest.mark.asyncio
async def test_request_id_generated_when_absent(client: AsyncClient):
    first = await client.get("/")
    second = await client.get("/")
    assert first.headers["X-Request-ID"] != second.headers["X-Request-ID"]


def test_domain_values_render_as_json_scalars():
    event = render_domain_values(None, "info", {
        "event": "payment_synced",
        "total": Decimal("170.00"),
        "status": BookingStatus.CONFIRMED,
        "checkin": date(2027, 3, 1),
        "at": datetime(2027, 3, 1, 12, 0, tzinfo=timezone.utc),
        "fields": ("name", "price"),
        "booking_id": 7,
    })

    assert event == {
        "event": "payment_synced",
        "total": "170.00",
        "status": "confirmed",
        "checkin": "2027-03-01",
        "at": "2027-03-01T12:00:00+00:00",
        "fields": ["name", "price"],
        "booking_id": 7,
    }


def test_service_context_does_not_override_event_values():
    event = add_service_context(None, "info", {"event": "booking_created", "env": "replay"})
    assert event["service"] == SERVICE_NAME
    assert event["env"] == "replay"
    assert "version" in event
