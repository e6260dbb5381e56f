"""
Tests for the application shell: health, request headers, error bodies and
the delivery transition table.
"""

import pytest

from fastshift.app.models.parcel_enums import DeliveryStatus, can_transition


async def test_health(client):
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


async def test_correlation_id_propagated(client):
    response = await client.get("/health", headers={"X-Correlation-ID": "cid-123"})
    assert response.headers["X-Correlation-ID"] == "cid-123"
    assert float(response.headers["X-Process-Time"]) >= 0


async def test_correlation_id_generated(client):
    response = await client.get("/")
    assert response.status_code == 200
    assert response.headers["X-Correlation-ID"]


async def test_error_body_format(client):
    response = await client.get("/all-parcels/missing")
    assert response.status_code == 404
    body = response.json()
    assert body["success"] is False
    assert body["error_code"] == "ERR_NOT_FOUND_001"
    assert body["message"]


async def test_unauthenticated_error_body(client):
    response = await client.get("/my-parcels", params={"email": "a@x.com"})
    assert response.status_code == 401
    assert response.json()["message"] == "Unauthorized access"


@pytest.mark.parametrize("current, target, allowed", [
    (DeliveryStatus.NOT_COLLECTED, DeliveryStatus.RIDER_ASSIGNED, True),
    (DeliveryStatus.NOT_COLLECTED, DeliveryStatus.IN_TRANSIT, False),
    (DeliveryStatus.RIDER_ASSIGNED, DeliveryStatus.IN_TRANSIT, True),
    (DeliveryStatus.RIDER_ASSIGNED, DeliveryStatus.DELIVERED, False),
    (DeliveryStatus.IN_TRANSIT, DeliveryStatus.DELIVERED, True),
    (DeliveryStatus.IN_TRANSIT, DeliveryStatus.SERVICE_CENTER_DELIVERED, True),
    (DeliveryStatus.DELIVERED, DeliveryStatus.IN_TRANSIT, False),
    (DeliveryStatus.DELIVERED, DeliveryStatus.NOT_COLLECTED, False),
])
def test_delivery_transitions(current, target, allowed):
    assert can_transition(current, target) is allowed
