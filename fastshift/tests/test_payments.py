"""
Integration tests for payment recording, payment history and charge intents.
"""

import pytest

from fastshift.app.core.exceptions import PaymentGatewayError
from fastshift.app.models.parcel import Parcel
from fastshift.app.models.parcel_enums import PaymentStatus


@pytest.fixture
async def parcel_id(client):
    response = await client.post("/parcels", json={"created_by": "a@x.com"})
    return response.json()["insertedId"]


async def test_payment_marks_parcel_paid_and_is_listed(client, parcel_id, auth, fetch):
    response = await client.post("/payments", json={
        "parcel_id": parcel_id,
        "amount": 500,
        "transaction_id": "tx1",
        "created_by": "a@x.com",
        "payment_method": "card",
    })
    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["payment_id"]

    parcel = await fetch(Parcel, parcel_id)
    assert parcel.payment_status == PaymentStatus.PAID

    history = await client.get("/payments", params={"email": "a@x.com"}, headers=auth("a@x.com"))
    assert history.status_code == 200
    payments = history.json()["data"]
    assert len(payments) == 1
    assert payments[0]["transaction_id"] == "tx1"
    assert payments[0]["parcel_id"] == parcel_id
    assert payments[0]["_id"] == body["payment_id"]
    assert payments[0]["paid_at_string"]


@pytest.mark.parametrize("missing", ["parcel_id", "amount", "transaction_id", "created_by"])
async def test_payment_missing_field_rejected(client, parcel_id, fetch, missing):
    payload = {
        "parcel_id": parcel_id,
        "amount": 500,
        "transaction_id": "tx1",
        "created_by": "a@x.com",
    }
    payload.pop(missing)

    response = await client.post("/payments", json=payload)
    assert response.status_code == 400
    assert response.json()["message"] == "Missing required fields"

    parcel = await fetch(Parcel, parcel_id)
    assert parcel.payment_status == PaymentStatus.UNPAID


async def test_payment_for_unknown_parcel(client):
    response = await client.post("/payments", json={
        "parcel_id": "missing",
        "amount": 500,
        "transaction_id": "tx1",
        "created_by": "a@x.com",
    })
    assert response.status_code == 404


async def test_second_payment_rejected(client, parcel_id, auth):
    payload = {"parcel_id": parcel_id, "amount": 500, "transaction_id": "tx1", "created_by": "a@x.com"}
    assert (await client.post("/payments", json=payload)).status_code == 200

    response = await client.post("/payments", json={**payload, "transaction_id": "tx2"})
    assert response.status_code == 400

    history = await client.get("/payments", params={"email": "a@x.com"}, headers=auth("a@x.com"))
    assert [p["transaction_id"] for p in history.json()["data"]] == ["tx1"]


async def test_payment_history_forbidden_for_other_email(client, parcel_id, auth):
    await client.post("/payments", json={
        "parcel_id": parcel_id, "amount": 500, "transaction_id": "tx1", "created_by": "a@x.com",
    })

    response = await client.get("/payments", params={"email": "a@x.com"}, headers=auth("b@x.com"))
    assert response.status_code == 403
    assert "data" not in response.json()


async def test_payment_history_without_email_lists_all_latest_first(client, auth):
    ids = []
    for creator in ("a@x.com", "b@x.com"):
        created = await client.post("/parcels", json={"created_by": creator})
        ids.append(created.json()["insertedId"])
        await client.post("/payments", json={
            "parcel_id": ids[-1], "amount": 100, "transaction_id": f"tx-{creator}", "created_by": creator,
        })

    response = await client.get("/payments", headers=auth("a@x.com"))
    assert response.status_code == 200
    assert [p["parcel_id"] for p in response.json()["data"]] == list(reversed(ids))


async def test_payment_history_requires_credential(client):
    assert (await client.get("/payments")).status_code == 401


async def test_create_payment_intent(client, payment_gateway):
    response = await client.post("/create-payment-intent", json={"amountInCents": 1500})
    assert response.status_code == 200
    assert response.json() == {"clientSecret": "pi_test_1500_secret"}
    assert payment_gateway.amounts == [1500]


async def test_create_payment_intent_gateway_failure(client, payment_gateway):
    payment_gateway.error = PaymentGatewayError("Your card was declined")

    response = await client.post("/create-payment-intent", json={"amountInCents": 1500})
    assert response.status_code == 500
    assert response.json()["error"] == "Your card was declined"


async def test_create_payment_intent_requires_amount(client, payment_gateway):
    response = await client.post("/create-payment-intent", json={})
    assert response.status_code == 400
    assert payment_gateway.amounts == []
