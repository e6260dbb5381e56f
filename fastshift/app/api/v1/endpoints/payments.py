"""
Payment API Endpoints.

Records payments, lists payment history and creates card charge intents.
"""

from typing import Optional
from fastapi import APIRouter, Depends, Query
from fastshift.app.core.dependencies import get_principal, get_store, get_payment_gateway
from fastshift.app.core.identity import Principal
from fastshift.app.db.store import DocumentStore
from fastshift.app.schemas.payment import PaymentCreate, PaymentIntentCreate, PaymentIntentResponse
from fastshift.app.services.payment_gateway import PaymentGatewayClient
from fastshift.app.services.payments import PaymentService

router = APIRouter(tags=["Payments"])


@router.post("/payments")
async def record_payment(
    payment: PaymentCreate,
    store: DocumentStore = Depends(get_store)
):
    """Mark the parcel as paid and save the payment history entry."""
    document = await PaymentService.record_payment(store, payment)
    return {
        "success": True,
        "message": "Payment recorded and parcel marked as paid",
        "payment_id": document.id,
    }


@router.get("/payments")
async def list_payments(
    email: Optional[str] = Query(None, description="Payer email; must match the caller when given"),
    principal: Principal = Depends(get_principal),
    store: DocumentStore = Depends(get_store)
):
    """Payment history, latest first."""
    payments = await PaymentService.list_payments(store, principal, email)
    return {
        "success": True,
        "count": len(payments),
        "data": [payment.to_document() for payment in payments],
    }


@router.post("/create-payment-intent", response_model=PaymentIntentResponse)
async def create_payment_intent(
    body: PaymentIntentCreate,
    gateway: PaymentGatewayClient = Depends(get_payment_gateway)
):
    client_secret = await PaymentService.create_charge_intent(gateway, body.amount_in_cents)
    return PaymentIntentResponse(clientSecret=client_secret)
