"""
Payment Recorder Service.

Recording a payment is two independent writes: the parcel is marked paid,
then the payment document is inserted. They are not wrapped in a single
transaction.
"""

import logging
from typing import List, Optional

from fastshift.app.core.exceptions import BadRequestError, ResourceNotFoundError
from fastshift.app.core.guards import ensure_same_principal
from fastshift.app.core.identity import Principal
from fastshift.app.db.store import DocumentStore
from fastshift.app.models.common import utcnow
from fastshift.app.models.parcel import Parcel
from fastshift.app.models.parcel_enums import PaymentStatus
from fastshift.app.models.payment import Payment
from fastshift.app.schemas.payment import PaymentCreate
from fastshift.app.services.payment_gateway import PaymentGatewayClient

logger = logging.getLogger("fastshift.payments")

REQUIRED_PAYMENT_FIELDS = ("parcel_id", "amount", "transaction_id", "created_by")


class PaymentService:

    @staticmethod
    async def record_payment(store: DocumentStore, payment: PaymentCreate) -> Payment:
        """
        Mark a parcel paid and store the payment.

        Raises:
            BadRequestError: a required field is missing, or the parcel is already paid
            ResourceNotFoundError: the parcel does not exist
        """
        missing = [name for name in REQUIRED_PAYMENT_FIELDS if not getattr(payment, name)]
        if missing:
            raise BadRequestError("Missing required fields", details={"missing": missing})

        parcel = await store.get(Parcel, payment.parcel_id)
        if parcel is None:
            raise ResourceNotFoundError("Parcel", payment.parcel_id)
        if parcel.payment_status == PaymentStatus.PAID:
            raise BadRequestError("Parcel is already paid", details={"parcel_id": payment.parcel_id})

        # 1. Update parcel payment_status, only while it is still unpaid
        result = await store.update_one(
            Parcel,
            Parcel.id == payment.parcel_id,
            Parcel.payment_status == PaymentStatus.UNPAID,
            values={"payment_status": PaymentStatus.PAID},
        )
        if result.matched_count == 0:
            raise BadRequestError("Parcel is already paid", details={"parcel_id": payment.parcel_id})

        # 2. Save to payments collection
        paid_at = utcnow()
        document = await store.insert_one(Payment, {
            "parcel_id": payment.parcel_id,
            "amount": payment.amount,
            "transaction_id": payment.transaction_id,
            "created_by": payment.created_by,
            "payment_method": payment.payment_method,
            "paid_at_string": paid_at.isoformat(),
            "paid_at": paid_at,
        })
        logger.info("Payment %s recorded for parcel %s", document.id, payment.parcel_id)
        return document

    @staticmethod
    async def list_payments(store: DocumentStore, principal: Principal, query_email: Optional[str]) -> List[Payment]:
        criteria = []
        if query_email:
            ensure_same_principal(principal, query_email)
            criteria.append(Payment.created_by == query_email)
        return await store.find(Payment, *criteria, order_by=[Payment.paid_at.desc()])

    @staticmethod
    async def create_charge_intent(gateway: PaymentGatewayClient, amount_in_cents: Optional[int]) -> str:
        if not amount_in_cents or amount_in_cents <= 0:
            raise BadRequestError("amountInCents must be a positive integer")
        return await gateway.create_charge_intent(amount_in_cents)
