"""
Payment Pydantic schemas.
"""

from pydantic import AliasChoices, BaseModel, Field
from typing import Optional


class PaymentCreate(BaseModel):
    """
    Schema for recording a payment.

    All fields are optional at the schema level so that missing fields are
    reported as 400 by the payment recorder rather than 422.
    """
    parcel_id: Optional[str] = None
    amount: Optional[float] = None
    transaction_id: Optional[str] = None
    created_by: Optional[str] = None
    payment_method: Optional[str] = None


class PaymentIntentCreate(BaseModel):
    amount_in_cents: Optional[int] = Field(
        None, validation_alias=AliasChoices("amountInCents", "amount_in_cents")
    )


class PaymentIntentResponse(BaseModel):
    clientSecret: str
