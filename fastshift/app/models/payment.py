"""
Payment database model.
"""

from sqlalchemy import Column, String, DateTime, Float
from fastshift.app.db.session import Base
from fastshift.app.models.common import DocumentMixin, new_id, utcnow


class Payment(DocumentMixin, Base):
    """
    A recorded payment for a parcel.

    ``paid_at_string`` keeps the human readable ISO timestamp next to the
    native ``paid_at`` value.
    """
    __tablename__ = "payments"

    id = Column(String(32), primary_key=True, default=new_id)
    parcel_id = Column(String(32), nullable=False, index=True)
    amount = Column(Float, nullable=False)
    transaction_id = Column(String(255), nullable=False, index=True)
    created_by = Column(String(255), nullable=False, index=True)
    payment_method = Column(String(100), nullable=True)
    paid_at_string = Column(String(64), nullable=False)
    paid_at = Column(DateTime(timezone=True), default=utcnow, nullable=False, index=True)

    def __repr__(self):
        return f"<Payment(id={self.id}, parcel_id={self.parcel_id}, transaction_id='{self.transaction_id}')>"
