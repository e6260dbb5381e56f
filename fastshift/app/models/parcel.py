"""
Parcel database model.

A parcel is a shipment tracked through payment and delivery states.
"""

from sqlalchemy import Column, String, DateTime, JSON
from fastshift.app.db.session import Base
from fastshift.app.models.common import DocumentMixin, enum_type, new_id, utcnow
from fastshift.app.models.parcel_enums import PaymentStatus, DeliveryStatus, CashoutStatus


class Parcel(DocumentMixin, Base):
    """
    Parcel document.

    Client-supplied fields that have no column of their own (title, type,
    sender/receiver details, cost, ...) are kept in ``details``.
    """
    __tablename__ = "parcels"

    id = Column(String(32), primary_key=True, default=new_id)
    tracking_id = Column(String(100), nullable=True, index=True)

    # Ownership
    created_by = Column(String(255), nullable=True, index=True)

    # Lifecycle
    payment_status = Column(enum_type(PaymentStatus), default=PaymentStatus.UNPAID, nullable=False, index=True)
    delivery_status = Column(enum_type(DeliveryStatus), default=DeliveryStatus.NOT_COLLECTED, nullable=False, index=True)
    cashout_status = Column(enum_type(CashoutStatus), default=CashoutStatus.NOT_CASHED_OUT, nullable=False)

    # Assignment (written together with the transition to rider_assigned)
    assigned_rider_id = Column(String(32), nullable=True, index=True)
    assigned_rider_email = Column(String(255), nullable=True, index=True)
    assigned_rider_name = Column(String(255), nullable=True)

    # Timestamps
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    assigned_at = Column(DateTime(timezone=True), nullable=True)
    picked_at = Column(DateTime(timezone=True), nullable=True)
    delivered_at = Column(DateTime(timezone=True), nullable=True)
    cashed_out_at = Column(DateTime(timezone=True), nullable=True)

    details = Column(JSON, nullable=True)

    def __repr__(self):
        return f"<Parcel(id={self.id}, created_by='{self.created_by}', delivery_status='{self.delivery_status.value}')>"
