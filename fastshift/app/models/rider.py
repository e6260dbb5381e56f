"""
Rider database model.

A rider is a delivery agent that goes through an activation workflow.
"""

from sqlalchemy import Column, String, DateTime, JSON
from fastshift.app.db.session import Base
from fastshift.app.models.common import DocumentMixin, enum_type, new_id, utcnow
from fastshift.app.models.enums import RiderStatus, RiderWorkStatus


class Rider(DocumentMixin, Base):
    __tablename__ = "riders"

    id = Column(String(32), primary_key=True, default=new_id)
    email = Column(String(255), nullable=False, index=True)
    name = Column(String(255), nullable=True)

    # Service area
    region = Column(String(100), nullable=True)
    district = Column(String(100), nullable=True, index=True)

    status = Column(enum_type(RiderStatus), default=RiderStatus.PENDING, nullable=False, index=True)
    work_status = Column(enum_type(RiderWorkStatus), default=RiderWorkStatus.AVAILABLE, nullable=False)

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    details = Column(JSON, nullable=True)

    def __repr__(self):
        return f"<Rider(id={self.id}, email='{self.email}', status='{self.status.value}')>"
