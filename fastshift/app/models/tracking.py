"""
Tracking event database model.

Events are append-only and never updated once written.
"""

from sqlalchemy import Column, Integer, String, DateTime, JSON
from fastshift.app.db.session import Base
from fastshift.app.models.common import DocumentMixin, utcnow


class TrackingEvent(DocumentMixin, Base):
    __tablename__ = "trackings"

    # Autoincrement id doubles as insertion order for events sharing a timestamp
    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    tracking_id = Column(String(100), nullable=False, index=True)
    status = Column(String(100), nullable=False)
    timestamp = Column(DateTime(timezone=True), default=utcnow, nullable=False, index=True)

    details = Column(JSON, nullable=True)

    def __repr__(self):
        return f"<TrackingEvent(id={self.id}, tracking_id='{self.tracking_id}', status='{self.status}')>"
