"""
User database model.

Users are identified by email; the role drives the authorization guards.
"""

from sqlalchemy import Column, String, DateTime, JSON
from fastshift.app.db.session import Base
from fastshift.app.models.common import DocumentMixin, enum_type, new_id, utcnow
from fastshift.app.models.enums import UserRole


class User(DocumentMixin, Base):
    __tablename__ = "users"

    id = Column(String(32), primary_key=True, default=new_id)
    email = Column(String(255), unique=True, index=True, nullable=False)
    name = Column(String(255), nullable=True)
    role = Column(enum_type(UserRole), default=UserRole.USER, nullable=False)

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    last_logged_in = Column(DateTime(timezone=True), default=utcnow, nullable=True)

    details = Column(JSON, nullable=True)

    def __repr__(self):
        return f"<User(id={self.id}, email='{self.email}', role='{self.role.value}')>"
