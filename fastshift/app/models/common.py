"""
Shared column helpers for document models.
"""

import enum
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, Type
from sqlalchemy import Enum


def new_id() -> str:
    """Opaque document identifier."""
    return uuid.uuid4().hex


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def enum_type(enum_cls: Type[enum.Enum]) -> Enum:
    """Store enum values (not names) so documents read the same as the API."""
    return Enum(
        enum_cls,
        native_enum=False,
        length=32,
        values_callable=lambda members: [m.value for m in members],
    )


class DocumentMixin:
    """
    Renders a row as a flat document.

    Typed columns are merged with the free-form ``details`` bag; typed columns
    win on key collisions. The primary key is exposed as ``_id``.
    """

    def to_document(self) -> Dict[str, Any]:
        doc: Dict[str, Any] = dict(getattr(self, "details", None) or {})
        for column in self.__table__.columns:
            if column.key == "details":
                continue
            value = getattr(self, column.key)
            if isinstance(value, enum.Enum):
                value = value.value
            key = "_id" if column.key == "id" else column.key
            doc[key] = value
        return doc
