"""
Tracking Pydantic schemas.
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import Optional


class TrackingCreate(BaseModel):
    """
    Schema for a tracking event.

    ``tracking_id`` and ``status`` are checked by the recorder so that a
    missing value is a 400. Extra fields (parcel_id, location, message,
    updated_by) are stored with the event.
    """
    model_config = ConfigDict(extra="allow")

    tracking_id: Optional[str] = Field(None, max_length=100)
    status: Optional[str] = Field(None, max_length=100)
