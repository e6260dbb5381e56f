"""
Rider Pydantic schemas.
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from fastshift.app.models.enums import RiderStatus


class RiderCreate(BaseModel):
    """Rider application; extra fields (phone, age, bike details, ...) are kept."""
    model_config = ConfigDict(extra="allow")

    email: Optional[str] = None
    name: Optional[str] = None
    region: Optional[str] = None
    district: Optional[str] = None


class RiderStatusUpdate(BaseModel):
    status: RiderStatus
    email: Optional[str] = Field(None, description="User to promote when the rider is activated")
