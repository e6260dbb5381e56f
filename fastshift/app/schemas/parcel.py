"""
Parcel Pydantic schemas.

Defines request and response models for parcel lifecycle endpoints.
"""

from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from typing import Optional
from fastshift.app.models.parcel_enums import DeliveryStatus


class ParcelCreate(BaseModel):
    """
    Schema for creating a new parcel.

    Any additional client field (title, type, sender/receiver details, cost)
    is kept as-is on the parcel document.
    """
    model_config = ConfigDict(extra="allow")

    created_by: Optional[str] = Field(None, description="Creator email")
    tracking_id: Optional[str] = Field(None, max_length=100, description="Public tracking identifier")


class RiderAssignment(BaseModel):
    """Schema for assigning a rider to a parcel."""
    rider_id: str = Field(..., validation_alias=AliasChoices("rider_id", "riderId"))
    rider_name: Optional[str] = Field(None, validation_alias=AliasChoices("rider_name", "riderName"))
    rider_email: Optional[str] = Field(None, validation_alias=AliasChoices("rider_email", "riderEmail"))


class DeliveredUpdate(BaseModel):
    """Final delivery status; defaults to a doorstep delivery."""
    delivery_status: DeliveryStatus = DeliveryStatus.DELIVERED


class StatusCount(BaseModel):
    status: str
    count: int
