"""
Tracking API Endpoints.
"""

from fastapi import APIRouter, Depends, Path, status
from fastshift.app.core.dependencies import get_store
from fastshift.app.db.store import DocumentStore
from fastshift.app.schemas.tracking import TrackingCreate
from fastshift.app.services.tracking import TrackingService

router = APIRouter(prefix="/trackings", tags=["Tracking"])


@router.post("", status_code=status.HTTP_201_CREATED)
async def add_tracking_event(
    event: TrackingCreate,
    store: DocumentStore = Depends(get_store)
):
    created = await TrackingService.append_event(store, event.model_dump())
    return {"success": True, "message": "Tracking event recorded", "insertedId": created.id}


@router.get("/{tracking_id}")
async def list_tracking_events(
    tracking_id: str = Path(..., description="Tracking ID"),
    store: DocumentStore = Depends(get_store)
):
    """Timeline for a tracking id, oldest event first."""
    return [event.to_document() for event in await TrackingService.list_events(store, tracking_id)]
