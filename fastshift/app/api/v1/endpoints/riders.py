"""
Rider API Endpoints.

Rider applications are public; reviewing and activating them is admin-only.
"""

from typing import Optional
from fastapi import APIRouter, Depends, Path, Query
from fastshift.app.core.dependencies import get_store
from fastshift.app.core.guards import require_admin
from fastshift.app.core.identity import Principal
from fastshift.app.db.store import DocumentStore
from fastshift.app.schemas.rider import RiderCreate, RiderStatusUpdate
from fastshift.app.services.rider_management import RiderService

router = APIRouter(prefix="/riders", tags=["Riders"])


@router.post("")
async def submit_rider(
    rider_data: RiderCreate,
    store: DocumentStore = Depends(get_store)
):
    rider = await RiderService.submit_rider(store, rider_data.model_dump())
    return {"success": True, "message": "Rider application submitted", "insertedId": rider.id}


@router.get("/pending")
async def list_pending_riders(
    admin: Principal = Depends(require_admin),
    store: DocumentStore = Depends(get_store)
):
    return [rider.to_document() for rider in await RiderService.list_pending(store)]


@router.get("/active")
async def list_active_riders(
    admin: Principal = Depends(require_admin),
    store: DocumentStore = Depends(get_store)
):
    return [rider.to_document() for rider in await RiderService.list_active(store)]


@router.get("/available")
async def list_available_riders(
    district: Optional[str] = Query(None, description="Delivery district"),
    store: DocumentStore = Depends(get_store)
):
    """Active riders serving ``district``."""
    return [rider.to_document() for rider in await RiderService.list_available(store, district)]


@router.patch("/status/{rider_id}")
async def set_rider_status(
    update: RiderStatusUpdate,
    rider_id: str = Path(..., description="Rider ID"),
    admin: Principal = Depends(require_admin),
    store: DocumentStore = Depends(get_store)
):
    """
    Approve, reject or otherwise change a rider's status (admin-only).

    Activation also grants the rider role to the user with the given email.
    """
    result = await RiderService.set_rider_status(store, rider_id, update.status, update.email)
    return {"success": True, **result}
