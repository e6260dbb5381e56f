"""
Parcel API Endpoints.

Parcel creation, queries and lifecycle transitions. Rider task listings are
guarded by the rider role and limited to the caller's own email.
"""

from typing import List, Optional
from fastapi import APIRouter, Depends, Query, Path, status
from fastshift.app.core.config import settings
from fastshift.app.core.dependencies import get_principal, get_store
from fastshift.app.core.exceptions import BadRequestError
from fastshift.app.core.guards import require_rider, ensure_same_principal
from fastshift.app.core.identity import Principal
from fastshift.app.db.store import DocumentStore
from fastshift.app.schemas.parcel import ParcelCreate, RiderAssignment, DeliveredUpdate, StatusCount
from fastshift.app.services.parcel_lifecycle import ParcelLifecycleService

router = APIRouter(tags=["Parcels"])


def _listing(parcels) -> dict:
    """
    Envelope used by /all-parcels and /my-parcels.

    The assignable and rider task listings return bare arrays (``_documents``).
    Both shapes are what existing web clients read; do not unify them.
    """
    return {
        "success": True,
        "count": len(parcels),
        "data": [parcel.to_document() for parcel in parcels],
    }


@router.post("/parcels", status_code=status.HTTP_201_CREATED)
async def create_parcel(
    parcel_data: ParcelCreate,
    store: DocumentStore = Depends(get_store)
):
    """Create a parcel; it starts unpaid and not collected."""
    parcel = await ParcelLifecycleService.create_parcel(store, parcel_data.model_dump())
    return {
        "success": True,
        "message": "Parcel added successfully",
        "insertedId": parcel.id,
    }


@router.get("/all-parcels")
async def list_all_parcels(store: DocumentStore = Depends(get_store)):
    """All parcels, latest first."""
    return _listing(await ParcelLifecycleService.list_all(store))


@router.get("/all-parcels/{parcel_id}")
async def get_parcel(
    parcel_id: str = Path(..., description="Parcel ID"),
    store: DocumentStore = Depends(get_store)
):
    parcel = await ParcelLifecycleService.get_by_id(store, parcel_id)
    return {"success": True, "data": parcel.to_document()}


@router.get("/my-parcels")
async def list_my_parcels(
    email: Optional[str] = Query(None, description="Creator email; must match the caller"),
    principal: Principal = Depends(get_principal),
    store: DocumentStore = Depends(get_store)
):
    """Parcels created by the authenticated user, latest first."""
    return _listing(await ParcelLifecycleService.list_by_creator(store, principal, email))


@router.get("/parcels/assignable")
async def list_assignable_parcels(store: DocumentStore = Depends(get_store)):
    """Paid parcels that no rider has collected yet."""
    return _documents(await ParcelLifecycleService.list_assignable(store))


@router.patch("/parcels/{parcel_id}/assign")
async def assign_rider(
    assignment: RiderAssignment,
    parcel_id: str = Path(..., description="Parcel ID"),
    store: DocumentStore = Depends(get_store)
):
    """
    Assign an active rider to a parcel.

    The parcel write and the rider work-status write are independent; the
    response reports the modified count of each.
    """
    result = await ParcelLifecycleService.assign_rider(
        store,
        parcel_id,
        assignment.rider_id,
        assignment.rider_name,
        assignment.rider_email,
    )
    return {"success": True, "message": "Rider assigned", **result}


@router.get("/parcels/rider-tasks")
async def list_rider_tasks(
    email: Optional[str] = Query(None, description="Rider email"),
    principal: Principal = Depends(require_rider),
    store: DocumentStore = Depends(get_store)
):
    """Parcels the rider still has to pick up or deliver, latest assignment first."""
    _require_rider_email(principal, email)
    return _documents(await ParcelLifecycleService.list_rider_tasks(store, email))


@router.patch("/parcels/{parcel_id}/picked-up")
async def mark_picked_up(
    parcel_id: str = Path(..., description="Parcel ID"),
    store: DocumentStore = Depends(get_store)
):
    result = await ParcelLifecycleService.mark_picked_up(store, parcel_id)
    return {"success": True, "matched_count": result.matched_count, "modified_count": result.modified_count}


@router.patch("/parcels/{parcel_id}/delivered")
async def mark_delivered(
    parcel_id: str = Path(..., description="Parcel ID"),
    body: Optional[DeliveredUpdate] = None,
    store: DocumentStore = Depends(get_store)
):
    target = (body or DeliveredUpdate()).delivery_status
    result = await ParcelLifecycleService.mark_delivered(store, parcel_id, target)
    return {"success": True, "matched_count": result.matched_count, "modified_count": result.modified_count}


@router.get("/parcels/rider-completed")
async def list_rider_completed(
    email: Optional[str] = Query(None, description="Rider email"),
    principal: Principal = Depends(require_rider),
    store: DocumentStore = Depends(get_store)
):
    """Parcels the rider has delivered, latest assignment first."""
    _require_rider_email(principal, email)
    return _documents(await ParcelLifecycleService.list_rider_completed(store, email))


@router.patch("/parcels/{parcel_id}/cashout")
async def cashout_parcel(
    parcel_id: str = Path(..., description="Parcel ID"),
    store: DocumentStore = Depends(get_store)
):
    result = await ParcelLifecycleService.cashout(
        store, parcel_id, require_delivered=settings.enforce_cashout_after_delivery
    )
    return {"success": True, "matched_count": result.matched_count, "modified_count": result.modified_count}


@router.get("/parcels/delivery/status-count", response_model=List[StatusCount])
async def delivery_status_count(store: DocumentStore = Depends(get_store)):
    return await ParcelLifecycleService.status_counts(store)


@router.delete("/parcels/{parcel_id}")
async def delete_parcel(
    parcel_id: str = Path(..., description="Parcel ID"),
    store: DocumentStore = Depends(get_store)
):
    result = await ParcelLifecycleService.delete_parcel(store, parcel_id)
    return {
        "success": True,
        "message": "Parcel deleted successfully",
        "deletedCount": result.deleted_count,
    }


def _require_rider_email(principal: Principal, email: Optional[str]) -> None:
    if not email:
        raise BadRequestError("Rider email is required")
    ensure_same_principal(principal, email)


def _documents(parcels) -> list:
    """Bare array for the assignable and rider listings; see ``_listing``."""
    return [parcel.to_document() for parcel in parcels]
