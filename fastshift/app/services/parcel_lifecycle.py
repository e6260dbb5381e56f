"""
Parcel Lifecycle Service (Domain Logic).

Owns parcel state transitions and rider workload bookkeeping:

    not_collected → rider_assigned → in_transit → delivered
                                                → service_center_delivered

Rider assignment is two independent writes (parcel, then rider). A failure
of the rider write is logged and reported in the result but does not undo
the parcel write.
"""

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError

from fastshift.app.core.exceptions import BadRequestError, ResourceNotFoundError
from fastshift.app.core.guards import ensure_same_principal
from fastshift.app.core.identity import Principal
from fastshift.app.db.store import DocumentStore, UpdateResult, DeleteResult
from fastshift.app.models.common import utcnow
from fastshift.app.models.enums import RiderStatus, RiderWorkStatus
from fastshift.app.models.parcel import Parcel
from fastshift.app.models.parcel_enums import (
    PaymentStatus,
    DeliveryStatus,
    CashoutStatus,
    ACTIVE_TASK_STATUSES,
    COMPLETED_STATUSES,
    can_transition,
)
from fastshift.app.models.rider import Rider

logger = logging.getLogger("fastshift.parcels")

# Fields the client may not set on creation; the lifecycle owns them.
RESERVED_FIELDS = {
    "_id", "id", "details",
    "payment_status", "delivery_status", "cashout_status",
    "assigned_rider_id", "assigned_rider_email", "assigned_rider_name",
    "created_at", "assigned_at", "picked_at", "delivered_at", "cashed_out_at",
}


class ParcelLifecycleService:

    @staticmethod
    async def create_parcel(store: DocumentStore, data: Dict[str, Any]) -> Parcel:
        """
        Insert a parcel as unpaid and not collected.

        Every client field is accepted; lifecycle fields in the body are
        dropped so a parcel cannot be created already paid or delivered.
        """
        details = {
            key: value for key, value in data.items()
            if key not in RESERVED_FIELDS and key not in ("created_by", "tracking_id")
        }
        parcel = await store.insert_one(Parcel, {
            "created_by": data.get("created_by"),
            "tracking_id": data.get("tracking_id"),
            "payment_status": PaymentStatus.UNPAID,
            "delivery_status": DeliveryStatus.NOT_COLLECTED,
            "cashout_status": CashoutStatus.NOT_CASHED_OUT,
            "details": details,
        })
        logger.info("Parcel %s created by %s", parcel.id, parcel.created_by)
        return parcel

    @staticmethod
    async def list_all(store: DocumentStore) -> List[Parcel]:
        return await store.find(Parcel, order_by=[Parcel.created_at.desc()])

    @staticmethod
    async def get_by_id(store: DocumentStore, parcel_id: str) -> Parcel:
        parcel = await store.get(Parcel, parcel_id)
        if parcel is None:
            raise ResourceNotFoundError("Parcel", parcel_id)
        return parcel

    @staticmethod
    async def list_by_creator(store: DocumentStore, principal: Principal, query_email: Optional[str]) -> List[Parcel]:
        if not query_email:
            raise BadRequestError("Please provide an email query parameter")
        ensure_same_principal(principal, query_email)
        return await store.find(
            Parcel,
            Parcel.created_by == query_email,
            order_by=[Parcel.created_at.desc()],
        )

    @staticmethod
    async def list_assignable(store: DocumentStore) -> List[Parcel]:
        return await store.find(
            Parcel,
            Parcel.payment_status == PaymentStatus.PAID,
            Parcel.delivery_status == DeliveryStatus.NOT_COLLECTED,
            order_by=[Parcel.created_at.desc()],
        )

    @staticmethod
    async def assign_rider(
        store: DocumentStore,
        parcel_id: str,
        rider_id: str,
        rider_name: Optional[str],
        rider_email: Optional[str]
    ) -> Dict[str, Any]:
        """
        Assign an active rider to a parcel.

        Flow:
        1. Validate parcel state (not_collected) and rider (exists, active)
        2. Write parcel assignment fields + rider_assigned + assigned_at
        3. Write rider work_status = in_delivery (independent of step 2)

        Returns:
            Modified counts of both writes and whether the rider write failed
        """
        parcel = await ParcelLifecycleService.get_by_id(store, parcel_id)
        ParcelLifecycleService._check_transition(parcel, DeliveryStatus.RIDER_ASSIGNED)

        rider = await store.get(Rider, rider_id)
        if rider is None:
            raise ResourceNotFoundError("Rider", rider_id)
        if rider.status != RiderStatus.ACTIVE:
            raise BadRequestError("Rider is not active", details={"rider_status": rider.status.value})

        parcel_result = await store.update_one(
            Parcel,
            Parcel.id == parcel_id,
            Parcel.delivery_status == DeliveryStatus.NOT_COLLECTED,
            values={
                "delivery_status": DeliveryStatus.RIDER_ASSIGNED,
                "assigned_rider_id": rider_id,
                "assigned_rider_name": rider_name or rider.name,
                "assigned_rider_email": rider_email or rider.email,
                "assigned_at": utcnow(),
            },
        )
        ParcelLifecycleService._require_matched(parcel_result, parcel_id, DeliveryStatus.RIDER_ASSIGNED)

        rider_update_failed = False
        try:
            rider_result = await store.update_one(
                Rider,
                Rider.id == rider_id,
                values={"work_status": RiderWorkStatus.IN_DELIVERY},
            )
        except SQLAlchemyError:
            await store.session.rollback()
            logger.exception("Parcel %s assigned but rider %s work status was not updated", parcel_id, rider_id)
            rider_result = UpdateResult(matched_count=0, modified_count=0)
            rider_update_failed = True

        logger.info("Parcel %s assigned to rider %s", parcel_id, rider_id)
        return {
            "parcel_modified_count": parcel_result.modified_count,
            "rider_modified_count": rider_result.modified_count,
            "rider_update_failed": rider_update_failed,
        }

    @staticmethod
    async def list_rider_tasks(store: DocumentStore, rider_email: str) -> List[Parcel]:
        return await store.find(
            Parcel,
            Parcel.assigned_rider_email == rider_email,
            Parcel.delivery_status.in_(ACTIVE_TASK_STATUSES),
            order_by=[Parcel.assigned_at.desc()],
        )

    @staticmethod
    async def list_rider_completed(store: DocumentStore, rider_email: str) -> List[Parcel]:
        return await store.find(
            Parcel,
            Parcel.assigned_rider_email == rider_email,
            Parcel.delivery_status.in_(COMPLETED_STATUSES),
            order_by=[Parcel.assigned_at.desc()],
        )

    @staticmethod
    async def mark_picked_up(store: DocumentStore, parcel_id: str) -> UpdateResult:
        return await ParcelLifecycleService._advance(
            store, parcel_id, DeliveryStatus.IN_TRANSIT, "picked_at"
        )

    @staticmethod
    async def mark_delivered(
        store: DocumentStore,
        parcel_id: str,
        status: DeliveryStatus = DeliveryStatus.DELIVERED
    ) -> UpdateResult:
        if status not in COMPLETED_STATUSES:
            raise BadRequestError("Invalid delivery status", details={"status": status.value})
        return await ParcelLifecycleService._advance(store, parcel_id, status, "delivered_at")

    @staticmethod
    async def cashout(store: DocumentStore, parcel_id: str, require_delivered: bool = False) -> UpdateResult:
        """
        Mark the rider earning for a parcel as cashed out.

        A parcel is cashed out at most once; repeating the call is a no-op.
        The delivered-first check is opt-in (``require_delivered``).
        """
        parcel = await ParcelLifecycleService.get_by_id(store, parcel_id)
        if require_delivered and parcel.delivery_status not in COMPLETED_STATUSES:
            raise BadRequestError(
                "Parcel must be delivered before cashout",
                details={"delivery_status": parcel.delivery_status.value},
            )
        if parcel.cashout_status == CashoutStatus.CASHED_OUT:
            return UpdateResult(matched_count=1, modified_count=0)

        result = await store.update_one(
            Parcel,
            Parcel.id == parcel_id,
            Parcel.cashout_status == CashoutStatus.NOT_CASHED_OUT,
            values={"cashout_status": CashoutStatus.CASHED_OUT, "cashed_out_at": utcnow()},
        )
        logger.info("Parcel %s cashed out", parcel_id)
        return result

    @staticmethod
    async def status_counts(store: DocumentStore) -> List[Dict[str, Any]]:
        rows = await store.count_by(Parcel, Parcel.delivery_status)
        return [
            {"status": getattr(status, "value", status), "count": count}
            for status, count in rows
        ]

    @staticmethod
    async def delete_parcel(store: DocumentStore, parcel_id: str) -> DeleteResult:
        result = await store.delete_one(Parcel, Parcel.id == parcel_id)
        if result.deleted_count == 0:
            raise ResourceNotFoundError("Parcel", parcel_id)
        logger.info("Parcel %s deleted", parcel_id)
        return result

    @staticmethod
    def _check_transition(parcel: Parcel, target: DeliveryStatus) -> None:
        if not can_transition(parcel.delivery_status, target):
            raise BadRequestError(
                "Invalid delivery status transition",
                details={"from": parcel.delivery_status.value, "to": target.value},
            )

    @staticmethod
    def _require_matched(result: UpdateResult, parcel_id: str, target: DeliveryStatus) -> None:
        # The status moved between the transition check and the write.
        if result.matched_count == 0:
            logger.warning("Parcel %s changed status before it could move to %s", parcel_id, target.value)
            raise BadRequestError(
                "Invalid delivery status transition",
                details={"to": target.value},
            )

    @staticmethod
    async def _advance(store: DocumentStore, parcel_id: str, target: DeliveryStatus, stamp_field: str) -> UpdateResult:
        parcel = await ParcelLifecycleService.get_by_id(store, parcel_id)
        current = parcel.delivery_status
        ParcelLifecycleService._check_transition(parcel, target)

        result = await store.update_one(
            Parcel,
            Parcel.id == parcel_id,
            Parcel.delivery_status == current,
            values={"delivery_status": target, stamp_field: utcnow()},
        )
        ParcelLifecycleService._require_matched(result, parcel_id, target)
        logger.info("Parcel %s moved %s -> %s", parcel_id, current.value, target.value)
        return result
