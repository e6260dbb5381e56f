"""
Tracking Recorder Service.

Tracking events are append-only. Unlike every other listing, events are
returned oldest first so the client can render a timeline.
"""

import logging
from typing import Any, Dict, List

from fastshift.app.core.exceptions import BadRequestError
from fastshift.app.db.store import DocumentStore
from fastshift.app.models.common import utcnow
from fastshift.app.models.tracking import TrackingEvent

logger = logging.getLogger("fastshift.tracking")


class TrackingService:

    @staticmethod
    async def append_event(store: DocumentStore, data: Dict[str, Any]) -> TrackingEvent:
        tracking_id = data.get("tracking_id")
        status = data.get("status")
        if not tracking_id or not status:
            raise BadRequestError("tracking_id and status are required")

        extra = {
            key: value for key, value in data.items()
            if key not in ("_id", "id", "tracking_id", "status", "timestamp", "details")
        }
        event = await store.insert_one(TrackingEvent, {
            "tracking_id": tracking_id,
            "status": status,
            "timestamp": utcnow(),
            "details": extra,
        })
        logger.info("Tracking %s: %s", tracking_id, status)
        return event

    @staticmethod
    async def list_events(store: DocumentStore, tracking_id: str) -> List[TrackingEvent]:
        return await store.find(
            TrackingEvent,
            TrackingEvent.tracking_id == tracking_id,
            order_by=[TrackingEvent.timestamp.asc(), TrackingEvent.id.asc()],
        )
