"""
Rider & Role Management Service.

Handles rider applications, rider activation (which promotes the matching
user to the rider role) and admin-side user role management.
"""

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import func, or_
from sqlalchemy.exc import SQLAlchemyError

from fastshift.app.core.exceptions import BadRequestError, InternalError, ResourceNotFoundError
from fastshift.app.db.store import DocumentStore
from fastshift.app.models.common import utcnow
from fastshift.app.models.enums import RiderStatus, RiderWorkStatus, UserRole
from fastshift.app.models.rider import Rider
from fastshift.app.models.user import User

logger = logging.getLogger("fastshift.riders")

USER_SEARCH_LIMIT = 10
ASSIGNABLE_ROLES = (UserRole.ADMIN, UserRole.USER)


class RiderService:

    @staticmethod
    async def submit_rider(store: DocumentStore, data: Dict[str, Any]) -> Rider:
        """Store a rider application as pending; status fields in the body are ignored."""
        if not data.get("email"):
            raise BadRequestError("Missing required fields", details={"missing": ["email"]})

        details = {
            key: value for key, value in data.items()
            if key not in ("_id", "id", "email", "name", "region", "district",
                           "status", "work_status", "created_at", "details")
        }
        rider = await store.insert_one(Rider, {
            "email": data["email"],
            "name": data.get("name"),
            "region": data.get("region"),
            "district": data.get("district"),
            "status": RiderStatus.PENDING,
            "work_status": RiderWorkStatus.AVAILABLE,
            "details": details,
        })
        logger.info("Rider application %s submitted by %s", rider.id, rider.email)
        return rider

    @staticmethod
    async def list_pending(store: DocumentStore) -> List[Rider]:
        return await store.find(Rider, Rider.status == RiderStatus.PENDING, order_by=[Rider.created_at.desc()])

    @staticmethod
    async def list_active(store: DocumentStore) -> List[Rider]:
        return await store.find(Rider, Rider.status == RiderStatus.ACTIVE, order_by=[Rider.created_at.desc()])

    @staticmethod
    async def list_available(store: DocumentStore, district: Optional[str]) -> List[Rider]:
        criteria = [Rider.status == RiderStatus.ACTIVE]
        if district:
            criteria.append(Rider.district == district)
        return await store.find(Rider, *criteria, order_by=[Rider.created_at.desc()])

    @staticmethod
    async def set_rider_status(
        store: DocumentStore,
        rider_id: str,
        status: RiderStatus,
        email: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Update a rider's status.

        Activation also sets the role of the user with ``email`` (defaulting to
        the rider's own email) to ``rider``. That is a second write: if it
        fails the status change stays and the failure is reported as 500.
        """
        rider = await store.get(Rider, rider_id)
        if rider is None:
            raise ResourceNotFoundError("Rider", rider_id)

        result = await store.update_one(Rider, Rider.id == rider_id, values={"status": status})
        response = {
            "matched_count": result.matched_count,
            "modified_count": result.modified_count,
        }
        logger.info("Rider %s status set to %s", rider_id, status.value)

        if status == RiderStatus.ACTIVE:
            user_email = email or rider.email
            try:
                user_result = await store.update_one(
                    User, User.email == user_email, values={"role": UserRole.RIDER}
                )
            except SQLAlchemyError as exc:
                await store.session.rollback()
                logger.exception("Rider %s activated but user %s was not promoted", rider_id, user_email)
                raise InternalError("Rider activated but user role update failed", error=str(exc))
            response["user_modified_count"] = user_result.modified_count
            if user_result.matched_count == 0:
                logger.warning("Rider %s activated but no user exists for %s", rider_id, user_email)

        return response


class UserService:

    @staticmethod
    async def upsert_user(store: DocumentStore, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Get-or-create a user by email.

        An existing user only gets ``last_logged_in`` touched. New users always
        start with the ``user`` role.
        """
        email = data.get("email")
        if not email:
            raise BadRequestError("Missing required fields", details={"missing": ["email"]})

        existing = await store.find_one(User, User.email == email)
        if existing is not None:
            await store.update_one(User, User.email == email, values={"last_logged_in": utcnow()})
            return {"message": "User already exist", "inserted": False}

        now = utcnow()
        details = {
            key: value for key, value in data.items()
            if key not in ("_id", "id", "email", "name", "role",
                           "created_at", "last_logged_in", "details")
        }
        user = await store.insert_one(User, {
            "email": email,
            "name": data.get("name"),
            "role": UserRole.USER,
            "created_at": now,
            "last_logged_in": now,
            "details": details,
        })
        logger.info("User %s created", email)
        return {"message": "User created", "inserted": True, "insertedId": user.id}

    @staticmethod
    async def search_users(store: DocumentStore, query: Optional[str]) -> List[User]:
        query = (query or "").strip()
        if not query:
            raise BadRequestError("Missing search query")

        needle = query.lower()
        return await store.find(
            User,
            or_(
                func.lower(User.email).contains(needle, autoescape=True),
                func.lower(User.name).contains(needle, autoescape=True),
            ),
            order_by=[User.created_at.desc()],
            limit=USER_SEARCH_LIMIT,
        )

    @staticmethod
    async def set_user_role(store: DocumentStore, user_id: str, role: UserRole) -> Dict[str, Any]:
        if role not in ASSIGNABLE_ROLES:
            raise BadRequestError("Role must be admin or user", details={"role": role.value})

        user = await store.get(User, user_id)
        if user is None:
            raise ResourceNotFoundError("User", user_id)

        previous = user.role
        result = await store.update_one(User, User.id == user_id, values={"role": role})
        logger.info("User %s role changed %s -> %s", user.email, previous.value, role.value)
        return {"matched_count": result.matched_count, "modified_count": result.modified_count}

    @staticmethod
    async def get_user_role(store: DocumentStore, email: str) -> Dict[str, Any]:
        user = await store.find_one(User, User.email == email)
        if user is None:
            raise ResourceNotFoundError("User", email)
        return {"role": user.role.value, "email": user.email, "created_at": user.created_at}
