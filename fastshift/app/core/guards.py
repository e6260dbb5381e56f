"""
Security guards for role-based and principal-based access control.

Guards are plain async callables ``(principal, store) -> None`` that raise on
failure. ``compose_guards`` turns an ordered list of them into a single
FastAPI dependency which runs only after the principal has been verified and
stops at the first failing guard.
"""

from typing import Awaitable, Callable, Optional
from fastapi import Depends
from fastshift.app.core.dependencies import get_principal, get_store
from fastshift.app.core.exceptions import ForbiddenError
from fastshift.app.core.identity import Principal
from fastshift.app.db.store import DocumentStore
from fastshift.app.models.enums import UserRole
from fastshift.app.models.user import User

Guard = Callable[[Principal, DocumentStore], Awaitable[None]]


def role_guard(role: UserRole) -> Guard:
    """
    Guard factory for role-based access control.

    The User record is looked up by the principal's email; a missing record
    is treated the same as a role mismatch. Guards never create users.
    """
    async def check_role(principal: Principal, store: DocumentStore) -> None:
        user = await store.find_one(User, User.email == principal.email)
        if user is None or user.role != role:
            raise ForbiddenError()

    check_role.__name__ = f"require_{role.value}"
    return check_role


def compose_guards(*guards: Guard):
    """
    Build a dependency running ``guards`` in order.

    Usage:
        @router.get("/riders/pending")
        async def pending(principal: Principal = Depends(require_admin)):
            ...
    """
    async def guarded_principal(
        principal: Principal = Depends(get_principal),
        store: DocumentStore = Depends(get_store)
    ) -> Principal:
        for guard in guards:
            await guard(principal, store)
        return principal

    return guarded_principal


def ensure_same_principal(principal: Principal, email: Optional[str]) -> None:
    """Raise ForbiddenError unless ``email`` belongs to the principal."""
    if principal.email != email:
        raise ForbiddenError()


require_admin = compose_guards(role_guard(UserRole.ADMIN))
require_rider = compose_guards(role_guard(UserRole.RIDER))
