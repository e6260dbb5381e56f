"""
User API Endpoints.

Sign-in upsert, public role lookup and admin-only role management.
"""

from typing import Optional
from fastapi import APIRouter, Depends, Path, Query
from fastshift.app.core.dependencies import get_store
from fastshift.app.core.guards import require_admin
from fastshift.app.core.identity import Principal
from fastshift.app.db.store import DocumentStore
from fastshift.app.models.enums import UserRole
from fastshift.app.schemas.user import UserUpsert, UserRoleResponse
from fastshift.app.services.rider_management import UserService

router = APIRouter(prefix="/users", tags=["Users"])


@router.post("")
async def upsert_user(
    user_data: UserUpsert,
    store: DocumentStore = Depends(get_store)
):
    """Create the user on first sign-in; afterwards only refresh last_logged_in."""
    return await UserService.upsert_user(store, user_data.model_dump())


@router.get("/search")
async def search_users(
    q: Optional[str] = Query(None, description="Part of an email or name"),
    admin: Principal = Depends(require_admin),
    store: DocumentStore = Depends(get_store)
):
    return [user.to_document() for user in await UserService.search_users(store, q)]


@router.patch("/make-admin/{user_id}")
async def make_admin(
    user_id: str = Path(..., description="User ID"),
    admin: Principal = Depends(require_admin),
    store: DocumentStore = Depends(get_store)
):
    result = await UserService.set_user_role(store, user_id, UserRole.ADMIN)
    return {"success": True, **result}


@router.patch("/remove-admin/{user_id}")
async def remove_admin(
    user_id: str = Path(..., description="User ID"),
    admin: Principal = Depends(require_admin),
    store: DocumentStore = Depends(get_store)
):
    result = await UserService.set_user_role(store, user_id, UserRole.USER)
    return {"success": True, **result}


@router.get("/{email}/role", response_model=UserRoleResponse)
async def get_user_role(
    email: str = Path(..., description="User email"),
    store: DocumentStore = Depends(get_store)
):
    return await UserService.get_user_role(store, email)
