"""
User Pydantic schemas.
"""

from pydantic import BaseModel, ConfigDict
from datetime import datetime
from typing import Optional
from fastshift.app.models.enums import UserRole


class UserUpsert(BaseModel):
    """
    Schema for the sign-in upsert.

    Used by POST /users after every client sign-in; profile fields such as
    the photo URL are kept on the user document.
    """
    model_config = ConfigDict(extra="allow")

    email: Optional[str] = None
    name: Optional[str] = None


class UserRoleResponse(BaseModel):
    role: UserRole
    email: str
    created_at: Optional[datetime] = None
