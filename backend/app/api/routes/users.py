"""
Profiles and roles: /me for the caller's role flags, /users for admin role management.
"""
from typing import Any, Literal

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from sqlalchemy.orm import Session

from app.api.deps import get_current_user, require_admin
from app.core.errors import STATUS_BAD_REQUEST, not_found
from app.db.session import get_db
from app.models.user_profile import UserProfile
from app.services import profile_service

router = APIRouter()


class RoleUpdate(BaseModel):
    role: Literal["basic", "submitter", "curator", "admin"]


@router.get("/me")
def me(user: UserProfile = Depends(get_current_user)) -> dict[str, Any]:
    """Caller's profile with is_submitter / is_curator / is_admin."""
    return profile_service.profile_to_dict(user)


@router.get("/users")
def list_users(
    db: Session = Depends(get_db),
    _: UserProfile = Depends(require_admin),
) -> dict[str, Any]:
    return {"users": profile_service.list_profiles(db)}


@router.patch("/users/{user_id}/role")
def update_user_role(
    user_id: str,
    body: RoleUpdate,
    db: Session = Depends(get_db),
    admin: UserProfile = Depends(require_admin),
) -> dict[str, Any]:
    try:
        row = profile_service.update_role(db, admin, user_id, body.role)
    except ValueError as e:
        raise HTTPException(status_code=STATUS_BAD_REQUEST, detail=str(e))
    if not row:
        raise not_found("User")
    return profile_service.profile_to_dict(row)
