"""
Event flags API: any signed-in user can request a correction; curators review.
"""
from typing import Any, Literal

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from app.api.deps import get_current_user, require_curator
from app.core.errors import STATUS_BAD_REQUEST, not_found
from app.db.session import get_db
from app.models.user_profile import UserProfile
from app.services import flag_service

router = APIRouter()


class FlagCreate(BaseModel):
    happening_id: str
    changes_requested: str = Field(..., max_length=5000)


class FlagResolve(BaseModel):
    status: Literal["resolved", "rejected"]


@router.post("", status_code=201)
def create_flag(
    body: FlagCreate,
    db: Session = Depends(get_db),
    user: UserProfile = Depends(get_current_user),
) -> dict[str, Any]:
    try:
        row = flag_service.create_flag(db, user, body.happening_id, body.changes_requested)
    except ValueError as e:
        raise HTTPException(status_code=STATUS_BAD_REQUEST, detail=str(e))
    if not row:
        raise not_found("Happening")
    return flag_service.flag_to_dict(row)


@router.get("")
def list_flags(
    db: Session = Depends(get_db),
    _: UserProfile = Depends(require_curator),
    status: Literal["pending", "resolved", "rejected"] | None = Query(None),
    limit: int = Query(100, ge=1, le=200),
) -> dict[str, Any]:
    flags = flag_service.list_flags(db, status=status, limit=limit)
    return {"flags": flags, "count": len(flags)}


@router.post("/{flag_id}/resolve")
def resolve_flag(
    flag_id: str,
    body: FlagResolve,
    db: Session = Depends(get_db),
    user: UserProfile = Depends(require_curator),
) -> dict[str, Any]:
    """Mark a flag resolved or rejected; records resolver and time."""
    row = flag_service.resolve_flag(db, user, flag_id, body.status)
    if not row:
        raise not_found("Flag")
    return flag_service.flag_to_dict(row)
