"""
Custom instructions API (admin): URL pattern -> scraping configuration, plus pattern testing.
"""
from typing import Any

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field, model_validator
from sqlalchemy.orm import Session

from app.api.deps import require_admin
from app.core.errors import STATUS_BAD_REQUEST, not_found
from app.db.session import get_db
from app.models.user_profile import UserProfile
from app.services import instruction_service
from app.services.scraping.matching import pattern_kind

router = APIRouter()


class InstructionCreate(BaseModel):
    url_pattern: str = Field(..., max_length=1024)
    instructions_text: str | None = None
    priority: int = 0
    is_active: bool = True
    use_playwright: bool = False


class InstructionUpdate(BaseModel):
    url_pattern: str | None = Field(None, max_length=1024)
    instructions_text: str | None = None
    priority: int | None = None
    is_active: bool | None = None
    use_playwright: bool | None = None


class ActiveToggle(BaseModel):
    is_active: bool


class PatternTest(BaseModel):
    url: str
    url_pattern: str | None = None
    instruction_id: str | None = None

    @model_validator(mode="after")
    def pattern_source(self):
        if not (self.url_pattern or self.instruction_id):
            raise ValueError("Provide url_pattern or instruction_id")
        return self


@router.get("")
def list_instructions(
    db: Session = Depends(get_db),
    _: UserProfile = Depends(require_admin),
) -> dict[str, Any]:
    rows = instruction_service.list_instructions(db)
    return {"instructions": [instruction_service.instruction_to_dict(r) for r in rows]}


@router.post("", status_code=201)
def create_instruction(
    body: InstructionCreate,
    db: Session = Depends(get_db),
    _: UserProfile = Depends(require_admin),
) -> dict[str, Any]:
    try:
        row = instruction_service.create_instruction(db, **body.model_dump())
    except ValueError as e:
        raise HTTPException(status_code=STATUS_BAD_REQUEST, detail=str(e))
    return instruction_service.instruction_to_dict(row)


@router.post("/test")
def test_url_pattern(
    body: PatternTest,
    db: Session = Depends(get_db),
    _: UserProfile = Depends(require_admin),
) -> dict[str, Any]:
    """
    Would this URL use this instruction? Uses the scraper's own matcher.
    pattern_type "wildcard" means the pattern is not a valid regex and was matched as a wildcard.
    """
    pattern = body.url_pattern
    if body.instruction_id:
        row = instruction_service.get_instruction(db, body.instruction_id)
        if not row:
            raise not_found("Instruction")
        pattern = row.url_pattern
    return {
        "url": body.url,
        "url_pattern": pattern,
        "pattern_type": pattern_kind(pattern),
        "matches": instruction_service.check_pattern(pattern, body.url),
    }


@router.patch("/{instruction_id}")
def update_instruction(
    instruction_id: str,
    body: InstructionUpdate,
    db: Session = Depends(get_db),
    _: UserProfile = Depends(require_admin),
) -> dict[str, Any]:
    changes = body.model_dump(exclude_unset=True)
    for key in ("priority", "is_active", "use_playwright"):
        if key in changes and changes[key] is None:
            raise HTTPException(status_code=STATUS_BAD_REQUEST, detail=f"{key} cannot be null")
    try:
        row = instruction_service.update_instruction(db, instruction_id, changes)
    except ValueError as e:
        raise HTTPException(status_code=STATUS_BAD_REQUEST, detail=str(e))
    if not row:
        raise not_found("Instruction")
    return instruction_service.instruction_to_dict(row)


@router.post("/{instruction_id}/active")
def toggle_active(
    instruction_id: str,
    body: ActiveToggle,
    db: Session = Depends(get_db),
    _: UserProfile = Depends(require_admin),
) -> dict[str, Any]:
    row = instruction_service.set_active(db, instruction_id, body.is_active)
    if not row:
        raise not_found("Instruction")
    return instruction_service.instruction_to_dict(row)


@router.delete("/{instruction_id}")
def delete_instruction(
    instruction_id: str,
    db: Session = Depends(get_db),
    _: UserProfile = Depends(require_admin),
) -> dict[str, Any]:
    if not instruction_service.delete_instruction(db, instruction_id):
        raise not_found("Instruction")
    return {"ok": True, "id": instruction_id}
