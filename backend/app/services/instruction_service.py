"""
Custom instructions: CRUD, active lookup for the scraper, and pattern testing for admins.
"""
import logging
from typing import Any

from sqlalchemy.orm import Session

from app.models.custom_instruction import CustomInstruction
from app.services.scraping.matching import pattern_matches

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ("url_pattern", "instructions_text", "priority", "is_active", "use_playwright")


def instruction_to_dict(r: CustomInstruction) -> dict[str, Any]:
    return {
        "id": r.id,
        "url_pattern": r.url_pattern,
        "instructions_text": r.instructions_text,
        "priority": r.priority,
        "is_active": r.is_active,
        "use_playwright": r.use_playwright,
        "created_at": r.created_at.isoformat() if r.created_at else None,
        "updated_at": r.updated_at.isoformat() if r.updated_at else None,
    }


def list_instructions(db: Session) -> list[CustomInstruction]:
    return (
        db.query(CustomInstruction)
        .order_by(CustomInstruction.priority.desc(), CustomInstruction.created_at.asc())
        .all()
    )


def get_instruction(db: Session, instruction_id: str) -> CustomInstruction | None:
    return db.get(CustomInstruction, instruction_id)


def get_active_instructions(db: Session) -> list[CustomInstruction]:
    """Active instructions, highest priority first (ties oldest first)."""
    return (
        db.query(CustomInstruction)
        .filter(CustomInstruction.is_active.is_(True))
        .order_by(CustomInstruction.priority.desc(), CustomInstruction.created_at.asc())
        .all()
    )


def _clean_pattern(value: str | None) -> str:
    pattern = (value or "").strip()
    if not pattern:
        raise ValueError("url_pattern is required")
    return pattern


def create_instruction(
    db: Session,
    url_pattern: str,
    instructions_text: str | None = None,
    priority: int = 0,
    is_active: bool = True,
    use_playwright: bool = False,
) -> CustomInstruction:
    row = CustomInstruction(
        url_pattern=_clean_pattern(url_pattern),
        instructions_text=(instructions_text or "").strip() or None,
        priority=priority,
        is_active=is_active,
        use_playwright=use_playwright,
    )
    db.add(row)
    db.commit()
    db.refresh(row)
    logger.info("Created custom instruction %s for pattern %r", row.id, row.url_pattern)
    return row


def update_instruction(db: Session, instruction_id: str, changes: dict[str, Any]) -> CustomInstruction | None:
    """Apply a partial update. Returns None if the instruction does not exist."""
    row = db.get(CustomInstruction, instruction_id)
    if not row:
        return None
    for key, value in changes.items():
        if key not in EDITABLE_FIELDS:
            continue
        if key == "url_pattern":
            value = _clean_pattern(value)
        elif key == "instructions_text":
            value = (value or "").strip() or None
        setattr(row, key, value)
    db.commit()
    db.refresh(row)
    return row


def set_active(db: Session, instruction_id: str, is_active: bool) -> CustomInstruction | None:
    return update_instruction(db, instruction_id, {"is_active": is_active})


def delete_instruction(db: Session, instruction_id: str) -> bool:
    deleted = db.query(CustomInstruction).filter(CustomInstruction.id == instruction_id).delete()
    db.commit()
    if deleted:
        logger.info("Deleted custom instruction %s", instruction_id)
    return bool(deleted)


def check_pattern(url_pattern: str, url: str) -> bool:
    """Same matcher the scraper uses, so admins see exactly what extraction will do."""
    return pattern_matches(url_pattern, url)
