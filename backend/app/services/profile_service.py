"""
User profiles and roles. Profiles are created on first authenticated request with role 'basic'.
"""
import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.constants import ADMIN_ROLES, CURATOR_ROLES, ROLE_BASIC, ROLES, SUBMITTER_ROLES
from app.models.user_profile import UserProfile

logger = logging.getLogger(__name__)


def get_or_create_profile(db: Session, user_id: str, email: str | None = None) -> UserProfile:
    row = db.get(UserProfile, user_id)
    if row:
        if email and row.email != email:
            row.email = email
            db.commit()
            db.refresh(row)
        return row
    row = UserProfile(id=user_id, email=email, role=ROLE_BASIC)
    db.add(row)
    try:
        db.commit()
    except IntegrityError:
        # Concurrent first request for the same user already inserted the row
        db.rollback()
        return db.get(UserProfile, user_id)
    db.refresh(row)
    logger.info("Created profile for user %s", user_id)
    return row


def role_flags(role: str) -> dict[str, bool]:
    return {
        "is_submitter": role in SUBMITTER_ROLES,
        "is_curator": role in CURATOR_ROLES,
        "is_admin": role in ADMIN_ROLES,
    }


def profile_to_dict(row: UserProfile) -> dict:
    return {
        "id": row.id,
        "email": row.email,
        "role": row.role,
        "updated_at": row.updated_at.isoformat() if row.updated_at else None,
        **role_flags(row.role),
    }


def list_profiles(db: Session) -> list[dict]:
    rows = db.query(UserProfile).order_by(UserProfile.updated_at.desc()).all()
    return [profile_to_dict(r) for r in rows]


def update_role(db: Session, actor: UserProfile, target_user_id: str, role: str) -> UserProfile | None:
    """
    Set a user's role. Returns the updated profile, or None if the user does not exist.
    Raises ValueError for an unknown role or when an admin tries to change their own role.
    """
    if role not in ROLES:
        raise ValueError(f"Unknown role: {role}. Allowed: {', '.join(ROLES)}")
    if target_user_id == actor.id:
        raise ValueError("Admins cannot change their own role")
    row = db.get(UserProfile, target_user_id)
    if not row:
        return None
    row.role = role
    db.commit()
    db.refresh(row)
    logger.info("User %s set role of %s to %s", actor.id, target_user_id, role)
    return row
