"""
Request dependencies: caller identity and role checks.

Auth failures raise ApiError so the body is {error, details}, matching the extraction endpoint.
"""
import logging
from typing import Callable

from fastapi import Depends, Header
from sqlalchemy.orm import Session

from app.core.constants import ADMIN_ROLES, CURATOR_ROLES, SUBMITTER_ROLES
from app.core.errors import (
    MSG_AUTH_FAILED,
    MSG_INSUFFICIENT_PERMISSIONS,
    MSG_MISSING_AUTH,
    STATUS_FORBIDDEN,
    STATUS_UNAUTHORIZED,
    ApiError,
)
from app.core.security import InvalidTokenError, decode_access_token, parse_bearer
from app.db.session import get_db
from app.models.user_profile import UserProfile
from app.services.profile_service import get_or_create_profile

logger = logging.getLogger(__name__)


def _profile_from_header(authorization: str | None, db: Session) -> UserProfile | None:
    token = parse_bearer(authorization)
    if token is None:
        return None
    try:
        user = decode_access_token(token)
    except InvalidTokenError as e:
        logger.info("Rejected bearer token: %s", e)
        raise ApiError(STATUS_UNAUTHORIZED, MSG_AUTH_FAILED, str(e))
    return get_or_create_profile(db, user.id, email=user.email)


def get_optional_user(
    authorization: str | None = Header(None),
    db: Session = Depends(get_db),
) -> UserProfile | None:
    """Caller's profile, or None for anonymous requests. A present but invalid token is still a 401."""
    return _profile_from_header(authorization, db)


def get_current_user(
    authorization: str | None = Header(None),
    db: Session = Depends(get_db),
) -> UserProfile:
    profile = _profile_from_header(authorization, db)
    if profile is None:
        raise ApiError(STATUS_UNAUTHORIZED, MSG_MISSING_AUTH)
    return profile


def require_roles(roles: frozenset[str], details: str) -> Callable[..., UserProfile]:
    def _dependency(user: UserProfile = Depends(get_current_user)) -> UserProfile:
        if user.role not in roles:
            raise ApiError(STATUS_FORBIDDEN, MSG_INSUFFICIENT_PERMISSIONS, details)
        return user

    return _dependency


require_submitter = require_roles(SUBMITTER_ROLES, "User role does not have permission to submit events or scrape URLs")
require_curator = require_roles(CURATOR_ROLES, "Curator or admin role required")
require_admin = require_roles(ADMIN_ROLES, "Admin role required")
