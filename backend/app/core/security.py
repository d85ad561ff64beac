"""
Bearer token verification. Access tokens come from the hosted auth provider (HS256, aud=authenticated).
"""
from dataclasses import dataclass

import jwt

from app.config import settings

JWT_ALGORITHMS = ["HS256"]


class InvalidTokenError(Exception):
    pass


@dataclass(frozen=True)
class AuthenticatedUser:
    id: str
    email: str | None = None


def parse_bearer(authorization: str | None) -> str | None:
    """Return the token from an Authorization header value, or None if the header is absent/empty."""
    if not authorization or not authorization.strip():
        return None
    value = authorization.strip()
    if value.lower().startswith("bearer "):
        value = value[7:].strip()
    return value or None


def decode_access_token(token: str) -> AuthenticatedUser:
    """Verify signature, expiry and audience; return the user the token identifies."""
    if not settings.jwt_secret:
        raise InvalidTokenError("JWT_SECRET not configured")
    try:
        claims = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=JWT_ALGORITHMS,
            audience=settings.jwt_audience or None,
            options={"verify_aud": bool(settings.jwt_audience)},
        )
    except jwt.PyJWTError as e:
        raise InvalidTokenError(str(e) or type(e).__name__) from e
    sub = claims.get("sub")
    if not sub:
        raise InvalidTokenError("Token has no subject")
    return AuthenticatedUser(id=str(sub), email=claims.get("email"))
