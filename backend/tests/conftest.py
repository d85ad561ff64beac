import os
import time

# Settings are read at import time; point them at test values before any app import
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET"] = "test-secret"
os.environ["JWT_AUDIENCE"] = "authenticated"
os.environ["MAPBOX_TOKEN"] = ""
os.environ["GEMINI_API_KEY"] = ""

import jwt
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.db.base import Base
from app.db.session import get_db
from app.main import app
from app.models.user_profile import UserProfile

TEST_SECRET = "test-secret"


@pytest.fixture
def engine():
    eng = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(eng)
    yield eng
    Base.metadata.drop_all(eng)
    eng.dispose()


@pytest.fixture
def db(engine):
    Session = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = Session()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(engine):
    Session = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    def _get_db():
        session = Session()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def make_token(user_id: str, email: str | None = None, *, secret: str = TEST_SECRET, expires_in: int = 3600) -> str:
    claims = {"sub": user_id, "aud": "authenticated", "exp": int(time.time()) + expires_in}
    if email:
        claims["email"] = email
    return jwt.encode(claims, secret, algorithm="HS256")


def auth_headers(user_id: str, email: str | None = None) -> dict[str, str]:
    return {"Authorization": f"Bearer {make_token(user_id, email)}"}


@pytest.fixture
def make_user(db):
    """Create a profile with the given role; returns auth headers for it."""

    def _make(user_id: str, role: str = "basic", email: str | None = None) -> dict[str, str]:
        db.add(UserProfile(id=user_id, email=email, role=role))
        db.commit()
        return auth_headers(user_id, email)

    return _make


@pytest.fixture
def admin(make_user):
    return make_user("admin-1", "admin", "admin@example.com")


@pytest.fixture
def curator(make_user):
    return make_user("curator-1", "curator", "curator@example.com")


@pytest.fixture
def submitter(make_user):
    return make_user("submitter-1", "submitter", "submitter@example.com")


@pytest.fixture
def basic(make_user):
    return make_user("basic-1", "basic", "basic@example.com")
