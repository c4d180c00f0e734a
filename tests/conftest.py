"""Root conftest: in-memory database, users and bearer tokens.

Invariants:
    - DATABASE_URL points at in-memory SQLite before any geopost import
    - Every test gets freshly created tables, dropped afterwards
    - Users are created through the identity directory, tokens through core.security
"""

import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("SECRET_KEY", "test-secret-key")

import pytest
from fastapi.testclient import TestClient

from geopost.core.security import create_access_token
from geopost.db.base import Base
from geopost.db.session import SessionLocal, engine
from geopost.main import app
from geopost.modules.user_management.services.user import create_user


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db):
    """FastAPI test client sharing the in-memory database with ``db``."""
    with TestClient(app) as c:
        yield c


@pytest.fixture
def make_user(db):
    """Register a username and return the User row."""
    def _make(username):
        return create_user(db, username)
    return _make


@pytest.fixture
def auth_headers():
    """Bearer headers for a user, as the external auth service would issue."""
    def _headers(user):
        return {"Authorization": f"Bearer {create_access_token(user.id)}"}
    return _headers
