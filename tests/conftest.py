"""
Pytest configuration and fixtures for assetshare tests.

Everything runs against an in-memory SQLite database; the environment is set
before the package is imported so the module-level engine points at it.
"""
import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SESSION_SECRET"] = "test-session-secret-with-at-least-32-characters"
os.environ["SESSION_COOKIE_SECURE"] = "false"
os.environ["RUN_MIGRATIONS"] = "false"

import uuid

import pytest
from sqlalchemy import event

from assetshare import models  # noqa: F401
from assetshare.core.storage import LocalObjectStore
from assetshare.db.base import Base
from assetshare.db.seed import seed_statuses
from assetshare.db.session import SessionLocal, engine
from assetshare.models.profile import Profile


@event.listens_for(engine, "connect")
def _enable_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


@pytest.fixture
def db():
    """A session on a freshly created schema with the default statuses."""
    Base.metadata.create_all(engine)
    session = SessionLocal()
    seed_statuses(session)
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(engine)


@pytest.fixture
def owner(db):
    """Principal U."""
    profile = Profile(id=uuid.uuid4(), username="umaster", full_name="Uma Master", email_address="u@example.com")
    db.add(profile)
    db.commit()
    return profile.id


@pytest.fixture
def outsider(db):
    """Principal V, never part of U's groups unless a test adds it."""
    profile = Profile(id=uuid.uuid4(), full_name="Vic Outsider", email_address="v@example.com")
    db.add(profile)
    db.commit()
    return profile.id


@pytest.fixture
def store(tmp_path):
    return LocalObjectStore(tmp_path / "objects")
