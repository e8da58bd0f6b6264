"""Test configuration and fixtures.

Provides an isolated in-memory SQLite database (single shared connection) and
a fresh realtime hub per test, so tests don't depend on a local Postgres or
on sockets left over from other tests.
"""

import os
from typing import Generator

# Set env flags BEFORE importing application modules
os.environ.setdefault("DEBUG", "1")
os.environ.setdefault("TESTING", "1")
os.environ.setdefault("TEST_DATABASE_URL", "sqlite://")
os.environ.setdefault("LOG_FILE", "")

import pytest
from fastapi.testclient import TestClient

from database import Base, SessionLocal, engine, get_db
from main import app  # imports routers & models
from models.user import User
from realtime.connection import Connection
from realtime.hub import RealtimeHub
from security import create_access_token


class FakeConnection(Connection):
    """Records every frame handed to it; optionally fails like a dead socket."""

    def __init__(self, user_id=None, fail=False):
        super().__init__(user_id)
        self.sent = []
        self.fail = fail

    def send(self, message):
        if self.fail:
            raise RuntimeError("socket is closed")
        self.sent.append(message)

    def events(self, name=None):
        return [m for m in self.sent if name is None or m["event"] == name]


@pytest.fixture(autouse=True)
def reset_schema() -> Generator[None, None, None]:
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture()
def db_session() -> Generator:  # type: ignore
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(autouse=True)
def override_db_dependency(db_session):  # type: ignore
    """Override FastAPI dependency to use the SQLite session."""
    def _get_db():
        try:
            yield db_session
        finally:
            pass
    app.dependency_overrides[get_db] = _get_db
    yield
    app.dependency_overrides.pop(get_db, None)


@pytest.fixture(autouse=True)
def hub() -> RealtimeHub:
    fresh = RealtimeHub()
    app.state.hub = fresh
    return fresh


@pytest.fixture()
def client() -> TestClient:  # type: ignore
    return TestClient(app)


@pytest.fixture()
def fake_connection():
    return FakeConnection


@pytest.fixture()
def make_user(db_session):
    counter = {"n": 0}

    def _make(full_name="Test User", email=None):
        counter["n"] += 1
        user = User(
            full_name=full_name,
            email=email or f"user{counter['n']}@example.com",
            username=f"user{counter['n']}",
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _make


def auth_headers(user) -> dict:
    return {"Authorization": f"Bearer {create_access_token({'sub': user.id})}"}


@pytest.fixture()
def headers():
    return auth_headers
