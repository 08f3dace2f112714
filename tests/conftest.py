"""Pytest fixtures: a fresh SQLite file database per test."""
import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SESSION_SECRET"] = "test-session-secret"
os.environ["APP_BASE_URL"] = "https://rsvp.example.com"

import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from fastapi.testclient import TestClient

from app.database import Base, configure_sqlite, get_db
from app.main import app

# Import all models so they register with Base.metadata
from app.models.user import User      # noqa: F401
from app.models.venue import Venue    # noqa: F401
from app.models.event import Event
from app.models.rsvp import RSVP


@pytest.fixture(scope="function")
def db_engine(tmp_path):
    """Create a fresh SQLite engine for each test."""
    engine = create_engine(
        f"sqlite:///{tmp_path / 'test.db'}",
        connect_args={"check_same_thread": False},
    )
    configure_sqlite(engine)

    # WAL lets the test session read while a request is writing
    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_conn, connection_record):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.close()

    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def db(db_engine):
    """Yield a database session, closed after the test."""
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope="function")
def client(db_engine):
    """FastAPI TestClient with the database dependency overridden to use SQLite."""
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)

    def _override_get_db():
        session = TestingSession()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Helpers: drive the HTML forms the way a browser would
# ---------------------------------------------------------------------------
def login(client: TestClient, email: str = "organizer@example.com", name: str = "Organizer") -> None:
    """POST /login and keep the session cookie on ``client``."""
    resp = client.post("/login", data={"email": email, "name": name}, follow_redirects=False)
    assert resp.status_code == 303, resp.text


def logout(client: TestClient) -> None:
    client.get("/logout", follow_redirects=False)


def fresh(db):
    """End the test session's snapshot so the next query sees committed requests."""
    db.rollback()
    return db


def create_test_event(
    client: TestClient,
    db,
    title: str = "Launch",
    start_time: str = "2030-06-01T18:00",
    duration: str = "2",
    description: str = "",
) -> Event:
    """POST /events/ and return the stored row."""
    resp = client.post("/events/", data={
        "title": title,
        "description": description,
        "start_time": start_time,
        "duration": duration,
    }, follow_redirects=False)
    assert resp.status_code == 303, resp.text
    return fresh(db).query(Event).filter(Event.title == title).one()


def create_test_rsvp(client: TestClient, db, event_id: str, name: str = "Ana") -> RSVP:
    """POST /rsvps/ for ``event_id`` and return the stored row."""
    resp = client.post("/rsvps/", data={"event_id": event_id, "name": name}, follow_redirects=False)
    assert resp.status_code == 303, resp.text
    return fresh(db).query(RSVP).filter(RSVP.event_id == event_id, RSVP.name == name).one()
