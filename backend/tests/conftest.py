"""Pytest fixtures — SQLite database per test for fast, isolated tests."""
import itertools
import os
from datetime import datetime, timedelta, timezone

os.environ.setdefault("DATABASE_URL", "sqlite:///./test.db")

import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from fastapi.testclient import TestClient

from app.database import Base, get_db
from app.main import app
from app.services import attendance_service

# Import all models so they register with Base.metadata
from app.models.user import User                     # noqa: F401
from app.models.category import Category             # noqa: F401
from app.models.event import Event, EventStatus      # noqa: F401
from app.models.attendee import EventAttendee        # noqa: F401
from app.models.report import Report                 # noqa: F401
from app.models.event_mutation import EventMutation  # noqa: F401

SQLITE_URL = "sqlite:///./test.db"


@pytest.fixture(scope="function")
def db_engine():
    """Create a fresh SQLite engine for each test."""
    engine = create_engine(SQLITE_URL, connect_args={"check_same_thread": False})

    # Enable WAL mode for better concurrency
    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_conn, connection_record):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.close()

    Base.metadata.drop_all(bind=engine)
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


@pytest.fixture
def fake_clock(monkeypatch):
    """Make attendance timestamps tick one second per call."""
    start = datetime(2026, 6, 1, 12, 0, tzinfo=timezone.utc)
    ticks = itertools.count()

    def _now():
        return start + timedelta(seconds=next(ticks))

    monkeypatch.setattr(attendance_service, "utcnow", _now)
    return _now


# ---------------------------------------------------------------------------
# Helpers: API
# ---------------------------------------------------------------------------
def create_test_user(client: TestClient, name: str = "Test User", email: str = None,
                     password: str = "secret123") -> dict:
    """Helper — POST /api/auth/signup; returns the user dict plus token and auth headers."""
    email = email or f"{name.lower().replace(' ', '.')}@happytolosa.fr"
    resp = client.post("/api/auth/signup", json={
        "email": email,
        "password": password,
        "display_name": name,
    })
    assert resp.status_code == 201, resp.text
    data = resp.json()
    return {
        **data["user"],
        "token": data["token"],
        "headers": {"Authorization": f"Bearer {data['token']}"},
    }


def make_admin(db, user_id: str) -> None:
    """Helper — flip the admin flag directly in the database."""
    user = db.query(User).filter(User.user_id == user_id).first()
    user.is_admin = True
    db.commit()


def event_payload(title: str = "Concert au Capitole", category: str = "musique",
                  capacity: int = 0, start_in: timedelta = timedelta(days=2),
                  duration: timedelta = timedelta(hours=2), description: str = "Une soirée en plein air") -> dict:
    start = datetime.now(timezone.utc) + start_in
    end = start + duration
    return {
        "title": title,
        "description": description,
        "category": category,
        "location": {
            "geo_point": {"latitude": 43.6045, "longitude": 1.4440},
            "address": "Place du Capitole, 31000 Toulouse",
        },
        "capacity": capacity,
        "start_time_utc": start.isoformat(),
        "end_time_utc": end.isoformat(),
    }


def create_test_event(client: TestClient, headers: dict, **kwargs) -> dict:
    """Helper — POST /api/events and return response JSON."""
    resp = client.post("/api/events/", json=event_payload(**kwargs), headers=headers)
    assert resp.status_code == 201, resp.text
    return resp.json()


# ---------------------------------------------------------------------------
# Helpers: direct database
# ---------------------------------------------------------------------------
def add_user(db, name: str) -> User:
    user = User(email=f"{name.lower()}@happytolosa.fr", display_name=name, password_hash="")
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def add_event(db, organizer: User, capacity: int = 0, title: str = "Marché Victor Hugo",
              start_in: timedelta = timedelta(days=3), status: EventStatus = EventStatus.active) -> Event:
    start = datetime.now(timezone.utc) + start_in
    event = Event(
        title=title,
        description="Dégustation de produits locaux",
        category="gastronomie",
        latitude=43.6060,
        longitude=1.4480,
        address="Place Victor Hugo, 31000 Toulouse",
        capacity=capacity,
        start_time_utc=start,
        end_time_utc=start + timedelta(hours=3),
        organizer_id=organizer.user_id,
        status=status,
    )
    db.add(event)
    db.commit()
    db.refresh(event)
    return event
