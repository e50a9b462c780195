"""Pytest fixtures — SQLite database per test, clients signed in through the API."""
import os

# Settings are read once at import time, so configure them before importing the app
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("JWT_SECRET", "test-secret-key-for-testing-only-0123456789")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("ADMIN_INVITE_CODE", "admin-invite")
os.environ.setdefault("FRONTDESK_INVITE_CODE", "frontdesk-invite")

import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from fastapi.testclient import TestClient

from wlp.database import Base, get_db
from wlp.main import app

# Import all models so they register with Base.metadata
from wlp.models.user import User                           # noqa: F401
from wlp.models.employer import Employer                   # noqa: F401
from wlp.models.hotel import Hotel
from wlp.models.room_request import RoomRequest            # noqa: F401
from wlp.models.extension_request import ExtensionRequest  # noqa: F401
from wlp.models.event_log import EventLogEntry             # noqa: F401
from wlp.models.worker import Worker                       # noqa: F401
from wlp.models.reservation import Reservation             # noqa: F401

SQLITE_URL = "sqlite:///./test.db"
PASSWORD = "correct-horse"


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

    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def session_factory(db_engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=db_engine)


@pytest.fixture(scope="function")
def db(session_factory):
    """Yield a database session for direct assertions and service-level tests."""
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope="function")
def client(session_factory):
    """FastAPI TestClient with the database dependency overridden to use SQLite."""

    def _override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture(scope="function")
def make_client(client):
    """Factory for extra clients, each with its own cookie jar (one per signed-in user)."""

    def _make() -> TestClient:
        return TestClient(app)

    return _make


@pytest.fixture(scope="function")
def hotel(db) -> dict:
    return create_test_hotel(db)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------
def signup(client: TestClient, email: str, name: str = "Test User", role: str | None = None,
           code: str | None = None, password: str = PASSWORD):
    """POST /api/signup and return the raw response."""
    body = {"name": name, "email": email, "password": password}
    if role:
        body["role"] = role
    if code:
        body["adminCode"] = code
    return client.post("/api/signup", json=body)


def signup_employer(client: TestClient, email: str = "boss@acme.example.com", company: str | None = "Acme Staffing") -> dict:
    """Sign up an EMPLOYER on ``client`` and, unless ``company`` is None, link an employer."""
    resp = signup(client, email, name="Employer User")
    assert resp.status_code == 201, resp.text
    if company:
        resp = client.post("/api/employer/account", json={"name": company})
        assert resp.status_code == 201, resp.text
    return client.get("/api/me").json()["user"]


def signup_frontdesk(client: TestClient, email: str = "desk@hotel.example.com") -> dict:
    resp = signup(client, email, name="Front Desk", role="FRONTDESK", code="frontdesk-invite")
    assert resp.status_code == 201, resp.text
    return client.get("/api/me").json()["user"]


def signup_admin(client: TestClient, email: str = "admin@hotel.example.com") -> dict:
    resp = signup(client, email, name="Admin", role="ADMIN", code="admin-invite")
    assert resp.status_code == 201, resp.text
    return client.get("/api/me").json()["user"]


def create_test_hotel(db, name: str = "Harbor Inn") -> dict:
    h = Hotel(name=name)
    db.add(h)
    db.commit()
    db.refresh(h)
    return {"hotel_id": h.hotel_id, "name": h.name}


def room_request_body(hotel_id: str, **overrides) -> dict:
    body = {
        "hotel_id": hotel_id,
        "stay_start": "2024-01-01",
        "stay_end": "2024-01-05",
        "headcount": 5,
        "room_type_mix": {"SINGLE": 2, "DOUBLE": 3},
    }
    body.update(overrides)
    return body


def create_room_request(client: TestClient, hotel_id: str, **overrides) -> str:
    """POST a room request and return its id."""
    resp = client.post("/api/employer/requests", json=room_request_body(hotel_id, **overrides))
    assert resp.status_code == 201, resp.text
    return resp.json()["id"]
