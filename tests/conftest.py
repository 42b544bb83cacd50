from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from trip_planner_api.app.core.config import Settings
from trip_planner_api.app.core.security import Pbkdf2PasswordHasher
from trip_planner_api.app.core.store import EntityStore
from trip_planner_api.app.main import create_app
from trip_planner_api.app.services.auth_service import AuthService
from trip_planner_api.app.services.session_service import SessionManager
from trip_planner_api.app.services.trip_service import TripService


class FakeClock:
    """Manually advanced replacement for ``utcnow``."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **delta) -> None:
        self.now += timedelta(**delta)


@pytest.fixture
def settings():
    return Settings(
        seed_demo_data=False,
        password_hash_iterations=1_000,
        session_sweep_interval_seconds=3600,
    )


@pytest.fixture
def clock():
    return FakeClock(datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc))


@pytest.fixture
def store():
    store = EntityStore().open()
    yield store
    store.close()


@pytest.fixture
def session_manager(store, clock):
    return SessionManager(store, clock=clock)


@pytest.fixture
def auth_service(store, session_manager):
    return AuthService(store, session_manager, Pbkdf2PasswordHasher(iterations=1_000))


@pytest.fixture
def trip_service(store):
    return TripService(store)


@pytest.fixture
def app(settings, clock):
    app = create_app(settings)
    app.state.session_manager.clock = clock
    return app


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


def auth_headers(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def signup(client, name="Ana", email="ana@x.com", password="abcdef"):
    resp = client.post("/api/v1/auth/signup", json={"name": name, "email": email, "password": password})
    assert resp.status_code == 200, resp.text
    body = resp.json()
    return body["user"], body["sessionToken"]
