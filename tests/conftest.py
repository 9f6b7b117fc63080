"""
Test configuration and fixtures for the short link service.
This centralizes all test setup, making individual tests clean.
"""

from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from main import create_app
from shortlink_app.config import Settings
from shortlink_app.database.connection import Database
from shortlink_app.dependencies import get_db, get_geolocator


class FakeGeoLocator:
    """Stands in for the HTTP lookup; remembers which IPs it was asked about"""

    def __init__(self, country: str = "Brazil"):
        self.country = country
        self.calls = []

    def lookup_country(self, ip):
        self.calls.append(ip)
        return self.country

    def close(self):
        pass


class FrozenClock:
    """Callable clock that only moves when told to"""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float):
        self.now += timedelta(seconds=seconds)


@pytest.fixture
def settings():
    """Settings isolated from the environment and .env"""
    return Settings(
        _env_file=None,
        database_url="sqlite://",
        cache_backend="null",
        base_url="http://sho.rt",
        link_ttl_seconds=60,
        qr_code_enabled=False,
    )


@pytest.fixture
def clock():
    return FrozenClock(datetime(2025, 1, 1, 12, 0, 0, tzinfo=timezone.utc))


@pytest.fixture
def database():
    """Fresh in-memory database for service-level tests"""
    db = Database("sqlite://")
    db.create_tables()
    try:
        yield db
    finally:
        db.dispose()


@pytest.fixture
def service_session(database):
    session = database.session()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def geolocator():
    return FakeGeoLocator()


@pytest.fixture
def app(settings, geolocator):
    app = create_app(settings)
    app.dependency_overrides[get_geolocator] = lambda: geolocator
    return app


@pytest.fixture
def client(app):
    """
    Test client running the app's lifespan (database, cache, geolocator).
    """
    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def db_session(app, client):
    """
    Session shared between the test and the app, so tests can inspect
    and tweak rows the API wrote.
    """
    db = app.state.database.session()

    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db

    try:
        yield db
    finally:
        db.close()
