# tests/conftest.py
import os
import tempfile

# Keep the app's own engine off the project's sqlite file; tests use their own DB below.
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, text
from sqlalchemy.orm import sessionmaker

from cityscope.aggregator import Aggregator
from cityscope.db import Base, get_db
from cityscope.deps import get_aggregator
from cityscope.main import app
from cityscope.settings import Settings, get_settings
from cityscope.upstream import (
    AirQualityReading,
    DemographicsReading,
    Failure,
    Success,
    WeatherReading,
)
from cityscope.errors import TransportError, UpstreamRejected

API_KEY = "test-secret"
IDENTITY_HEADER = "X-Authenticated-User"


# --- Temporary SQLite DB file for the whole test session ---
@pytest.fixture(scope="session")
def tmp_db_url():
    fd, path = tempfile.mkstemp(suffix=".db")
    os.close(fd)
    url = f"sqlite:///{path}"
    yield url
    try:
        os.remove(path)
    except OSError:
        pass


@pytest.fixture(scope="session")
def engine(tmp_db_url):
    eng = create_engine(tmp_db_url, connect_args={"check_same_thread": False}, future=True)
    Base.metadata.create_all(bind=eng)
    return eng


@pytest.fixture(scope="function")
def db_session(engine):
    TestingSession = sessionmaker(bind=engine, autocommit=False, autoflush=False, future=True)
    db = TestingSession()
    db.execute(text("DELETE FROM city_snapshots"))
    db.commit()
    try:
        yield db
    finally:
        db.rollback()
        db.close()


@pytest.fixture
def settings():
    return Settings(database_url="sqlite://", app_api_key=API_KEY, identity_header=IDENTITY_HEADER)


# --- Override FastAPI's DB + settings dependencies ---
@pytest.fixture(autouse=True)
def override_deps(db_session, settings):
    def _get_db():
        try:
            yield db_session
        finally:
            pass
    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_settings] = lambda: settings
    yield
    app.dependency_overrides.clear()


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c


# --- Fake upstream clients ---
class FakeClient:
    """Stands in for an UpstreamClient: records calls, returns a canned result."""
    def __init__(self, result):
        self.result = result
        self.calls = []

    async def fetch(self, *args):
        self.calls.append(args)
        return self.result


COLOMBO_WEATHER = Success(WeatherReading(
    city_name="Colombo", country="LK", latitude=6.9319, longitude=79.8478,
    temp_c=28.4, humidity_pct=70, condition="haze",
))
PARIS_WEATHER = Success(WeatherReading(
    city_name="Paris", country="FR", latitude=48.8534, longitude=2.3488,
    temp_c=14.2, humidity_pct=81, condition="light rain",
))
GOOD_AIR = Success(AirQualityReading(aqi=42, pm2_5=12.5))
GOOD_DEMO = Success(DemographicsReading(population=752993, elevation_m=7))
AIR_DOWN = Failure(UpstreamRejected(503))
DEMO_DOWN = Failure(TransportError("timeout"))


@pytest.fixture
def make_aggregator():
    def _make(weather=COLOMBO_WEATHER, air=GOOD_AIR, demo=GOOD_DEMO, locale="en_US"):
        return Aggregator(FakeClient(weather), FakeClient(air), FakeClient(demo), population_locale=locale)
    return _make


@pytest.fixture
def use_aggregator():
    """Point the lookup endpoint at a given Aggregator."""
    def _use(aggregator):
        app.dependency_overrides[get_aggregator] = lambda: aggregator
        return aggregator
    return _use


@pytest.fixture
def auth_headers():
    def _headers(user="alice", key=API_KEY):
        h = {}
        if key is not None:
            h["x-api-key"] = key
        if user is not None:
            h[IDENTITY_HEADER] = user
        return h
    return _headers
