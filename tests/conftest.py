import os
import uuid

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Make sure models are imported so Base has all tables
from depth_charts import models  # noqa: F401
from depth_charts.db import Base, get_db
from depth_charts.main import app

# --- Enable test mode so the dev grant endpoint is available ---
os.environ["TESTING"] = "1"

# Single in-memory DB shared across the whole process
TEST_DATABASE_URL = "sqlite+pysqlite://"

COACH = "coach"
ALL_CAPS = [c.value for c in models.Capability]


@pytest.fixture(scope="session")
def engine():
    engine = create_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,  # <<< key: share the same memory DB
        future=True,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def db_session(engine):
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def client(db_session):
    # Override app DB dependency to use our shared in-memory session
    def _get_db_override():
        yield db_session

    app.dependency_overrides[get_db] = _get_db_override

    from starlette.testclient import TestClient

    with TestClient(app) as c:
        yield c

    app.dependency_overrides.clear()


@pytest.fixture()
def coach(client):
    """Headers for a user holding every capability."""
    r = client.post("/permissions/grant", json={"user_id": COACH, "capabilities": ALL_CAPS})
    assert r.status_code == 200, r.text
    return {"X-User-Id": COACH}


@pytest.fixture()
def team_id(client):
    r = client.post("/teams/", json={"name": f"Team {uuid.uuid4().hex[:8]}"})
    assert r.status_code == 201, r.text
    return r.json()["id"]


@pytest.fixture()
def seed_players(client):
    def _seed(team_id: int, rows: list[dict]) -> list[dict]:
        r = client.post("/players/seed", json=[{"team_id": team_id, **row} for row in rows])
        assert r.status_code == 200, r.text
        return r.json()

    return _seed


@pytest.fixture()
def make_chart(client, coach):
    def _make(team_id: int, name: str = "Opening Day", **extra) -> dict:
        r = client.post("/depth-charts", json={"team_id": team_id, "name": name, **extra}, headers=coach)
        assert r.status_code == 201, r.text
        return r.json()

    return _make


def position_by_code(chart: dict, code: str) -> dict:
    for p in chart["positions"]:
        if p["position_code"] == code:
            return p
    raise AssertionError(f"position {code} not found")


def history_count(client, headers, chart_id: int) -> int:
    r = client.get(f"/depth-charts/{chart_id}/history", headers=headers)
    assert r.status_code == 200, r.text
    return len(r.json())
