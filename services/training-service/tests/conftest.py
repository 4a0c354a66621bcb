import os
import sys
import tempfile
from datetime import date
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

# Ensure the service package and the shared library are importable
SERVICE_ROOT = Path(__file__).resolve().parents[1]
LIBS_ROOT = SERVICE_ROOT.parents[1] / "libs" / "backend-common"
for path in (SERVICE_ROOT, LIBS_ROOT):
    if str(path) not in sys.path:
        sys.path.insert(0, str(path))

TEST_DB_PATH = Path(tempfile.mkdtemp(prefix="training_db_")) / "test_training.db"

# Settings are read once, so the environment must be in place before the first import
os.environ["TRAINING_DATABASE_URL"] = f"sqlite+aiosqlite:///{TEST_DB_PATH}"
os.environ["TRAINING_REDIS_HOST"] = ""
os.environ.setdefault("APP_ENV", "test")

from alembic import command  # noqa: E402
from alembic.config import Config  # noqa: E402

USER_ID = "user-1"
TODAY = date(2024, 1, 1)  # a Monday


def _alembic_upgrade_head() -> None:
    cfg = Config(str(SERVICE_ROOT / "alembic.ini"))
    # Pin script_location explicitly to avoid picking up wrong migrations when running from repo root
    cfg.set_main_option("script_location", str(SERVICE_ROOT / "alembic"))
    command.upgrade(cfg, "head")


@pytest.fixture(scope="session")
def migrated_db():
    _alembic_upgrade_head()
    yield str(TEST_DB_PATH)


@pytest.fixture()
def client(migrated_db: str):
    from training_service.dependencies import get_today
    from training_service.main import app

    app.dependency_overrides[get_today] = lambda: TODAY

    with TestClient(app, headers={"X-User-Id": USER_ID}) as c:
        yield c

    app.dependency_overrides.clear()


@pytest.fixture()
def set_today(client: TestClient):
    """Move the service clock for the rest of the test."""
    from training_service.dependencies import get_today
    from training_service.main import app

    def _set(day: date) -> None:
        app.dependency_overrides[get_today] = lambda: day

    return _set


@pytest.fixture(autouse=True)
def auto_clean_tables(request):
    """Fixture to automatically clean all tables after each test."""
    yield
    if "client" not in request.fixturenames:
        return

    from sqlalchemy import create_engine
    from training_service.models import Base

    engine = create_engine(f"sqlite:///{TEST_DB_PATH}")
    with engine.connect() as connection:
        transaction = connection.begin()
        for table in reversed(Base.metadata.sorted_tables):
            connection.execute(table.delete())
        transaction.commit()
    engine.dispose()


@pytest.fixture()
def muscle_groups(client: TestClient) -> dict[str, int]:
    response = client.get("/api/v1/muscle-groups")
    assert response.status_code == 200, response.text
    return {g["name"]: g["id"] for g in response.json()}


@pytest.fixture()
def catalog(client: TestClient) -> dict[str, int]:
    response = client.get("/api/v1/exercises")
    assert response.status_code == 200, response.text
    return {e["name"]: e["id"] for e in response.json()["exercises"]}


@pytest.fixture()
def create_mesocycle(client: TestClient, catalog: dict[str, int]):
    """Create a mesocycle; every training day gets the same two exercises by default."""

    def _create(**overrides) -> dict:
        days_per_week = overrides.pop("training_days_per_week", 3)
        payload = {
            "name": "Hypertrophy block",
            "goal": "Build muscle",
            "duration_in_weeks": 2,
            "training_days_per_week": days_per_week,
            "training_days": [
                {
                    "label": f"Day {i}",
                    "exercises": [
                        {
                            "exercise_id": catalog["Barbell Bench Press"],
                            "sets": [
                                {"rep_range_lower_bound": 6, "rep_range_upper_bound": 10, "rir": 2, "weight": 60},
                                {"rep_range_lower_bound": 6, "rep_range_upper_bound": 10, "rir": 1, "weight": 60},
                            ],
                        },
                        {"exercise_id": catalog["Pull Up"]},
                    ],
                }
                for i in range(1, days_per_week + 1)
            ],
        }
        payload.update(overrides)
        response = client.post("/api/v1/mesocycles", json=payload)
        assert response.status_code == 201, response.text
        return response.json()

    return _create


@pytest.fixture()
def active_mesocycle(client: TestClient, create_mesocycle) -> dict:
    mesocycle = create_mesocycle()
    response = client.post(f"/api/v1/mesocycles/{mesocycle['id']}/start")
    assert response.status_code == 200, response.text
    return response.json()
