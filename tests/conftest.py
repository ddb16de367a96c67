import pytest
from fastapi.testclient import TestClient

from attendance_tracker.config import Settings
from attendance_tracker.main import create_app

FRONTEND_URL = "https://frontend.example.com"


@pytest.fixture
def settings(tmp_path):
    return Settings(
        DATABASE_URL=f"sqlite+aiosqlite:///{tmp_path / 'attendance.db'}",
        DB_POOL_SIZE=5,
        DB_CONNECT_ATTEMPTS=1,
        DB_RETRY_DELAY_SECONDS=0,
        FRONTEND_URL=FRONTEND_URL,
        LOG_FILE="",
    )


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    # Entering the client runs the lifespan: bootstrap on enter, dispose on exit.
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def offline_client(app):
    """Client whose lifespan never ran, so no store is attached."""
    return TestClient(app, raise_server_exceptions=False)


def make_payload(**overrides):
    payload = {
        "employeeName": "Alice Smith",
        "employeeID": "E1",
        "date": "2024-03-01",
        "status": "Present",
    }
    payload.update(overrides)
    return payload
