import os

# Must be set before the app (and its cached settings / engine) is imported.
os.environ["APP_ENV"] = "test"
os.environ.setdefault("DB_URL", "sqlite+aiosqlite:///./test_gym_attendance.db")
os.environ.setdefault("LOCAL_TIMEZONE", "UTC")
os.environ.pop("INTERNAL_API_KEY", None)

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from app.main import create_app  # noqa: E402


@pytest.fixture(scope="session")
def client() -> TestClient:
    """
    Shared TestClient fixture for all API tests.

    Uses the application factory so dependency overrides set by one test
    can be cleared without affecting module-level state.
    """
    app = create_app()
    with TestClient(app) as test_client:
        yield test_client
        app.dependency_overrides.clear()
