# tests/backend/conftest.py

import os

# config.AppConfig is instantiated at import time; give it what it needs
# before any backend module is imported.
os.environ.setdefault("API_KEY", "test-api-key")
os.environ.setdefault("MONGODB_URL", "mongodb://localhost:27017")
os.environ.setdefault("REDIS_URL", "redis://localhost:6379/0")

import httpx  # noqa: E402
import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402


@pytest.fixture(scope="session")
def test_client() -> TestClient:
    """
    A TestClient for the whole app. The lifespan is not entered, so tests
    must override the database/Redis-backed dependencies they hit.
    """
    from main import app

    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()


@pytest.fixture
def api_headers() -> dict[str, str]:
    return {"X-API-Key": os.environ["API_KEY"]}


class RecordingTransport(httpx.MockTransport):
    """MockTransport that remembers every request it served."""

    def __init__(self, handler):
        self.requests: list[httpx.Request] = []

        def recording_handler(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return handler(request)

        super().__init__(recording_handler)


@pytest.fixture
def json_transport():
    """Factory: a RecordingTransport answering every request with `body` and `status_code`."""

    def factory(body, status_code: int = 200) -> RecordingTransport:
        return RecordingTransport(lambda request: httpx.Response(status_code, json=body))

    return factory
