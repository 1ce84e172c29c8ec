import os

# Configure before the app (and its settings) are imported.
os.environ["USE_MOCK_DB"] = "true"
os.environ["MOCK_DB_PATH"] = "./tests/does-not-exist.json"
os.environ["JWT_SECRET"] = "test-secret-with-at-least-thirty-two-bytes"
for name in ("TWILIO_SID", "TWILIO_AUTH_TOKEN", "TWILIO_PHONE", "VERCEL"):
    os.environ.pop(name, None)

import pytest
from fastapi.testclient import TestClient

from app.config.firebase import get_db
from app.main import app
from app.services.rate_limiter import get_rate_limiter
from app.services.response_cache import get_response_cache


@pytest.fixture(autouse=True)
def clean_state():
    """Fresh store, cache, limiter and dependency overrides for every test."""
    get_db().reset()
    get_response_cache().clear()
    get_rate_limiter().reset()
    app.dependency_overrides.clear()
    yield
    app.dependency_overrides.clear()


@pytest.fixture
def db():
    return get_db()


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c


@pytest.fixture
def auth_headers(client):
    resp = client.post("/api/login", json={"username": "user", "password": "pass"})
    assert resp.status_code == 200
    return {"Authorization": f"Bearer {resp.json()['token']}"}
