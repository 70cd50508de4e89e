import pytest
from fastapi.testclient import TestClient

from rapport.main import app
from rapport.settings import settings

ADMIN_KEY = "test-admin-key"


@pytest.fixture
def client(fake_redis, monkeypatch):
    monkeypatch.setattr(settings, "API_KEY", "")
    monkeypatch.setattr(settings, "ADMIN_API_KEY", ADMIN_KEY)
    return TestClient(app)


@pytest.fixture
def signup(client):
    """Create an account and log in; returns the session headers."""
    def _signup(username: str, password: str = "pw", admin: bool = False) -> dict:
        body = {"username": username, "password": password}
        if admin:
            body["adminKey"] = ADMIN_KEY
        assert client.post("/users", json=body).status_code == 200
        res = client.post("/login", json={"username": username, "password": password})
        assert res.status_code == 200
        return {settings.SESSION_HEADER: res.json()["token"]}
    return _signup
