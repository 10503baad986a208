import pytest
from fastapi.testclient import TestClient

from inventory_api.config import Settings
from inventory_api.main import create_app


@pytest.fixture(scope="function")
def settings(tmp_path):
    """Settings for an isolated app backed by SQLite in-memory."""
    return Settings(
        _env_file=None,
        DATABASE_URL="sqlite://",
        JWT_SECRET="test-secret",
        BCRYPT_ROUNDS=4,
        UPLOAD_DIR=str(tmp_path / "uploads"),
    )


@pytest.fixture(scope="function")
def app(settings):
    return create_app(settings)


@pytest.fixture(scope="function")
def client(app):
    """Create test client with fresh database for each test."""
    with TestClient(app) as test_client:
        yield test_client


def register(client, email="alice@example.com", password="s3cret-pass", name="Alice"):
    response = client.post(
        "/api/auth/register",
        json={"email": email, "password": password, "name": name}
    )
    assert response.status_code == 201, response.text
    return response.json()


def bearer(token):
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture(scope="function")
def auth_headers(client):
    """Authorization headers for a freshly registered user."""
    return bearer(register(client)["token"])


@pytest.fixture(scope="function")
def other_auth_headers(client):
    return bearer(register(client, email="bob@example.com", name="Bob")["token"])
