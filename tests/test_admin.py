"""Tests for the database connection diagnostic."""
from unittest.mock import MagicMock, patch

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

from inventory_api.main import create_app

CREDENTIALS = {
    "host": "db.example.com",
    "port": 3306,
    "database": "shop",
    "user": "admin",
    "password": "hunter2",
}


@pytest.fixture
def diagnostics_client(settings):
    settings.ENABLE_DB_DIAGNOSTICS = True
    settings.API_KEY = "admin-key"

    with TestClient(create_app(settings)) as test_client:
        yield test_client


API_KEY_HEADERS = {"Authorization": "Bearer admin-key"}


def test_diagnostics_disabled_by_default(client):
    response = client.post("/api/test-connection", json=CREDENTIALS)

    assert response.status_code == 404


def test_diagnostics_require_api_key(diagnostics_client):
    response = diagnostics_client.post(
        "/api/test-connection",
        json=CREDENTIALS,
        headers={"Authorization": "Bearer wrong"}
    )

    assert response.status_code == 401
    assert response.json()["error"] == "Invalid API key"


def test_connection_success(diagnostics_client):
    engine = MagicMock()
    conn = engine.connect.return_value.__enter__.return_value
    conn.execute.return_value.fetchall.return_value = [("products",)]

    with patch("inventory_api.api.admin.create_engine", return_value=engine) as create_engine:
        response = diagnostics_client.post("/api/test-connection", json=CREDENTIALS, headers=API_KEY_HEADERS)

    assert response.status_code == 200
    assert response.json() == {
        "success": True,
        "message": "Database connection successful",
        "hasProductsTable": True,
        "database": "shop",
        "host": "db.example.com",
    }
    url = create_engine.call_args.args[0]
    assert url.host == "db.example.com"
    assert url.port == 3306
    engine.dispose.assert_called_once()


def test_connection_failure(diagnostics_client):
    engine = MagicMock()
    engine.connect.side_effect = OperationalError("SELECT 1", {}, Exception("Access denied"))

    with patch("inventory_api.api.admin.create_engine", return_value=engine):
        response = diagnostics_client.post("/api/test-connection", json=CREDENTIALS, headers=API_KEY_HEADERS)

    assert response.status_code == 400
    data = response.json()
    assert data["success"] is False
    assert data["error"] == "Database connection failed"
    engine.dispose.assert_called_once()


def test_connection_missing_fields(diagnostics_client):
    response = diagnostics_client.post(
        "/api/test-connection",
        json={"host": "db.example.com"},
        headers=API_KEY_HEADERS
    )

    assert response.status_code == 400
