"""Tests for registration, login and token verification."""
from datetime import datetime, timedelta, timezone

import jwt

from conftest import bearer, register


def test_register(client):
    data = register(client)

    assert data["success"] is True
    assert data["token"]
    user = data["user"]
    assert user["email"] == "alice@example.com"
    assert user["name"] == "Alice"
    assert user["role"] == "user"
    assert "createdAt" in user
    assert "password_hash" not in user


def test_register_token_claims(client, settings):
    data = register(client)

    claims = jwt.decode(data["token"], settings.JWT_SECRET, algorithms=["HS256"])

    assert claims["id"] == data["user"]["id"]
    assert claims["email"] == "alice@example.com"
    assert claims["role"] == "user"
    assert claims["exp"] - claims["iat"] == 24 * 3600


def test_register_duplicate_email(client):
    register(client)

    response = client.post(
        "/api/auth/register",
        json={"email": "alice@example.com", "password": "other", "name": "Alice 2"}
    )

    assert response.status_code == 400
    assert response.json()["error"] == "User already exists"


def test_register_missing_fields(client):
    response = client.post("/api/auth/register", json={"email": "alice@example.com"})

    assert response.status_code == 400


def test_login(client):
    register(client)

    response = client.post(
        "/api/auth/login",
        json={"email": "alice@example.com", "password": "s3cret-pass"}
    )

    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["user"]["email"] == "alice@example.com"

    # The issued token opens protected routes
    assert client.get("/api/products", headers=bearer(data["token"])).status_code == 200


def test_login_wrong_password(client):
    register(client)

    response = client.post(
        "/api/auth/login",
        json={"email": "alice@example.com", "password": "wrong"}
    )

    assert response.status_code == 401
    assert response.json()["error"] == "Invalid email or password"


def test_login_unknown_email(client):
    response = client.post(
        "/api/auth/login",
        json={"email": "nobody@example.com", "password": "whatever"}
    )

    assert response.status_code == 401
    assert response.json()["error"] == "Invalid email or password"


def test_tampered_token_rejected(client):
    token = register(client)["token"]
    header, payload, signature = token.split(".")
    tampered = ".".join([header, payload, ("B" if signature[0] != "B" else "C") + signature[1:]])

    response = client.get("/api/products", headers=bearer(tampered))

    assert response.status_code == 401
    assert response.json()["error"] == "Invalid or expired token"


def test_expired_token_rejected(client, settings):
    now = datetime.now(timezone.utc)
    token = jwt.encode(
        {"id": 1, "email": "a@b.co", "role": "user", "exp": now - timedelta(minutes=1)},
        settings.JWT_SECRET,
        algorithm="HS256"
    )

    response = client.get("/api/products", headers=bearer(token))

    assert response.status_code == 401


def test_token_signed_with_other_secret_rejected(client):
    token = jwt.encode({"id": 1, "email": "a@b.co", "role": "user"}, "another-secret", algorithm="HS256")

    response = client.get("/api/products", headers=bearer(token))

    assert response.status_code == 401
