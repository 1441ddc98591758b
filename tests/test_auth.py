"""Integration tests for authentication endpoints."""
from __future__ import annotations

import uuid

from fastapi.testclient import TestClient


def test_user_registration_success(client: TestClient, queued_emails) -> None:
    payload = {
        "email": "Learner@Example.com",
        "password": "securepassword",
        "full_name": "Learner One",
        "target_language": "spanish",
        "native_language": "english",
    }

    response = client.post("/api/v1/auth/register", json=payload)

    assert response.status_code == 201
    data = response.json()
    assert uuid.UUID(data["id"])  # Valid UUID string
    assert data["email"] == "learner@example.com"
    assert data["target_language"] == "spanish"
    assert data["is_active"] is True
    assert data["roles"] == ["user"]
    assert queued_emails == [("template", "learner@example.com", "welcome")]


def test_user_registration_duplicate_email(client: TestClient) -> None:
    payload = {"email": "duplicate@example.com", "password": "anothersecurepassword"}

    first_response = client.post("/api/v1/auth/register", json=payload)
    assert first_response.status_code == 201

    duplicate_response = client.post(
        "/api/v1/auth/register", json={**payload, "email": "DUPLICATE@example.com"}
    )
    assert duplicate_response.status_code == 400
    assert duplicate_response.json()["detail"] == "A user with this email already exists."


def test_user_registration_validation_error(client: TestClient) -> None:
    response = client.post("/api/v1/auth/register", json={"email": "short@example.com", "password": "123"})

    assert response.status_code == 422
    assert response.json()["message"] == "Validation failed"


def test_user_login_success(client: TestClient) -> None:
    client.post("/api/v1/auth/register", json={"email": "login@example.com", "password": "supersecure"})

    response = client.post("/api/v1/auth/login", json={"email": "login@example.com", "password": "supersecure"})

    assert response.status_code == 200
    data = response.json()
    assert "access_token" in data
    assert "refresh_token" in data
    assert data["token_type"] == "bearer"


def test_user_login_invalid_credentials(client: TestClient) -> None:
    response = client.post("/api/v1/auth/login", json={"email": "unknown@example.com", "password": "wrongpassword"})

    assert response.status_code == 401
    assert response.json()["detail"] == "Incorrect email or password"


def test_protected_endpoint_requires_token(client: TestClient) -> None:
    response = client.get("/api/v1/users/me")

    assert response.status_code == 401


def test_refresh_token_is_not_accepted_as_access_token(client: TestClient) -> None:
    client.post("/api/v1/auth/register", json={"email": "refresh@example.com", "password": "supersecure"})
    tokens = client.post(
        "/api/v1/auth/login", json={"email": "refresh@example.com", "password": "supersecure"}
    ).json()

    response = client.get("/api/v1/users/me", headers={"Authorization": f"Bearer {tokens['refresh_token']}"})

    assert response.status_code == 401
