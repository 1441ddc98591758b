"""Tests for dictation exercise endpoints."""
from __future__ import annotations

import uuid

from fastapi.testclient import TestClient

from lwl.db.models import UserDailyActivity


def _create(client: TestClient, headers, **overrides):
    payload = {
        "title": "  En el mercado ",
        "text": "Compramos fruta fresca en el mercado.",
        "language": "spanish",
        "tags": ["market", " ", "food "],
    }
    payload.update(overrides)
    response = client.post("/api/v1/exercises/", json=payload, headers=headers)
    assert response.status_code == 201
    return response.json()


def test_create_and_fetch_exercise(client: TestClient, auth_headers) -> None:
    created = _create(client, auth_headers)

    assert created["title"] == "En el mercado"
    assert created["tags"] == ["market", "food"]
    assert created["completion_count"] == 0

    fetched = client.get(f"/api/v1/exercises/{created['id']}", headers=auth_headers)
    assert fetched.status_code == 200
    assert fetched.json()["text"] == "Compramos fruta fresca en el mercado."


def test_exercise_is_private_to_owner(client: TestClient, auth_headers, login) -> None:
    created = _create(client, auth_headers)
    other_headers = login("other@example.com")

    response = client.get(f"/api/v1/exercises/{created['id']}", headers=other_headers)

    assert response.status_code == 404
    assert response.json()["detail"] == "Exercise not found"


def test_unknown_exercise_returns_404(client: TestClient, auth_headers) -> None:
    response = client.post(f"/api/v1/exercises/{uuid.uuid4()}/complete", headers=auth_headers)

    assert response.status_code == 404


def test_completion_threshold_and_activity(client: TestClient, auth_headers, db_session) -> None:
    created = _create(client, auth_headers)
    url = f"/api/v1/exercises/{created['id']}/complete"

    first = client.post(url, headers=auth_headers).json()
    second = client.post(url, headers=auth_headers).json()
    third = client.post(url, headers=auth_headers).json()

    assert first["is_completed"] is False
    assert second["completion_count"] == 2
    assert third["is_completed"] is True

    activity = db_session.query(UserDailyActivity).one()
    assert activity.language == "spanish"
    assert activity.exercises_completed == 3


def test_archive_hides_exercise_from_listing(client: TestClient, auth_headers) -> None:
    kept = _create(client, auth_headers, title="Kept")
    archived = _create(client, auth_headers, title="Archived")
    _create(client, auth_headers, title="French", language="french")

    response = client.delete(f"/api/v1/exercises/{archived['id']}", headers=auth_headers)
    assert response.json()["archived"] is True

    listed = client.get("/api/v1/exercises/", params={"language": "spanish"}, headers=auth_headers).json()
    assert [item["id"] for item in listed] == [kept["id"]]

    with_archived = client.get(
        "/api/v1/exercises/", params={"language": "spanish", "include_archived": True}, headers=auth_headers
    ).json()
    assert len(with_archived) == 2


def test_reading_exercise_count(client: TestClient, auth_headers) -> None:
    _create(client, auth_headers)
    _create(client, auth_headers)
    _create(client, auth_headers, language="french")

    response = client.get("/api/v1/exercises/reading-count", params={"language": "spanish"}, headers=auth_headers)

    assert response.json() == {"language": "spanish", "count": 2}
