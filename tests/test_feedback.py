"""Feedback submission tests."""
from __future__ import annotations

from fastapi.testclient import TestClient

from lwl.db.models import Feedback


def test_submit_feedback_stores_and_notifies(client: TestClient, db_session, queued_emails) -> None:
    response = client.post(
        "/api/v1/feedback",
        json={"name": "Ana", "email": "ana@example.com", "message": "Love the dictation mode"},
    )

    assert response.status_code == 200
    assert response.json() == {"success": True, "message": "Feedback submitted successfully"}
    entry = db_session.query(Feedback).one()
    assert entry.name == "Ana"
    assert entry.read is False
    assert queued_emails == [("feedback", "Ana", "ana@example.com", "Love the dictation mode")]


def test_anonymous_feedback(client: TestClient, db_session) -> None:
    response = client.post("/api/v1/feedback", json={"message": "Nice app"})

    assert response.status_code == 200
    assert db_session.query(Feedback).one().name == "Anonymous"


def test_feedback_requires_message(client: TestClient, queued_emails) -> None:
    response = client.post("/api/v1/feedback", json={"name": "Ana", "message": "   "})

    assert response.status_code == 400
    assert response.json()["detail"] == "Message is required"
    assert queued_emails == []


def test_feedback_rejects_invalid_email(client: TestClient) -> None:
    response = client.post("/api/v1/feedback", json={"email": "not-an-email", "message": "Hi"})

    assert response.status_code == 400
    assert response.json()["detail"] == "Please enter a valid email address"
