"""Tests for the Resend email client and contact endpoint."""
from __future__ import annotations

import json

import httpx
import pytest
from fastapi.testclient import TestClient

from lwl.config import settings
from lwl.services.email_service import (
    TEMPLATES,
    EmailClient,
    feedback_notification_email,
    streak_reminder_email,
    welcome_email,
)
from lwl.utils.exceptions import ConfigurationError, ExternalServiceError, ValidationError


def _client(handler, **kwargs) -> EmailClient:
    return EmailClient("re_test", audience_id="aud_1", transport=httpx.MockTransport(handler), **kwargs)


def test_send_email_posts_payload() -> None:
    captured: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        captured.append(request)
        return httpx.Response(200, json={"id": "email_1"})

    data = _client(handler, from_email="lwlnow <hi@lwlnow.com>").send_email("ana@example.com", "Hi", "<p>Hi</p>")

    assert data == {"id": "email_1"}
    request = captured[0]
    assert request.url.path == "/emails"
    assert request.headers["Authorization"] == "Bearer re_test"
    assert json.loads(request.content)["to"] == ["ana@example.com"]


def test_create_contact_targets_audience() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/audiences/aud_1/contacts"
        body = json.loads(request.content)
        assert body["unsubscribed"] is False
        assert body["first_name"] is None
        return httpx.Response(200, json={"id": "contact_1"})

    assert _client(handler).create_contact("ana@example.com")["id"] == "contact_1"


@pytest.mark.parametrize(
    "status_code,body,expected_status,expected_message",
    [
        (401, "unauthorized", 401, "Invalid Resend API key"),
        (422, "audience not found", 400, "Invalid audience ID"),
        (500, "boom", 500, "Email provider request failed"),
    ],
)
def test_provider_errors_are_mapped(status_code, body, expected_status, expected_message) -> None:
    client = _client(lambda request: httpx.Response(status_code, text=body))

    with pytest.raises(ExternalServiceError) as excinfo:
        client.create_contact("ana@example.com")

    assert excinfo.value.status_code == expected_status
    assert excinfo.value.message == expected_message


def test_contact_validation_happens_before_request() -> None:
    def handler(request: httpx.Request) -> httpx.Response:  # pragma: no cover - must not be called
        raise AssertionError("unexpected request")

    with pytest.raises(ValidationError):
        _client(handler).create_contact("")
    with pytest.raises(ValidationError):
        _client(handler).create_contact("nope")


def test_missing_api_key_is_configuration_error() -> None:
    with pytest.raises(ConfigurationError):
        EmailClient("", audience_id="aud_1").send_email("ana@example.com", "Hi", "<p>Hi</p>")


def test_templates_escape_user_input() -> None:
    assert "&lt;b&gt;" in welcome_email("<b>Ana</b>").html
    notification = feedback_notification_email("Ana", None, "<script>x</script>")
    assert "No email provided" in notification.html
    assert "<script>" not in notification.html


def test_streak_reminder_template() -> None:
    message = TEMPLATES["streak_reminder"]("<i>Ana</i>")

    assert message.subject == streak_reminder_email(None).subject == "Your lwlnow streak ends tonight"
    assert "&lt;i&gt;Ana" in message.html


def test_contact_endpoint_validation(client: TestClient) -> None:
    response = client.post("/api/v1/contacts", json={"email": "bad"})

    assert response.status_code == 400
    assert response.json()["detail"] == "Please enter a valid email address"


def test_contact_endpoint_without_audience(client: TestClient, monkeypatch) -> None:
    monkeypatch.setattr(settings, "RESEND_AUDIENCE_ID", None)

    response = client.post("/api/v1/contacts", json={"email": "ana@example.com"})

    assert response.status_code == 500
    assert response.json()["detail"] == "Resend audience not configured"
