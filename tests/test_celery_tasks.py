"""Tests for Celery background tasks."""
from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy.orm import sessionmaker

from lwl.config import settings
from lwl.db.models import Subscriber, User
from lwl.services.streaks import record_language_activity
from lwl.tasks import emails, maintenance
from lwl.tasks.emails import send_feedback_notification, send_template_email
from lwl.tasks.maintenance import resync_subscriptions, scan_streaks_at_risk
from lwl.utils.exceptions import ExternalServiceError


@pytest.fixture()
def task_session_factory(db_session, monkeypatch):
    factory = sessionmaker(autocommit=False, autoflush=False, bind=db_session.bind)
    monkeypatch.setattr(emails, "SessionLocal", factory)
    monkeypatch.setattr(maintenance, "SessionLocal", factory)
    return factory


class RecordingEmailClient:
    sent: list[tuple[str, str]] = []
    fail: bool = False

    def send_email(self, to, subject, html):
        if self.fail:
            raise ExternalServiceError("Email provider unavailable")
        self.sent.append((to, subject))
        return {"id": "email_1"}


@pytest.fixture()
def email_client(monkeypatch):
    RecordingEmailClient.sent = []
    RecordingEmailClient.fail = False
    monkeypatch.setattr(emails, "EmailClient", RecordingEmailClient)
    return RecordingEmailClient


def test_send_template_email_uses_user_name(db_session, task_session_factory, email_client) -> None:
    db_session.add(User(email="ana@example.com", hashed_password="x", full_name="Ana"))
    db_session.commit()

    result = send_template_email("ana@example.com", "welcome")

    assert result == {"sent": True, "template": "welcome"}
    assert email_client.sent == [("ana@example.com", "Welcome to lwlnow!")]


def test_unknown_template_is_skipped(task_session_factory, email_client) -> None:
    assert send_template_email("ana@example.com", "newsletter") == {"sent": False, "reason": "unknown_template"}
    assert email_client.sent == []


def test_template_email_failure_is_reported(task_session_factory, email_client) -> None:
    email_client.fail = True

    result = send_template_email("ana@example.com", "premium")

    assert result == {"sent": False, "reason": "Email provider unavailable"}


def test_feedback_notification_needs_admin_email(email_client, monkeypatch) -> None:
    monkeypatch.setattr(settings, "ADMIN_EMAIL", None)
    assert send_feedback_notification("Ana", None, "Hi") == {"sent": False, "reason": "no_admin_email"}

    monkeypatch.setattr(settings, "ADMIN_EMAIL", "admin@lwlnow.test")
    assert send_feedback_notification("Ana", None, "Hi") == {"sent": True}
    assert email_client.sent == [("admin@lwlnow.test", "New feedback from Ana")]


def test_resync_subscriptions_counts_failures(db_session, task_session_factory, monkeypatch) -> None:
    ok = User(email="ok@example.com", hashed_password="x")
    broken = User(email="broken@example.com", hashed_password="x")
    db_session.add_all([ok, broken])
    db_session.flush()
    db_session.add_all(
        [
            Subscriber(email=ok.email, user_id=ok.id),
            Subscriber(email=broken.email, user_id=broken.id),
        ]
    )
    db_session.commit()

    def fake_check(self, user):
        if user.email == "broken@example.com":
            raise ExternalServiceError("Failed to check subscription")
        return None

    monkeypatch.setattr(maintenance.SubscriptionService, "check_subscription", fake_check)

    assert resync_subscriptions() == {"checked": 1, "failed": 1}


def test_scan_streaks_at_risk(db_session, user, task_session_factory, queued_emails) -> None:
    today = datetime.now(timezone.utc).date()
    for offset in (1, 2):
        record_language_activity(db_session, user.id, "spanish", activity_date=today - timedelta(days=offset))
    record_language_activity(db_session, user.id, "french", activity_date=today - timedelta(days=1))

    assert scan_streaks_at_risk() == {"checked": 2, "at_risk": 1, "reminded": 1}
    assert queued_emails == [("template", user.email, "streak_reminder")]


def test_scan_streaks_skips_inactive_learners(db_session, user, task_session_factory, queued_emails) -> None:
    today = datetime.now(timezone.utc).date()
    for offset in (1, 2):
        record_language_activity(db_session, user.id, "spanish", activity_date=today - timedelta(days=offset))
    user.is_active = False
    db_session.commit()

    assert scan_streaks_at_risk() == {"checked": 1, "at_risk": 1, "reminded": 0}
    assert queued_emails == []
