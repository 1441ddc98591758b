"""Transactional email and marketing contacts over the Resend REST API."""
from __future__ import annotations

from dataclasses import dataclass
from html import escape
from typing import Any, Dict, List, Optional

import httpx
from loguru import logger

from lwl.config import settings
from lwl.core.validation import validate_email
from lwl.utils.exceptions import ConfigurationError, ExternalServiceError, ValidationError


@dataclass
class EmailMessage:
    subject: str
    html: str


class EmailClient:
    """Minimal Resend client.

    ``transport`` lets tests route requests through an ``httpx.MockTransport``.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        *,
        audience_id: Optional[str] = None,
        from_email: Optional[str] = None,
        base_url: Optional[str] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.api_key = api_key if api_key is not None else settings.RESEND_API_KEY
        self.audience_id = audience_id if audience_id is not None else settings.RESEND_AUDIENCE_ID
        self.from_email = from_email or settings.RESEND_FROM_EMAIL
        self.base_url = base_url or settings.RESEND_API_BASE
        self._transport = transport

    def _client(self) -> httpx.Client:
        if not self.api_key:
            raise ConfigurationError("Resend API key not configured")
        return httpx.Client(
            base_url=self.base_url,
            timeout=15.0,
            transport=self._transport,
            headers={"Authorization": f"Bearer {self.api_key}"},
        )

    def _post(self, path: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        with self._client() as client:
            try:
                response = client.post(path, json=payload)
            except httpx.HTTPError as exc:
                logger.exception("Resend request failed", path=path)
                raise ExternalServiceError("Email provider unavailable") from exc

        if response.status_code in (401, 403):
            logger.error("Resend rejected API key", status=response.status_code)
            raise ExternalServiceError(
                "Invalid Resend API key",
                {"details": "Please check your Resend API key configuration"},
                status_code=401,
            )
        if response.status_code >= 400:
            body = response.text
            logger.error("Resend returned error", status=response.status_code, body=body)
            if "audience" in body.lower():
                raise ExternalServiceError(
                    "Invalid audience ID",
                    {"details": "The specified audience ID is not valid"},
                    status_code=400,
                )
            raise ExternalServiceError("Email provider request failed", status_code=500)
        return response.json()

    def send_email(self, to: str | List[str], subject: str, html: str) -> Dict[str, Any]:
        recipients = [to] if isinstance(to, str) else list(to)
        data = self._post(
            "/emails",
            {"from": self.from_email, "to": recipients, "subject": subject, "html": html},
        )
        logger.info("Email sent", subject=subject, recipients=len(recipients), id=data.get("id"))
        return data

    def create_contact(
        self, email: Optional[str], first_name: Optional[str] = None, last_name: Optional[str] = None
    ) -> Dict[str, Any]:
        if not email:
            raise ValidationError("Email is required")
        if not validate_email(email):
            raise ValidationError("Please enter a valid email address")
        if not self.audience_id:
            raise ConfigurationError("Resend audience not configured")

        data = self._post(
            f"/audiences/{self.audience_id}/contacts",
            {
                "email": email,
                "first_name": first_name or None,
                "last_name": last_name or None,
                "unsubscribed": False,
            },
        )
        logger.info("Resend contact created", id=data.get("id"))
        return data


def _layout(heading: str, body: str) -> str:
    return (
        '<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">'
        f'<h1 style="color: #1f2937;">{heading}</h1>'
        f"{body}"
        f'<p style="color: #6b7280; font-size: 12px;">lwlnow &middot; <a href="{settings.SITE_URL}">{settings.SITE_URL}</a></p>'
        "</div>"
    )


def welcome_email(name: Optional[str]) -> EmailMessage:
    greeting = escape(name) if name else "there"
    return EmailMessage(
        subject="Welcome to lwlnow!",
        html=_layout(
            f"Welcome, {greeting}!",
            "<p>Start with a short dictation exercise and build your vocabulary one sentence at a time.</p>"
            f'<p><a href="{settings.SITE_URL}/dashboard">Open your dashboard</a></p>',
        ),
    )


def feedback_notification_email(name: str, email: Optional[str], message: str) -> EmailMessage:
    return EmailMessage(
        subject=f"New feedback from {name}",
        html=_layout(
            "New feedback received",
            f"<p><strong>From:</strong> {escape(name)} ({escape(email or 'No email provided')})</p>"
            f'<p style="white-space: pre-wrap;">{escape(message)}</p>',
        ),
    )


def premium_welcome_email(name: Optional[str]) -> EmailMessage:
    greeting = escape(name) if name else "there"
    return EmailMessage(
        subject="Your lwlnow Premium is active",
        html=_layout(
            f"Thanks for upgrading, {greeting}!",
            "<p>Unlimited exercises, sentence mining and bidirectional reviews are now unlocked.</p>",
        ),
    )


def cancellation_email(name: Optional[str]) -> EmailMessage:
    greeting = escape(name) if name else "there"
    return EmailMessage(
        subject="Your lwlnow subscription was cancelled",
        html=_layout(
            f"Sorry to see you go, {greeting}",
            "<p>Your account has been moved to the free plan. Your exercises and vocabulary are kept.</p>"
            f'<p><a href="{settings.SITE_URL}/subscription">Resubscribe any time</a></p>',
        ),
    )


def streak_reminder_email(name: Optional[str]) -> EmailMessage:
    greeting = escape(name) if name else "there"
    return EmailMessage(
        subject="Your lwlnow streak ends tonight",
        html=_layout(
            f"Keep it going, {greeting}!",
            "<p>You practised yesterday but not yet today. One short exercise keeps your streak alive.</p>"
            f'<p><a href="{settings.SITE_URL}/dashboard">Practise now</a></p>',
        ),
    )


TEMPLATES = {
    "welcome": welcome_email,
    "premium": premium_welcome_email,
    "cancellation": cancellation_email,
    "streak_reminder": streak_reminder_email,
}


__all__ = [
    "EmailClient",
    "EmailMessage",
    "TEMPLATES",
    "cancellation_email",
    "feedback_notification_email",
    "premium_welcome_email",
    "streak_reminder_email",
    "welcome_email",
]
