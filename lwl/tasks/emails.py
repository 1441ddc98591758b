"""Celery tasks sending transactional email."""
from __future__ import annotations

from typing import Optional

from loguru import logger
from sqlalchemy import select

from lwl.celery_app import celery_app
from lwl.config import settings
from lwl.db.models.user import User
from lwl.db.session import SessionLocal
from lwl.services.email_service import TEMPLATES, EmailClient, feedback_notification_email
from lwl.utils.exceptions import LwlException


@celery_app.task(name="lwl.tasks.emails.send_template_email")
def send_template_email(email: str, template: str) -> dict[str, str | bool]:
    """Render ``template`` for the user owning ``email`` and send it."""

    render = TEMPLATES.get(template)
    if render is None:
        logger.warning("Unknown email template", template=template)
        return {"sent": False, "reason": "unknown_template"}

    db = SessionLocal()
    try:
        name = db.scalar(select(User.full_name).where(User.email == email))
    finally:
        db.close()

    message = render(name)
    try:
        EmailClient().send_email(email, message.subject, message.html)
    except LwlException as exc:
        logger.error("Template email failed", template=template, error=exc.message)
        return {"sent": False, "reason": exc.message}
    return {"sent": True, "template": template}


@celery_app.task(name="lwl.tasks.emails.send_feedback_notification")
def send_feedback_notification(name: str, email: Optional[str], message: str) -> dict[str, str | bool]:
    if not settings.ADMIN_EMAIL:
        logger.info("Feedback notification skipped; no admin email configured")
        return {"sent": False, "reason": "no_admin_email"}

    notification = feedback_notification_email(name, email, message)
    try:
        EmailClient().send_email(settings.ADMIN_EMAIL, notification.subject, notification.html)
    except LwlException as exc:
        logger.error("Feedback notification failed", error=exc.message)
        return {"sent": False, "reason": exc.message}
    return {"sent": True}
