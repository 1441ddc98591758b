"""User feedback intake."""
from __future__ import annotations

import uuid
from typing import Optional

from loguru import logger
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from lwl.core.validation import sanitize_input, validate_feedback
from lwl.db.models.feedback import Feedback
from lwl.utils.exceptions import ValidationError


class FeedbackNotFoundError(ValueError):
    """Raised when a feedback entry does not exist."""


class FeedbackService:
    def __init__(self, db: Session):
        self.db = db

    def submit(self, name: Optional[str], email: Optional[str], message: Optional[str]) -> Optional[Feedback]:
        """Validate and store feedback, then notify the admin.

        A storage failure is logged and swallowed so the submitter still gets a
        success response; ``None`` is returned in that case.
        """

        result = validate_feedback(name, email, message)
        if not result.is_valid:
            raise ValidationError(result.error or "Invalid feedback")

        display_name = sanitize_input(name) or "Anonymous"
        entry = Feedback(
            name=display_name,
            email=email or None,
            message=sanitize_input(message),
            read=False,
        )
        try:
            self.db.add(entry)
            self.db.commit()
            self.db.refresh(entry)
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("Error storing feedback")
            entry = None

        from lwl.tasks.emails import send_feedback_notification

        send_feedback_notification.delay(display_name, email, message)
        logger.info("Feedback submitted", name=display_name)
        return entry

    def list_feedback(self, *, unread_only: bool = False, limit: int = 100) -> list[Feedback]:
        stmt = select(Feedback)
        if unread_only:
            stmt = stmt.where(Feedback.read.is_(False))
        return list(self.db.scalars(stmt.order_by(Feedback.created_at.desc()).limit(limit)))

    def mark_read(self, feedback_id: uuid.UUID) -> Feedback:
        entry = self.db.get(Feedback, feedback_id)
        if entry is None:
            raise FeedbackNotFoundError("Feedback not found")
        entry.read = True
        self.db.commit()
        return entry
