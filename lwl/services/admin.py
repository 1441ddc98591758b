"""Aggregated counts for the admin dashboard."""
from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from lwl.core.srs.mastery import MASTERED_LEVEL
from lwl.db.models import Exercise, Feedback, KnownWord, Subscriber, User, Visitor


@dataclass
class AdminStats:
    total_users: int
    total_exercises: int
    total_subscribers: int
    premium_subscribers: int
    unread_feedback: int
    unique_visitors: int
    mastered_words: int


class AdminStatsService:
    def __init__(self, db: Session):
        self.db = db

    def _count(self, stmt) -> int:
        return int(self.db.scalar(stmt) or 0)

    def get_stats(self) -> AdminStats:
        return AdminStats(
            total_users=self._count(select(func.count(User.id))),
            total_exercises=self._count(select(func.count(Exercise.id))),
            total_subscribers=self._count(select(func.count(Subscriber.id))),
            premium_subscribers=self._count(
                select(func.count(Subscriber.id)).where(Subscriber.subscribed.is_(True))
            ),
            unread_feedback=self._count(select(func.count(Feedback.id)).where(Feedback.read.is_(False))),
            unique_visitors=self._count(select(func.count(func.distinct(Visitor.visitor_id)))),
            mastered_words=self._count(
                select(func.count(KnownWord.id)).where(KnownWord.mastery_level >= MASTERED_LEVEL)
            ),
        )
