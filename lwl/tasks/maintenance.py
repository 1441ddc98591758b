"""Periodic upkeep for subscriptions and streaks."""
from __future__ import annotations

from datetime import datetime, timedelta, timezone

from loguru import logger
from sqlalchemy import select

from lwl.celery_app import celery_app
from lwl.db.models.activity import UserDailyActivity
from lwl.db.models.subscription import Subscriber
from lwl.db.models.user import User
from lwl.db.session import SessionLocal
from lwl.services.streaks import calculate_streak
from lwl.services.subscriptions import SubscriptionService
from lwl.tasks.emails import send_template_email
from lwl.utils.exceptions import LwlException


@celery_app.task(name="lwl.tasks.maintenance.resync_subscriptions")
def resync_subscriptions() -> dict[str, int]:
    """Refresh every linked subscriber from Stripe."""

    db = SessionLocal()
    checked = failed = 0
    try:
        users = db.scalars(
            select(User).join(Subscriber, Subscriber.user_id == User.id).where(User.is_active.is_(True))
        ).all()
        service = SubscriptionService(db)
        for user in users:
            try:
                service.check_subscription(user)
                checked += 1
            except LwlException as exc:
                db.rollback()
                failed += 1
                logger.warning("Subscription resync failed", user_id=str(user.id), error=exc.message)
        logger.info("Subscription resync finished", checked=checked, failed=failed)
        return {"checked": checked, "failed": failed}
    finally:
        db.close()


@celery_app.task(name="lwl.tasks.maintenance.scan_streaks_at_risk")
def scan_streaks_at_risk() -> dict[str, int]:
    """Queue one reminder per learner whose streak ends tonight unless they practise."""

    db = SessionLocal()
    now = datetime.now(timezone.utc)
    yesterday = now.date() - timedelta(days=1)
    try:
        pairs = db.execute(
            select(UserDailyActivity.user_id, UserDailyActivity.language)
            .where(UserDailyActivity.activity_date == yesterday)
            .distinct()
        ).all()
        at_risk = 0
        reminder_ids: set = set()
        for user_id, language in pairs:
            streak = calculate_streak(db, user_id, language, now=now)
            if streak.status == "at_risk" and streak.current_streak >= 2:
                at_risk += 1
                logger.info(
                    "Streak at risk",
                    user_id=str(user_id),
                    language=language,
                    streak=streak.current_streak,
                    hours_remaining=streak.hours_remaining,
                )
                reminder_ids.add(user_id)

        emails = []
        if reminder_ids:
            emails = db.scalars(
                select(User.email).where(User.id.in_(reminder_ids), User.is_active.is_(True))
            ).all()
        for email in emails:
            send_template_email.delay(email, "streak_reminder")
        logger.info("Streak scan finished", checked=len(pairs), at_risk=at_risk, reminded=len(emails))
        return {"checked": len(pairs), "at_risk": at_risk, "reminded": len(emails)}
    finally:
        db.close()
