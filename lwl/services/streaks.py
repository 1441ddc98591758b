"""Daily activity recording and streak calculation."""
from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from typing import Optional

from loguru import logger
from sqlalchemy import select
from sqlalchemy.orm import Session

from lwl.db.models.activity import UserDailyActivity

# Activity older than this window never contributes to the current streak.
STREAK_LOOKBACK_DAYS = 100


@dataclass
class StreakInfo:
    language: str
    current_streak: int
    longest_streak: int
    last_activity_date: Optional[date]
    status: str  # active / at_risk / broken
    hours_remaining: Optional[int] = None


def record_language_activity(
    db: Session,
    user_id: uuid.UUID,
    language: str,
    *,
    activity_date: Optional[date] = None,
    exercises: int = 1,
    words: int = 0,
    commit: bool = True,
) -> UserDailyActivity:
    """Add to today's activity counters for ``language``, creating the row if needed."""

    day = activity_date or datetime.now(timezone.utc).date()
    activity = db.scalar(
        select(UserDailyActivity).where(
            UserDailyActivity.user_id == user_id,
            UserDailyActivity.language == language,
            UserDailyActivity.activity_date == day,
        )
    )
    if activity is None:
        activity = UserDailyActivity(
            user_id=user_id,
            language=language,
            activity_date=day,
            activity_count=0,
            exercises_completed=0,
            words_mastered=0,
        )
        db.add(activity)

    activity.activity_count = (activity.activity_count or 0) + 1
    activity.exercises_completed = (activity.exercises_completed or 0) + exercises
    activity.words_mastered = (activity.words_mastered or 0) + words
    if commit:
        db.commit()
    else:
        db.flush()
    logger.debug("Activity recorded", user_id=str(user_id), language=language, day=day.isoformat())
    return activity


def _longest_run(days: list[date]) -> int:
    longest = run = 0
    previous: Optional[date] = None
    for day in sorted(days):
        run = run + 1 if previous is not None and day - previous == timedelta(days=1) else 1
        longest = max(longest, run)
        previous = day
    return longest


def calculate_streak(
    db: Session,
    user_id: uuid.UUID,
    language: str,
    *,
    now: Optional[datetime] = None,
) -> StreakInfo:
    """Count consecutive active days ending today, or yesterday when today is still empty."""

    moment = now or datetime.now(timezone.utc)
    today = moment.date()
    rows = db.scalars(
        select(UserDailyActivity.activity_date)
        .where(
            UserDailyActivity.user_id == user_id,
            UserDailyActivity.language == language,
            UserDailyActivity.exercises_completed > 0,
        )
        .order_by(UserDailyActivity.activity_date.desc())
    ).all()
    active_days = set(rows)
    if not active_days:
        return StreakInfo(language, 0, 0, None, "broken")

    last_activity = max(active_days)
    yesterday = today - timedelta(days=1)
    cursor = today if today in active_days else yesterday

    current = 0
    earliest = today - timedelta(days=STREAK_LOOKBACK_DAYS)
    while cursor in active_days and cursor >= earliest:
        current += 1
        cursor -= timedelta(days=1)

    hours_remaining: Optional[int] = None
    if last_activity == today:
        status = "active"
    elif last_activity == yesterday:
        status = "at_risk"
        midnight = datetime.combine(today + timedelta(days=1), time.min, tzinfo=timezone.utc)
        if moment.tzinfo is None:
            moment = moment.replace(tzinfo=timezone.utc)
        hours_remaining = max(0, -(-int((midnight - moment).total_seconds()) // 3600))
    else:
        status = "broken"
        current = 0

    return StreakInfo(
        language=language,
        current_streak=current,
        longest_streak=max(_longest_run(list(active_days)), current),
        last_activity_date=last_activity,
        status=status,
        hours_remaining=hours_remaining,
    )
