"""Celery application instance and configuration."""
from __future__ import annotations

from celery import Celery
from celery.schedules import crontab

from lwl.config import settings


def _resolve_broker_url() -> str:
    if settings.CELERY_BROKER_URL is not None:
        return str(settings.CELERY_BROKER_URL)
    if settings.REDIS_URL is not None:
        return str(settings.REDIS_URL)
    return "memory://"


def _resolve_result_backend() -> str:
    if settings.CELERY_RESULT_BACKEND is not None:
        return str(settings.CELERY_RESULT_BACKEND)
    if settings.REDIS_URL is not None:
        return str(settings.REDIS_URL)
    return "cache+memory://"


celery_app = Celery(
    "lwlnow",
    broker=_resolve_broker_url(),
    backend=_resolve_result_backend(),
    include=[
        "lwl.tasks.emails",
        "lwl.tasks.maintenance",
    ],
)

celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,
    task_track_started=True,
    task_time_limit=10 * 60,
    task_soft_time_limit=8 * 60,
    worker_prefetch_multiplier=1,
    worker_max_tasks_per_child=1000,
)

celery_app.conf.beat_schedule = {
    "resync-subscriptions": {
        "task": "lwl.tasks.maintenance.resync_subscriptions",
        "schedule": crontab(hour=3, minute=0),
    },
    "scan-streaks-at-risk": {
        "task": "lwl.tasks.maintenance.scan_streaks_at_risk",
        "schedule": crontab(hour=18, minute=0),
    },
}

__all__ = ["celery_app"]
