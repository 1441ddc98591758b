"""Celery tasks package."""

from lwl.tasks import emails, maintenance

__all__ = ["emails", "maintenance"]
