"""Fixed-step schedule for bidirectional translation reviews."""
from __future__ import annotations

from datetime import date, timedelta

# Correct review number -> days until the next review.
REVIEW_STEPS = {1: 1, 2: 3, 3: 7}
GRADUATED_INTERVAL = 30
RELEARN_INTERVAL = 1
MASTERY_REVIEW_NUMBER = 3


def next_review_date(is_correct: bool, review_number: int, today: date) -> date:
    """Return the due date after the ``review_number``-th review of one direction."""

    if not is_correct:
        return today + timedelta(days=RELEARN_INTERVAL)
    days = REVIEW_STEPS.get(review_number, GRADUATED_INTERVAL)
    return today + timedelta(days=days)
