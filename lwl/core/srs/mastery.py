"""Word mastery scheduler.

Each known word carries a mastery level between 1 and 10 plus review and
correct counters. A review recomputes the level and pushes the next review
date out geometrically with the current level. Correct answers grow the
interval by ``easy_multiplier`` per level, incorrect ones by the smaller
``hard_multiplier``; the multiplier is nudged up for learners above 90%
accuracy and down below 70%.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, timedelta

MIN_LEVEL = 1
MAX_LEVEL = 10
MASTERED_LEVEL = 4


@dataclass(frozen=True, slots=True)
class MasteryConfig:
    """Tuning parameters for the mastery scheduler."""

    initial_interval: int = 1  # days
    easy_multiplier: float = 2.5
    hard_multiplier: float = 1.3
    max_interval: int = 365  # days
    min_accuracy_for_promotion: float = 0.8
    struggling_threshold: float = 0.6


DEFAULT_CONFIG = MasteryConfig()


@dataclass(slots=True)
class MasteryState:
    """Counters stored for a known word."""

    mastery_level: int
    review_count: int
    correct_count: int


@dataclass(slots=True)
class MasteryOutcome:
    """Result of applying one review to a :class:`MasteryState`."""

    mastery_level: int
    review_count: int
    correct_count: int
    interval_days: int
    next_review_date: date


def accuracy(correct_count: int, review_count: int) -> float:
    if review_count <= 0:
        return 0.0
    return correct_count / review_count


def next_interval(
    current_level: int, was_correct: bool, new_accuracy: float, config: MasteryConfig = DEFAULT_CONFIG
) -> int:
    """Return the number of days until the next review."""

    multiplier = config.easy_multiplier if was_correct else config.hard_multiplier
    if new_accuracy > 0.9:
        multiplier *= 1.2
    elif new_accuracy < 0.7:
        multiplier *= 0.8

    interval = math.ceil(config.initial_interval * multiplier ** (current_level - 1))
    return min(interval, config.max_interval)


def next_level(
    correct_count: int, review_count: int, current_level: int, config: MasteryConfig = DEFAULT_CONFIG
) -> int:
    """Promote, demote or keep the mastery level given updated counters."""

    ratio = accuracy(correct_count, review_count)
    if ratio >= config.min_accuracy_for_promotion and correct_count >= current_level * 2:
        return min(current_level + 1, MAX_LEVEL)
    if ratio < config.struggling_threshold and review_count >= 5:
        return max(current_level - 1, MIN_LEVEL)
    return current_level


def mastery_score(correct_count: int, review_count: int, mastery_level: int) -> float:
    """Blend accuracy, experience and level into a 0-100 score."""

    if review_count == 0:
        return 0.0
    experience_bonus = min(review_count / 20, 1)
    level_bonus = mastery_level / 10
    score = (accuracy(correct_count, review_count) * 0.6 + experience_bonus * 0.2 + level_bonus * 0.2) * 100
    return min(score, 100.0)


def is_struggling(
    correct_count: int, review_count: int, config: MasteryConfig = DEFAULT_CONFIG
) -> bool:
    return review_count >= 3 and accuracy(correct_count, review_count) < config.struggling_threshold


def review(
    state: MasteryState | None,
    is_correct: bool,
    today: date,
    config: MasteryConfig = DEFAULT_CONFIG,
) -> MasteryOutcome:
    """Apply a single review to ``state`` (``None`` for a never-seen word)."""

    if state is None:
        return MasteryOutcome(
            mastery_level=MIN_LEVEL,
            review_count=1,
            correct_count=1 if is_correct else 0,
            interval_days=config.initial_interval,
            next_review_date=today + timedelta(days=config.initial_interval),
        )

    correct_count = state.correct_count + (1 if is_correct else 0)
    review_count = state.review_count + 1
    interval = next_interval(
        state.mastery_level, is_correct, accuracy(correct_count, review_count), config
    )
    return MasteryOutcome(
        mastery_level=next_level(correct_count, review_count, state.mastery_level, config),
        review_count=review_count,
        correct_count=correct_count,
        interval_days=interval,
        next_review_date=today + timedelta(days=interval),
    )
