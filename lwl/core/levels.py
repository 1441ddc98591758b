"""Vocabulary size levels shown on learner dashboards."""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class LevelInfo:
    level: str
    title: str
    description: str
    cefr_equivalent: str
    min_words: int
    max_words: int | None


LANGUAGE_LEVELS: tuple[LevelInfo, ...] = (
    LevelInfo("A0", "Beginner Starter", "Learning the basics", "Pre-A1", 0, 100),
    LevelInfo("A1", "Elementary", "Can handle basic everyday expressions", "A1", 101, 500),
    LevelInfo("A2", "Pre-Intermediate", "Can communicate simple tasks", "A2", 501, 1000),
    LevelInfo("B1", "Intermediate", "Intermediate use of language", "B1", 1001, 2000),
    LevelInfo("B2", "Upper Intermediate", "Independent, extended vocabulary", "B2", 2001, 4000),
    LevelInfo("C1", "Advanced", "Advanced vocabulary range", "C1", 4001, 7000),
    LevelInfo("C2", "Proficient", "Near-native command of vocabulary", "C2", 7001, None),
)


def level_for(mastered_words: int) -> LevelInfo:
    for info in LANGUAGE_LEVELS:
        if mastered_words >= info.min_words and (info.max_words is None or mastered_words <= info.max_words):
            return info
    return LANGUAGE_LEVELS[-1]


def words_to_next_level(mastered_words: int) -> int:
    info = level_for(mastered_words)
    if info.max_words is None:
        return 0
    return info.max_words - mastered_words


def level_progress(mastered_words: int) -> int:
    """Percent progress through the current level."""

    info = level_for(mastered_words)
    if info.max_words is None:
        return 100
    span = info.max_words - info.min_words
    return round((mastered_words - info.min_words) / span * 100)
