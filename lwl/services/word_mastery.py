"""Mastered-word statistics across practice modes."""
from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from lwl.core.srs.mastery import MASTERED_LEVEL
from lwl.db.models import BidirectionalMasteredWord, Exercise, KnownWord, VocabularyItem


@dataclass
class MasteryStats:
    total_mastered: int
    sentence_mining_mastered: int
    regular_exercise_mastered: int
    bidirectional_mastered: int
    breakdown: dict[str, float] = field(default_factory=dict)


@dataclass
class MasteryAchievement:
    word: str
    source: str
    mastered_at: Optional[datetime]


class WordMasteryService:
    """Combine known words, bidirectional words and completed-exercise vocabulary.

    A word counts once towards ``total_mastered`` even when several sources
    report it; the regular-exercise share is whatever the other two sources
    do not already explain.
    """

    def __init__(self, db: Session):
        self.db = db

    def _known_mastered(self, user_id: uuid.UUID, language: str) -> set[str]:
        stmt = select(KnownWord.word).where(
            KnownWord.user_id == user_id,
            KnownWord.language == language,
            KnownWord.mastery_level >= MASTERED_LEVEL,
        )
        return set(self.db.scalars(stmt))

    def _bidirectional_mastered(self, user_id: uuid.UUID, language: str) -> set[str]:
        stmt = select(BidirectionalMasteredWord.word).where(
            BidirectionalMasteredWord.user_id == user_id,
            BidirectionalMasteredWord.language == language,
        )
        return set(self.db.scalars(stmt))

    def _exercise_vocabulary(self, user_id: uuid.UUID, language: str) -> set[str]:
        stmt = (
            select(VocabularyItem.word)
            .join(Exercise, Exercise.id == VocabularyItem.exercise_id)
            .where(
                VocabularyItem.user_id == user_id,
                VocabularyItem.language == language,
                Exercise.is_completed.is_(True),
            )
        )
        return {word.lower() for word in self.db.scalars(stmt)}

    def get_mastery_stats(self, user_id: uuid.UUID, language: str) -> MasteryStats:
        known = self._known_mastered(user_id, language)
        bidirectional = self._bidirectional_mastered(user_id, language)
        regular = self._exercise_vocabulary(user_id, language)

        total = len(known | bidirectional | regular)
        stats = MasteryStats(
            total_mastered=total,
            sentence_mining_mastered=len(known),
            bidirectional_mastered=len(bidirectional),
            regular_exercise_mastered=len(regular - known - bidirectional),
        )
        stats.breakdown = self.get_mastery_breakdown(stats)
        return stats

    @staticmethod
    def get_mastery_breakdown(stats: MasteryStats) -> dict[str, float]:
        """Percentage share per source, omitting sources with no words."""

        if stats.total_mastered == 0:
            return {}
        counts = {
            "sentence_mining": stats.sentence_mining_mastered,
            "regular_exercises": stats.regular_exercise_mastered,
            "bidirectional": stats.bidirectional_mastered,
        }
        return {
            source: round(count / stats.total_mastered * 100)
            for source, count in counts.items()
            if count > 0
        }

    def is_word_mastered(self, user_id: uuid.UUID, word: str, language: str) -> bool:
        normalized = word.strip().lower()
        known = self.db.scalar(
            select(KnownWord.id).where(
                KnownWord.user_id == user_id,
                KnownWord.word == normalized,
                KnownWord.language == language,
                KnownWord.mastery_level >= MASTERED_LEVEL,
            )
        )
        if known is not None:
            return True
        bidirectional = self.db.scalar(
            select(BidirectionalMasteredWord.id).where(
                BidirectionalMasteredWord.user_id == user_id,
                BidirectionalMasteredWord.word == normalized,
                BidirectionalMasteredWord.language == language,
            )
        )
        return bidirectional is not None

    def get_recent_mastery_achievements(
        self, user_id: uuid.UUID, language: str, limit: int = 10
    ) -> list[MasteryAchievement]:
        known_rows = self.db.execute(
            select(KnownWord.word, KnownWord.updated_at)
            .where(
                KnownWord.user_id == user_id,
                KnownWord.language == language,
                KnownWord.mastery_level >= MASTERED_LEVEL,
            )
            .order_by(KnownWord.updated_at.desc())
            .limit(limit)
        ).all()
        bidirectional_rows = self.db.execute(
            select(BidirectionalMasteredWord.word, BidirectionalMasteredWord.mastered_at)
            .where(
                BidirectionalMasteredWord.user_id == user_id,
                BidirectionalMasteredWord.language == language,
            )
            .order_by(BidirectionalMasteredWord.mastered_at.desc())
            .limit(limit)
        ).all()

        achievements = [MasteryAchievement(word, "sentence_mining", at) for word, at in known_rows]
        achievements.extend(MasteryAchievement(word, "bidirectional", at) for word, at in bidirectional_rows)
        achievements.sort(key=lambda item: item.mastered_at.timestamp() if item.mastered_at else 0.0, reverse=True)
        return achievements[:limit]
