"""Persistence wrapper around the word mastery scheduler."""
from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Optional

from loguru import logger
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from lwl.core.srs import mastery
from lwl.db.models.known_word import KnownWord


@dataclass
class WordPerformance:
    word: str
    language: str
    mastery_level: int
    review_count: int
    correct_count: int
    accuracy: float
    mastery_score: float
    is_struggling: bool
    is_mastered: bool
    last_reviewed_at: Optional[datetime]
    next_review_date: Optional[date]


def normalize_word(word: str) -> str:
    return word.strip().lower()


class SpacedRepetitionEngine:
    """Read and update :class:`KnownWord` rows for one learner."""

    def __init__(self, db: Session, config: mastery.MasteryConfig = mastery.DEFAULT_CONFIG):
        self.db = db
        self.config = config

    def _select(self, user_id: uuid.UUID, word: str, language: str):
        return select(KnownWord).where(
            KnownWord.user_id == user_id,
            KnownWord.word == normalize_word(word),
            KnownWord.language == language,
        )

    def _performance(self, known: KnownWord) -> WordPerformance:
        return WordPerformance(
            word=known.word,
            language=known.language,
            mastery_level=known.mastery_level,
            review_count=known.review_count,
            correct_count=known.correct_count,
            accuracy=known.accuracy,
            mastery_score=mastery.mastery_score(known.correct_count, known.review_count, known.mastery_level),
            is_struggling=mastery.is_struggling(known.correct_count, known.review_count, self.config),
            is_mastered=known.mastery_level >= mastery.MASTERED_LEVEL,
            last_reviewed_at=known.last_reviewed_at,
            next_review_date=known.next_review_date,
        )

    def get_word_performance(self, user_id: uuid.UUID, word: str, language: str) -> Optional[WordPerformance]:
        known = self.db.scalar(self._select(user_id, word, language))
        return self._performance(known) if known is not None else None

    def update_word_performance(
        self,
        user_id: uuid.UUID,
        word: str,
        language: str,
        is_correct: bool,
        *,
        today: Optional[date] = None,
        commit: bool = True,
    ) -> KnownWord:
        """Apply one review result.

        The row is locked with ``SELECT ... FOR UPDATE`` so concurrent reviews of
        the same word are applied one after the other. A first review inserts the
        row inside a savepoint; losing that insert to a concurrent first review
        falls back to locking the row the other transaction created.
        """

        now = datetime.now(timezone.utc)
        review_day = today or now.date()
        locked = self._select(user_id, word, language).with_for_update()
        known = self.db.scalar(locked)

        created = False
        if known is None:
            known = self._claim_new_word(user_id, word, language, now)
            created = known is not None
            if known is None:
                logger.info("Concurrent first review detected", word=normalize_word(word), language=language)
                known = self.db.scalar(locked.execution_options(populate_existing=True))

        state = None
        if not created:
            state = mastery.MasteryState(
                mastery_level=known.mastery_level,
                review_count=known.review_count,
                correct_count=known.correct_count,
            )
        outcome = mastery.review(state, is_correct, review_day, self.config)

        previous_level = state.mastery_level if state else 0
        known.mastery_level = outcome.mastery_level
        known.review_count = outcome.review_count
        known.correct_count = outcome.correct_count
        known.last_reviewed_at = now
        known.next_review_date = outcome.next_review_date

        if commit:
            self.db.commit()
        else:
            self.db.flush()

        logger.info(
            "Word mastery updated",
            word=known.word,
            language=language,
            level=outcome.mastery_level,
            previous_level=previous_level,
            interval_days=outcome.interval_days,
        )
        return known

    def _claim_new_word(
        self, user_id: uuid.UUID, word: str, language: str, now: datetime
    ) -> Optional[KnownWord]:
        """Insert a fresh row, or return ``None`` if another transaction already did."""

        known = KnownWord(user_id=user_id, word=normalize_word(word), language=language, first_seen_at=now)
        try:
            with self.db.begin_nested():
                self.db.add(known)
        except IntegrityError:
            return None
        return known

    def initialize_word(self, user_id: uuid.UUID, word: str, language: str, *, today: Optional[date] = None) -> KnownWord:
        """Ensure a word is tracked without counting a review."""

        known = self.db.scalar(self._select(user_id, word, language))
        if known is not None:
            return known
        now = datetime.now(timezone.utc)
        known = KnownWord(
            user_id=user_id,
            word=normalize_word(word),
            language=language,
            mastery_level=mastery.MIN_LEVEL,
            review_count=0,
            correct_count=0,
            first_seen_at=now,
            next_review_date=today or now.date(),
        )
        self.db.add(known)
        self.db.commit()
        self.db.refresh(known)
        return known

    def get_words_for_review(
        self, user_id: uuid.UUID, language: str, *, limit: int = 20, today: Optional[date] = None
    ) -> list[KnownWord]:
        due = today or datetime.now(timezone.utc).date()
        stmt = (
            select(KnownWord)
            .where(
                KnownWord.user_id == user_id,
                KnownWord.language == language,
                KnownWord.next_review_date <= due,
            )
            .order_by(KnownWord.next_review_date.asc(), KnownWord.word.asc())
            .limit(limit)
        )
        return list(self.db.scalars(stmt))

    def get_struggling_words(self, user_id: uuid.UUID, language: str, *, limit: int = 10) -> list[KnownWord]:
        stmt = select(KnownWord).where(
            KnownWord.user_id == user_id,
            KnownWord.language == language,
            KnownWord.review_count >= 3,
        )
        struggling = [
            known
            for known in self.db.scalars(stmt)
            if mastery.is_struggling(known.correct_count, known.review_count, self.config)
        ]
        struggling.sort(key=lambda known: (known.accuracy, known.word))
        return struggling[:limit]
