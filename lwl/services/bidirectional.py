"""Bidirectional translation exercises with fixed-step reviews."""
from __future__ import annotations

import re
import uuid
from datetime import date, datetime, timezone
from typing import Optional

from loguru import logger
from sqlalchemy import delete, func, select
from sqlalchemy.orm import Session

from lwl.core.srs.bidirectional import MASTERY_REVIEW_NUMBER, next_review_date
from lwl.db.models.bidirectional import BidirectionalExercise, BidirectionalMasteredWord, BidirectionalReview
from lwl.schemas.bidirectional import BidirectionalCreate, BidirectionalReviewCreate, BidirectionalTranslationsUpdate
from lwl.schemas.vocabulary import VocabularyItemCreate
from lwl.services.llm_service import LLMProviderError, LLMService
from lwl.services.streaks import record_language_activity
from lwl.services.vocabulary import VocabularyService

REVIEW_TYPES = ("forward", "backward")
_NON_WORD = re.compile(r"[^\w\s]")
_WHITESPACE = re.compile(r"\s+")


class BidirectionalNotFoundError(ValueError):
    """Raised when an exercise is missing or owned by another user."""


def extract_words(sentence: str) -> list[str]:
    """Lower-cased words longer than two characters, punctuation removed, duplicates dropped."""

    cleaned = _NON_WORD.sub("", sentence.lower())
    return list(dict.fromkeys(word for word in _WHITESPACE.split(cleaned) if len(word) > 2))


class BidirectionalService:
    def __init__(self, db: Session, llm_service: Optional[LLMService] = None):
        self.db = db
        self.llm_service = llm_service

    def _translations(self, payload: BidirectionalCreate) -> dict[str, str]:
        if self.llm_service is None:
            return {"normal": "", "literal": ""}
        try:
            return self.llm_service.translate_sentence(
                payload.original_sentence, payload.target_language, payload.support_language
            )
        except LLMProviderError:
            logger.exception("Translation generation failed")
            return {"normal": "", "literal": ""}

    def create(self, user_id: uuid.UUID, payload: BidirectionalCreate) -> BidirectionalExercise:
        translations = self._translations(payload)
        exercise = BidirectionalExercise(
            user_id=user_id,
            original_sentence=payload.original_sentence.strip(),
            target_language=payload.target_language,
            support_language=payload.support_language,
            normal_translation=translations["normal"] or None,
            literal_translation=translations["literal"] or None,
            status="learning",
        )
        self.db.add(exercise)
        self.db.commit()
        self.db.refresh(exercise)
        return exercise

    def get(self, user_id: uuid.UUID, exercise_id: uuid.UUID) -> BidirectionalExercise:
        exercise = self.db.get(BidirectionalExercise, exercise_id)
        if exercise is None or exercise.user_id != user_id:
            raise BidirectionalNotFoundError("Exercise not found")
        return exercise

    def list_exercises(self, user_id: uuid.UUID, status: Optional[str] = None) -> list[BidirectionalExercise]:
        stmt = select(BidirectionalExercise).where(BidirectionalExercise.user_id == user_id)
        if status:
            stmt = stmt.where(BidirectionalExercise.status == status)
        return list(self.db.scalars(stmt.order_by(BidirectionalExercise.created_at.desc())))

    def update_translations(
        self, user_id: uuid.UUID, exercise_id: uuid.UUID, payload: BidirectionalTranslationsUpdate
    ) -> BidirectionalExercise:
        exercise = self.get(user_id, exercise_id)
        for field, value in payload.model_dump(exclude_unset=True).items():
            setattr(exercise, field, value)
        self.db.commit()
        self.db.refresh(exercise)
        return exercise

    def promote_to_reviewing(self, user_id: uuid.UUID, exercise_id: uuid.UUID) -> BidirectionalExercise:
        exercise = self.get(user_id, exercise_id)
        exercise.status = "reviewing"
        record_language_activity(self.db, user_id, exercise.target_language, commit=False)
        self.db.commit()
        self.db.refresh(exercise)
        return exercise

    def _review_count(self, exercise_id: uuid.UUID, review_type: str, *, correct_only: bool = False) -> int:
        stmt = select(func.count(BidirectionalReview.id)).where(
            BidirectionalReview.exercise_id == exercise_id,
            BidirectionalReview.review_type == review_type,
        )
        if correct_only:
            stmt = stmt.where(BidirectionalReview.is_correct.is_(True))
        return int(self.db.scalar(stmt) or 0)

    def record_review(
        self,
        user_id: uuid.UUID,
        exercise_id: uuid.UUID,
        payload: BidirectionalReviewCreate,
        *,
        today: Optional[date] = None,
    ) -> BidirectionalReview:
        """Store a recall attempt and schedule the next one for the same direction."""

        exercise = self.get(user_id, exercise_id)
        review_day = today or datetime.now(timezone.utc).date()
        review_number = self._review_count(exercise.id, payload.review_type) + 1

        review = BidirectionalReview(
            exercise_id=exercise.id,
            user_id=user_id,
            review_type=payload.review_type,
            user_recall_attempt=payload.user_recall_attempt,
            is_correct=payload.is_correct,
            feedback=payload.feedback,
            review_round=review_number,
            due_date=next_review_date(payload.is_correct, review_number, review_day),
            completed_at=datetime.now(timezone.utc),
        )
        self.db.add(review)
        self.db.flush()

        mastered_words = 0
        if payload.is_correct and review_number >= MASTERY_REVIEW_NUMBER:
            mastered_words = self._mark_mastered_words(user_id, exercise)
            if all(
                self._review_count(exercise.id, kind, correct_only=True) >= MASTERY_REVIEW_NUMBER
                for kind in REVIEW_TYPES
            ):
                exercise.status = "mastered"
                logger.info("Bidirectional exercise mastered", exercise_id=str(exercise.id))

        record_language_activity(
            self.db, user_id, exercise.target_language, words=mastered_words, commit=False
        )
        self.db.commit()
        self.db.refresh(review)
        return review

    def _mark_mastered_words(self, user_id: uuid.UUID, exercise: BidirectionalExercise) -> int:
        words = extract_words(exercise.original_sentence)
        if not words:
            return 0
        existing = set(
            self.db.scalars(
                select(BidirectionalMasteredWord.word).where(
                    BidirectionalMasteredWord.user_id == user_id,
                    BidirectionalMasteredWord.language == exercise.target_language,
                    BidirectionalMasteredWord.word.in_(words),
                )
            )
        )
        vocabulary = VocabularyService(self.db)
        added = 0
        for word in words:
            if word not in existing:
                self.db.add(
                    BidirectionalMasteredWord(
                        user_id=user_id,
                        exercise_id=exercise.id,
                        word=word,
                        language=exercise.target_language,
                        mastered_at=datetime.now(timezone.utc),
                    )
                )
                added += 1
            vocabulary.save(
                user_id,
                VocabularyItemCreate(
                    word=word,
                    language=exercise.target_language,
                    definition=f"From bidirectional exercise: {exercise.original_sentence}",
                    example_sentence=exercise.original_sentence,
                    exercise_id=exercise.id,
                ),
                commit=False,
            )
        self.db.flush()
        return added

    def _latest_due_date(self, exercise_id: uuid.UUID, review_type: str) -> Optional[date]:
        return self.db.scalar(
            select(BidirectionalReview.due_date)
            .where(
                BidirectionalReview.exercise_id == exercise_id,
                BidirectionalReview.review_type == review_type,
            )
            .order_by(BidirectionalReview.completed_at.desc(), BidirectionalReview.created_at.desc())
            .limit(1)
        )

    def get_due_reviews(
        self, user_id: uuid.UUID, *, today: Optional[date] = None
    ) -> list[tuple[BidirectionalExercise, str]]:
        due_day = today or datetime.now(timezone.utc).date()
        due: list[tuple[BidirectionalExercise, str]] = []
        for exercise in self.list_exercises(user_id, status="reviewing"):
            for review_type in REVIEW_TYPES:
                latest = self._latest_due_date(exercise.id, review_type)
                if latest is None or latest <= due_day:
                    due.append((exercise, review_type))
        return due

    def list_mastered_words(self, user_id: uuid.UUID, language: Optional[str] = None) -> list[BidirectionalMasteredWord]:
        stmt = select(BidirectionalMasteredWord).where(BidirectionalMasteredWord.user_id == user_id)
        if language:
            stmt = stmt.where(BidirectionalMasteredWord.language == language)
        return list(self.db.scalars(stmt.order_by(BidirectionalMasteredWord.mastered_at.desc())))

    def delete(self, user_id: uuid.UUID, exercise_id: uuid.UUID) -> None:
        exercise = self.get(user_id, exercise_id)
        self.db.execute(
            delete(BidirectionalMasteredWord).where(BidirectionalMasteredWord.exercise_id == exercise.id)
        )
        self.db.delete(exercise)
        self.db.commit()
        logger.info("Bidirectional exercise deleted", exercise_id=str(exercise_id))
