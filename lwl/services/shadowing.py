"""Shadowing exercises and progress tracking."""
from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.orm import Session

from lwl.db.models.shadowing import ShadowingExercise, ShadowingProgress
from lwl.schemas.activity import ShadowingExerciseCreate
from lwl.services.streaks import record_language_activity


class ShadowingNotFoundError(ValueError):
    """Raised when a shadowing exercise is missing."""


class ShadowingService:
    def __init__(self, db: Session):
        self.db = db

    def create(self, user_id: uuid.UUID, payload: ShadowingExerciseCreate) -> ShadowingExercise:
        exercise = ShadowingExercise(
            user_id=user_id,
            title=payload.title,
            language=payload.language,
            sentences=[sentence.strip() for sentence in payload.sentences if sentence.strip()],
        )
        self.db.add(exercise)
        self.db.commit()
        self.db.refresh(exercise)
        return exercise

    def list_exercises(self, user_id: uuid.UUID) -> list[ShadowingExercise]:
        stmt = (
            select(ShadowingExercise)
            .where(ShadowingExercise.user_id == user_id)
            .order_by(ShadowingExercise.created_at.desc())
        )
        return list(self.db.scalars(stmt))

    def update_progress(
        self,
        user_id: uuid.UUID,
        exercise_id: uuid.UUID,
        sentence_index: int,
        total_sentences: int,
    ) -> ShadowingProgress:
        """Record that ``sentence_index`` was practised; completion never moves backwards."""

        exercise = self.db.get(ShadowingExercise, exercise_id)
        if exercise is None or exercise.user_id != user_id:
            raise ShadowingNotFoundError("Shadowing exercise not found")

        progress = self.db.scalar(
            select(ShadowingProgress).where(
                ShadowingProgress.user_id == user_id,
                ShadowingProgress.shadowing_exercise_id == exercise_id,
            )
        )
        if progress is None:
            progress = ShadowingProgress(
                user_id=user_id,
                shadowing_exercise_id=exercise_id,
                completed_sentences=0,
            )
            self.db.add(progress)

        previous = progress.completed_sentences or 0
        completed = min(max(previous, sentence_index + 1), total_sentences)
        progress.current_sentence_index = sentence_index
        progress.completed_sentences = completed
        progress.total_sentences = total_sentences
        progress.completion_percentage = round(completed / total_sentences * 100, 2)
        progress.last_practiced_at = datetime.now(timezone.utc)
        if completed == total_sentences and previous < total_sentences:
            record_language_activity(self.db, user_id, exercise.language, commit=False)
        self.db.commit()
        self.db.refresh(progress)
        return progress
