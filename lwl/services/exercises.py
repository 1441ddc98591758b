"""Dictation exercise management."""
from __future__ import annotations

import uuid
from typing import Optional

from loguru import logger
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from lwl.db.models.exercise import Exercise
from lwl.schemas.exercise import ExerciseCreate
from lwl.services.streaks import record_language_activity

COMPLETION_THRESHOLD = 3


class ExerciseNotFoundError(ValueError):
    """Raised when an exercise does not exist or belongs to someone else."""


class ExerciseService:
    def __init__(self, db: Session):
        self.db = db

    def create(self, user_id: uuid.UUID, payload: ExerciseCreate) -> Exercise:
        exercise = Exercise(
            user_id=user_id,
            title=payload.title.strip(),
            text=payload.text,
            language=payload.language,
            tags=[tag.strip() for tag in payload.tags if tag.strip()],
            audio_url=payload.audio_url,
            completion_count=0,
            is_completed=False,
            archived=False,
        )
        self.db.add(exercise)
        self.db.commit()
        self.db.refresh(exercise)
        logger.info("Exercise created", exercise_id=str(exercise.id), language=exercise.language)
        return exercise

    def get(self, user_id: uuid.UUID, exercise_id: uuid.UUID) -> Exercise:
        exercise = self.db.get(Exercise, exercise_id)
        if exercise is None or exercise.user_id != user_id:
            raise ExerciseNotFoundError("Exercise not found")
        return exercise

    def list_exercises(
        self,
        user_id: uuid.UUID,
        *,
        language: Optional[str] = None,
        include_archived: bool = False,
        limit: int = 50,
        offset: int = 0,
    ) -> list[Exercise]:
        stmt = select(Exercise).where(Exercise.user_id == user_id)
        if language:
            stmt = stmt.where(Exercise.language == language)
        if not include_archived:
            stmt = stmt.where(Exercise.archived.is_(False))
        stmt = stmt.order_by(Exercise.created_at.desc()).offset(offset).limit(limit)
        return list(self.db.scalars(stmt))

    def archive(self, user_id: uuid.UUID, exercise_id: uuid.UUID) -> Exercise:
        exercise = self.get(user_id, exercise_id)
        exercise.archived = True
        self.db.commit()
        logger.info("Exercise archived", exercise_id=str(exercise_id))
        return exercise

    def record_completion(self, user_id: uuid.UUID, exercise_id: uuid.UUID) -> Exercise:
        """Count one more successful run; the exercise completes after three."""

        exercise = self.get(user_id, exercise_id)
        exercise.completion_count = (exercise.completion_count or 0) + 1
        if exercise.completion_count >= COMPLETION_THRESHOLD:
            exercise.is_completed = True
        record_language_activity(self.db, user_id, exercise.language, commit=False)
        self.db.commit()
        self.db.refresh(exercise)
        return exercise

    def reading_exercise_count(self, user_id: uuid.UUID, language: str) -> int:
        stmt = select(func.count(Exercise.id)).where(
            Exercise.user_id == user_id,
            Exercise.language == language,
            Exercise.archived.is_(False),
        )
        return int(self.db.scalar(stmt) or 0)
