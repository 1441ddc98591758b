"""Cloze-based sentence mining sessions."""
from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Optional

from loguru import logger
from sqlalchemy import select
from sqlalchemy.orm import Session

from lwl.core.srs.mastery import MASTERED_LEVEL
from lwl.core.text import EvaluationResult, evaluate_answer
from lwl.db.models.known_word import KnownWord
from lwl.db.models.sentence_mining import SentenceMiningExercise, SentenceMiningSession
from lwl.schemas.sentence_mining import MiningExerciseCreate, SessionStartRequest
from lwl.services.sentence_generator import SentenceGenerator
from lwl.services.session_tracker import SessionWordTracker, load_recent_words, session_word_tracker
from lwl.services.spaced_repetition import SpacedRepetitionEngine, normalize_word
from lwl.services.streaks import record_language_activity


class MiningSessionNotFoundError(ValueError):
    """Raised when a session or exercise is missing or owned by someone else."""


class MiningSessionClosedError(ValueError):
    """Raised when modifying a session that has already been completed."""


class MiningExerciseAnsweredError(MiningSessionClosedError):
    """Raised when a cloze exercise already has a graded answer."""


class SentenceMiningService:
    def __init__(
        self,
        db: Session,
        *,
        engine: Optional[SpacedRepetitionEngine] = None,
        tracker: SessionWordTracker = session_word_tracker,
    ):
        self.db = db
        self.engine = engine or SpacedRepetitionEngine(db)
        self.tracker = tracker

    def start_session(self, user_id: uuid.UUID, payload: SessionStartRequest) -> SentenceMiningSession:
        self.tracker.cleanup()
        recent_words = load_recent_words(self.db, user_id, payload.language)
        session = SentenceMiningSession(
            user_id=user_id,
            language=payload.language,
            difficulty_level=payload.difficulty_level,
            exercise_types=payload.exercise_types,
            total_exercises=0,
            correct_exercises=0,
            new_words_encountered=0,
            words_mastered=0,
            session_data={"recent_words": recent_words},
            started_at=datetime.now(timezone.utc),
        )
        self.db.add(session)
        self.db.commit()
        self.db.refresh(session)
        logger.info("Sentence mining session started", session_id=str(session.id), language=session.language)
        return session

    def get_session(self, user_id: uuid.UUID, session_id: uuid.UUID) -> SentenceMiningSession:
        session = self.db.get(SentenceMiningSession, session_id)
        if session is None or session.user_id != user_id:
            raise MiningSessionNotFoundError("Session not found")
        return session

    def avoidance_list(self, user_id: uuid.UUID, session_id: uuid.UUID) -> list[str]:
        session = self.get_session(user_id, session_id)
        recent = (session.session_data or {}).get("recent_words", [])
        return self.tracker.get_avoidance_list(session.id, user_id, recent)

    def add_exercise(
        self, user_id: uuid.UUID, session_id: uuid.UUID, payload: MiningExerciseCreate
    ) -> SentenceMiningExercise:
        session = self.get_session(user_id, session_id)
        if session.completed_at is not None:
            raise MiningSessionClosedError("Session already completed")
        exercise = SentenceMiningExercise(
            session_id=session.id,
            exercise_type="cloze",
            sentence=payload.sentence,
            cloze_sentence=payload.cloze_sentence,
            translation=payload.translation,
            target_words=payload.target_words,
            unknown_words=payload.unknown_words,
            difficulty_score=payload.difficulty_score,
            hints_used=0,
        )
        self.db.add(exercise)
        for word in payload.target_words:
            self.tracker.add_word_to_session(session.id, word)
        self.db.commit()
        self.db.refresh(exercise)
        return exercise

    def generate_exercise(
        self, user_id: uuid.UUID, session_id: uuid.UUID, generator: SentenceGenerator
    ) -> SentenceMiningExercise:
        """Ask the generator for a cloze sentence that skips the session's avoided words."""

        session = self.get_session(user_id, session_id)
        if session.completed_at is not None:
            raise MiningSessionClosedError("Session already completed")

        avoid = self.avoidance_list(user_id, session_id)
        generated = generator.generate_sentence(session.language, session.difficulty_level, avoid)
        payload = MiningExerciseCreate(
            sentence=generated.sentence,
            cloze_sentence=generated.cloze_sentence,
            target_words=[generated.target_word],
        )
        return self.add_exercise(user_id, session_id, payload)

    def submit_answer(
        self,
        user_id: uuid.UUID,
        exercise_id: uuid.UUID,
        user_response: str,
        *,
        hints_used: int = 0,
        completion_time: Optional[int] = None,
    ) -> tuple[SentenceMiningExercise, EvaluationResult]:
        """Grade a cloze answer and feed the result into word mastery."""

        exercise = self.db.get(SentenceMiningExercise, exercise_id)
        if exercise is None or exercise.session.user_id != user_id:
            raise MiningSessionNotFoundError("Exercise not found")
        session = exercise.session
        if session.completed_at is not None:
            raise MiningSessionClosedError("Session already completed")
        if exercise.completed_at is not None:
            raise MiningExerciseAnsweredError("Exercise already answered")

        result = evaluate_answer(user_response, exercise.target_words[0])

        exercise.user_response = user_response
        exercise.is_correct = result.is_correct
        exercise.hints_used = hints_used
        exercise.completion_time = completion_time
        exercise.completed_at = datetime.now(timezone.utc)

        session.total_exercises += 1
        if result.is_correct:
            session.correct_exercises += 1

        new_words = 0
        for word in exercise.target_words:
            if self.engine.get_word_performance(user_id, word, session.language) is None:
                new_words += 1
            self.engine.update_word_performance(
                user_id, word, session.language, result.is_correct, commit=False
            )
            self.tracker.add_word_to_session(session.id, word)
            self.tracker.set_cooldown(user_id, word)
        session.new_words_encountered += new_words

        self.db.commit()
        self.db.refresh(exercise)
        logger.info(
            "Cloze answer graded",
            exercise_id=str(exercise.id),
            correct=result.is_correct,
            category=result.category,
        )
        return exercise, result

    def complete_session(self, user_id: uuid.UUID, session_id: uuid.UUID) -> SentenceMiningSession:
        session = self.get_session(user_id, session_id)
        if session.completed_at is not None:
            return session

        targets = {normalize_word(word) for exercise in session.exercises for word in exercise.target_words}
        mastered = 0
        if targets:
            mastered = len(
                self.db.scalars(
                    select(KnownWord.word).where(
                        KnownWord.user_id == user_id,
                        KnownWord.language == session.language,
                        KnownWord.word.in_(targets),
                        KnownWord.mastery_level >= MASTERED_LEVEL,
                    )
                ).all()
            )

        session.words_mastered = mastered
        session.completed_at = datetime.now(timezone.utc)
        record_language_activity(
            self.db,
            user_id,
            session.language,
            exercises=session.total_exercises,
            words=mastered,
            commit=False,
        )
        self.db.commit()
        self.db.refresh(session)
        self.tracker.clear_session(session.id)
        logger.info(
            "Sentence mining session completed",
            session_id=str(session.id),
            total=session.total_exercises,
            correct=session.correct_exercises,
        )
        return session
