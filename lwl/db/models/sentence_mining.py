"""Sentence mining session and exercise models."""
import uuid

from sqlalchemy import Boolean, Column, DateTime, Float, ForeignKey, Integer, String, Text
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from sqlalchemy.types import JSON

from lwl.db.base import Base
from lwl.db.types import StringList


class SentenceMiningSession(Base):
    """Aggregates cloze attempts made during one practice session."""

    __tablename__ = "sentence_mining_sessions"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(
        UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    language = Column(String(20), nullable=False, index=True)
    difficulty_level = Column(String(20), nullable=False, default="beginner")
    exercise_types = Column(StringList, nullable=True)

    total_exercises = Column(Integer, nullable=False, default=0)
    correct_exercises = Column(Integer, nullable=False, default=0)
    new_words_encountered = Column(Integer, nullable=False, default=0)
    words_mastered = Column(Integer, nullable=False, default=0)
    session_data = Column(JSONB().with_variant(JSON(), "sqlite"), nullable=True)

    started_at = Column(DateTime(timezone=True), server_default=func.now())
    completed_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)

    exercises = relationship(
        "SentenceMiningExercise",
        back_populates="session",
        cascade="all, delete-orphan",
        order_by="SentenceMiningExercise.created_at",
    )

    @property
    def accuracy(self) -> float:
        if not self.total_exercises:
            return 0.0
        return self.correct_exercises / self.total_exercises


class SentenceMiningExercise(Base):
    """A single cloze exercise and the learner's attempt at it."""

    __tablename__ = "sentence_mining_exercises"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    session_id = Column(
        UUID(as_uuid=True),
        ForeignKey("sentence_mining_sessions.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    exercise_type = Column(String(20), nullable=False, default="cloze")
    sentence = Column(Text, nullable=False)
    cloze_sentence = Column(Text, nullable=True)
    translation = Column(Text, nullable=True)
    target_words = Column(StringList, nullable=False, default=list)
    unknown_words = Column(StringList, nullable=False, default=list)
    difficulty_score = Column(Float, nullable=False, default=0.0)

    user_response = Column(Text, nullable=True)
    is_correct = Column(Boolean, nullable=True)
    hints_used = Column(Integer, nullable=False, default=0)
    completion_time = Column(Integer, nullable=True)

    completed_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    session = relationship("SentenceMiningSession", back_populates="exercises")
