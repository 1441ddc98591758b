"""Shadowing exercises and per-user progress."""
import uuid

from sqlalchemy import Column, DateTime, Float, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.sql import func

from lwl.db.base import Base
from lwl.db.types import StringList


class ShadowingExercise(Base):
    __tablename__ = "shadowing_exercises"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(
        UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    title = Column(String(255), nullable=False)
    language = Column(String(20), nullable=False)
    sentences = Column(StringList, nullable=False, default=list)
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class ShadowingProgress(Base):
    __tablename__ = "shadowing_progress"
    __table_args__ = (
        UniqueConstraint("user_id", "shadowing_exercise_id", name="uq_shadowing_progress_user_exercise"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(
        UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    shadowing_exercise_id = Column(
        UUID(as_uuid=True),
        ForeignKey("shadowing_exercises.id", ondelete="CASCADE"),
        nullable=False,
    )
    current_sentence_index = Column(Integer, nullable=False, default=0)
    completed_sentences = Column(Integer, nullable=False, default=0)
    total_sentences = Column(Integer, nullable=False, default=0)
    completion_percentage = Column(Float, nullable=False, default=0.0)
    last_practiced_at = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
