"""Bidirectional translation exercises and their review history."""
import uuid

from sqlalchemy import Boolean, Column, Date, DateTime, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from lwl.db.base import Base


class BidirectionalExercise(Base):
    """A sentence translated forward into the support language and back again."""

    __tablename__ = "bidirectional_exercises"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(
        UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    original_sentence = Column(Text, nullable=False)
    target_language = Column(String(20), nullable=False, index=True)
    support_language = Column(String(20), nullable=False)

    normal_translation = Column(Text, nullable=True)
    literal_translation = Column(Text, nullable=True)
    user_forward_translation = Column(Text, nullable=True)
    user_back_translation = Column(Text, nullable=True)
    reflection_notes = Column(Text, nullable=True)
    original_audio_url = Column(String(1024), nullable=True)

    # learning -> reviewing -> mastered
    status = Column(String(20), nullable=False, default="learning", index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    reviews = relationship(
        "BidirectionalReview", back_populates="exercise", cascade="all, delete-orphan"
    )


class BidirectionalReview(Base):
    """One recall attempt in either direction."""

    __tablename__ = "bidirectional_reviews"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    exercise_id = Column(
        UUID(as_uuid=True),
        ForeignKey("bidirectional_exercises.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id = Column(
        UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    review_type = Column(String(10), nullable=False)  # forward / backward
    user_recall_attempt = Column(Text, nullable=False)
    is_correct = Column(Boolean, nullable=False)
    feedback = Column(Text, nullable=True)
    review_round = Column(Integer, nullable=True)
    due_date = Column(Date, nullable=False, index=True)

    completed_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    exercise = relationship("BidirectionalExercise", back_populates="reviews")


class BidirectionalMasteredWord(Base):
    """Words extracted from an exercise once it has been recalled reliably."""

    __tablename__ = "bidirectional_mastered_words"
    __table_args__ = (
        UniqueConstraint("user_id", "word", "language", name="uq_bidirectional_mastered_user_word"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(
        UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    exercise_id = Column(
        UUID(as_uuid=True),
        ForeignKey("bidirectional_exercises.id", ondelete="CASCADE"),
        nullable=False,
    )
    word = Column(String(255), nullable=False)
    language = Column(String(20), nullable=False)
    mastered_at = Column(DateTime(timezone=True), server_default=func.now())
