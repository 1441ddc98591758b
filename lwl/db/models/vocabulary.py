"""Vocabulary database models."""
import uuid

from sqlalchemy import Column, DateTime, ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.sql import func

from lwl.db.base import Base


class VocabularyItem(Base):
    """A word saved by a learner, optionally linked to the exercise it came from."""

    __tablename__ = "vocabulary"
    __table_args__ = (
        UniqueConstraint("user_id", "word", "language", name="uq_vocabulary_user_word_language"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(
        UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    exercise_id = Column(UUID(as_uuid=True), nullable=True)
    word = Column(String(255), nullable=False)
    language = Column(String(20), nullable=False, index=True)
    definition = Column(Text, nullable=False, default="")
    example_sentence = Column(Text, nullable=False, default="")
    explanation = Column(Text, nullable=True)
    audio_url = Column(String(1024), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    def __repr__(self) -> str:  # pragma: no cover - debug helper
        return f"<VocabularyItem word={self.word!r} language={self.language!r}>"
