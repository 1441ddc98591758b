"""Per-user word mastery records."""
import uuid

from sqlalchemy import Column, Date, DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.sql import func

from lwl.db.base import Base


class KnownWord(Base):
    """Mastery level and next review date for a word the learner has met."""

    __tablename__ = "known_words"
    __table_args__ = (
        UniqueConstraint("user_id", "word", "language", name="uq_known_words_user_word_language"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(
        UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    word = Column(String(255), nullable=False)
    language = Column(String(20), nullable=False, index=True)

    mastery_level = Column(Integer, nullable=False, default=1)
    review_count = Column(Integer, nullable=False, default=0)
    correct_count = Column(Integer, nullable=False, default=0)

    first_seen_at = Column(DateTime(timezone=True), server_default=func.now())
    last_reviewed_at = Column(DateTime(timezone=True), nullable=True)
    next_review_date = Column(Date, nullable=True, index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    @property
    def accuracy(self) -> float:
        if not self.review_count:
            return 0.0
        return self.correct_count / self.review_count
