"""Dictation exercise model."""
import uuid

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.sql import func

from lwl.db.base import Base
from lwl.db.types import StringList


class Exercise(Base):
    """A user-owned dictation exercise.

    Exercises are archived rather than deleted so completion history survives.
    """

    __tablename__ = "exercises"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(
        UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    title = Column(String(255), nullable=False)
    text = Column(Text, nullable=False)
    language = Column(String(20), nullable=False, index=True)
    tags = Column(StringList, nullable=True)
    audio_url = Column(String(1024), nullable=True)

    completion_count = Column(Integer, default=0)
    is_completed = Column(Boolean, default=False)
    archived = Column(Boolean, default=False, index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    def __repr__(self) -> str:  # pragma: no cover - debug helper
        return f"<Exercise title={self.title!r} language={self.language!r}>"
