"""Daily activity rows used for streak tracking."""
import uuid

from sqlalchemy import Column, Date, DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.sql import func

from lwl.db.base import Base


class UserDailyActivity(Base):
    """Per-language activity counters for a single day."""

    __tablename__ = "user_daily_activities"
    __table_args__ = (
        UniqueConstraint("user_id", "language", "activity_date", name="uq_daily_activity_user_day"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(
        UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    language = Column(String(20), nullable=False)
    activity_date = Column(Date, nullable=False, index=True)
    activity_count = Column(Integer, nullable=False, default=0)
    exercises_completed = Column(Integer, nullable=False, default=0)
    words_mastered = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
