"""Promotional banners and promo code usage history."""
import uuid

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.sql import func

from lwl.db.base import Base


class PromotionalBanner(Base):
    __tablename__ = "promotional_banners"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    title = Column(String(255), nullable=False)
    content = Column(Text, nullable=False)
    target_route = Column(String(255), nullable=False, default="/", index=True)
    banner_type = Column(String(30), nullable=True)
    button_text = Column(String(100), nullable=True)
    button_url = Column(String(1024), nullable=True)
    background_color = Column(String(30), nullable=True)
    text_color = Column(String(30), nullable=True)
    promo_code = Column(String(100), nullable=True)
    priority = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True)
    start_date = Column(DateTime(timezone=True), nullable=True)
    end_date = Column(DateTime(timezone=True), nullable=True)
    created_by = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())


class PromoCodeUsage(Base):
    """A checkout that applied a promotion code."""

    __tablename__ = "promo_code_usage"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    promo_code = Column(String(100), nullable=False, index=True)
    email = Column(String(255), nullable=False)
    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    stripe_session_id = Column(String(255), nullable=True)
    discount_amount = Column(Integer, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
