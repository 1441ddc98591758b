"""Promo code validation and promotional banners."""
from __future__ import annotations

import time
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import stripe
from loguru import logger
from sqlalchemy import or_, select
from sqlalchemy.orm import Session

from lwl.db.models.promotion import PromoCodeUsage, PromotionalBanner
from lwl.schemas.billing import BannerCreate
from lwl.services.subscriptions import configure_stripe
from lwl.utils.exceptions import ExternalServiceError, ValidationError


def _coupon_for(promotion_code: Any) -> Any:
    coupon = promotion_code.get("coupon")
    if coupon is None:
        coupon = (promotion_code.get("promotion") or {}).get("coupon")
    if isinstance(coupon, str):
        return stripe.Coupon.retrieve(coupon)
    return coupon


def validate_promo_code(code: Optional[str]) -> Dict[str, Any]:
    """Look up a customer-facing promo code in Stripe.

    Invalid codes come back as ``{"valid": False, "error": ...}``; only a
    blank code or a provider failure raise.
    """

    if not code or not code.strip():
        raise ValidationError("Promo code is required")
    configure_stripe()
    try:
        promotion_codes = stripe.PromotionCode.list(code=code.strip(), limit=1)
        if not promotion_codes.data:
            return {"valid": False, "error": "Invalid promo code"}
        promotion_code = promotion_codes.data[0]
        if not promotion_code.get("active"):
            return {"valid": False, "error": "Promo code is not active"}
        expires_at = promotion_code.get("expires_at")
        if expires_at and expires_at < int(time.time()):
            return {"valid": False, "error": "Promo code has expired"}
        coupon = _coupon_for(promotion_code)
    except stripe.StripeError as exc:
        logger.error("Promo code validation failed", error=str(exc))
        raise ExternalServiceError("Failed to validate promo code", status_code=500) from exc

    amount_off = coupon.get("amount_off")
    percent_off = coupon.get("percent_off")
    return {
        "valid": True,
        "promotion_code_id": promotion_code.get("id"),
        "coupon_id": coupon.get("id"),
        "discount_amount": amount_off or percent_off or 0,
        "discount_type": "amount" if amount_off else "percent",
        "coupon_details": {
            "percent_off": percent_off,
            "amount_off": amount_off,
            "currency": coupon.get("currency"),
        },
    }


class PromotionService:
    def __init__(self, db: Session):
        self.db = db

    def create_banner(self, created_by: uuid.UUID, payload: BannerCreate) -> PromotionalBanner:
        if payload.start_date and payload.end_date and payload.end_date <= payload.start_date:
            raise ValidationError("End date must be after start date")
        banner = PromotionalBanner(created_by=created_by, **payload.model_dump())
        self.db.add(banner)
        self.db.commit()
        self.db.refresh(banner)
        return banner

    def list_banners(self) -> list[PromotionalBanner]:
        stmt = select(PromotionalBanner).order_by(
            PromotionalBanner.priority.desc(), PromotionalBanner.created_at.desc()
        )
        return list(self.db.scalars(stmt))

    def get_active_banner(self, route: str, *, now: Optional[datetime] = None) -> Optional[PromotionalBanner]:
        """Highest-priority active banner for ``route`` whose date window contains ``now``."""

        moment = now or datetime.now(timezone.utc)
        stmt = (
            select(PromotionalBanner)
            .where(
                PromotionalBanner.is_active.is_(True),
                PromotionalBanner.target_route == route,
                or_(PromotionalBanner.start_date.is_(None), PromotionalBanner.start_date <= moment),
                or_(PromotionalBanner.end_date.is_(None), PromotionalBanner.end_date >= moment),
            )
            .order_by(PromotionalBanner.priority.desc(), PromotionalBanner.created_at.desc())
            .limit(1)
        )
        return self.db.scalar(stmt)

    def list_usage(self, promo_code: Optional[str] = None, limit: int = 100) -> list[PromoCodeUsage]:
        stmt = select(PromoCodeUsage)
        if promo_code:
            stmt = stmt.where(PromoCodeUsage.promo_code == promo_code)
        return list(self.db.scalars(stmt.order_by(PromoCodeUsage.created_at.desc()).limit(limit)))
