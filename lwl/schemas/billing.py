"""Subscription and promotion schemas."""
from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class SubscriptionStatus(BaseModel):
    subscribed: bool
    subscription_tier: str = "free"
    subscription_status: Optional[str] = None
    trial_end: Optional[datetime] = None
    subscription_end: Optional[datetime] = None
    lifetime_access: bool = False


class CheckoutRequest(BaseModel):
    plan_id: str = Field(default="monthly", max_length=40)
    currency: str = Field(default="usd", min_length=3, max_length=3)
    promotion_code_id: Optional[str] = Field(default=None, max_length=255)
    promo_code: Optional[str] = Field(default=None, max_length=100)


class CheckoutResponse(BaseModel):
    url: str
    session_id: str


class PromoCodeRequest(BaseModel):
    code: Optional[str] = Field(default=None, max_length=100)


class PromoCodeValidation(BaseModel):
    valid: bool
    error: Optional[str] = None
    promotion_code_id: Optional[str] = None
    coupon_id: Optional[str] = None
    discount_amount: Optional[float] = None
    discount_type: Optional[Literal["amount", "percent"]] = None
    coupon_details: Optional[Dict[str, Any]] = None


class BannerCreate(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    content: str = Field(min_length=1, max_length=5000)
    target_route: str = Field(default="/", max_length=255)
    banner_type: Optional[str] = Field(default=None, max_length=30)
    button_text: Optional[str] = Field(default=None, max_length=100)
    button_url: Optional[str] = Field(default=None, max_length=1024)
    background_color: Optional[str] = Field(default=None, max_length=30)
    text_color: Optional[str] = Field(default=None, max_length=30)
    promo_code: Optional[str] = Field(default=None, max_length=100)
    priority: int = 0
    is_active: bool = True
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None


class BannerRead(BannerCreate):
    id: uuid.UUID
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class PromoUsageRead(BaseModel):
    id: uuid.UUID
    promo_code: str
    email: str
    stripe_session_id: Optional[str] = None
    discount_amount: Optional[int] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class PromoUsageList(BaseModel):
    items: List[PromoUsageRead]
