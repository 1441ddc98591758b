"""Subscription and promotion endpoints."""
from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Header, Query, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from lwl.api import deps
from lwl.db.models.user import User
from lwl.schemas.billing import (
    BannerRead,
    CheckoutRequest,
    CheckoutResponse,
    PromoCodeRequest,
    PromoCodeValidation,
    SubscriptionStatus,
)
from lwl.services.promotions import PromotionService, validate_promo_code
from lwl.services.subscriptions import SubscriptionService
from lwl.utils.cache import build_cache_key, cache_backend
from lwl.utils.exceptions import LwlException, to_http_exception

router = APIRouter(tags=["billing"])

BANNER_CACHE_TTL_SECONDS = 60


def _status(subscriber) -> SubscriptionStatus:
    if subscriber is None:
        return SubscriptionStatus(subscribed=False)
    return SubscriptionStatus(
        subscribed=bool(subscriber.subscribed),
        subscription_tier=subscriber.subscription_tier or "free",
        subscription_status=subscriber.subscription_status,
        trial_end=subscriber.trial_end,
        subscription_end=subscriber.subscription_end,
        lifetime_access=bool(subscriber.lifetime_access),
    )


@router.post("/subscriptions/check", response_model=SubscriptionStatus)
def check_subscription(
    db: Session = Depends(deps.get_db),
    current_user: User = Depends(deps.get_current_user),
) -> SubscriptionStatus:
    """Refresh the caller's subscription from Stripe and return it."""

    try:
        subscriber = SubscriptionService(db).check_subscription(current_user)
    except LwlException as exc:
        raise to_http_exception(exc) from exc
    return _status(subscriber)


@router.get("/subscriptions/status", response_model=SubscriptionStatus)
def subscription_status(
    db: Session = Depends(deps.get_db),
    current_user: User = Depends(deps.get_current_user),
) -> SubscriptionStatus:
    return _status(SubscriptionService(db).get_status(current_user))


@router.post("/subscriptions/checkout", response_model=CheckoutResponse)
def create_checkout(
    payload: CheckoutRequest,
    origin: Optional[str] = Header(default=None),
    db: Session = Depends(deps.get_db),
    current_user: User = Depends(deps.get_current_user),
) -> CheckoutResponse:
    try:
        session = SubscriptionService(db).create_checkout(
            current_user,
            plan_id=payload.plan_id,
            currency=payload.currency,
            promotion_code_id=payload.promotion_code_id,
            promo_code=payload.promo_code,
            origin=origin,
        )
    except LwlException as exc:
        raise to_http_exception(exc) from exc
    return CheckoutResponse(**session)


@router.post("/subscriptions/webhook")
async def stripe_webhook(
    request: Request,
    db: Session = Depends(deps.get_db),
) -> Dict[str, Any]:
    payload = await request.body()
    try:
        result = SubscriptionService(db).handle_webhook(payload, request.headers.get("stripe-signature"))
    except LwlException as exc:
        raise to_http_exception(exc) from exc
    return {"received": True, **result}


@router.post("/promotions/validate", response_model=PromoCodeValidation)
def validate_promotion(payload: PromoCodeRequest):
    """Check a promo code; unknown or inactive codes answer 400 with ``valid: false``."""

    try:
        result = validate_promo_code(payload.code)
    except LwlException as exc:
        http_exc = to_http_exception(exc)
        return JSONResponse(
            status_code=http_exc.status_code,
            content={"valid": False, "error": http_exc.detail},
        )
    if not result["valid"]:
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=result)
    return result


@router.get("/promotions/banner", response_model=Optional[BannerRead])
def active_banner(
    route: str = Query("/", max_length=255),
    db: Session = Depends(deps.get_db),
):
    cache_key = build_cache_key(route=route)
    cached = cache_backend.get("promotions:banner", cache_key)
    if cached is not None:
        return cached.get("banner")

    banner = PromotionService(db).get_active_banner(route)
    payload = BannerRead.model_validate(banner).model_dump(mode="json") if banner else None
    cache_backend.set("promotions:banner", cache_key, {"banner": payload}, ttl_seconds=BANNER_CACHE_TTL_SECONDS)
    return payload
