"""Promo code and banner tests."""
from __future__ import annotations

import time
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

import pytest
import stripe
from fastapi.testclient import TestClient

from lwl.config import settings
from lwl.schemas.billing import BannerCreate
from lwl.services.promotions import PromotionService, validate_promo_code
from lwl.utils.cache import cache_backend
from lwl.utils.exceptions import ValidationError


@pytest.fixture()
def promotion_codes(monkeypatch) -> list:
    monkeypatch.setattr(settings, "STRIPE_SECRET_KEY", "sk_test_123")
    codes: list = []
    monkeypatch.setattr(stripe.PromotionCode, "list", lambda **kwargs: SimpleNamespace(data=codes))
    return codes


def test_valid_percent_code(promotion_codes) -> None:
    promotion_codes.append({"id": "promo_1", "active": True, "coupon": {"id": "co_1", "percent_off": 20}})

    result = validate_promo_code(" LAUNCH ")

    assert result["valid"] is True
    assert result["promotion_code_id"] == "promo_1"
    assert result["discount_amount"] == 20
    assert result["discount_type"] == "percent"


def test_coupon_id_is_retrieved(promotion_codes, monkeypatch) -> None:
    promotion_codes.append({"id": "promo_2", "active": True, "promotion": {"coupon": "co_2"}})
    monkeypatch.setattr(
        stripe.Coupon, "retrieve", lambda coupon_id: {"id": coupon_id, "amount_off": 500, "currency": "usd"}
    )

    result = validate_promo_code("FIVE")

    assert result["coupon_id"] == "co_2"
    assert result["discount_type"] == "amount"
    assert result["coupon_details"]["currency"] == "usd"


@pytest.mark.parametrize(
    "code,error",
    [
        (None, "Invalid promo code"),
        ({"id": "p", "active": False, "coupon": {}}, "Promo code is not active"),
        ({"id": "p", "active": True, "expires_at": 1, "coupon": {}}, "Promo code has expired"),
    ],
)
def test_invalid_codes(promotion_codes, code, error) -> None:
    if code is not None:
        promotion_codes.append(code)

    assert validate_promo_code("X") == {"valid": False, "error": error}


def test_blank_code_raises() -> None:
    with pytest.raises(ValidationError):
        validate_promo_code("  ")


def test_validate_endpoint(client: TestClient, promotion_codes) -> None:
    invalid = client.post("/api/v1/promotions/validate", json={"code": "NOPE"})
    assert invalid.status_code == 400
    assert invalid.json() == {"valid": False, "error": "Invalid promo code"}

    blank = client.post("/api/v1/promotions/validate", json={})
    assert blank.status_code == 400
    assert blank.json() == {"valid": False, "error": "Promo code is required"}

    promotion_codes.append(
        {"id": "promo_1", "active": True, "expires_at": int(time.time()) + 3600, "coupon": {"id": "co", "percent_off": 10}}
    )
    valid = client.post("/api/v1/promotions/validate", json={"code": "TEN"})
    assert valid.status_code == 200
    assert valid.json()["valid"] is True


def test_banner_dates_must_be_ordered(db_session, user) -> None:
    now = datetime.now(timezone.utc)
    payload = BannerCreate(title="Sale", content="20% off", start_date=now, end_date=now - timedelta(days=1))

    with pytest.raises(ValidationError):
        PromotionService(db_session).create_banner(user.id, payload)


def test_active_banner_prefers_priority(db_session, user) -> None:
    service = PromotionService(db_session)
    service.create_banner(user.id, BannerCreate(title="Low", content="a", target_route="/pricing", priority=1))
    service.create_banner(user.id, BannerCreate(title="High", content="b", target_route="/pricing", priority=5))
    service.create_banner(
        user.id, BannerCreate(title="Off", content="c", target_route="/pricing", priority=9, is_active=False)
    )

    assert service.get_active_banner("/pricing").title == "High"
    assert service.get_active_banner("/") is None


def test_banner_endpoint_is_cached(client: TestClient, db_session, user) -> None:
    assert client.get("/api/v1/promotions/banner?route=/pricing").json() is None

    PromotionService(db_session).create_banner(user.id, BannerCreate(title="Sale", content="x", target_route="/pricing"))
    assert client.get("/api/v1/promotions/banner?route=/pricing").json() is None

    cache_backend.clear()
    banner = client.get("/api/v1/promotions/banner?route=/pricing").json()
    assert banner["title"] == "Sale"
