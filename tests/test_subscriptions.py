"""Stripe subscription tests with the Stripe SDK calls stubbed out."""
from __future__ import annotations

from types import SimpleNamespace

import pytest
import stripe
from fastapi.testclient import TestClient

from lwl.config import settings
from lwl.db.models import PromoCodeUsage, Subscriber
from lwl.services.subscriptions import PLANS, SubscriptionService, is_premium
from lwl.utils.exceptions import ConfigurationError, ValidationError

PERIOD_END = 1_767_225_600  # 2026-01-01T00:00:00Z


@pytest.fixture()
def stripe_keys(monkeypatch) -> None:
    monkeypatch.setattr(settings, "STRIPE_SECRET_KEY", "sk_test_123")
    monkeypatch.setattr(settings, "STRIPE_WEBHOOK_SECRET", "whsec_123")


@pytest.fixture()
def stripe_calls(monkeypatch, stripe_keys) -> dict:
    """Stub the Stripe SDK; tests fill ``customers`` and ``subscriptions``."""

    calls: dict = {"customers": [], "subscriptions": [], "checkout": []}

    def list_customers(**kwargs):
        return SimpleNamespace(data=calls["customers"])

    def list_subscriptions(**kwargs):
        return SimpleNamespace(data=calls["subscriptions"])

    def create_session(**kwargs):
        calls["checkout"].append(kwargs)
        return {"id": "cs_test_1", "url": "https://checkout.stripe.test/cs_test_1"}

    monkeypatch.setattr(stripe.Customer, "list", list_customers)
    monkeypatch.setattr(stripe.Subscription, "list", list_subscriptions)
    monkeypatch.setattr(stripe.checkout.Session, "create", create_session)
    return calls


def test_check_subscription_without_customer(db_session, user, stripe_calls) -> None:
    subscriber = SubscriptionService(db_session).check_subscription(user)

    assert subscriber.subscribed is False
    assert subscriber.subscription_tier == "free"
    assert subscriber.user_id == user.id
    assert is_premium(db_session, user) is False


def test_check_subscription_picks_active(db_session, user, stripe_calls) -> None:
    stripe_calls["customers"].append({"id": "cus_1"})
    stripe_calls["subscriptions"].extend(
        [
            {"status": "canceled", "current_period_end": PERIOD_END},
            {"status": "trialing", "trial_end": PERIOD_END, "items": {"data": [{"current_period_end": PERIOD_END}]}},
        ]
    )

    subscriber = SubscriptionService(db_session).check_subscription(user)

    assert subscriber.subscribed is True
    assert subscriber.subscription_tier == "premium"
    assert subscriber.subscription_status == "trialing"
    assert subscriber.stripe_customer_id == "cus_1"
    assert subscriber.subscription_end is not None
    assert subscriber.trial_end is not None
    assert is_premium(db_session, user) is True


def test_check_subscription_requires_key(db_session, user, monkeypatch) -> None:
    monkeypatch.setattr(settings, "STRIPE_SECRET_KEY", None)

    with pytest.raises(ConfigurationError):
        SubscriptionService(db_session).check_subscription(user)


def test_recurring_checkout_has_trial(db_session, user, stripe_calls) -> None:
    result = SubscriptionService(db_session).create_checkout(user, plan_id="quarterly", origin="https://app.test/")

    assert result == {"url": "https://checkout.stripe.test/cs_test_1", "session_id": "cs_test_1"}
    params = stripe_calls["checkout"][0]
    assert params["mode"] == "subscription"
    assert params["customer_email"] == "service@example.com"
    price = params["line_items"][0]["price_data"]
    assert price["unit_amount"] == PLANS["quarterly"].unit_amount
    assert price["recurring"] == {"interval": "month", "interval_count": 3}
    assert params["subscription_data"] == {"trial_period_days": 7}
    assert params["success_url"].startswith("https://app.test/dashboard?subscription=success")
    assert db_session.query(Subscriber).one().subscription_status == "pending"


def test_lifetime_checkout_with_promotion(db_session, user, stripe_calls) -> None:
    stripe_calls["customers"].append({"id": "cus_9"})

    SubscriptionService(db_session).create_checkout(
        user, plan_id="lifetime", promotion_code_id="promo_1", promo_code="LAUNCH"
    )

    params = stripe_calls["checkout"][0]
    assert params["mode"] == "payment"
    assert params["customer"] == "cus_9"
    assert "recurring" not in params["line_items"][0]["price_data"]
    assert params["discounts"] == [{"promotion_code": "promo_1"}]
    usage = db_session.query(PromoCodeUsage).one()
    assert (usage.promo_code, usage.stripe_session_id) == ("LAUNCH", "cs_test_1")


def test_checkout_rejects_unknown_plan(db_session, user, stripe_calls) -> None:
    with pytest.raises(ValidationError):
        SubscriptionService(db_session).create_checkout(user, plan_id="weekly")


def _webhook(monkeypatch, event: dict) -> None:
    def construct_event(payload, signature, secret):
        assert secret == "whsec_123"
        return event

    monkeypatch.setattr(stripe.Webhook, "construct_event", construct_event)


def test_webhook_checkout_completed(client: TestClient, db_session, stripe_keys, monkeypatch, queued_emails) -> None:
    _webhook(
        monkeypatch,
        {
            "type": "checkout.session.completed",
            "data": {"object": {"customer": "cus_1", "customer_details": {"email": "buyer@example.com"}}},
        },
    )

    response = client.post("/api/v1/subscriptions/webhook", content=b"{}", headers={"stripe-signature": "sig"})

    assert response.status_code == 200
    assert response.json() == {"received": True, "type": "checkout.session.completed", "email": "buyer@example.com"}
    subscriber = db_session.query(Subscriber).filter_by(email="buyer@example.com").one()
    assert subscriber.subscribed is True
    assert subscriber.subscription_status == "active"
    assert ("template", "buyer@example.com", "premium") in queued_emails


def test_webhook_subscription_deleted(client: TestClient, db_session, stripe_keys, monkeypatch, queued_emails) -> None:
    db_session.add(Subscriber(email="buyer@example.com", subscribed=True, subscription_tier="premium"))
    db_session.commit()
    monkeypatch.setattr(stripe.Customer, "retrieve", lambda customer_id: {"email": "buyer@example.com"})
    _webhook(
        monkeypatch,
        {"type": "customer.subscription.deleted", "data": {"object": {"customer": "cus_1", "status": "canceled"}}},
    )

    response = client.post("/api/v1/subscriptions/webhook", content=b"{}", headers={"stripe-signature": "sig"})

    assert response.status_code == 200
    subscriber = db_session.query(Subscriber).filter_by(email="buyer@example.com").one()
    assert subscriber.subscribed is False
    assert subscriber.subscription_status == "canceled"
    assert subscriber.canceled_at is not None
    assert ("template", "buyer@example.com", "cancellation") in queued_emails


def test_webhook_requires_signature(client: TestClient, stripe_keys) -> None:
    response = client.post("/api/v1/subscriptions/webhook", content=b"{}")

    assert response.status_code == 400
    assert response.json()["detail"] == "No Stripe signature found"


def test_webhook_bad_signature(client: TestClient, stripe_keys, monkeypatch) -> None:
    def construct_event(payload, signature, secret):
        raise ValueError("Invalid payload")

    monkeypatch.setattr(stripe.Webhook, "construct_event", construct_event)

    response = client.post("/api/v1/subscriptions/webhook", content=b"x", headers={"stripe-signature": "sig"})

    assert response.status_code == 400
    assert response.json()["detail"].startswith("Webhook Error")


def test_subscription_endpoints(client: TestClient, auth_headers, stripe_calls) -> None:
    assert client.get("/api/v1/subscriptions/status", headers=auth_headers).json()["subscribed"] is False

    checked = client.post("/api/v1/subscriptions/check", headers=auth_headers)
    assert checked.status_code == 200
    assert checked.json()["subscription_tier"] == "free"

    checkout = client.post(
        "/api/v1/subscriptions/checkout",
        json={"plan_id": "annual"},
        headers={**auth_headers, "Origin": "https://lwlnow.test"},
    )
    assert checkout.status_code == 200
    assert checkout.json()["session_id"] == "cs_test_1"
    assert stripe_calls["checkout"][0]["cancel_url"] == "https://lwlnow.test/dashboard?subscription=canceled"

    invalid = client.post("/api/v1/subscriptions/checkout", json={"plan_id": "weekly"}, headers=auth_headers)
    assert invalid.status_code == 400


def test_lifetime_checkout_creates_customer_for_new_buyer(db_session, user, stripe_calls) -> None:
    SubscriptionService(db_session).create_checkout(user, plan_id="lifetime")

    params = stripe_calls["checkout"][0]
    assert params["customer_email"] == "service@example.com"
    assert params["customer_creation"] == "always"


def test_recurring_checkout_leaves_customer_creation_to_stripe(db_session, user, stripe_calls) -> None:
    SubscriptionService(db_session).create_checkout(user, plan_id="monthly")

    assert "customer_creation" not in stripe_calls["checkout"][0]


def test_lifetime_purchase_survives_resync(
    client: TestClient, db_session, user, stripe_calls, monkeypatch, queued_emails
) -> None:
    _webhook(
        monkeypatch,
        {
            "type": "checkout.session.completed",
            "data": {"object": {"mode": "payment", "customer_details": {"email": user.email}}},
        },
    )

    response = client.post("/api/v1/subscriptions/webhook", content=b"{}", headers={"stripe-signature": "sig"})
    assert response.status_code == 200
    assert response.json()["email"] == user.email

    subscriber = db_session.query(Subscriber).filter_by(email=user.email).one()
    assert subscriber.lifetime_access is True
    assert subscriber.user_id == user.id

    checked = SubscriptionService(db_session).check_subscription(user)

    assert checked.subscribed is True
    assert checked.subscription_tier == "premium"
    assert checked.subscription_end is None
    assert is_premium(db_session, user) is True


def test_lifetime_buyer_keeps_access_when_old_subscription_ends(
    client: TestClient, db_session, stripe_keys, monkeypatch, queued_emails
) -> None:
    db_session.add(
        Subscriber(email="buyer@example.com", subscribed=True, subscription_tier="premium", lifetime_access=True)
    )
    db_session.commit()
    monkeypatch.setattr(stripe.Customer, "retrieve", lambda customer_id: {"email": "buyer@example.com"})
    _webhook(
        monkeypatch,
        {"type": "customer.subscription.deleted", "data": {"object": {"customer": "cus_1", "status": "canceled"}}},
    )

    response = client.post("/api/v1/subscriptions/webhook", content=b"{}", headers={"stripe-signature": "sig"})

    assert response.status_code == 200
    subscriber = db_session.query(Subscriber).filter_by(email="buyer@example.com").one()
    assert subscriber.subscribed is True
    assert subscriber.subscription_tier == "premium"
    assert ("template", "buyer@example.com", "cancellation") not in queued_emails
