"""Stripe-backed subscription state and checkout."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import stripe
from loguru import logger
from sqlalchemy import select
from sqlalchemy.orm import Session

from lwl.config import settings
from lwl.db.models.promotion import PromoCodeUsage
from lwl.db.models.subscription import Subscriber
from lwl.db.models.user import User
from lwl.utils.exceptions import ConfigurationError, ExternalServiceError, ValidationError

ACTIVE_STATUSES = ("active", "trialing")
STRIPE_API_VERSION = "2023-10-16"


@dataclass(frozen=True)
class Plan:
    name: str
    description: str
    unit_amount: int  # cents, USD
    interval: Optional[str] = None
    interval_count: int = 1
    trial_period_days: Optional[int] = 7

    @property
    def one_time(self) -> bool:
        return self.interval is None


PLANS: Dict[str, Plan] = {
    "monthly": Plan("Monthly Premium", "Full access, cancel anytime", 499, "month", 1),
    "quarterly": Plan("Quarterly Premium", "Save 13% vs monthly", 1299, "month", 3),
    "annual": Plan("Annual Premium", "Save 25%, billed annually", 4499, "year", 1),
    "lifetime": Plan(
        "Lifetime Access",
        "Pay once, get lifetime access to all current & future features",
        11999,
        trial_period_days=None,
    ),
}


def configure_stripe() -> None:
    if not settings.STRIPE_SECRET_KEY:
        raise ConfigurationError("STRIPE_SECRET_KEY is not set")
    stripe.api_key = settings.STRIPE_SECRET_KEY
    stripe.api_version = STRIPE_API_VERSION


def _timestamp(value: Any) -> Optional[datetime]:
    if not value:
        return None
    return datetime.fromtimestamp(int(value), tz=timezone.utc)


def _period_end(subscription: Any) -> Optional[datetime]:
    end = subscription.get("current_period_end")
    if end is None:
        items = (subscription.get("items") or {}).get("data") or []
        end = items[0].get("current_period_end") if items else None
    return _timestamp(end)


class SubscriptionService:
    def __init__(self, db: Session):
        self.db = db

    def _subscriber(self, email: str) -> Subscriber:
        subscriber = self.db.scalar(select(Subscriber).where(Subscriber.email == email))
        if subscriber is None:
            subscriber = Subscriber(email=email, subscribed=False, subscription_tier="free")
            self.db.add(subscriber)
        return subscriber

    def _find_customer_id(self, email: str) -> Optional[str]:
        customers = stripe.Customer.list(email=email, limit=1)
        return customers.data[0]["id"] if customers.data else None

    def check_subscription(self, user: User) -> Subscriber:
        """Refresh the stored subscription for ``user`` from Stripe."""

        configure_stripe()
        subscriber = self._subscriber(user.email)
        subscriber.user_id = user.id
        try:
            customer_id = self._find_customer_id(user.email)
            active = None
            if customer_id:
                subscriptions = stripe.Subscription.list(customer=customer_id, status="all", limit=5)
                active = next((sub for sub in subscriptions.data if sub.get("status") in ACTIVE_STATUSES), None)
        except stripe.StripeError as exc:
            logger.error("Stripe subscription lookup failed", error=str(exc))
            raise ExternalServiceError("Failed to check subscription", status_code=500) from exc

        subscriber.stripe_customer_id = customer_id or subscriber.stripe_customer_id
        if active is None and subscriber.lifetime_access:
            _grant_lifetime(subscriber)
        elif active is None:
            subscriber.subscribed = False
            subscriber.subscription_tier = "free"
            subscriber.subscription_status = None
            subscriber.trial_end = None
            subscriber.subscription_end = None
        else:
            subscriber.subscribed = True
            subscriber.subscription_tier = "premium"
            subscriber.subscription_status = active.get("status")
            subscriber.subscription_end = _period_end(active)
            subscriber.trial_end = (
                _timestamp(active.get("trial_end")) if active.get("status") == "trialing" else None
            )
        self.db.commit()
        self.db.refresh(subscriber)
        logger.info(
            "Subscription checked",
            user_id=str(user.id),
            subscribed=subscriber.subscribed,
            status=subscriber.subscription_status,
        )
        return subscriber

    def get_status(self, user: User) -> Optional[Subscriber]:
        return self.db.scalar(select(Subscriber).where(Subscriber.email == user.email))

    def create_checkout(
        self,
        user: User,
        *,
        plan_id: str = "monthly",
        currency: str = "usd",
        promotion_code_id: Optional[str] = None,
        promo_code: Optional[str] = None,
        origin: Optional[str] = None,
    ) -> Dict[str, str]:
        plan = PLANS.get(plan_id)
        if plan is None:
            raise ValidationError(f"Invalid plan ID: {plan_id}")
        configure_stripe()
        base_url = (origin or settings.SITE_URL).rstrip("/")

        price_data: Dict[str, Any] = {
            "currency": currency.lower(),
            "product_data": {"name": plan.name, "description": plan.description},
            "unit_amount": plan.unit_amount,
        }
        params: Dict[str, Any] = {
            "line_items": [{"price_data": price_data, "quantity": 1}],
            "success_url": f"{base_url}{settings.CHECKOUT_SUCCESS_PATH}&plan={plan_id}",
            "cancel_url": f"{base_url}{settings.CHECKOUT_CANCEL_PATH}",
            "metadata": {"user_id": str(user.id), "plan_id": plan_id},
        }
        if plan.one_time:
            params["mode"] = "payment"
        else:
            params["mode"] = "subscription"
            price_data["recurring"] = {"interval": plan.interval, "interval_count": plan.interval_count}
            if plan.trial_period_days:
                params["subscription_data"] = {"trial_period_days": plan.trial_period_days}
        if promotion_code_id:
            params["discounts"] = [{"promotion_code": promotion_code_id}]

        try:
            customer_id = self._find_customer_id(user.email)
            if customer_id:
                params["customer"] = customer_id
            else:
                params["customer_email"] = user.email
                if plan.one_time:
                    params["customer_creation"] = "always"
            session = stripe.checkout.Session.create(**params)
        except stripe.StripeError as exc:
            logger.error("Stripe checkout failed", error=str(exc))
            raise ExternalServiceError("Could not create checkout session", status_code=500) from exc

        subscriber = self._subscriber(user.email)
        subscriber.user_id = user.id
        subscriber.stripe_customer_id = customer_id
        subscriber.subscription_status = subscriber.subscription_status or "pending"
        if promotion_code_id:
            self.db.add(
                PromoCodeUsage(
                    promo_code=promo_code or promotion_code_id,
                    email=user.email,
                    user_id=user.id,
                    stripe_session_id=session["id"],
                )
            )
        self.db.commit()
        logger.info("Checkout session created", session_id=session["id"], plan=plan_id)
        return {"url": session["url"], "session_id": session["id"]}

    def handle_webhook(self, payload: bytes, signature: Optional[str]) -> Dict[str, Any]:
        """Verify and apply a Stripe webhook; returns the event type and affected email."""

        configure_stripe()
        if not settings.STRIPE_WEBHOOK_SECRET:
            raise ConfigurationError("STRIPE_WEBHOOK_SECRET is not set")
        if not signature:
            raise ValidationError("No Stripe signature found")
        try:
            event = stripe.Webhook.construct_event(payload, signature, settings.STRIPE_WEBHOOK_SECRET)
        except (ValueError, stripe.SignatureVerificationError) as exc:
            logger.warning("Stripe webhook verification failed", error=str(exc))
            raise ValidationError(f"Webhook Error: {exc}") from exc

        event_type = event["type"]
        obj = event["data"]["object"]
        logger.info("Stripe webhook received", type=event_type)

        email: Optional[str] = None
        try:
            if event_type == "checkout.session.completed":
                email = self._on_checkout_completed(obj)
            elif event_type == "customer.subscription.updated":
                email = self._on_subscription_changed(obj, deleted=False)
            elif event_type == "customer.subscription.deleted":
                email = self._on_subscription_changed(obj, deleted=True)
            else:
                logger.info("Unhandled Stripe event", type=event_type)
        except stripe.StripeError as exc:
            logger.error("Stripe lookup during webhook failed", error=str(exc))
            raise ExternalServiceError("Webhook processing failed", status_code=500) from exc

        self.db.commit()
        return {"type": event_type, "email": email}

    def _link_user(self, subscriber: Subscriber) -> None:
        if subscriber.user_id is None:
            subscriber.user_id = self.db.scalar(select(User.id).where(User.email == subscriber.email))

    def _on_checkout_completed(self, session: Any) -> Optional[str]:
        email = session.get("customer_email") or (session.get("customer_details") or {}).get("email")
        if not email:
            return None
        subscriber = self._subscriber(email)
        if session.get("customer"):
            subscriber.stripe_customer_id = session["customer"]
        subscriber.subscribed = True
        subscriber.subscription_tier = "premium"
        if session.get("mode") == "payment":
            _grant_lifetime(subscriber)
        elif session.get("subscription"):
            subscription = stripe.Subscription.retrieve(session["subscription"])
            subscriber.subscription_status = subscription.get("status")
            subscriber.trial_end = _timestamp(subscription.get("trial_end"))
            subscriber.subscription_end = _period_end(subscription)
        else:
            subscriber.subscription_status = "active"
            subscriber.subscription_end = None
        self._link_user(subscriber)
        _queue_email(email, "premium")
        return email

    def _on_subscription_changed(self, subscription: Any, *, deleted: bool) -> Optional[str]:
        customer = stripe.Customer.retrieve(subscription["customer"])
        email = customer.get("email")
        if not email:
            return None
        subscriber = self._subscriber(email)
        subscriber.stripe_customer_id = subscription["customer"]
        if subscriber.lifetime_access:
            subscriber.canceled_at = _timestamp(subscription.get("canceled_at")) or subscriber.canceled_at
        elif deleted:
            subscriber.subscribed = False
            subscriber.subscription_tier = "free"
            subscriber.subscription_status = "canceled"
            subscriber.canceled_at = datetime.now(timezone.utc)
            _queue_email(email, "cancellation")
        else:
            status = subscription.get("status")
            subscriber.subscribed = status in ACTIVE_STATUSES
            subscriber.subscription_tier = "premium" if subscriber.subscribed else "free"
            subscriber.subscription_status = status
            subscriber.trial_end = _timestamp(subscription.get("trial_end"))
            subscriber.subscription_end = _period_end(subscription)
            if subscription.get("canceled_at"):
                subscriber.canceled_at = _timestamp(subscription["canceled_at"])
        self._link_user(subscriber)
        return email


def _grant_lifetime(subscriber: Subscriber) -> None:
    """One-time purchases never expire; Stripe keeps no subscription for them."""

    subscriber.lifetime_access = True
    subscriber.subscribed = True
    subscriber.subscription_tier = "premium"
    subscriber.subscription_status = "active"
    subscriber.trial_end = None
    subscriber.subscription_end = None


def _queue_email(email: str, template: str) -> None:
    from lwl.tasks.emails import send_template_email

    send_template_email.delay(email, template)


def is_premium(db: Session, user: User) -> bool:
    subscriber = db.scalar(select(Subscriber).where(Subscriber.email == user.email))
    return bool(subscriber and subscriber.subscribed)
