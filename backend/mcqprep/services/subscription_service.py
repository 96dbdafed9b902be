"""
Simulated subscriptions.

Payment is always treated as successful; the only state change is the user's
tier and expiry, which the access gate reads.
"""
from sqlalchemy.orm import Session
from datetime import datetime, timedelta
from typing import Dict, List, Optional
import math
import logging

from ..core.config import settings
from ..core.exceptions import DomainValidationError
from ..models.user import User
from ..models.enums import SubscriptionType
from ..schemas.subscription import SubscriptionPlan, SubscriptionStatus, Subscription
from ..utils.timezone import utc_now
from .access_control import has_premium_access

logger = logging.getLogger(__name__)

_BASE_FEATURES = [
    "Access to 9000+ Premium MCQs",
    "Unlimited Mock Tests",
    "Detailed Performance Analytics",
    "WhatsApp Group Access",
    "Expert Doubt Resolution",
    "Mobile App Access",
]

PLANS: Dict[str, SubscriptionPlan] = {
    "monthly": SubscriptionPlan(
        id="monthly",
        name="Monthly Premium",
        price=299,
        currency=settings.currency,
        duration=30,
        features=_BASE_FEATURES,
    ),
    "yearly": SubscriptionPlan(
        id="yearly",
        name="Yearly Premium",
        price=2999,
        currency=settings.currency,
        duration=365,
        features=_BASE_FEATURES + ["Priority Support", "2 Months Free (Best Value)"],
    ),
    "lifetime": SubscriptionPlan(
        id="lifetime",
        name="Lifetime Premium",
        price=9999,
        currency=settings.currency,
        duration=None,
        features=_BASE_FEATURES + ["Priority Support", "Lifetime Updates", "One-time Payment"],
    ),
}


def get_plan(plan_id: str) -> SubscriptionPlan:
    plan = PLANS.get(plan_id)
    if plan is None:
        raise DomainValidationError(
            "Invalid subscription plan",
            errors=[{"field": "planId", "message": f"Unknown plan '{plan_id}'"}],
        )
    return plan


def days_remaining(expires_at: Optional[datetime], now: Optional[datetime] = None) -> Optional[int]:
    """Whole days left, rounded up; None for lifetime subscriptions"""
    if expires_at is None:
        return None
    now = now or utc_now()
    return math.ceil((expires_at - now).total_seconds() / 86400)


class SubscriptionService:
    def __init__(self, db: Session):
        self.db = db

    def list_plans(self) -> List[SubscriptionPlan]:
        return list(PLANS.values())

    def get_status(self, user: User) -> SubscriptionStatus:
        remaining = None
        if user.subscription_type == SubscriptionType.PREMIUM.value:
            remaining = days_remaining(user.subscription_expires_at)
        return SubscriptionStatus(
            type=user.subscription_type,
            is_active=has_premium_access(user),
            expires_at=user.subscription_expires_at,
            days_remaining=remaining,
        )

    def subscribe(self, user: User, plan_id: str) -> Subscription:
        plan = get_plan(plan_id)
        user.subscription_type = SubscriptionType.PREMIUM.value
        if plan.duration:
            user.subscription_expires_at = utc_now() + timedelta(days=plan.duration)
        else:
            user.subscription_expires_at = None
        self.db.commit()
        self.db.refresh(user)
        logger.info(f"Activated {plan.id} subscription for user {user.id}")
        return Subscription(type=user.subscription_type, expires_at=user.subscription_expires_at, plan=plan)

    def cancel(self, user: User) -> None:
        if user.subscription_type != SubscriptionType.PREMIUM.value:
            raise DomainValidationError("No active subscription to cancel")
        user.subscription_type = SubscriptionType.FREE.value
        user.subscription_expires_at = None
        self.db.commit()
        logger.info(f"Cancelled subscription for user {user.id}")

    def renew(self, user: User, plan_id: str) -> Subscription:
        """Extend from the current expiry while it is still in the future, else from now"""
        plan = get_plan(plan_id)
        is_lifetime = (
            user.subscription_type == SubscriptionType.PREMIUM.value
            and user.subscription_expires_at is None
        )
        if is_lifetime:
            raise DomainValidationError("Lifetime subscription does not need renewal")

        now = utc_now()
        user.subscription_type = SubscriptionType.PREMIUM.value
        if plan.duration:
            current_expiry = user.subscription_expires_at or now
            start = current_expiry if current_expiry > now else now
            user.subscription_expires_at = start + timedelta(days=plan.duration)
        else:
            user.subscription_expires_at = None
        self.db.commit()
        self.db.refresh(user)
        logger.info(f"Renewed {plan.id} subscription for user {user.id} until {user.subscription_expires_at}")
        return Subscription(type=user.subscription_type, expires_at=user.subscription_expires_at, plan=plan)

    def expire_lapsed(self) -> int:
        """Downgrade premium users whose expiry has passed to the free tier"""
        now = utc_now()
        lapsed = (
            self.db.query(User)
            .filter(
                User.subscription_type == SubscriptionType.PREMIUM.value,
                User.subscription_expires_at.isnot(None),
                User.subscription_expires_at <= now,
            )
            .all()
        )
        for user in lapsed:
            user.subscription_type = SubscriptionType.FREE.value
        self.db.commit()
        if lapsed:
            logger.info(f"Expired {len(lapsed)} lapsed subscriptions")
        return len(lapsed)
