"""
Premium content gating.

A user has premium access iff their tier is premium and the subscription is
either lifetime (no expiry) or expires strictly after now. Every helper here
is a pure read of subscription state.
"""
from datetime import datetime
from typing import Iterable, List, Optional

from ..core.exceptions import PremiumRequiredError
from ..models.enums import SubscriptionType
from ..utils.timezone import utc_now


def has_premium_access(user, now: Optional[datetime] = None) -> bool:
    if user is None:
        return False
    if user.subscription_type != SubscriptionType.PREMIUM.value:
        return False
    if user.subscription_expires_at is None:
        return True
    now = now or utc_now()
    return user.subscription_expires_at > now


def restrict_to_free(query, model, user):
    """Add the free-only filter to a list query when the caller lacks premium access.

    Applied to the query itself so counts and pagination see the same rows.
    """
    if has_premium_access(user):
        return query
    return query.filter(model.is_premium.is_(False))


def ensure_access(item, user, label: str = "content") -> None:
    """Raise PremiumRequiredError if item is premium and user cannot see it."""
    if item.is_premium and not has_premium_access(user):
        raise PremiumRequiredError(f"Premium subscription required to access this {label}")


def deliverable_questions(questions: Iterable, user) -> List:
    """Questions the user may see; premium ones are silently dropped without access."""
    if has_premium_access(user):
        return list(questions)
    return [q for q in questions if not q.is_premium]
