from pydantic import Field
from datetime import datetime
from typing import Any, Dict, List, Optional

from .common import CamelModel
from ..models.enums import SubscriptionType


class SubscriptionPlan(CamelModel):
    id: str
    name: str
    price: int
    currency: str
    duration: Optional[int] = Field(None, description="Length in days; None for lifetime")
    features: List[str] = []


class SubscribeRequest(CamelModel):
    plan_id: str
    payment_method: Optional[str] = None
    payment_details: Optional[Dict[str, Any]] = None


class SubscriptionStatus(CamelModel):
    type: SubscriptionType
    is_active: bool
    expires_at: Optional[datetime] = None
    days_remaining: Optional[int] = None


class Subscription(CamelModel):
    type: SubscriptionType
    expires_at: Optional[datetime] = None
    plan: SubscriptionPlan
