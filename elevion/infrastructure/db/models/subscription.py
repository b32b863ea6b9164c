"""
Subscription plan and user subscription models.

Plans are always listed by ascending price. A user subscription is
"active" when its status is active and the current period has not ended.
"""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import ConfigDict
from sqlalchemy import Column
from sqlmodel import Field, SQLModel

from elevion.domain.statuses import BillingInterval, SubscriptionStatus
from elevion.infrastructure.db.models.base import (
    IntIdMixin,
    JSONType,
    NaiveUTCDateTime,
    TimestampMixin,
)


class SubscriptionPlan(IntIdMixin, TimestampMixin, table=True):
    """Purchasable plan; price history rows reference it by plan_id."""

    __tablename__ = "subscription_plans"

    name: str = Field(..., unique=True, max_length=100)
    description: str
    price: Decimal = Field(..., max_digits=10, decimal_places=2, index=True)
    interval: str = Field(..., max_length=20)
    features: List[str] = Field(default_factory=list, sa_column=Column(JSONType, nullable=False))
    is_active: bool = Field(default=True)
    stripe_price_id: str


class SubscriptionPlanCreate(SQLModel):
    model_config = ConfigDict(use_enum_values=True, validate_default=True)

    name: str = Field(..., min_length=1, max_length=100)
    description: str
    price: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)
    interval: BillingInterval = BillingInterval.MONTH
    features: List[str] = Field(default_factory=list)
    is_active: bool = True
    stripe_price_id: str


class SubscriptionPlanUpdate(SQLModel):
    model_config = ConfigDict(use_enum_values=True, validate_default=True)

    name: Optional[str] = Field(default=None, max_length=100)
    description: Optional[str] = None
    price: Optional[Decimal] = Field(default=None, ge=0, max_digits=10, decimal_places=2)
    interval: Optional[BillingInterval] = None
    features: Optional[List[str]] = None
    is_active: Optional[bool] = None
    stripe_price_id: Optional[str] = None


class UserSubscription(IntIdMixin, TimestampMixin, table=True):
    """
    A user's subscription to a plan.

    A user may hold several historical rows; at most one is expected to
    be active at a time, which is advisory and not enforced by a constraint.
    """

    __tablename__ = "user_subscriptions"

    user_id: int = Field(..., foreign_key="users.id", index=True)
    plan_id: int = Field(..., foreign_key="subscription_plans.id")
    status: str = Field(..., max_length=20)
    current_period_start: datetime = Field(..., sa_type=NaiveUTCDateTime)
    current_period_end: datetime = Field(..., sa_type=NaiveUTCDateTime)
    cancel_at_period_end: bool = Field(default=False)
    stripe_subscription_id: str
    stripe_customer_id: str


class UserSubscriptionCreate(SQLModel):
    model_config = ConfigDict(use_enum_values=True, validate_default=True)

    user_id: int
    plan_id: int
    status: SubscriptionStatus = SubscriptionStatus.ACTIVE
    current_period_start: datetime
    current_period_end: datetime
    cancel_at_period_end: bool = False
    stripe_subscription_id: str
    stripe_customer_id: str


class UserSubscriptionUpdate(SQLModel):
    model_config = ConfigDict(use_enum_values=True, validate_default=True)

    status: Optional[SubscriptionStatus] = None
    current_period_start: Optional[datetime] = None
    current_period_end: Optional[datetime] = None
    cancel_at_period_end: Optional[bool] = None
    stripe_subscription_id: Optional[str] = None
