"""
Subscription API Routes

Plan catalogue and per-user subscription records. Subscriptions are
recorded here after the payment processor has confirmed them.
"""

from datetime import datetime

from fastapi import APIRouter, status
from pydantic import BaseModel, Field

from elevion.api.dependencies import StorageDep
from elevion.api.responses import ok, require_found
from elevion.domain.statuses import SubscriptionStatus
from elevion.infrastructure.db.models.subscription import UserSubscriptionCreate


router = APIRouter(prefix="/api/subscriptions", tags=["Subscriptions"])


# =============================================================================
# Request Schemas
# =============================================================================

class RecordSubscriptionRequest(BaseModel):
    plan_id: int = Field(..., description="Subscribed plan")
    status: SubscriptionStatus = Field(SubscriptionStatus.ACTIVE)
    current_period_start: datetime
    current_period_end: datetime
    cancel_at_period_end: bool = False
    stripe_subscription_id: str = Field(..., min_length=1)
    stripe_customer_id: str = Field(..., min_length=1)


# =============================================================================
# Plans
# =============================================================================

@router.get("/plans")
async def list_plans(storage: StorageDep):
    """Active plans, cheapest first."""
    return ok(await storage.get_active_subscription_plans())


@router.get("/plans/{plan_id}")
async def get_plan(plan_id: int, storage: StorageDep):
    plan = await storage.get_subscription_plan(plan_id)
    return ok(require_found(plan, "subscription_plans", plan_id))


# =============================================================================
# User Subscriptions
# =============================================================================

@router.get("/users/{user_id}")
async def list_user_subscriptions(user_id: int, storage: StorageDep):
    return ok(await storage.get_user_subscriptions(user_id))


@router.get("/users/{user_id}/active")
async def get_active_subscription(user_id: int, storage: StorageDep):
    """The user's current subscription, or null when there is none."""
    return ok(await storage.get_user_active_subscription(user_id))


@router.post("/users/{user_id}", status_code=status.HTTP_201_CREATED)
async def record_subscription(
    user_id: int,
    request: RecordSubscriptionRequest,
    storage: StorageDep,
):
    plan = await storage.get_subscription_plan(request.plan_id)
    require_found(plan, "subscription_plans", request.plan_id)

    subscription = await storage.create_user_subscription(
        UserSubscriptionCreate(user_id=user_id, **request.model_dump())
    )
    return ok(subscription)
