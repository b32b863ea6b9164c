"""
Pricing API Routes

Review and application of subscription price recommendations.
"""

from typing import Optional

from fastapi import APIRouter
from pydantic import BaseModel

from elevion.api.dependencies import PricingServiceDep, StorageDep
from elevion.api.responses import ok
from elevion.domain.statuses import RecommendationStatus


router = APIRouter(prefix="/api/pricing", tags=["Pricing"])


class UpdateRecommendationStatusRequest(BaseModel):
    status: RecommendationStatus


class ApplyRecommendationRequest(BaseModel):
    user_id: int


@router.get("/recommendations")
async def list_recommendations(storage: StorageDep, status: Optional[RecommendationStatus] = None):
    return ok(await storage.get_price_recommendations(status.value if status else None))


@router.patch("/recommendations/{recommendation_id}/status")
async def update_recommendation_status(
    recommendation_id: int,
    request: UpdateRecommendationStatusRequest,
    service: PricingServiceDep,
):
    return ok(await service.update_recommendation_status(recommendation_id, request.status))


@router.post("/recommendations/{recommendation_id}/apply")
async def apply_recommendation(
    recommendation_id: int,
    request: ApplyRecommendationRequest,
    service: PricingServiceDep,
):
    """Apply an approved recommendation to its plan's price."""
    history = await service.apply_price_recommendation(recommendation_id, request.user_id)
    return ok(history, message="Price recommendation applied")


@router.get("/plans/{plan_id}/history")
async def plan_price_history(plan_id: int, storage: StorageDep):
    return ok(await storage.get_price_history(plan_id))
