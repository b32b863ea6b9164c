"""
Pricing Service

Applies reviewed price recommendations to subscription plans and keeps
the price history in step.
"""

import logging
from typing import Any, Dict

from elevion.domain.statuses import RecommendationStatus
from elevion.infrastructure.db.models.pricing import (
    PriceHistory,
    PriceHistoryCreate,
    PriceRecommendation,
    PriceRecommendationUpdate,
)
from elevion.infrastructure.db.models.subscription import SubscriptionPlanUpdate
from elevion.infrastructure.db.storage import DatabaseStorage
from elevion.infrastructure.exceptions import NotFoundError, ValidationError


logger = logging.getLogger(__name__)


def summarize_analysis(recommendation: PriceRecommendation) -> Dict[str, Any]:
    """Condense a recommendation's analysis into the price-history record."""
    analysis = recommendation.analysis_data or {}
    return {
        "market_factors": [
            trend.get("factor") for trend in analysis.get("market_trends", [])
            if isinstance(trend, dict)
        ],
        "competitive_analysis": analysis.get("competitive_analysis"),
        "user_impact": analysis.get("user_metrics"),
        "recommended_adjustment": float(recommendation.percent_change),
        "confidence": analysis.get("confidence_score"),
    }


class PricingService:
    def __init__(self, storage: DatabaseStorage):
        self._storage = storage

    async def apply_price_recommendation(
        self,
        recommendation_id: int,
        user_id: int,
    ) -> PriceHistory:
        """
        Apply an approved recommendation to its plan.

        Appends a price-history row, sets the plan's price and marks the
        recommendation applied. Each step commits on its own.

        Raises:
            NotFoundError: recommendation or plan does not exist
            ValidationError: recommendation is not approved
        """
        recommendation = await self._storage.get_price_recommendation(recommendation_id)
        if recommendation is None:
            raise NotFoundError(
                f"Price recommendation {recommendation_id} not found",
                operation="apply",
                table="price_recommendations",
            )
        if recommendation.status != RecommendationStatus.APPROVED.value:
            raise ValidationError(
                f"Price recommendation {recommendation_id} is not approved",
                details={"status": recommendation.status},
            )

        plan = await self._storage.get_subscription_plan(recommendation.plan_id)
        if plan is None:
            raise NotFoundError(
                f"Subscription plan {recommendation.plan_id} not found",
                operation="apply",
                table="subscription_plans",
            )

        history = await self._storage.create_price_history(
            PriceHistoryCreate(
                plan_id=plan.id,
                previous_price=plan.price,
                new_price=recommendation.recommended_price,
                change_reason=f"Applied recommendation ID {recommendation_id}",
                ai_analysis=summarize_analysis(recommendation),
                changed_by_user_id=user_id,
                is_automatic=False,
            )
        )
        await self._storage.update_subscription_plan(
            plan.id,
            SubscriptionPlanUpdate(price=recommendation.recommended_price),
        )
        await self._storage.update_price_recommendation(
            recommendation_id,
            PriceRecommendationUpdate(status=RecommendationStatus.APPLIED),
        )

        logger.info(
            f"Applied recommendation {recommendation_id}: plan {plan.id} "
            f"{plan.price} -> {recommendation.recommended_price}"
        )
        return history

    async def update_recommendation_status(
        self,
        recommendation_id: int,
        status: RecommendationStatus,
    ) -> PriceRecommendation:
        return await self._storage.update_price_recommendation(
            recommendation_id,
            PriceRecommendationUpdate(status=status),
        )
