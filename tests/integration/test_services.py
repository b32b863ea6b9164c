"""
Integration tests for the services built on the storage gateway.
"""

import random
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from unittest.mock import AsyncMock, patch

import pytest

from elevion.infrastructure.db.models import (
    PriceRecommendationCreate,
    SubscriptionPlanCreate,
    UserCreate,
)
from elevion.infrastructure.exceptions import NotFoundError, ValidationError
from elevion.infrastructure.services.analytics_service import AnalyticsService
from elevion.infrastructure.services.pricing_service import PricingService
from elevion.infrastructure.services.sample_data_service import (
    CONTENT_CATALOG,
    SAMPLE_CLIENT_PREVIEWS,
    SampleDataBootstrapper,
)


# ============================================================================
# Pricing
# ============================================================================

@pytest.fixture
async def plan(storage):
    return await storage.create_subscription_plan(SubscriptionPlanCreate(
        name="Starter",
        description="Starter plan",
        price=Decimal("9.99"),
        stripe_price_id="price_starter",
    ))


@pytest.fixture
async def admin(storage):
    return await storage.create_user(UserCreate(
        username="admin",
        email="admin@example.com",
        password_hash="hashed",
        role="admin",
    ))


async def _recommendation(storage, plan, status):
    return await storage.create_price_recommendation(PriceRecommendationCreate(
        plan_id=plan.id,
        current_price=plan.price,
        recommended_price=Decimal("12.99"),
        percent_change=Decimal("30.03"),
        analysis_data={
            "market_trends": [{"factor": "competitor pricing"}, {"factor": "demand"}],
            "confidence_score": 0.8,
        },
        status=status,
    ))


class TestApplyPriceRecommendation:
    """Applying a recommendation updates the plan and records history."""

    @pytest.mark.asyncio
    async def test_apply_approved(self, storage, plan, admin):
        recommendation = await _recommendation(storage, plan, "approved")

        history = await PricingService(storage).apply_price_recommendation(recommendation.id, admin.id)

        assert history.previous_price == Decimal("9.99")
        assert history.new_price == Decimal("12.99")
        assert history.change_reason == f"Applied recommendation ID {recommendation.id}"
        assert history.changed_by_user_id == admin.id
        assert history.is_automatic is False
        assert history.ai_analysis["market_factors"] == ["competitor pricing", "demand"]

        assert (await storage.get_subscription_plan(plan.id)).price == Decimal("12.99")
        assert (await storage.get_price_recommendation(recommendation.id)).status == "applied"
        assert len(await storage.get_price_history(plan.id)) == 1

    @pytest.mark.asyncio
    async def test_pending_recommendation_is_rejected(self, storage, plan, admin):
        recommendation = await _recommendation(storage, plan, "pending")

        with pytest.raises(ValidationError):
            await PricingService(storage).apply_price_recommendation(recommendation.id, admin.id)

        assert (await storage.get_subscription_plan(plan.id)).price == Decimal("9.99")
        assert await storage.get_price_history(plan.id) == []

    @pytest.mark.asyncio
    async def test_missing_recommendation(self, storage, admin):
        with pytest.raises(NotFoundError):
            await PricingService(storage).apply_price_recommendation(404, admin.id)

    @pytest.mark.asyncio
    async def test_status_update(self, storage, plan):
        recommendation = await _recommendation(storage, plan, "pending")

        updated = await PricingService(storage).update_recommendation_status(recommendation.id, "approved")

        assert updated.status == "approved"
        approved = await storage.get_price_recommendations(status="approved")
        assert [r.id for r in approved] == [recommendation.id]


# ============================================================================
# Analytics
# ============================================================================

class TestAnalyticsWithStorage:
    @pytest.mark.asyncio
    async def test_tracked_sessions_feed_the_summary(self, storage, clock):
        service = AnalyticsService(storage)
        now = clock()

        await service.track_session(now - timedelta(minutes=10), now - timedelta(minutes=8), device="tablet")
        await service.track_session(now - timedelta(days=40), now - timedelta(days=40) + timedelta(seconds=5))

        summary = await service.get_engagement_summary()

        assert summary["sessions"]["total"] == 1
        assert summary["sessions"]["avg_duration_seconds"] == 120.0
        assert summary["devices"]["tablet"] == 1

    @pytest.mark.asyncio
    async def test_offset_session_lands_in_its_utc_window(self, storage):
        plus_two = timezone(timedelta(hours=2))

        await AnalyticsService(storage).track_session(
            datetime(2024, 6, 1, 14, 0, tzinfo=plus_two),
            datetime(2024, 6, 1, 14, 1, tzinfo=plus_two),
        )

        sessions = await storage.get_sessions_between(datetime(2024, 6, 1, 11, 59), datetime(2024, 6, 1, 12, 1))

        assert len(sessions) == 1
        assert sessions[0].start_time == datetime(2024, 6, 1, 12, 0)
        assert sessions[0].end_time == datetime(2024, 6, 1, 12, 1)

    @pytest.mark.asyncio
    async def test_content_views_feed_the_effectiveness_report(self, storage):
        service = AnalyticsService(storage)

        await service.track_content_view(1, "blog", "Choosing a CMS", time_spent=Decimal("120"), user_id=5)
        await service.track_content_view(1, "blog", "Choosing a CMS", time_spent=Decimal("60"))
        await service.track_content_view(2, "page", "Pricing")

        report = await service.get_content_effectiveness()

        assert report["total_content"] == 2
        assert report["total_views"] == 3
        assert report["most_effective"][0]["title"] == "Choosing a CMS"
        assert report["most_effective"][0]["avg_time_on_page"] == 90.0


# ============================================================================
# Sample Data
# ============================================================================

class TestSampleDataBootstrapper:
    """Seeding fills empty tables once and is a no-op afterwards."""

    @pytest.mark.asyncio
    async def test_seeds_empty_database(self, storage, clock):
        await storage.create_user(UserCreate(username="ana", email="ana@example.com", password_hash="x"))
        bootstrapper = SampleDataBootstrapper(storage, rng=random.Random(7), clock=clock)

        summary = await bootstrapper.run()

        assert summary["client_previews"] == len(SAMPLE_CLIENT_PREVIEWS)
        assert summary["content_metrics"] == len(CONTENT_CATALOG)
        assert 1 <= summary["user_sessions"] <= 20
        assert await storage.validate_client_preview_code("AERO123") is True
        assert await storage.validate_client_preview_code("EXEC456") is True

    @pytest.mark.asyncio
    async def test_second_run_inserts_nothing(self, storage, clock):
        await storage.create_user(UserCreate(username="ana", email="ana@example.com", password_hash="x"))
        bootstrapper = SampleDataBootstrapper(storage, rng=random.Random(7), clock=clock)

        await bootstrapper.run()
        sessions = await storage.count_user_sessions()

        summary = await bootstrapper.run()

        assert summary == {"client_previews": 0, "user_sessions": 0, "content_metrics": 0}
        assert await storage.count_client_previews() == len(SAMPLE_CLIENT_PREVIEWS)
        assert await storage.count_user_sessions() == sessions
        assert await storage.count_content_view_metrics() == len(CONTENT_CATALOG)

    @pytest.mark.asyncio
    async def test_no_users_means_no_sessions(self, storage, clock):
        summary = await SampleDataBootstrapper(storage, clock=clock).run()
        assert summary["user_sessions"] == 0

    @pytest.mark.asyncio
    async def test_failing_step_does_not_stop_the_others(self, storage, clock):
        bootstrapper = SampleDataBootstrapper(storage, clock=clock)

        with patch.object(storage, "count_client_previews", AsyncMock(side_effect=RuntimeError("boom"))):
            summary = await bootstrapper.run()

        assert summary["client_previews"] == 0
        assert summary["content_metrics"] == len(CONTENT_CATALOG)
