"""
Integration tests for the storage gateway.

Runs every operation against a real SQLite database (see the `storage`
fixture in conftest.py) with a controllable clock.
"""

import asyncio
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from unittest.mock import MagicMock, patch

import pytest
from sqlalchemy import DateTime
from sqlmodel import SQLModel

from elevion.infrastructure.db.models import (
    AdvertisementCreate,
    AdvertisementUpdate,
    ClientPreviewCreate,
    ContactSubmissionCreate,
    FeedbackCreate,
    MarketplaceItemCreate,
    MarketplaceItemUpdate,
    MarketplaceOrderCreate,
    MarketplaceOrderUpdate,
    MockupRequestCreate,
    MockupRequestUpdate,
    NaiveUTCDateTime,
    PostCreate,
    PriceHistoryCreate,
    SubscriptionPlanCreate,
    SubscriptionPlanUpdate,
    UserCreate,
    UserSessionCreate,
    UserSubscriptionCreate,
    UserSubscriptionUpdate,
    UserUpdate,
)
from elevion.infrastructure.db.storage import DatabaseStorage
from elevion.infrastructure.exceptions import ConstraintViolationError, NotFoundError


async def _user(storage, username="ana", email=None):
    return await storage.create_user(
        UserCreate(
            username=username,
            email=email or f"{username}@example.com",
            password_hash="hashed",
        )
    )


async def _plan(storage, name, price, is_active=True):
    return await storage.create_subscription_plan(
        SubscriptionPlanCreate(
            name=name,
            description=f"{name} plan",
            price=Decimal(price),
            features=["hosting"],
            is_active=is_active,
            stripe_price_id=f"price_{name.lower()}",
        )
    )


async def _item(storage, seller_id, name, category="service", description="Built by us", **kwargs):
    return await storage.create_marketplace_item(
        MarketplaceItemCreate(
            name=name,
            description=description,
            price=Decimal("100.00"),
            seller_id=seller_id,
            category=category,
            **kwargs,
        )
    )


async def _ad(storage, clock, name="Spring sale", ad_type="banner", **kwargs):
    values = dict(
        name=name,
        type=ad_type,
        image_url="/img/ad.png",
        target_url="/sale",
        start_date=clock() - timedelta(days=1),
        end_date=clock() + timedelta(days=1),
    )
    values.update(kwargs)
    return await storage.create_advertisement(AdvertisementCreate(**values))


# ============================================================================
# Create / Get / Update
# ============================================================================

class TestUsers:
    """Tests for the create/get/update contract, using users."""

    @pytest.mark.asyncio
    async def test_create_then_get(self, storage, clock):
        user = await _user(storage)

        assert user.id is not None
        assert user.created_at == clock()
        assert user.updated_at == clock()

        fetched = await storage.get_user(user.id)
        assert fetched.username == "ana"
        assert fetched.role == "user"
        assert await storage.get_user_by_email("ana@example.com") is not None
        assert await storage.get_user_by_username("nobody") is None

    @pytest.mark.asyncio
    async def test_update_merges_fields_and_advances_updated_at(self, storage, clock):
        user = await _user(storage)
        later = clock.advance(minutes=5)

        updated = await storage.update_user(user.id, UserUpdate(first_name="Ana"))

        assert updated.first_name == "Ana"
        assert updated.email == "ana@example.com"
        assert updated.created_at == user.created_at
        assert updated.updated_at == later

    @pytest.mark.asyncio
    async def test_update_missing_row_raises_not_found(self, storage):
        with pytest.raises(NotFoundError):
            await storage.update_user(999, UserUpdate(first_name="Ghost"))

    @pytest.mark.asyncio
    async def test_duplicate_username_is_constraint_violation(self, storage):
        await _user(storage, "ana", "ana@example.com")

        with pytest.raises(ConstraintViolationError) as exc_info:
            await _user(storage, "ana", "other@example.com")

        assert exc_info.value.details["table"] == "users"
        assert exc_info.value.constraint == "users.username"

        assert len(await storage.get_all_users()) == 1

    @pytest.mark.asyncio
    async def test_stripe_customer_id_and_login(self, storage, clock):
        user = await _user(storage)
        clock.advance(hours=1)

        await storage.update_stripe_customer_id(user.id, "cus_123")
        logged_in = await storage.record_user_login(user.id)

        assert logged_in.stripe_customer_id == "cus_123"
        assert logged_in.last_login_at == clock()


class TestTimestampColumns:
    """Timestamps are `timestamp without time zone` columns holding UTC."""

    def test_every_datetime_column_is_naive_utc(self):
        import elevion.infrastructure.db.models  # noqa: F401

        for table in SQLModel.metadata.sorted_tables:
            for column in table.columns:
                if isinstance(column.type, DateTime) or isinstance(getattr(column.type, "impl", None), DateTime):
                    assert isinstance(column.type, NaiveUTCDateTime), f"{table.name}.{column.name}"
                    assert column.type.impl.timezone is False

    @pytest.mark.asyncio
    async def test_offset_aware_values_are_stored_as_utc(self, storage, clock):
        plus_two = timezone(timedelta(hours=2))
        ad = await _ad(
            storage,
            clock,
            start_date=datetime(2024, 6, 1, 13, 0, tzinfo=plus_two),
            end_date=datetime(2024, 6, 1, 15, 0, tzinfo=plus_two),
        )

        fetched = await storage.get_advertisement(ad.id)
        assert fetched.start_date == datetime(2024, 6, 1, 11, 0)
        assert fetched.end_date == datetime(2024, 6, 1, 13, 0)
        assert [a.id for a in await storage.get_active_advertisements()] == [ad.id]
        assert len(await storage.get_active_advertisements(now=datetime(2024, 6, 1, 13, 30, tzinfo=plus_two))) == 1
        assert await storage.get_active_advertisements(now=datetime(2024, 6, 1, 15, 30, tzinfo=plus_two)) == []


class TestContactSubmissions:
    @pytest.mark.asyncio
    async def test_newest_first(self, storage, clock):
        await storage.create_contact_submission(
            ContactSubmissionCreate(name="A", email="a@example.com", message="first")
        )
        clock.advance(minutes=1)
        await storage.create_contact_submission(
            ContactSubmissionCreate(name="B", email="b@example.com", message="second")
        )

        submissions = await storage.get_contact_submissions()
        assert [s.message for s in submissions] == ["second", "first"]


# ============================================================================
# Client Previews
# ============================================================================

class TestClientPreviews:
    """Lookup only returns active, unexpired previews."""

    @pytest.mark.asyncio
    async def test_valid_preview(self, storage, clock):
        await storage.create_client_preview(ClientPreviewCreate(
            code="AERO123",
            client_name="SkyHigh Airlines",
            project_id=1,
            expires_at=clock() + timedelta(days=30),
        ))

        preview = await storage.get_client_preview_by_code("AERO123")

        assert preview.client_name == "SkyHigh Airlines"
        assert await storage.validate_client_preview_code("AERO123") is True

    @pytest.mark.asyncio
    async def test_expired_preview_is_absent(self, storage, clock):
        await storage.create_client_preview(ClientPreviewCreate(
            code="OLD1",
            client_name="Old Client",
            project_id=3,
            expires_at=clock() + timedelta(days=1),
        ))
        clock.advance(days=2)

        assert await storage.get_client_preview_by_code("OLD1") is None
        assert await storage.validate_client_preview_code("OLD1") is False

    @pytest.mark.asyncio
    async def test_inactive_preview_is_absent(self, storage, clock):
        await storage.create_client_preview(ClientPreviewCreate(
            code="OFF1",
            client_name="Paused Client",
            project_id=4,
            expires_at=clock() + timedelta(days=30),
            is_active=False,
        ))

        assert await storage.get_client_preview_by_code("OFF1") is None

    @pytest.mark.asyncio
    async def test_unknown_code(self, storage):
        assert await storage.validate_client_preview_code("NOPE") is False


# ============================================================================
# Posts
# ============================================================================

class TestPosts:
    @pytest.mark.asyncio
    async def test_recent_posts_newest_first(self, storage, clock):
        for title in ("One", "Two", "Three"):
            await storage.create_post(PostCreate(title=title, content="Body", tags=["news"]))
            clock.advance(minutes=1)

        posts = await storage.get_recent_posts(limit=2)

        assert [p.title for p in posts] == ["Three", "Two"]
        assert posts[0].status == "published"
        assert posts[0].tags == ["news"]


# ============================================================================
# Subscription Plans
# ============================================================================

class TestSubscriptionPlans:
    """Plans are always listed cheapest first."""

    @pytest.mark.asyncio
    async def test_plans_ordered_by_price(self, storage):
        await _plan(storage, "Pro", "29.99")
        await _plan(storage, "Starter", "9.99")
        await _plan(storage, "Business", "19.99")

        plans = await storage.get_all_subscription_plans()

        assert [p.name for p in plans] == ["Starter", "Business", "Pro"]
        assert plans[0].price == Decimal("9.99")
        assert plans[0].interval == "month"

    @pytest.mark.asyncio
    async def test_price_change_reorders_plans(self, storage):
        await _plan(storage, "Starter", "9.99")
        pro = await _plan(storage, "Pro", "29.99")

        await storage.update_subscription_plan(pro.id, SubscriptionPlanUpdate(price=Decimal("4.99")))

        plans = await storage.get_all_subscription_plans()
        assert [p.name for p in plans] == ["Pro", "Starter"]

    @pytest.mark.asyncio
    async def test_active_plans_only(self, storage):
        await _plan(storage, "Starter", "9.99")
        await _plan(storage, "Legacy", "5.00", is_active=False)

        active = await storage.get_active_subscription_plans()
        everything = await storage.get_all_subscription_plans()

        assert [p.name for p in active] == ["Starter"]
        assert len(everything) == 2

    @pytest.mark.asyncio
    async def test_partial_update_keeps_other_fields(self, storage):
        plan = await _plan(storage, "Starter", "9.99")

        updated = await storage.update_subscription_plan(
            plan.id, SubscriptionPlanUpdate(description="Now with email")
        )

        assert updated.description == "Now with email"
        assert updated.price == Decimal("9.99")
        assert updated.features == ["hosting"]


class TestUserSubscriptions:
    @pytest.mark.asyncio
    async def test_active_subscription(self, storage, clock):
        user = await _user(storage)
        plan = await _plan(storage, "Starter", "9.99")
        subscription = await storage.create_user_subscription(UserSubscriptionCreate(
            user_id=user.id,
            plan_id=plan.id,
            current_period_start=clock() - timedelta(days=1),
            current_period_end=clock() + timedelta(days=29),
            stripe_subscription_id="sub_1",
            stripe_customer_id="cus_1",
        ))

        active = await storage.get_user_active_subscription(user.id)
        assert active.id == subscription.id
        assert active.status == "active"

        clock.advance(days=30)
        assert await storage.get_user_active_subscription(user.id) is None

    @pytest.mark.asyncio
    async def test_canceled_subscription_is_not_active(self, storage, clock):
        user = await _user(storage)
        plan = await _plan(storage, "Starter", "9.99")
        await storage.create_user_subscription(UserSubscriptionCreate(
            user_id=user.id,
            plan_id=plan.id,
            status="canceled",
            current_period_start=clock() - timedelta(days=1),
            current_period_end=clock() + timedelta(days=29),
            stripe_subscription_id="sub_1",
            stripe_customer_id="cus_1",
        ))

        assert await storage.get_user_active_subscription(user.id) is None
        assert len(await storage.get_user_subscriptions(user.id)) == 1


# ============================================================================
# Marketplace
# ============================================================================

class TestMarketplace:
    @pytest.mark.asyncio
    async def test_available_items_and_services(self, storage):
        seller = await _user(storage)
        await _item(storage, seller.id, "SEO audit")
        await _item(storage, seller.id, "Logo pack", category="design")
        await _item(storage, seller.id, "Retired service", is_available=False)

        available = await storage.get_available_marketplace_items()
        services = await storage.get_marketplace_services()

        assert [i.name for i in available] == ["SEO audit", "Logo pack"]
        assert [i.name for i in services] == ["SEO audit"]


class TestServiceEngagement:
    """Engagement counters are created on first touch and then incremented."""

    @pytest.mark.asyncio
    async def test_first_click_creates_row(self, storage):
        engagement = await storage.track_service_click(4)

        assert engagement.clicks == 1
        assert engagement.inquiries == 0
        assert engagement.conversions == 0

    @pytest.mark.asyncio
    async def test_repeated_tracking_increments(self, storage, clock):
        await storage.track_service_click(4)
        clock.advance(minutes=1)
        engagement = await storage.track_service_click(4)

        assert engagement.clicks == 2
        assert engagement.last_engaged_at == clock()

        engagement = await storage.track_service_inquiry(4)
        assert engagement.clicks == 2
        assert engagement.inquiries == 1

    @pytest.mark.asyncio
    async def test_listing_most_clicked_first(self, storage):
        await storage.track_service_click(1)
        await storage.track_service_click(2)
        await storage.track_service_click(2)
        await storage.track_service_conversion(3)

        rows = await storage.get_marketplace_service_engagement()

        assert [r.service_id for r in rows] == [2, 1, 3]

    @pytest.mark.asyncio
    async def test_concurrent_first_clicks_share_one_row(self, storage):
        await asyncio.gather(*(storage.track_service_click(9) for _ in range(10)))

        rows = await storage.get_marketplace_service_engagement()

        assert [(r.service_id, r.clicks) for r in rows] == [(9, 10)]


# ============================================================================
# Advertisements
# ============================================================================

class TestAdvertisements:
    """Active means flagged active and strictly inside the run window."""

    @pytest.mark.asyncio
    async def test_active_window(self, storage, clock):
        ad = await _ad(storage, clock)
        await _ad(storage, clock, name="Paused", is_active=False)
        await _ad(storage, clock, name="Future", start_date=clock() + timedelta(days=1),
                  end_date=clock() + timedelta(days=5))

        active = await storage.get_active_advertisements()
        assert [a.name for a in active] == ["Spring sale"]

        await storage.update_advertisement(ad.id, AdvertisementUpdate(end_date=clock() - timedelta(hours=1)))
        assert await storage.get_active_advertisements() == []

    @pytest.mark.asyncio
    async def test_explicit_now(self, storage, clock):
        ad = await _ad(storage, clock)

        assert await storage.get_active_advertisements(now=ad.end_date) == []
        assert await storage.get_active_advertisements(now=ad.start_date) == []
        assert len(await storage.get_active_advertisements(now=clock())) == 1

    @pytest.mark.asyncio
    async def test_filter_by_type(self, storage, clock):
        await _ad(storage, clock, name="Top", ad_type="banner")
        await _ad(storage, clock, name="Side", ad_type="sidebar")

        sidebar = await storage.get_active_advertisements_by_type("sidebar")
        assert [a.name for a in sidebar] == ["Side"]

    @pytest.mark.asyncio
    async def test_concurrent_increments_are_not_lost(self, storage, clock):
        ad = await _ad(storage, clock)

        await asyncio.gather(*(storage.increment_ad_impressions(ad.id) for _ in range(10)))
        await asyncio.gather(*(storage.increment_ad_clicks(ad.id) for _ in range(3)))

        fetched = await storage.get_advertisement(ad.id)
        assert fetched.impressions == 10
        assert fetched.clicks == 3

    @pytest.mark.asyncio
    async def test_increment_missing_ad(self, storage):
        with pytest.raises(NotFoundError):
            await storage.increment_ad_clicks(404)


# ============================================================================
# Feedback and Mockups
# ============================================================================

class TestFeedback:
    @pytest.mark.asyncio
    async def test_status_filter_and_order(self, storage, clock):
        first = await storage.create_feedback(FeedbackCreate(message="Love it"))
        clock.advance(minutes=1)
        await storage.create_feedback(FeedbackCreate(message="Slow page"))

        assert first.status == "new"
        await storage.update_feedback_status(first.id, "reviewed")

        newest = await storage.get_all_feedback()
        reviewed = await storage.get_all_feedback(status="reviewed")
        recent = await storage.get_recent_feedback(limit=1)

        assert [f.message for f in newest] == ["Slow page", "Love it"]
        assert [f.message for f in reviewed] == ["Love it"]
        assert [f.message for f in recent] == ["Slow page"]

    @pytest.mark.asyncio
    async def test_update_status_of_missing_feedback(self, storage):
        with pytest.raises(NotFoundError):
            await storage.update_feedback_status(12, "reviewed")


class TestMockupRequests:
    @pytest.mark.asyncio
    async def test_by_status(self, storage):
        await storage.create_mockup_request(MockupRequestCreate(business_type="Bakery"))
        await storage.create_mockup_request(
            MockupRequestCreate(business_type="Airline", status="completed")
        )

        pending = await storage.get_mockup_requests_by_status("pending")
        recent = await storage.get_recent_mockup_requests()

        assert [m.business_type for m in pending] == ["Bakery"]
        assert len(recent) == 2


# ============================================================================
# Pricing rows
# ============================================================================

class TestPriceHistory:
    @pytest.mark.asyncio
    async def test_applied_at_defaults_to_now(self, storage, clock):
        plan = await _plan(storage, "Starter", "9.99")

        entry = await storage.create_price_history(PriceHistoryCreate(
            plan_id=plan.id,
            previous_price=Decimal("9.99"),
            new_price=Decimal("12.99"),
        ))

        assert entry.applied_at == clock()
        assert (await storage.get_price_history(plan.id))[0].id == entry.id


# ============================================================================
# Content Views
# ============================================================================

class TestContentViews:
    """record_content_view upserts the per-content metric row."""

    @pytest.mark.asyncio
    async def test_first_and_second_view(self, storage):
        metric = await storage.record_content_view(
            7, "blog", "Choosing a CMS", time_spent=Decimal("30"), user_id=1
        )
        assert metric.views == 1
        assert metric.unique_views == 1
        assert metric.avg_time_on_page == Decimal("30")

        metric = await storage.record_content_view(
            7, "blog", "Choosing a CMS", time_spent=Decimal("60")
        )
        assert metric.views == 2
        assert metric.unique_views == 1
        assert metric.avg_time_on_page == Decimal("45")

    @pytest.mark.asyncio
    async def test_same_id_different_type_is_separate(self, storage):
        await storage.record_content_view(7, "blog", "Post")
        await storage.record_content_view(7, "page", "Page")

        assert await storage.count_content_view_metrics() == 2


# ============================================================================
# Search
# ============================================================================

class TestSearch:
    @pytest.mark.asyncio
    async def test_results_are_capped_at_fifteen(self, storage):
        for i in range(20):
            await storage.create_post(PostCreate(title=f"Launch notes {i}", content="Release"))

        assert len(await storage.search_posts("launch")) == 15

    @pytest.mark.asyncio
    async def test_search_posts_is_case_insensitive(self, storage):
        await storage.create_post(PostCreate(title="Speed Matters", content="Fast sites convert"))
        await storage.create_post(PostCreate(title="Colour", content="Palettes", category="design"))

        assert [p.title for p in await storage.search_posts("speed")] == ["Speed Matters"]
        assert [p.title for p in await storage.search_posts("DESIGN")] == ["Colour"]

    @pytest.mark.asyncio
    async def test_search_services_only_matches_services(self, storage):
        seller = await _user(storage)
        await _item(storage, seller.id, "Web design retainer")
        await _item(storage, seller.id, "Design templates", category="templates")

        services = await storage.search_services("design")
        items = await storage.search_marketplace_items("design")

        assert [i.name for i in services] == ["Web design retainer"]
        assert len(items) == 2

    @pytest.mark.asyncio
    async def test_failing_search_returns_empty(self, clock):
        broken = DatabaseStorage(
            session_factory=MagicMock(side_effect=RuntimeError("connection refused")),
            clock=clock,
        )

        assert await broken.search_posts("anything") == []
        assert await broken.search_marketplace_items("anything") == []
        assert await broken.search_services("anything") == []

    @pytest.mark.asyncio
    async def test_query_error_returns_empty(self, storage):
        with patch(
            "elevion.infrastructure.db.repositories.search_repository.SearchRepository.search_posts",
            side_effect=RuntimeError("syntax error"),
        ):
            assert await storage.search_posts("x") == []


# ============================================================================
# Remaining getters and updates
# ============================================================================

class TestLookupsAndUpdates:
    """Single-row getters return None for unknown ids; updates merge."""

    @pytest.mark.asyncio
    async def test_orders(self, storage, clock):
        buyer = await _user(storage)
        item = await _item(storage, buyer.id, "SEO audit")
        order = await storage.create_marketplace_order(MarketplaceOrderCreate(
            buyer_id=buyer.id,
            item_id=item.id,
            quantity=2,
            total_price=Decimal("200.00"),
        ))

        assert order.status == "pending"
        assert (await storage.get_marketplace_order(order.id)).quantity == 2
        assert await storage.get_marketplace_order(404) is None

        completed = await storage.update_marketplace_order(
            order.id, MarketplaceOrderUpdate(status="completed", stripe_payment_intent_id="pi_1")
        )
        assert completed.status == "completed"
        assert completed.total_price == Decimal("200.00")
        assert [o.id for o in await storage.get_user_marketplace_orders(buyer.id)] == [order.id]

    @pytest.mark.asyncio
    async def test_items(self, storage):
        seller = await _user(storage)
        item = await _item(storage, seller.id, "SEO audit")

        await storage.update_marketplace_item(item.id, MarketplaceItemUpdate(is_available=False))

        assert (await storage.get_marketplace_item(item.id)).is_available is False
        assert len(await storage.get_all_marketplace_items()) == 1
        assert await storage.get_available_marketplace_items() == []

    @pytest.mark.asyncio
    async def test_subscription_update(self, storage, clock):
        user = await _user(storage)
        plan = await _plan(storage, "Starter", "9.99")
        subscription = await storage.create_user_subscription(UserSubscriptionCreate(
            user_id=user.id,
            plan_id=plan.id,
            current_period_start=clock(),
            current_period_end=clock() + timedelta(days=30),
            stripe_subscription_id="sub_1",
            stripe_customer_id="cus_1",
        ))

        updated = await storage.update_user_subscription(
            subscription.id, UserSubscriptionUpdate(cancel_at_period_end=True)
        )

        assert updated.cancel_at_period_end is True
        assert updated.status == "active"

    @pytest.mark.asyncio
    async def test_posts_feedback_and_mockups(self, storage):
        post = await storage.create_post(PostCreate(title="Hello", content="World"))
        feedback = await storage.create_feedback(FeedbackCreate(message="Nice", rating=4))
        mockup = await storage.create_mockup_request(MockupRequestCreate(business_type="Bakery"))

        assert (await storage.get_post(post.id)).title == "Hello"
        assert (await storage.get_feedback(feedback.id)).rating == 4
        assert await storage.get_mockup_request(404) is None

        done = await storage.update_mockup_request(
            mockup.id, MockupRequestUpdate(status="completed", completion_time=Decimal("3.50"))
        )
        assert done.status == "completed"
        assert (await storage.get_mockup_request(mockup.id)).completion_time == Decimal("3.50")

    @pytest.mark.asyncio
    async def test_sessions_and_engagement(self, storage, clock):
        user = await _user(storage)
        start = clock() - timedelta(hours=1)
        await storage.create_user_session(UserSessionCreate(
            user_id=user.id,
            session_duration=Decimal("60"),
            start_time=start,
            end_time=start + timedelta(seconds=60),
        ))

        assert len(await storage.get_user_sessions(user.id)) == 1
        assert len(await storage.get_sessions_between(start, clock())) == 1
        assert await storage.get_sessions_between(clock(), clock() + timedelta(hours=1)) == []

        assert await storage.get_service_engagement(8) is None
        await storage.track_service_conversion(8)
        assert (await storage.get_service_engagement(8)).conversions == 1
