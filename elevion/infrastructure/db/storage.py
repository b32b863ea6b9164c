"""
Storage gateway for Elevion

DatabaseStorage is the single persistence entry point used by routes,
services and the sample-data bootstrapper. Every public method runs in
its own unit of work: a session is opened, the repository call runs,
and the transaction commits before the method returns. Entities are never
cached between calls.
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime
from decimal import Decimal
from functools import lru_cache
from typing import AsyncGenerator, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from elevion.config.settings import Settings, get_settings
from elevion.domain.statuses import EngagementCounter
from elevion.infrastructure.db.database import get_db_manager, session_scope
from elevion.infrastructure.db.models import (
    Advertisement,
    AdvertisementCreate,
    AdvertisementUpdate,
    ClientPreview,
    ClientPreviewCreate,
    ContactSubmission,
    ContactSubmissionCreate,
    ContentViewMetric,
    ContentViewMetricCreate,
    Feedback,
    FeedbackCreate,
    MarketplaceItem,
    MarketplaceItemCreate,
    MarketplaceItemUpdate,
    MarketplaceOrder,
    MarketplaceOrderCreate,
    MarketplaceOrderUpdate,
    MockupRequest,
    MockupRequestCreate,
    MockupRequestUpdate,
    Post,
    PostCreate,
    PriceHistory,
    PriceHistoryCreate,
    PriceRecommendation,
    PriceRecommendationCreate,
    PriceRecommendationUpdate,
    ServiceEngagement,
    SubscriptionPlan,
    SubscriptionPlanCreate,
    SubscriptionPlanUpdate,
    User,
    UserCreate,
    UserSession,
    UserSessionCreate,
    UserSubscription,
    UserSubscriptionCreate,
    UserSubscriptionUpdate,
    UserUpdate,
    utc_now,
)
from elevion.infrastructure.db.repositories import (
    AdvertisementRepository,
    ClientPreviewRepository,
    Clock,
    ContactSubmissionRepository,
    ContentViewMetricRepository,
    FeedbackRepository,
    MarketplaceItemRepository,
    MarketplaceOrderRepository,
    MockupRequestRepository,
    PostRepository,
    PriceHistoryRepository,
    PriceRecommendationRepository,
    SearchRepository,
    ServiceEngagementRepository,
    SubscriptionPlanRepository,
    UserRepository,
    UserSessionRepository,
    UserSubscriptionRepository,
)


logger = logging.getLogger(__name__)


class DatabaseStorage:
    """
    Persistence gateway over the relational store.

    Args:
        session_factory: Session factory to open units of work with.
            Defaults to the process-wide pool.
        clock: Source of the current time for timestamps and "active"
            queries. Defaults to UTC wall-clock time.
        settings: Application settings (search limit).
    """

    def __init__(
        self,
        session_factory: Optional[async_sessionmaker[AsyncSession]] = None,
        clock: Optional[Clock] = None,
        settings: Optional[Settings] = None,
    ):
        self._session_factory = session_factory
        self._clock = clock or utc_now
        self._settings = settings or get_settings()

    @property
    def session_factory(self) -> async_sessionmaker[AsyncSession]:
        if self._session_factory is None:
            self._session_factory = get_db_manager().session_factory
        return self._session_factory

    def now(self) -> datetime:
        return self._clock()

    @asynccontextmanager
    async def _unit_of_work(self) -> AsyncGenerator[AsyncSession, None]:
        async with session_scope(self.session_factory) as session:
            yield session

    # =========================================================================
    # Users
    # =========================================================================

    async def get_user(self, user_id: int) -> Optional[User]:
        async with self._unit_of_work() as session:
            return await UserRepository(session, self._clock).get_by_id(user_id)

    async def get_user_by_username(self, username: str) -> Optional[User]:
        async with self._unit_of_work() as session:
            return await UserRepository(session, self._clock).get_by_username(username)

    async def get_user_by_email(self, email: str) -> Optional[User]:
        async with self._unit_of_work() as session:
            return await UserRepository(session, self._clock).get_by_email(email)

    async def get_all_users(self) -> List[User]:
        async with self._unit_of_work() as session:
            return await UserRepository(session, self._clock).get_all()

    async def create_user(self, data: UserCreate) -> User:
        async with self._unit_of_work() as session:
            user = await UserRepository(session, self._clock).create(data)
        logger.info(f"Created user {user.id} ({user.username})")
        return user

    async def update_user(self, user_id: int, data: UserUpdate) -> User:
        async with self._unit_of_work() as session:
            return await UserRepository(session, self._clock).update(user_id, data)

    async def update_stripe_customer_id(self, user_id: int, customer_id: str) -> User:
        async with self._unit_of_work() as session:
            return await UserRepository(session, self._clock).update(
                user_id, {"stripe_customer_id": customer_id}
            )

    async def record_user_login(self, user_id: int) -> User:
        async with self._unit_of_work() as session:
            return await UserRepository(session, self._clock).record_login(user_id, self.now())

    # =========================================================================
    # Contact submissions
    # =========================================================================

    async def create_contact_submission(self, data: ContactSubmissionCreate) -> ContactSubmission:
        async with self._unit_of_work() as session:
            return await ContactSubmissionRepository(session, self._clock).create(data)

    async def get_contact_submissions(self) -> List[ContactSubmission]:
        async with self._unit_of_work() as session:
            return await ContactSubmissionRepository(session, self._clock).get_newest_first()

    # =========================================================================
    # Client previews
    # =========================================================================

    async def create_client_preview(self, data: ClientPreviewCreate) -> ClientPreview:
        async with self._unit_of_work() as session:
            return await ClientPreviewRepository(session, self._clock).create(data)

    async def get_client_preview_by_code(
        self,
        code: str,
        now: Optional[datetime] = None,
    ) -> Optional[ClientPreview]:
        async with self._unit_of_work() as session:
            return await ClientPreviewRepository(session, self._clock).get_valid_by_code(
                code, now or self.now()
            )

    async def validate_client_preview_code(self, code: str, now: Optional[datetime] = None) -> bool:
        return await self.get_client_preview_by_code(code, now) is not None

    async def count_client_previews(self) -> int:
        async with self._unit_of_work() as session:
            return await ClientPreviewRepository(session, self._clock).count()

    # =========================================================================
    # Posts
    # =========================================================================

    async def create_post(self, data: PostCreate) -> Post:
        async with self._unit_of_work() as session:
            return await PostRepository(session, self._clock).create(data)

    async def get_post(self, post_id: int) -> Optional[Post]:
        async with self._unit_of_work() as session:
            return await PostRepository(session, self._clock).get_by_id(post_id)

    async def get_recent_posts(self, limit: int = 10) -> List[Post]:
        async with self._unit_of_work() as session:
            return await PostRepository(session, self._clock).get_recent(limit)

    # =========================================================================
    # Subscription plans
    # =========================================================================

    async def create_subscription_plan(self, data: SubscriptionPlanCreate) -> SubscriptionPlan:
        async with self._unit_of_work() as session:
            return await SubscriptionPlanRepository(session, self._clock).create(data)

    async def get_subscription_plan(self, plan_id: int) -> Optional[SubscriptionPlan]:
        async with self._unit_of_work() as session:
            return await SubscriptionPlanRepository(session, self._clock).get_by_id(plan_id)

    async def get_all_subscription_plans(self) -> List[SubscriptionPlan]:
        async with self._unit_of_work() as session:
            return await SubscriptionPlanRepository(session, self._clock).get_by_price()

    async def get_active_subscription_plans(self) -> List[SubscriptionPlan]:
        async with self._unit_of_work() as session:
            return await SubscriptionPlanRepository(session, self._clock).get_by_price(active_only=True)

    async def update_subscription_plan(
        self,
        plan_id: int,
        data: SubscriptionPlanUpdate,
    ) -> SubscriptionPlan:
        async with self._unit_of_work() as session:
            plan = await SubscriptionPlanRepository(session, self._clock).update(plan_id, data)
        logger.info(f"Updated subscription plan {plan_id}")
        return plan

    # =========================================================================
    # User subscriptions
    # =========================================================================

    async def create_user_subscription(self, data: UserSubscriptionCreate) -> UserSubscription:
        async with self._unit_of_work() as session:
            subscription = await UserSubscriptionRepository(session, self._clock).create(data)
        logger.info(
            f"Created subscription {subscription.id} for user {subscription.user_id} "
            f"on plan {subscription.plan_id}"
        )
        return subscription

    async def get_user_subscriptions(self, user_id: int) -> List[UserSubscription]:
        async with self._unit_of_work() as session:
            return await UserSubscriptionRepository(session, self._clock).get_for_user(user_id)

    async def get_user_active_subscription(
        self,
        user_id: int,
        now: Optional[datetime] = None,
    ) -> Optional[UserSubscription]:
        async with self._unit_of_work() as session:
            return await UserSubscriptionRepository(session, self._clock).get_active_for_user(
                user_id, now or self.now()
            )

    async def update_user_subscription(
        self,
        subscription_id: int,
        data: UserSubscriptionUpdate,
    ) -> UserSubscription:
        async with self._unit_of_work() as session:
            return await UserSubscriptionRepository(session, self._clock).update(subscription_id, data)

    # =========================================================================
    # Marketplace
    # =========================================================================

    async def create_marketplace_item(self, data: MarketplaceItemCreate) -> MarketplaceItem:
        async with self._unit_of_work() as session:
            return await MarketplaceItemRepository(session, self._clock).create(data)

    async def get_marketplace_item(self, item_id: int) -> Optional[MarketplaceItem]:
        async with self._unit_of_work() as session:
            return await MarketplaceItemRepository(session, self._clock).get_by_id(item_id)

    async def get_all_marketplace_items(self) -> List[MarketplaceItem]:
        async with self._unit_of_work() as session:
            return await MarketplaceItemRepository(session, self._clock).get_all()

    async def get_available_marketplace_items(self) -> List[MarketplaceItem]:
        async with self._unit_of_work() as session:
            return await MarketplaceItemRepository(session, self._clock).get_available()

    async def get_marketplace_services(self) -> List[MarketplaceItem]:
        async with self._unit_of_work() as session:
            return await MarketplaceItemRepository(session, self._clock).get_services()

    async def update_marketplace_item(
        self,
        item_id: int,
        data: MarketplaceItemUpdate,
    ) -> MarketplaceItem:
        async with self._unit_of_work() as session:
            return await MarketplaceItemRepository(session, self._clock).update(item_id, data)

    async def create_marketplace_order(self, data: MarketplaceOrderCreate) -> MarketplaceOrder:
        async with self._unit_of_work() as session:
            order = await MarketplaceOrderRepository(session, self._clock).create(data)
        logger.info(f"Created marketplace order {order.id} for buyer {order.buyer_id}")
        return order

    async def get_marketplace_order(self, order_id: int) -> Optional[MarketplaceOrder]:
        async with self._unit_of_work() as session:
            return await MarketplaceOrderRepository(session, self._clock).get_by_id(order_id)

    async def get_user_marketplace_orders(self, buyer_id: int) -> List[MarketplaceOrder]:
        async with self._unit_of_work() as session:
            return await MarketplaceOrderRepository(session, self._clock).get_for_buyer(buyer_id)

    async def update_marketplace_order(
        self,
        order_id: int,
        data: MarketplaceOrderUpdate,
    ) -> MarketplaceOrder:
        async with self._unit_of_work() as session:
            return await MarketplaceOrderRepository(session, self._clock).update(order_id, data)

    # =========================================================================
    # Advertisements
    # =========================================================================

    async def create_advertisement(self, data: AdvertisementCreate) -> Advertisement:
        async with self._unit_of_work() as session:
            return await AdvertisementRepository(session, self._clock).create(data)

    async def get_advertisement(self, ad_id: int) -> Optional[Advertisement]:
        async with self._unit_of_work() as session:
            return await AdvertisementRepository(session, self._clock).get_by_id(ad_id)

    async def get_active_advertisements(self, now: Optional[datetime] = None) -> List[Advertisement]:
        async with self._unit_of_work() as session:
            return await AdvertisementRepository(session, self._clock).get_active(now or self.now())

    async def get_active_advertisements_by_type(
        self,
        ad_type: str,
        now: Optional[datetime] = None,
    ) -> List[Advertisement]:
        async with self._unit_of_work() as session:
            return await AdvertisementRepository(session, self._clock).get_active(
                now or self.now(), ad_type=ad_type
            )

    async def update_advertisement(self, ad_id: int, data: AdvertisementUpdate) -> Advertisement:
        async with self._unit_of_work() as session:
            return await AdvertisementRepository(session, self._clock).update(ad_id, data)

    async def increment_ad_impressions(self, ad_id: int) -> None:
        async with self._unit_of_work() as session:
            await AdvertisementRepository(session, self._clock).increment_impressions(ad_id)

    async def increment_ad_clicks(self, ad_id: int) -> None:
        async with self._unit_of_work() as session:
            await AdvertisementRepository(session, self._clock).increment_clicks(ad_id)

    # =========================================================================
    # Feedback
    # =========================================================================

    async def create_feedback(self, data: FeedbackCreate) -> Feedback:
        async with self._unit_of_work() as session:
            return await FeedbackRepository(session, self._clock).create(data)

    async def get_feedback(self, feedback_id: int) -> Optional[Feedback]:
        async with self._unit_of_work() as session:
            return await FeedbackRepository(session, self._clock).get_by_id(feedback_id)

    async def get_all_feedback(
        self,
        limit: Optional[int] = None,
        status: Optional[str] = None,
    ) -> List[Feedback]:
        async with self._unit_of_work() as session:
            return await FeedbackRepository(session, self._clock).get_newest_first(limit, status)

    async def get_recent_feedback(self, limit: int = 10) -> List[Feedback]:
        return await self.get_all_feedback(limit=limit)

    async def update_feedback_status(self, feedback_id: int, status: str) -> Feedback:
        async with self._unit_of_work() as session:
            return await FeedbackRepository(session, self._clock).update_status(feedback_id, status)

    # =========================================================================
    # Mockup requests
    # =========================================================================

    async def create_mockup_request(self, data: MockupRequestCreate) -> MockupRequest:
        async with self._unit_of_work() as session:
            return await MockupRequestRepository(session, self._clock).create(data)

    async def get_mockup_request(self, request_id: int) -> Optional[MockupRequest]:
        async with self._unit_of_work() as session:
            return await MockupRequestRepository(session, self._clock).get_by_id(request_id)

    async def get_mockup_requests_by_status(self, status: str) -> List[MockupRequest]:
        async with self._unit_of_work() as session:
            return await MockupRequestRepository(session, self._clock).get_by_status(status)

    async def get_recent_mockup_requests(self, limit: int = 10) -> List[MockupRequest]:
        async with self._unit_of_work() as session:
            return await MockupRequestRepository(session, self._clock).get_recent(limit)

    async def update_mockup_request(
        self,
        request_id: int,
        data: MockupRequestUpdate,
    ) -> MockupRequest:
        async with self._unit_of_work() as session:
            return await MockupRequestRepository(session, self._clock).update(request_id, data)

    # =========================================================================
    # Pricing
    # =========================================================================

    async def create_price_recommendation(
        self,
        data: PriceRecommendationCreate,
    ) -> PriceRecommendation:
        async with self._unit_of_work() as session:
            return await PriceRecommendationRepository(session, self._clock).create(data)

    async def get_price_recommendation(self, recommendation_id: int) -> Optional[PriceRecommendation]:
        async with self._unit_of_work() as session:
            return await PriceRecommendationRepository(session, self._clock).get_by_id(recommendation_id)

    async def get_price_recommendations(self, status: Optional[str] = None) -> List[PriceRecommendation]:
        async with self._unit_of_work() as session:
            return await PriceRecommendationRepository(session, self._clock).get_newest_first(status)

    async def update_price_recommendation(
        self,
        recommendation_id: int,
        data: PriceRecommendationUpdate,
    ) -> PriceRecommendation:
        async with self._unit_of_work() as session:
            return await PriceRecommendationRepository(session, self._clock).update(
                recommendation_id, data
            )

    async def create_price_history(self, data: PriceHistoryCreate) -> PriceHistory:
        async with self._unit_of_work() as session:
            return await PriceHistoryRepository(session, self._clock).create(data)

    async def get_price_history(self, plan_id: int) -> List[PriceHistory]:
        async with self._unit_of_work() as session:
            return await PriceHistoryRepository(session, self._clock).get_for_plan(plan_id)

    # =========================================================================
    # Analytics rows
    # =========================================================================

    async def create_user_session(self, data: UserSessionCreate) -> UserSession:
        async with self._unit_of_work() as session:
            return await UserSessionRepository(session, self._clock).create(data)

    async def get_user_sessions(self, user_id: int) -> List[UserSession]:
        async with self._unit_of_work() as session:
            return await UserSessionRepository(session, self._clock).get_for_user(user_id)

    async def get_sessions_between(self, start: datetime, end: datetime) -> List[UserSession]:
        async with self._unit_of_work() as session:
            return await UserSessionRepository(session, self._clock).get_between(start, end)

    async def count_user_sessions(self) -> int:
        async with self._unit_of_work() as session:
            return await UserSessionRepository(session, self._clock).count()

    async def create_content_view_metric(self, data: ContentViewMetricCreate) -> ContentViewMetric:
        async with self._unit_of_work() as session:
            return await ContentViewMetricRepository(session, self._clock).create(data)

    async def get_content_view_metrics(self) -> List[ContentViewMetric]:
        async with self._unit_of_work() as session:
            return await ContentViewMetricRepository(session, self._clock).get_by_views()

    async def count_content_view_metrics(self) -> int:
        async with self._unit_of_work() as session:
            return await ContentViewMetricRepository(session, self._clock).count()

    async def record_content_view(
        self,
        content_id: int,
        content_type: str,
        content_title: str,
        time_spent: Decimal = Decimal("0"),
        user_id: Optional[int] = None,
    ) -> ContentViewMetric:
        async with self._unit_of_work() as session:
            return await ContentViewMetricRepository(session, self._clock).record_view(
                content_id,
                content_type,
                content_title,
                time_spent=time_spent,
                unique=user_id is not None,
            )

    # =========================================================================
    # Service engagement
    # =========================================================================

    async def _track_service(self, service_id: int, counter: EngagementCounter) -> ServiceEngagement:
        async with self._unit_of_work() as session:
            return await ServiceEngagementRepository(session, self._clock).track(service_id, counter)

    async def track_service_click(self, service_id: int) -> ServiceEngagement:
        return await self._track_service(service_id, EngagementCounter.CLICKS)

    async def track_service_inquiry(self, service_id: int) -> ServiceEngagement:
        return await self._track_service(service_id, EngagementCounter.INQUIRIES)

    async def track_service_conversion(self, service_id: int) -> ServiceEngagement:
        return await self._track_service(service_id, EngagementCounter.CONVERSIONS)

    async def get_service_engagement(self, service_id: int) -> Optional[ServiceEngagement]:
        async with self._unit_of_work() as session:
            return await ServiceEngagementRepository(session, self._clock).get_by_service(service_id)

    async def get_marketplace_service_engagement(self) -> List[ServiceEngagement]:
        async with self._unit_of_work() as session:
            return await ServiceEngagementRepository(session, self._clock).get_by_clicks()

    # =========================================================================
    # Search
    # =========================================================================
    # Search never raises: a failing query is logged and reported as no
    # results.

    async def search_posts(self, query: str) -> List[Post]:
        try:
            async with self._unit_of_work() as session:
                return await self._search(session).search_posts(query)
        except Exception as e:
            logger.error(f"Error searching posts for '{query}': {e}")
            return []

    async def search_marketplace_items(self, query: str) -> List[MarketplaceItem]:
        try:
            async with self._unit_of_work() as session:
                return await self._search(session).search_marketplace_items(query)
        except Exception as e:
            logger.error(f"Error searching marketplace items for '{query}': {e}")
            return []

    async def search_services(self, query: str) -> List[MarketplaceItem]:
        try:
            async with self._unit_of_work() as session:
                return await self._search(session).search_services(query)
        except Exception as e:
            logger.error(f"Error searching services for '{query}': {e}")
            return []

    def _search(self, session: AsyncSession) -> SearchRepository:
        return SearchRepository(session, limit=self._settings.search_result_limit)


@lru_cache
def get_storage() -> DatabaseStorage:
    """Get the process-wide storage gateway (FastAPI dependency)."""
    return DatabaseStorage()
