"""
Repository Layer for Elevion

Exports all repository classes used by the storage gateway.
"""

from elevion.infrastructure.db.repositories.base_repository import (
    BaseRepository,
    Clock,
)
from elevion.infrastructure.db.repositories.user_repository import (
    ContactSubmissionRepository,
    UserRepository,
)
from elevion.infrastructure.db.repositories.client_preview_repository import (
    ClientPreviewRepository,
)
from elevion.infrastructure.db.repositories.post_repository import PostRepository
from elevion.infrastructure.db.repositories.subscription_repository import (
    SubscriptionPlanRepository,
    UserSubscriptionRepository,
)
from elevion.infrastructure.db.repositories.marketplace_repository import (
    MarketplaceItemRepository,
    MarketplaceOrderRepository,
)
from elevion.infrastructure.db.repositories.advertisement_repository import (
    AdvertisementRepository,
)
from elevion.infrastructure.db.repositories.feedback_repository import (
    FeedbackRepository,
    MockupRequestRepository,
)
from elevion.infrastructure.db.repositories.pricing_repository import (
    PriceHistoryRepository,
    PriceRecommendationRepository,
)
from elevion.infrastructure.db.repositories.analytics_repository import (
    ContentViewMetricRepository,
    ServiceEngagementRepository,
    UserSessionRepository,
)
from elevion.infrastructure.db.repositories.search_repository import SearchRepository


__all__ = [
    # Base
    "BaseRepository",
    "Clock",
    # Repositories
    "UserRepository",
    "ContactSubmissionRepository",
    "ClientPreviewRepository",
    "PostRepository",
    "SubscriptionPlanRepository",
    "UserSubscriptionRepository",
    "MarketplaceItemRepository",
    "MarketplaceOrderRepository",
    "AdvertisementRepository",
    "FeedbackRepository",
    "MockupRequestRepository",
    "PriceHistoryRepository",
    "PriceRecommendationRepository",
    "ContentViewMetricRepository",
    "ServiceEngagementRepository",
    "UserSessionRepository",
    "SearchRepository",
]
