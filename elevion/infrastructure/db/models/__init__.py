"""
SQLModel ORM Models for Elevion

Exports all database models for Alembic autogenerate and application use.
Import models here to register them with SQLModel.metadata.
"""

from elevion.infrastructure.db.models.base import (
    CreatedAtMixin,
    IntIdMixin,
    JSONType,
    NaiveUTCDateTime,
    TimestampMixin,
    as_naive_utc,
    utc_now,
)
from elevion.infrastructure.db.models.user import (
    ContactSubmission,
    ContactSubmissionCreate,
    User,
    UserCreate,
    UserUpdate,
)
from elevion.infrastructure.db.models.client_preview import (
    ClientPreview,
    ClientPreviewCreate,
    ClientPreviewUpdate,
)
from elevion.infrastructure.db.models.post import Post, PostCreate
from elevion.infrastructure.db.models.subscription import (
    SubscriptionPlan,
    SubscriptionPlanCreate,
    SubscriptionPlanUpdate,
    UserSubscription,
    UserSubscriptionCreate,
    UserSubscriptionUpdate,
)
from elevion.infrastructure.db.models.marketplace import (
    SERVICE_CATEGORY,
    MarketplaceItem,
    MarketplaceItemCreate,
    MarketplaceItemUpdate,
    MarketplaceOrder,
    MarketplaceOrderCreate,
    MarketplaceOrderUpdate,
)
from elevion.infrastructure.db.models.advertisement import (
    Advertisement,
    AdvertisementCreate,
    AdvertisementUpdate,
)
from elevion.infrastructure.db.models.feedback import (
    Feedback,
    FeedbackCreate,
    MockupRequest,
    MockupRequestCreate,
    MockupRequestUpdate,
)
from elevion.infrastructure.db.models.pricing import (
    PriceHistory,
    PriceHistoryCreate,
    PriceRecommendation,
    PriceRecommendationCreate,
    PriceRecommendationUpdate,
)
from elevion.infrastructure.db.models.analytics import (
    ContentViewMetric,
    ContentViewMetricCreate,
    ServiceEngagement,
    UserSession,
    UserSessionCreate,
)


__all__ = [
    # Base
    "CreatedAtMixin",
    "IntIdMixin",
    "JSONType",
    "NaiveUTCDateTime",
    "TimestampMixin",
    "as_naive_utc",
    "utc_now",
    # Users
    "User",
    "UserCreate",
    "UserUpdate",
    "ContactSubmission",
    "ContactSubmissionCreate",
    # Client previews
    "ClientPreview",
    "ClientPreviewCreate",
    "ClientPreviewUpdate",
    # Posts
    "Post",
    "PostCreate",
    # Subscriptions
    "SubscriptionPlan",
    "SubscriptionPlanCreate",
    "SubscriptionPlanUpdate",
    "UserSubscription",
    "UserSubscriptionCreate",
    "UserSubscriptionUpdate",
    # Marketplace
    "SERVICE_CATEGORY",
    "MarketplaceItem",
    "MarketplaceItemCreate",
    "MarketplaceItemUpdate",
    "MarketplaceOrder",
    "MarketplaceOrderCreate",
    "MarketplaceOrderUpdate",
    # Advertisements
    "Advertisement",
    "AdvertisementCreate",
    "AdvertisementUpdate",
    # Feedback & mockups
    "Feedback",
    "FeedbackCreate",
    "MockupRequest",
    "MockupRequestCreate",
    "MockupRequestUpdate",
    # Pricing
    "PriceHistory",
    "PriceHistoryCreate",
    "PriceRecommendation",
    "PriceRecommendationCreate",
    "PriceRecommendationUpdate",
    # Analytics
    "ContentViewMetric",
    "ContentViewMetricCreate",
    "ServiceEngagement",
    "UserSession",
    "UserSessionCreate",
]
