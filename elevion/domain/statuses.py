"""
Status Enums

Closed value sets for the free-form status columns. Columns store the
plain string value; no transition rules are enforced between values.
"""

from enum import Enum


class PostStatus(str, Enum):
    """Publication state of a feed post."""
    PUBLISHED = "published"
    DRAFT = "draft"
    ARCHIVED = "archived"


class SubscriptionStatus(str, Enum):
    """Subscription lifecycle status as reported by the payment processor."""
    ACTIVE = "active"
    CANCELED = "canceled"
    PAST_DUE = "past_due"
    TRIALING = "trialing"


class BillingInterval(str, Enum):
    """Billing interval of a subscription plan."""
    MONTH = "month"
    YEAR = "year"


class OrderStatus(str, Enum):
    """Marketplace order state."""
    PENDING = "pending"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class FeedbackStatus(str, Enum):
    """Review state of a feedback entry."""
    NEW = "new"
    REVIEWED = "reviewed"
    ANALYZED = "analyzed"
    ADDRESSED = "addressed"


class MockupStatus(str, Enum):
    """Progress of a mockup request."""
    PENDING = "pending"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class RecommendationStatus(str, Enum):
    """Lifecycle of a price recommendation."""
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    APPLIED = "applied"
    EXPIRED = "expired"


class EngagementCounter(str, Enum):
    """Counters tracked per marketplace service."""
    CLICKS = "clicks"
    INQUIRIES = "inquiries"
    CONVERSIONS = "conversions"
