"""
Analytics Models

User sessions, per-content view metrics and marketplace service
engagement counters.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, SQLModel

from elevion.infrastructure.db.models.base import (
    CreatedAtMixin,
    IntIdMixin,
    NaiveUTCDateTime,
    TimestampMixin,
    utc_now,
)


class UserSessionBase(SQLModel):
    user_id: Optional[int] = Field(default=None, foreign_key="users.id", index=True)
    session_duration: Decimal = Field(
        default=Decimal("0"),
        max_digits=10,
        decimal_places=2,
        description="Seconds between start_time and end_time"
    )
    start_time: datetime = Field(default_factory=utc_now, index=True, sa_type=NaiveUTCDateTime)
    end_time: Optional[datetime] = Field(default=None, sa_type=NaiveUTCDateTime)
    device: Optional[str] = Field(default=None, max_length=20)
    browser: Optional[str] = Field(default=None, max_length=50)
    ip_address: Optional[str] = Field(default=None, max_length=64)
    referrer: Optional[str] = None


class UserSession(UserSessionBase, IntIdMixin, TimestampMixin, table=True):
    __tablename__ = "user_sessions"


class UserSessionCreate(UserSessionBase):
    pass


class ContentViewMetricBase(SQLModel):
    content_id: int
    content_type: str = Field(..., max_length=50, description="blog, page, product, ...")
    content_title: str = Field(..., max_length=300)
    views: int = Field(default=0, ge=0)
    unique_views: int = Field(default=0, ge=0)
    avg_time_on_page: Decimal = Field(default=Decimal("0"), max_digits=10, decimal_places=2)
    bounce_rate: Decimal = Field(default=Decimal("0"), max_digits=10, decimal_places=2)
    conversion_rate: Decimal = Field(default=Decimal("0"), max_digits=10, decimal_places=2)


class ContentViewMetric(ContentViewMetricBase, IntIdMixin, TimestampMixin, table=True):
    """One row per (content_id, content_type)."""

    __tablename__ = "content_view_metrics"
    __table_args__ = (
        UniqueConstraint("content_id", "content_type", name="uq_content_view_metrics_content"),
    )


class ContentViewMetricCreate(ContentViewMetricBase):
    pass


class ServiceEngagement(IntIdMixin, CreatedAtMixin, table=True):
    """
    Interaction tallies for one marketplace service.

    Rows are created by the first tracked interaction and incremented in
    place afterwards.
    """

    __tablename__ = "service_engagement"

    service_id: int = Field(..., unique=True, index=True)
    clicks: int = Field(default=0)
    inquiries: int = Field(default=0)
    conversions: int = Field(default=0)
    last_engaged_at: datetime = Field(default_factory=utc_now, sa_type=NaiveUTCDateTime)
