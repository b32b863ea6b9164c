"""
Advertisement model.

An ad is served while it is active and start_date < now < end_date.
impressions and clicks only ever grow, through store-side increments.
"""

from datetime import datetime
from typing import Optional

from sqlmodel import Field, SQLModel

from elevion.infrastructure.db.models.base import IntIdMixin, NaiveUTCDateTime, TimestampMixin


class AdvertisementBase(SQLModel):
    name: str = Field(..., min_length=1, max_length=200)
    type: str = Field(..., max_length=20, description="banner, sidebar or popup")
    image_url: str
    target_url: str
    start_date: datetime = Field(..., sa_type=NaiveUTCDateTime)
    end_date: datetime = Field(..., sa_type=NaiveUTCDateTime)
    is_active: bool = Field(default=True)
    position: Optional[str] = Field(default=None, max_length=20)


class Advertisement(AdvertisementBase, IntIdMixin, TimestampMixin, table=True):
    __tablename__ = "advertisements"

    type: str = Field(..., max_length=20, index=True)
    impressions: int = Field(default=0)
    clicks: int = Field(default=0)


class AdvertisementCreate(AdvertisementBase):
    pass


class AdvertisementUpdate(SQLModel):
    """Counters change only through the increment operations."""

    name: Optional[str] = Field(default=None, max_length=200)
    type: Optional[str] = Field(default=None, max_length=20)
    image_url: Optional[str] = None
    target_url: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    is_active: Optional[bool] = None
    position: Optional[str] = Field(default=None, max_length=20)
