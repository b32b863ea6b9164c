"""
Feedback and mockup request models.
"""

from decimal import Decimal
from typing import Optional

from pydantic import ConfigDict
from sqlalchemy import Column, Text
from sqlmodel import Field, SQLModel

from elevion.domain.statuses import FeedbackStatus, MockupStatus
from elevion.infrastructure.db.models.base import IntIdMixin, TimestampMixin


class Feedback(IntIdMixin, TimestampMixin, table=True):
    __tablename__ = "feedback"

    user_id: Optional[int] = Field(default=None, foreign_key="users.id")
    message: str = Field(..., sa_column=Column(Text, nullable=False))
    source: str = Field(default="website", max_length=50)
    category: Optional[str] = Field(default=None, max_length=50)
    rating: Optional[int] = Field(default=None)
    status: str = Field(default=FeedbackStatus.NEW.value, max_length=20, index=True)


class FeedbackCreate(SQLModel):
    model_config = ConfigDict(use_enum_values=True, validate_default=True)

    user_id: Optional[int] = None
    message: str = Field(..., min_length=1)
    source: str = "website"
    category: Optional[str] = None
    rating: Optional[int] = Field(default=None, ge=1, le=5)
    status: FeedbackStatus = FeedbackStatus.NEW


class MockupRequest(IntIdMixin, TimestampMixin, table=True):
    __tablename__ = "mockup_requests"

    user_id: Optional[int] = Field(default=None, foreign_key="users.id", index=True)
    business_type: str = Field(..., max_length=200)
    business_goals: Optional[str] = None
    industry_category: Optional[str] = None
    target_audience: Optional[str] = None
    design_preferences: Optional[str] = None
    status: str = Field(default=MockupStatus.PENDING.value, max_length=20, index=True)
    completion_time: Optional[Decimal] = Field(default=None, max_digits=10, decimal_places=2)
    feedback: Optional[str] = None


class MockupRequestCreate(SQLModel):
    model_config = ConfigDict(use_enum_values=True, validate_default=True)

    user_id: Optional[int] = None
    business_type: str = Field(..., min_length=1, max_length=200)
    business_goals: Optional[str] = None
    industry_category: Optional[str] = None
    target_audience: Optional[str] = None
    design_preferences: Optional[str] = None
    status: MockupStatus = MockupStatus.PENDING


class MockupRequestUpdate(SQLModel):
    model_config = ConfigDict(use_enum_values=True, validate_default=True)

    status: Optional[MockupStatus] = None
    completion_time: Optional[Decimal] = Field(default=None, ge=0, max_digits=10, decimal_places=2)
    feedback: Optional[str] = None
