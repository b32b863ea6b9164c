"""
Price optimization models.

Recommendations are mutable records moved through their status field.
Price history is append-only: rows are inserted and never updated.
"""

from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, Optional

from pydantic import ConfigDict
from sqlalchemy import Column
from sqlmodel import Field, SQLModel

from elevion.domain.statuses import RecommendationStatus
from elevion.infrastructure.db.models.base import (
    CreatedAtMixin,
    IntIdMixin,
    JSONType,
    NaiveUTCDateTime,
    TimestampMixin,
    utc_now,
)


class PriceRecommendation(IntIdMixin, TimestampMixin, table=True):
    __tablename__ = "price_recommendations"

    plan_id: int = Field(..., foreign_key="subscription_plans.id", index=True)
    current_price: Decimal = Field(..., max_digits=10, decimal_places=2)
    recommended_price: Decimal = Field(..., max_digits=10, decimal_places=2)
    percent_change: Decimal = Field(..., max_digits=10, decimal_places=2)
    analysis_data: Dict[str, Any] = Field(
        default_factory=dict,
        sa_column=Column(JSONType, nullable=False),
    )
    status: str = Field(default=RecommendationStatus.PENDING.value, max_length=20, index=True)
    expires_at: Optional[datetime] = Field(default=None, sa_type=NaiveUTCDateTime)


class PriceRecommendationCreate(SQLModel):
    model_config = ConfigDict(use_enum_values=True, validate_default=True)

    plan_id: int
    current_price: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)
    recommended_price: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)
    percent_change: Decimal = Field(..., max_digits=10, decimal_places=2)
    analysis_data: Dict[str, Any] = Field(default_factory=dict)
    status: RecommendationStatus = RecommendationStatus.PENDING
    expires_at: Optional[datetime] = None


class PriceRecommendationUpdate(SQLModel):
    model_config = ConfigDict(use_enum_values=True, validate_default=True)

    status: Optional[RecommendationStatus] = None
    recommended_price: Optional[Decimal] = Field(default=None, ge=0, max_digits=10, decimal_places=2)
    percent_change: Optional[Decimal] = Field(default=None, max_digits=10, decimal_places=2)
    analysis_data: Optional[Dict[str, Any]] = None
    expires_at: Optional[datetime] = None


class PriceHistory(IntIdMixin, CreatedAtMixin, table=True):
    __tablename__ = "price_history"

    plan_id: int = Field(..., foreign_key="subscription_plans.id", index=True)
    previous_price: Decimal = Field(..., max_digits=10, decimal_places=2)
    new_price: Decimal = Field(..., max_digits=10, decimal_places=2)
    change_reason: Optional[str] = None
    ai_analysis: Optional[Dict[str, Any]] = Field(default=None, sa_column=Column(JSONType))
    changed_by_user_id: Optional[int] = Field(default=None, foreign_key="users.id")
    is_automatic: bool = Field(default=False)
    applied_at: datetime = Field(default_factory=utc_now, sa_type=NaiveUTCDateTime)


class PriceHistoryCreate(SQLModel):
    plan_id: int
    previous_price: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)
    new_price: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)
    change_reason: Optional[str] = None
    ai_analysis: Optional[Dict[str, Any]] = None
    changed_by_user_id: Optional[int] = None
    is_automatic: bool = False
    applied_at: Optional[datetime] = None
