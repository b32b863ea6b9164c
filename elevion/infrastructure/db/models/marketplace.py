"""
Marketplace item and order models.

Services are not a separate table: an item whose category is "service"
is listed by the services view.
"""

from decimal import Decimal
from typing import List, Optional

from pydantic import ConfigDict
from sqlalchemy import Column, Text
from sqlmodel import Field, SQLModel

from elevion.domain.statuses import OrderStatus
from elevion.infrastructure.db.models.base import IntIdMixin, JSONType, TimestampMixin


SERVICE_CATEGORY = "service"


class MarketplaceItem(IntIdMixin, TimestampMixin, table=True):
    __tablename__ = "marketplace_items"

    name: str = Field(..., max_length=200)
    description: str = Field(..., sa_column=Column(Text, nullable=False))
    price: Decimal = Field(..., max_digits=10, decimal_places=2)
    seller_id: int = Field(..., foreign_key="users.id", index=True)
    category: str = Field(..., max_length=100, index=True)
    tags: List[str] = Field(default_factory=list, sa_column=Column(JSONType, nullable=False))
    images: List[str] = Field(default_factory=list, sa_column=Column(JSONType, nullable=False))
    is_available: bool = Field(default=True)
    stripe_product_id: Optional[str] = None
    stripe_price_id: Optional[str] = None


class MarketplaceItemCreate(SQLModel):
    name: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1)
    price: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)
    seller_id: int
    category: str = Field(..., min_length=1, max_length=100)
    tags: List[str] = Field(default_factory=list)
    images: List[str] = Field(default_factory=list)
    is_available: bool = True
    stripe_product_id: Optional[str] = None
    stripe_price_id: Optional[str] = None


class MarketplaceItemUpdate(SQLModel):
    name: Optional[str] = Field(default=None, max_length=200)
    description: Optional[str] = None
    price: Optional[Decimal] = Field(default=None, ge=0, max_digits=10, decimal_places=2)
    category: Optional[str] = Field(default=None, max_length=100)
    tags: Optional[List[str]] = None
    images: Optional[List[str]] = None
    is_available: Optional[bool] = None
    stripe_product_id: Optional[str] = None
    stripe_price_id: Optional[str] = None


class MarketplaceOrder(IntIdMixin, TimestampMixin, table=True):
    """Purchase of an item; every mutation bumps updated_at."""

    __tablename__ = "marketplace_orders"

    buyer_id: int = Field(..., foreign_key="users.id", index=True)
    item_id: int = Field(..., foreign_key="marketplace_items.id")
    quantity: int = Field(default=1)
    total_price: Decimal = Field(..., max_digits=10, decimal_places=2)
    status: str = Field(..., max_length=20)
    stripe_payment_intent_id: Optional[str] = None


class MarketplaceOrderCreate(SQLModel):
    model_config = ConfigDict(use_enum_values=True, validate_default=True)

    buyer_id: int
    item_id: int
    quantity: int = Field(default=1, ge=1)
    total_price: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)
    status: OrderStatus = OrderStatus.PENDING
    stripe_payment_intent_id: Optional[str] = None


class MarketplaceOrderUpdate(SQLModel):
    model_config = ConfigDict(use_enum_values=True, validate_default=True)

    status: Optional[OrderStatus] = None
    stripe_payment_intent_id: Optional[str] = None
