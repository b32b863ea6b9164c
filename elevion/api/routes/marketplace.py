"""
Marketplace API Routes

Item and service listings, order placement and service engagement
tracking.
"""

from decimal import Decimal
from typing import Optional

from fastapi import APIRouter, status
from pydantic import BaseModel, Field

from elevion.api.dependencies import StorageDep, StripeDep
from elevion.api.responses import ok, require_found
from elevion.domain.statuses import OrderStatus
from elevion.infrastructure.db.models.marketplace import MarketplaceOrderCreate
from elevion.infrastructure.exceptions import ValidationError


router = APIRouter(prefix="/api/marketplace", tags=["Marketplace"])


class CreateOrderRequest(BaseModel):
    buyer_id: int
    item_id: int
    quantity: int = Field(1, ge=1)
    currency: Optional[str] = Field(None, min_length=3, max_length=3)


# =============================================================================
# Listings
# =============================================================================

@router.get("/items")
async def list_items(storage: StorageDep):
    return ok(await storage.get_available_marketplace_items())


@router.get("/items/{item_id}")
async def get_item(item_id: int, storage: StorageDep):
    item = await storage.get_marketplace_item(item_id)
    return ok(require_found(item, "marketplace_items", item_id))


@router.get("/services")
async def list_services(storage: StorageDep):
    return ok(await storage.get_marketplace_services())


# =============================================================================
# Orders
# =============================================================================

@router.post("/orders", status_code=status.HTTP_201_CREATED)
async def create_order(request: CreateOrderRequest, storage: StorageDep, stripe_service: StripeDep):
    """
    Place an order for an available item.

    When payments are configured a payment intent is created first and
    its client secret returned; the order is recorded as pending either
    way.
    """
    item = require_found(
        await storage.get_marketplace_item(request.item_id),
        "marketplace_items",
        request.item_id,
    )
    if not item.is_available:
        raise ValidationError(f"Item {item.id} is not available")

    total_price = Decimal(item.price) * request.quantity

    intent = None
    if stripe_service.is_configured:
        intent = await stripe_service.create_payment_intent(
            total_price,
            currency=request.currency,
            metadata={
                "buyer_id": str(request.buyer_id),
                "item_id": str(item.id),
                "quantity": str(request.quantity),
            },
        )

    order = await storage.create_marketplace_order(
        MarketplaceOrderCreate(
            buyer_id=request.buyer_id,
            item_id=item.id,
            quantity=request.quantity,
            total_price=total_price,
            status=OrderStatus.PENDING,
            stripe_payment_intent_id=intent.id if intent else None,
        )
    )
    return ok({
        "order": order,
        "client_secret": intent.client_secret if intent else None,
    })


@router.get("/users/{buyer_id}/orders")
async def list_user_orders(buyer_id: int, storage: StorageDep):
    return ok(await storage.get_user_marketplace_orders(buyer_id))


# =============================================================================
# Service Engagement
# =============================================================================

@router.get("/service-engagement")
async def list_service_engagement(storage: StorageDep):
    """Engagement counters per service, most clicked first."""
    return ok(await storage.get_marketplace_service_engagement())


@router.post("/track/click/{service_id}")
async def track_click(service_id: int, storage: StorageDep):
    return ok(await storage.track_service_click(service_id))


@router.post("/track/inquiry/{service_id}")
async def track_inquiry(service_id: int, storage: StorageDep):
    return ok(await storage.track_service_inquiry(service_id))
