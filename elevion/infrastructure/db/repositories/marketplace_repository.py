"""
Marketplace Repository

Items, the services subset of items, and orders.
"""

from typing import List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from elevion.infrastructure.db.models.base import utc_now
from elevion.infrastructure.db.models.marketplace import (
    SERVICE_CATEGORY,
    MarketplaceItem,
    MarketplaceItemCreate,
    MarketplaceItemUpdate,
    MarketplaceOrder,
    MarketplaceOrderCreate,
    MarketplaceOrderUpdate,
)
from elevion.infrastructure.db.repositories.base_repository import BaseRepository, Clock


class MarketplaceItemRepository(
    BaseRepository[MarketplaceItem, MarketplaceItemCreate, MarketplaceItemUpdate]
):
    def __init__(self, session: AsyncSession, clock: Clock = utc_now):
        super().__init__(MarketplaceItem, session, clock)

    async def get_available(self) -> List[MarketplaceItem]:
        stmt = (
            select(MarketplaceItem)
            .where(MarketplaceItem.is_available.is_(True))
            .order_by(MarketplaceItem.id)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_services(self) -> List[MarketplaceItem]:
        """Available items listed under the service category."""
        stmt = (
            select(MarketplaceItem)
            .where(
                MarketplaceItem.is_available.is_(True),
                MarketplaceItem.category == SERVICE_CATEGORY,
            )
            .order_by(MarketplaceItem.id)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())


class MarketplaceOrderRepository(
    BaseRepository[MarketplaceOrder, MarketplaceOrderCreate, MarketplaceOrderUpdate]
):
    def __init__(self, session: AsyncSession, clock: Clock = utc_now):
        super().__init__(MarketplaceOrder, session, clock)

    async def get_for_buyer(self, buyer_id: int) -> List[MarketplaceOrder]:
        stmt = (
            select(MarketplaceOrder)
            .where(MarketplaceOrder.buyer_id == buyer_id)
            .order_by(MarketplaceOrder.created_at.desc(), MarketplaceOrder.id.desc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
