"""
Subscription Repository

Plans are listed cheapest first; a user's subscriptions newest first.
"""

from datetime import datetime
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from elevion.domain.statuses import SubscriptionStatus
from elevion.infrastructure.db.models.base import utc_now
from elevion.infrastructure.db.models.subscription import (
    SubscriptionPlan,
    SubscriptionPlanCreate,
    SubscriptionPlanUpdate,
    UserSubscription,
    UserSubscriptionCreate,
    UserSubscriptionUpdate,
)
from elevion.infrastructure.db.repositories.base_repository import BaseRepository, Clock


class SubscriptionPlanRepository(
    BaseRepository[SubscriptionPlan, SubscriptionPlanCreate, SubscriptionPlanUpdate]
):
    def __init__(self, session: AsyncSession, clock: Clock = utc_now):
        super().__init__(SubscriptionPlan, session, clock)

    async def get_by_price(self, active_only: bool = False) -> List[SubscriptionPlan]:
        stmt = select(SubscriptionPlan)
        if active_only:
            stmt = stmt.where(SubscriptionPlan.is_active.is_(True))
        stmt = stmt.order_by(SubscriptionPlan.price.asc(), SubscriptionPlan.id.asc())
        result = await self.session.execute(stmt)
        return list(result.scalars().all())


class UserSubscriptionRepository(
    BaseRepository[UserSubscription, UserSubscriptionCreate, UserSubscriptionUpdate]
):
    def __init__(self, session: AsyncSession, clock: Clock = utc_now):
        super().__init__(UserSubscription, session, clock)

    async def get_for_user(self, user_id: int) -> List[UserSubscription]:
        stmt = (
            select(UserSubscription)
            .where(UserSubscription.user_id == user_id)
            .order_by(UserSubscription.created_at.desc(), UserSubscription.id.desc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_active_for_user(
        self,
        user_id: int,
        now: Optional[datetime] = None,
    ) -> Optional[UserSubscription]:
        """
        Get the user's newest subscription that is active and whose
        current period has not ended yet.
        """
        now = now or self.now()
        stmt = (
            select(UserSubscription)
            .where(
                UserSubscription.user_id == user_id,
                UserSubscription.status == SubscriptionStatus.ACTIVE.value,
                UserSubscription.current_period_end > now,
            )
            .order_by(UserSubscription.created_at.desc(), UserSubscription.id.desc())
            .limit(1)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()
