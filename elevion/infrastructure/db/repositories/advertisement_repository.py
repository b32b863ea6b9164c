"""
Advertisement Repository
"""

from datetime import datetime
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from elevion.infrastructure.db.models.advertisement import (
    Advertisement,
    AdvertisementCreate,
    AdvertisementUpdate,
)
from elevion.infrastructure.db.models.base import utc_now
from elevion.infrastructure.db.repositories.base_repository import BaseRepository, Clock


class AdvertisementRepository(
    BaseRepository[Advertisement, AdvertisementCreate, AdvertisementUpdate]
):
    """
    Repository for advertisements.

    An ad is live when it is flagged active and `now` falls strictly
    between its start and end dates. The window is evaluated in the
    query on every call.
    """

    def __init__(self, session: AsyncSession, clock: Clock = utc_now):
        super().__init__(Advertisement, session, clock)

    async def get_active(
        self,
        now: Optional[datetime] = None,
        ad_type: Optional[str] = None,
    ) -> List[Advertisement]:
        now = now or self.now()
        stmt = select(Advertisement).where(
            Advertisement.is_active.is_(True),
            Advertisement.start_date < now,
            Advertisement.end_date > now,
        )
        if ad_type is not None:
            stmt = stmt.where(Advertisement.type == ad_type)
        stmt = stmt.order_by(Advertisement.id)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def increment_impressions(self, ad_id: int) -> None:
        await self.increment(ad_id, "impressions")

    async def increment_clicks(self, ad_id: int) -> None:
        await self.increment(ad_id, "clicks")
