"""
Pricing Repository

Price recommendations and the append-only price history.
"""

from typing import Any, List, Mapping, Optional, Union

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from elevion.infrastructure.db.models.base import utc_now
from elevion.infrastructure.db.models.pricing import (
    PriceHistory,
    PriceHistoryCreate,
    PriceRecommendation,
    PriceRecommendationCreate,
    PriceRecommendationUpdate,
)
from elevion.infrastructure.db.repositories.base_repository import BaseRepository, Clock


class PriceRecommendationRepository(
    BaseRepository[PriceRecommendation, PriceRecommendationCreate, PriceRecommendationUpdate]
):
    def __init__(self, session: AsyncSession, clock: Clock = utc_now):
        super().__init__(PriceRecommendation, session, clock)

    async def get_newest_first(self, status: Optional[str] = None) -> List[PriceRecommendation]:
        stmt = select(PriceRecommendation)
        if status is not None:
            stmt = stmt.where(PriceRecommendation.status == status)
        stmt = stmt.order_by(
            PriceRecommendation.created_at.desc(),
            PriceRecommendation.id.desc(),
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())


class PriceHistoryRepository(BaseRepository[PriceHistory, PriceHistoryCreate, PriceHistoryCreate]):
    def __init__(self, session: AsyncSession, clock: Clock = utc_now):
        super().__init__(PriceHistory, session, clock)

    async def create(self, data: Union[PriceHistoryCreate, Mapping[str, Any]]) -> PriceHistory:
        values = data.model_dump() if isinstance(data, PriceHistoryCreate) else dict(data)
        if values.get("applied_at") is None:
            values["applied_at"] = self.now()
        return await super().create(values)

    async def get_for_plan(self, plan_id: int) -> List[PriceHistory]:
        stmt = (
            select(PriceHistory)
            .where(PriceHistory.plan_id == plan_id)
            .order_by(PriceHistory.applied_at.desc(), PriceHistory.id.desc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
