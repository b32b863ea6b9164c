"""
Feedback and mockup request repositories.
"""

from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from elevion.infrastructure.db.models.base import utc_now
from elevion.infrastructure.db.models.feedback import (
    Feedback,
    FeedbackCreate,
    MockupRequest,
    MockupRequestCreate,
    MockupRequestUpdate,
)
from elevion.infrastructure.db.repositories.base_repository import BaseRepository, Clock


class FeedbackRepository(BaseRepository[Feedback, FeedbackCreate, FeedbackCreate]):
    def __init__(self, session: AsyncSession, clock: Clock = utc_now):
        super().__init__(Feedback, session, clock)

    async def get_newest_first(
        self,
        limit: Optional[int] = None,
        status: Optional[str] = None,
    ) -> List[Feedback]:
        stmt = select(Feedback)
        if status is not None:
            stmt = stmt.where(Feedback.status == status)
        stmt = stmt.order_by(Feedback.created_at.desc(), Feedback.id.desc())
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def update_status(self, feedback_id: int, status: str) -> Feedback:
        return await self.update(feedback_id, {"status": status})


class MockupRequestRepository(
    BaseRepository[MockupRequest, MockupRequestCreate, MockupRequestUpdate]
):
    def __init__(self, session: AsyncSession, clock: Clock = utc_now):
        super().__init__(MockupRequest, session, clock)

    async def get_by_status(self, status: str) -> List[MockupRequest]:
        stmt = (
            select(MockupRequest)
            .where(MockupRequest.status == status)
            .order_by(MockupRequest.created_at.desc(), MockupRequest.id.desc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_recent(self, limit: int = 10) -> List[MockupRequest]:
        stmt = (
            select(MockupRequest)
            .order_by(MockupRequest.created_at.desc(), MockupRequest.id.desc())
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
