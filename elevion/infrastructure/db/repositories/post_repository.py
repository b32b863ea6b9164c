"""
Post Repository
"""

from typing import List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from elevion.infrastructure.db.models.base import utc_now
from elevion.infrastructure.db.models.post import Post, PostCreate
from elevion.infrastructure.db.repositories.base_repository import BaseRepository, Clock


class PostRepository(BaseRepository[Post, PostCreate, PostCreate]):
    def __init__(self, session: AsyncSession, clock: Clock = utc_now):
        super().__init__(Post, session, clock)

    async def get_recent(self, limit: int = 10) -> List[Post]:
        stmt = (
            select(Post)
            .order_by(Post.created_at.desc(), Post.id.desc())
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
