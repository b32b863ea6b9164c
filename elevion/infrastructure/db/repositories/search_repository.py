"""
Search Repository

Case-insensitive substring search over posts and marketplace items.
"""

from typing import List

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from elevion.infrastructure.db.models.marketplace import SERVICE_CATEGORY, MarketplaceItem
from elevion.infrastructure.db.models.post import Post


class SearchRepository:
    """
    Repository for free-text search.

    Each query matches `%term%` with ILIKE against a fixed set of columns
    and returns at most `limit` rows.
    """

    def __init__(self, session: AsyncSession, limit: int = 15):
        self._session = session
        self._limit = limit

    @staticmethod
    def _pattern(term: str) -> str:
        return f"%{term}%"

    async def search_posts(self, term: str) -> List[Post]:
        pattern = self._pattern(term)
        stmt = (
            select(Post)
            .where(
                or_(
                    Post.title.ilike(pattern),
                    Post.content.ilike(pattern),
                    Post.category.ilike(pattern),
                )
            )
            .order_by(Post.created_at.desc(), Post.id.desc())
            .limit(self._limit)
        )
        result = await self._session.execute(stmt)
        return list(result.scalars().all())

    async def search_marketplace_items(self, term: str) -> List[MarketplaceItem]:
        pattern = self._pattern(term)
        stmt = (
            select(MarketplaceItem)
            .where(
                or_(
                    MarketplaceItem.name.ilike(pattern),
                    MarketplaceItem.description.ilike(pattern),
                    MarketplaceItem.category.ilike(pattern),
                )
            )
            .order_by(MarketplaceItem.id)
            .limit(self._limit)
        )
        result = await self._session.execute(stmt)
        return list(result.scalars().all())

    async def search_services(self, term: str) -> List[MarketplaceItem]:
        pattern = self._pattern(term)
        stmt = (
            select(MarketplaceItem)
            .where(
                MarketplaceItem.category == SERVICE_CATEGORY,
                or_(
                    MarketplaceItem.name.ilike(pattern),
                    MarketplaceItem.description.ilike(pattern),
                ),
            )
            .order_by(MarketplaceItem.id)
            .limit(self._limit)
        )
        result = await self._session.execute(stmt)
        return list(result.scalars().all())
