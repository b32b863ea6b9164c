"""
User and contact submission repositories.
"""

from datetime import datetime
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from elevion.infrastructure.db.models.base import utc_now
from elevion.infrastructure.db.models.user import (
    ContactSubmission,
    ContactSubmissionCreate,
    User,
    UserCreate,
    UserUpdate,
)
from elevion.infrastructure.db.repositories.base_repository import BaseRepository, Clock


class UserRepository(BaseRepository[User, UserCreate, UserUpdate]):
    """
    Repository for user accounts.

    Adds lookups by the two unique natural keys (username, email).
    """

    def __init__(self, session: AsyncSession, clock: Clock = utc_now):
        super().__init__(User, session, clock)

    async def get_by_username(self, username: str) -> Optional[User]:
        stmt = select(User).where(User.username == username)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_email(self, email: str) -> Optional[User]:
        stmt = select(User).where(User.email == email)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def record_login(self, user_id: int, at: Optional[datetime] = None) -> User:
        return await self.update(user_id, {"last_login_at": at or self.now()})


class ContactSubmissionRepository(
    BaseRepository[ContactSubmission, ContactSubmissionCreate, ContactSubmissionCreate]
):
    def __init__(self, session: AsyncSession, clock: Clock = utc_now):
        super().__init__(ContactSubmission, session, clock)

    async def get_newest_first(self) -> List[ContactSubmission]:
        stmt = select(ContactSubmission).order_by(
            ContactSubmission.created_at.desc(),
            ContactSubmission.id.desc(),
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
