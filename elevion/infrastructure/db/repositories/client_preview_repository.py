"""
Client Preview Repository
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from elevion.infrastructure.db.models.base import utc_now
from elevion.infrastructure.db.models.client_preview import (
    ClientPreview,
    ClientPreviewCreate,
    ClientPreviewUpdate,
)
from elevion.infrastructure.db.repositories.base_repository import BaseRepository, Clock


class ClientPreviewRepository(
    BaseRepository[ClientPreview, ClientPreviewCreate, ClientPreviewUpdate]
):
    def __init__(self, session: AsyncSession, clock: Clock = utc_now):
        super().__init__(ClientPreview, session, clock)

    async def get_valid_by_code(
        self,
        code: str,
        now: Optional[datetime] = None,
    ) -> Optional[ClientPreview]:
        """
        Find an active, unexpired preview by its code.

        An inactive or expired preview with the same code is treated as
        absent.
        """
        now = now or self.now()
        stmt = (
            select(ClientPreview)
            .where(
                ClientPreview.code == code,
                ClientPreview.is_active.is_(True),
                ClientPreview.expires_at > now,
            )
            .limit(1)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()
