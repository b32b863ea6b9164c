"""
Analytics Repository

Session rows, per-content view metrics and per-service engagement
counters. Counter updates are single INSERT ... ON CONFLICT DO UPDATE
statements so concurrent writers never lose an increment.
"""

import logging
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import Float, cast, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession

from elevion.domain.statuses import EngagementCounter
from elevion.infrastructure.db.models.analytics import (
    ContentViewMetric,
    ContentViewMetricCreate,
    ServiceEngagement,
    UserSession,
    UserSessionCreate,
)
from elevion.infrastructure.db.models.base import utc_now
from elevion.infrastructure.db.repositories.base_repository import BaseRepository, Clock
from elevion.infrastructure.exceptions import DatabaseError


logger = logging.getLogger(__name__)


def dialect_insert(session: AsyncSession, table):
    """Return an INSERT construct that supports ON CONFLICT for the bound dialect."""
    dialect = session.bind.dialect.name
    if dialect == "postgresql":
        return postgresql.insert(table)
    if dialect == "sqlite":
        return sqlite.insert(table)
    raise DatabaseError(
        f"Upsert is not supported on {dialect}",
        operation="upsert",
        table=table.__tablename__,
    )


class UserSessionRepository(BaseRepository[UserSession, UserSessionCreate, UserSessionCreate]):
    def __init__(self, session: AsyncSession, clock: Clock = utc_now):
        super().__init__(UserSession, session, clock)

    async def get_for_user(self, user_id: int) -> List[UserSession]:
        stmt = (
            select(UserSession)
            .where(UserSession.user_id == user_id)
            .order_by(UserSession.start_time.desc(), UserSession.id.desc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_between(self, start: datetime, end: datetime) -> List[UserSession]:
        """Sessions whose start time falls within [start, end]."""
        stmt = (
            select(UserSession)
            .where(UserSession.start_time >= start, UserSession.start_time <= end)
            .order_by(UserSession.start_time.asc(), UserSession.id.asc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())


class ContentViewMetricRepository(
    BaseRepository[ContentViewMetric, ContentViewMetricCreate, ContentViewMetricCreate]
):
    def __init__(self, session: AsyncSession, clock: Clock = utc_now):
        super().__init__(ContentViewMetric, session, clock)

    async def get_by_views(self) -> List[ContentViewMetric]:
        stmt = select(ContentViewMetric).order_by(
            ContentViewMetric.views.desc(),
            ContentViewMetric.id.asc(),
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_by_content(self, content_id: int, content_type: str) -> Optional[ContentViewMetric]:
        stmt = (
            select(ContentViewMetric)
            .where(
                ContentViewMetric.content_id == content_id,
                ContentViewMetric.content_type == content_type,
            )
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def record_view(
        self,
        content_id: int,
        content_type: str,
        content_title: str,
        time_spent: Decimal = Decimal("0"),
        unique: bool = False,
    ) -> ContentViewMetric:
        """
        Count one view of a piece of content.

        The first view creates the row. Later views add one to `views`,
        add one to `unique_views` when `unique` is set, and fold
        `time_spent` into the running average time on page.
        """
        now = self.now()
        table = ContentViewMetric.__table__
        unique_step = 1 if unique else 0

        stmt = dialect_insert(self.session, ContentViewMetric).values(
            content_id=content_id,
            content_type=content_type,
            content_title=content_title,
            views=1,
            unique_views=unique_step,
            avg_time_on_page=time_spent,
            bounce_rate=Decimal("0"),
            conversion_rate=Decimal("0"),
            created_at=now,
            updated_at=now,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=["content_id", "content_type"],
            set_={
                "views": table.c.views + 1,
                "unique_views": table.c.unique_views + unique_step,
                "avg_time_on_page": (
                    (cast(table.c.avg_time_on_page, Float) * table.c.views + float(time_spent))
                    / cast(table.c.views + 1, Float)
                ),
                "updated_at": now,
            },
        )
        await self.session.execute(stmt)
        metric = await self.get_by_content(content_id, content_type)
        logger.debug(f"Recorded view of {content_type}:{content_id} (views={metric.views})")
        return metric


class ServiceEngagementRepository(BaseRepository[ServiceEngagement, ServiceEngagement, ServiceEngagement]):
    def __init__(self, session: AsyncSession, clock: Clock = utc_now):
        super().__init__(ServiceEngagement, session, clock)

    async def get_by_service(self, service_id: int) -> Optional[ServiceEngagement]:
        stmt = (
            select(ServiceEngagement)
            .where(ServiceEngagement.service_id == service_id)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_clicks(self) -> List[ServiceEngagement]:
        stmt = select(ServiceEngagement).order_by(
            ServiceEngagement.clicks.desc(),
            ServiceEngagement.service_id.asc(),
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def track(self, service_id: int, counter: EngagementCounter) -> ServiceEngagement:
        """
        Add one to a service's engagement counter.

        The first touch inserts the row with that counter at 1 and the
        others at 0.
        """
        now = self.now()
        column = EngagementCounter(counter).value
        table = ServiceEngagement.__table__

        initial = {c.value: 0 for c in EngagementCounter}
        initial[column] = 1

        stmt = dialect_insert(self.session, ServiceEngagement).values(
            service_id=service_id,
            created_at=now,
            last_engaged_at=now,
            **initial,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=["service_id"],
            set_={
                column: table.c[column] + 1,
                "last_engaged_at": now,
            },
        )
        await self.session.execute(stmt)
        return await self.get_by_service(service_id)

