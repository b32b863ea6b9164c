"""
Sample Data Bootstrapper

Fills an empty development database with demo client previews, visitor
sessions and content metrics. Each step only runs when its table is
empty, so repeated runs insert nothing new.
"""

import logging
import random
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Dict, List, Optional, Tuple

from elevion.config.settings import get_settings
from elevion.infrastructure.db.models import (
    ClientPreviewCreate,
    ContentViewMetricCreate,
    UserSessionCreate,
    utc_now,
)
from elevion.infrastructure.db.repositories.base_repository import Clock
from elevion.infrastructure.db.storage import DatabaseStorage


logger = logging.getLogger(__name__)


# (code, client name, project id)
SAMPLE_CLIENT_PREVIEWS: List[Tuple[str, str, int]] = [
    ("AERO123", "SkyHigh Airlines", 1),
    ("EXEC456", "Elite Air Charter", 2),
]

DEVICES = ["desktop", "mobile", "tablet"]
BROWSERS = ["Chrome", "Firefox", "Safari", "Edge"]
REFERRERS = ["google.com", "facebook.com", "linkedin.com", "twitter.com", "direct"]

SESSIONS_PER_USER = (1, 20)
SESSION_DURATION_SECONDS = (30, 1800)
SESSION_WINDOW_DAYS = 30

# (content id, content type, title)
CONTENT_CATALOG: List[Tuple[int, str, str]] = [
    (1, "blog", "Getting Started with Web Development"),
    (2, "blog", "10 Tips for Small Business Websites"),
    (3, "blog", "Why Mobile-First Design Matters"),
    (4, "page", "Services Overview"),
    (5, "page", "About Elevion"),
    (6, "page", "Pricing"),
    (7, "product", "Website Starter Package"),
    (8, "product", "E-commerce Growth Package"),
    (9, "case_study", "Rebuilding a Charter Booking Site"),
    (10, "case_study", "Local Bakery Goes Online"),
]


class SampleDataBootstrapper:
    """
    Seeds demo data through the storage gateway.

    Args:
        storage: Persistence gateway
        rng: Random source; pass a seeded `random.Random` for
            reproducible data
        clock: Source of "now" for expiry dates and session times
    """

    def __init__(
        self,
        storage: DatabaseStorage,
        rng: Optional[random.Random] = None,
        clock: Optional[Clock] = None,
    ):
        self._storage = storage
        self._rng = rng or random.Random()
        self._clock = clock or utc_now
        self._settings = get_settings()

    def _now(self) -> datetime:
        return self._clock()

    async def seed_client_previews(self) -> int:
        if await self._storage.count_client_previews() > 0:
            logger.info("Client previews already present, skipping")
            return 0

        expires_at = self._now() + timedelta(days=self._settings.client_preview_ttl_days)
        for code, client_name, project_id in SAMPLE_CLIENT_PREVIEWS:
            await self._storage.create_client_preview(
                ClientPreviewCreate(
                    code=code,
                    client_name=client_name,
                    project_id=project_id,
                    expires_at=expires_at,
                    is_active=True,
                )
            )
        logger.info(f"Seeded {len(SAMPLE_CLIENT_PREVIEWS)} client previews")
        return len(SAMPLE_CLIENT_PREVIEWS)

    async def seed_user_sessions(self) -> int:
        if await self._storage.count_user_sessions() > 0:
            logger.info("User sessions already present, skipping")
            return 0

        now = self._now()
        window_seconds = SESSION_WINDOW_DAYS * 24 * 60 * 60
        inserted = 0
        for user in await self._storage.get_all_users():
            for _ in range(self._rng.randint(*SESSIONS_PER_USER)):
                duration = self._rng.randint(*SESSION_DURATION_SECONDS)
                start_time = now - timedelta(seconds=self._rng.randint(duration, window_seconds))
                await self._storage.create_user_session(
                    UserSessionCreate(
                        user_id=user.id,
                        session_duration=Decimal(duration),
                        start_time=start_time,
                        end_time=start_time + timedelta(seconds=duration),
                        device=self._rng.choice(DEVICES),
                        browser=self._rng.choice(BROWSERS),
                        referrer=self._rng.choice(REFERRERS),
                    )
                )
                inserted += 1
        logger.info(f"Seeded {inserted} user sessions")
        return inserted

    async def seed_content_metrics(self) -> int:
        if await self._storage.count_content_view_metrics() > 0:
            logger.info("Content metrics already present, skipping")
            return 0

        for content_id, content_type, title in CONTENT_CATALOG:
            views = self._rng.randint(50, 5000)
            await self._storage.create_content_view_metric(
                ContentViewMetricCreate(
                    content_id=content_id,
                    content_type=content_type,
                    content_title=title,
                    views=views,
                    unique_views=int(views * self._rng.uniform(0.4, 0.9)),
                    avg_time_on_page=self._decimal(self._rng.uniform(15, 300)),
                    bounce_rate=self._decimal(self._rng.uniform(20, 80)),
                    conversion_rate=self._decimal(self._rng.uniform(0.5, 10)),
                )
            )
        logger.info(f"Seeded {len(CONTENT_CATALOG)} content metrics")
        return len(CONTENT_CATALOG)

    @staticmethod
    def _decimal(value: float) -> Decimal:
        return Decimal(str(round(value, 2)))

    async def run(self) -> Dict[str, int]:
        """
        Run every seeding step.

        A failing step is logged and skipped; it never aborts startup.

        Returns:
            Rows inserted per step
        """
        summary: Dict[str, int] = {}
        steps = [
            ("client_previews", self.seed_client_previews),
            ("user_sessions", self.seed_user_sessions),
            ("content_metrics", self.seed_content_metrics),
        ]
        for name, step in steps:
            try:
                summary[name] = await step()
            except Exception as e:
                logger.error(f"Error initializing sample data ({name}): {e}")
                summary[name] = 0
        return summary
