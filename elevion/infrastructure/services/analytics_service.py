"""
Analytics Service

Session and content-view tracking plus the engagement and content
effectiveness reports built from those rows.
"""

import logging
from collections import Counter, defaultdict
from datetime import datetime, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, List, Optional

from elevion.infrastructure.db.models.analytics import (
    ContentViewMetric,
    UserSession,
    UserSessionCreate,
)
from elevion.infrastructure.db.models.base import as_naive_utc
from elevion.infrastructure.db.storage import DatabaseStorage
from elevion.infrastructure.exceptions import ValidationError


logger = logging.getLogger(__name__)


SUMMARY_WINDOW_DAYS = 30
TOP_CONTENT_LIMIT = 5
KNOWN_DEVICES = ("desktop", "mobile", "tablet")

# Effectiveness score weights and saturation points
VIEWS_WEIGHT = 0.4
VIEWS_CAP = 100
TIME_WEIGHT = 0.35
TIME_CAP_SECONDS = 300
CONVERSION_WEIGHT = 0.25


def session_duration(start_time: datetime, end_time: datetime) -> Decimal:
    """Seconds between start and end, rounded to 2 decimals."""
    seconds = Decimal(str((end_time - start_time).total_seconds()))
    return seconds.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


def effectiveness_score(views: int, avg_time_on_page: float, conversion_rate: float) -> float:
    """
    Score a piece of content on a 0-100 scale.

    Views saturate at 100 and time on page at 300 seconds; conversion
    rate is a percentage.
    """
    views_score = min(views / VIEWS_CAP, 1) * VIEWS_WEIGHT
    time_score = min(avg_time_on_page / TIME_CAP_SECONDS, 1) * TIME_WEIGHT
    conversion_score = conversion_rate / 100 * CONVERSION_WEIGHT
    return round((views_score + time_score + conversion_score) * 100, 1)


class AnalyticsService:
    """
    Service for visitor analytics.

    Writes go through the storage gateway; reports are computed in
    memory from the rows it returns.
    """

    def __init__(self, storage: DatabaseStorage):
        self._storage = storage

    # =========================================================================
    # Tracking
    # =========================================================================

    async def track_session(
        self,
        start_time: datetime,
        end_time: datetime,
        user_id: Optional[int] = None,
        device: Optional[str] = None,
        browser: Optional[str] = None,
        referrer: Optional[str] = None,
        ip_address: Optional[str] = None,
    ) -> UserSession:
        """
        Record one visitor session.

        Offset-aware times are stored as UTC.

        Raises:
            ValidationError: the session ends before it starts
        """
        start_time = as_naive_utc(start_time)
        end_time = as_naive_utc(end_time)
        if end_time < start_time:
            raise ValidationError(
                "Session end time is before its start time",
                details={"start_time": start_time.isoformat(), "end_time": end_time.isoformat()},
            )

        session = await self._storage.create_user_session(
            UserSessionCreate(
                user_id=user_id,
                session_duration=session_duration(start_time, end_time),
                start_time=start_time,
                end_time=end_time,
                device=device,
                browser=browser,
                referrer=referrer,
                ip_address=ip_address,
            )
        )
        logger.debug(f"[ANALYTICS] Tracked session {session.id} ({session.session_duration}s)")
        return session

    async def track_content_view(
        self,
        content_id: int,
        content_type: str,
        content_title: str,
        time_spent: Optional[Decimal] = None,
        user_id: Optional[int] = None,
    ) -> ContentViewMetric:
        return await self._storage.record_content_view(
            content_id,
            content_type,
            content_title,
            time_spent=Decimal(str(time_spent or 0)),
            user_id=user_id,
        )

    # =========================================================================
    # Reports
    # =========================================================================

    async def get_engagement_summary(
        self,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> Dict[str, Any]:
        """
        Summarise sessions and content views.

        Defaults to the trailing 30 days ending now.
        """
        end = as_naive_utc(end) or self._storage.now()
        start = as_naive_utc(start) or end - timedelta(days=SUMMARY_WINDOW_DAYS)

        sessions = await self._storage.get_sessions_between(start, end)
        metrics = await self._storage.get_content_view_metrics()

        total = len(sessions)
        authenticated = sum(1 for s in sessions if s.user_id is not None)
        total_duration = sum((Decimal(str(s.session_duration)) for s in sessions), Decimal("0"))
        avg_duration = float(total_duration / total) if total else 0.0

        devices = {device: 0 for device in KNOWN_DEVICES}
        devices["other"] = 0
        for s in sessions:
            key = s.device if s.device in KNOWN_DEVICES else "other"
            devices[key] += 1

        referrers = Counter(s.referrer for s in sessions if s.referrer)

        top_content = sorted(metrics, key=lambda m: m.views, reverse=True)[:TOP_CONTENT_LIMIT]

        return {
            "timeframe": {
                "start": start.isoformat(),
                "end": end.isoformat(),
                "days": round((end - start).total_seconds() / 86400),
            },
            "sessions": {
                "total": total,
                "authenticated": authenticated,
                "anonymous": total - authenticated,
                "avg_duration_seconds": round(avg_duration, 2),
            },
            "devices": devices,
            "referrers": dict(referrers),
            "content": {
                "total_views": sum(m.views for m in metrics),
                "total_unique_views": sum(m.unique_views for m in metrics),
                "top_content": [
                    {
                        "title": m.content_title,
                        "type": m.content_type,
                        "views": m.views,
                        "avg_time_on_page": float(m.avg_time_on_page),
                    }
                    for m in top_content
                ],
            },
        }

    async def get_content_effectiveness(self) -> Dict[str, Any]:
        """Rank content by effectiveness score, with a per-type breakdown."""
        metrics = await self._storage.get_content_view_metrics()

        scored: List[Dict[str, Any]] = []
        for m in metrics:
            scored.append({
                "id": m.id,
                "content_type": m.content_type,
                "title": m.content_title,
                "views": m.views,
                "unique_views": m.unique_views,
                "avg_time_on_page": float(m.avg_time_on_page),
                "conversion_rate": float(m.conversion_rate),
                "bounce_rate": float(m.bounce_rate),
                "effectiveness_score": effectiveness_score(
                    m.views,
                    float(m.avg_time_on_page),
                    float(m.conversion_rate),
                ),
            })
        scored.sort(key=lambda item: item["effectiveness_score"], reverse=True)

        by_type: Dict[str, Dict[str, Any]] = defaultdict(lambda: {"count": 0, "views": 0, "scores": []})
        for item in scored:
            bucket = by_type[item["content_type"]]
            bucket["count"] += 1
            bucket["views"] += item["views"]
            bucket["scores"].append(item["effectiveness_score"])

        content_by_type = {
            content_type: {
                "count": bucket["count"],
                "views": bucket["views"],
                "avg_effectiveness": round(sum(bucket["scores"]) / len(bucket["scores"]), 1),
            }
            for content_type, bucket in by_type.items()
        }

        return {
            "total_content": len(scored),
            "total_views": sum(item["views"] for item in scored),
            "content_by_type": content_by_type,
            "most_effective": scored[:TOP_CONTENT_LIMIT],
            "least_effective": list(reversed(scored[-TOP_CONTENT_LIMIT:])),
            "all_content": scored,
        }
