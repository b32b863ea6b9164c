"""
Analytics API Routes

Endpoints for tracking visitor sessions and content views, and for the
engagement and content effectiveness reports.
"""

import logging
from datetime import datetime
from decimal import Decimal
from typing import Optional

from fastapi import APIRouter, status
from pydantic import BaseModel, Field

from elevion.api.dependencies import AnalyticsServiceDep
from elevion.api.responses import ok
from elevion.infrastructure.exceptions import ValidationError


logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/analytics", tags=["Analytics"])


# =============================================================================
# Request Schemas
# =============================================================================

class TrackSessionRequest(BaseModel):
    start_time: datetime
    end_time: datetime
    user_id: Optional[int] = None
    device: Optional[str] = Field(None, max_length=20)
    browser: Optional[str] = Field(None, max_length=50)
    referrer: Optional[str] = None
    ip_address: Optional[str] = Field(None, max_length=64)


class TrackContentViewRequest(BaseModel):
    content_id: int
    content_type: str = Field(..., min_length=1, max_length=50)
    content_title: str = Field(..., min_length=1, max_length=300)
    time_spent: Decimal = Field(Decimal("0"), ge=0, description="Seconds on page")
    user_id: Optional[int] = None


# =============================================================================
# Tracking Endpoints
# =============================================================================

@router.post("/track-session", status_code=status.HTTP_201_CREATED)
async def track_session(request: TrackSessionRequest, service: AnalyticsServiceDep):
    """Record a visitor session. Storage failures are logged, not raised."""
    try:
        session = await service.track_session(**request.model_dump())
    except ValidationError:
        raise
    except Exception as e:
        logger.error(f"Failed to track session: {e}")
        return {"success": False, "message": "Failed to track session"}
    return ok(session)


@router.post("/track-content-view")
async def track_content_view(request: TrackContentViewRequest, service: AnalyticsServiceDep):
    try:
        metric = await service.track_content_view(**request.model_dump())
    except Exception as e:
        logger.error(f"Failed to track content view: {e}")
        return {"success": False, "message": "Failed to track content view"}
    return ok(metric)


# =============================================================================
# Reports
# =============================================================================

@router.get("/user-engagement")
async def user_engagement(
    service: AnalyticsServiceDep,
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
):
    """Engagement summary; defaults to the trailing 30 days."""
    return ok(await service.get_engagement_summary(start=start, end=end))


@router.get("/content-effectiveness")
async def content_effectiveness(service: AnalyticsServiceDep):
    return ok(await service.get_content_effectiveness())
