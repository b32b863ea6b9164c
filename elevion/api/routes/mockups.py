"""
Mockup Request API Routes
"""

from typing import Optional

from fastapi import APIRouter, Query, status

from elevion.api.dependencies import StorageDep
from elevion.api.responses import ok
from elevion.domain.statuses import MockupStatus
from elevion.infrastructure.db.models.feedback import MockupRequestCreate


router = APIRouter(prefix="/api/mockups", tags=["Mockups"])


@router.post("/", status_code=status.HTTP_201_CREATED)
async def create_mockup_request(request: MockupRequestCreate, storage: StorageDep):
    return ok(await storage.create_mockup_request(request))


@router.get("/")
async def list_mockup_requests(
    storage: StorageDep,
    status: Optional[MockupStatus] = None,
    limit: int = Query(10, ge=1, le=100),
):
    """Requests in one status, or the most recent ones when no status is given."""
    if status is not None:
        return ok(await storage.get_mockup_requests_by_status(status.value))
    return ok(await storage.get_recent_mockup_requests(limit))
