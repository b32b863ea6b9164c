"""
Feedback API Routes
"""

from typing import Optional

from fastapi import APIRouter, Query, status
from pydantic import BaseModel, Field

from elevion.api.dependencies import StorageDep
from elevion.api.responses import ok
from elevion.domain.statuses import FeedbackStatus
from elevion.infrastructure.db.models.feedback import FeedbackCreate


router = APIRouter(prefix="/api/feedback", tags=["Feedback"])


class SubmitFeedbackRequest(BaseModel):
    message: str = Field(..., min_length=1)
    user_id: Optional[int] = None
    source: str = "website"
    category: Optional[str] = None
    rating: Optional[int] = Field(None, ge=1, le=5)


class UpdateFeedbackStatusRequest(BaseModel):
    status: FeedbackStatus


@router.post("/", status_code=status.HTTP_201_CREATED)
async def submit_feedback(request: SubmitFeedbackRequest, storage: StorageDep):
    """Store new feedback; it always starts in the `new` state."""
    feedback = await storage.create_feedback(FeedbackCreate(**request.model_dump()))
    return ok(feedback, message="Thank you for your feedback")


@router.get("/")
async def list_feedback(
    storage: StorageDep,
    limit: Optional[int] = Query(None, ge=1, le=500),
    status: Optional[FeedbackStatus] = None,
):
    return ok(await storage.get_all_feedback(
        limit=limit,
        status=status.value if status else None,
    ))


@router.patch("/{feedback_id}/status")
async def update_feedback_status(
    feedback_id: int,
    request: UpdateFeedbackStatusRequest,
    storage: StorageDep,
):
    return ok(await storage.update_feedback_status(feedback_id, request.status.value))
