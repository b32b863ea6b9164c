"""
Contact API Routes
"""

from fastapi import APIRouter, status

from elevion.api.dependencies import StorageDep
from elevion.api.responses import ok
from elevion.infrastructure.db.models.user import ContactSubmissionCreate


router = APIRouter(prefix="/api/contact", tags=["Contact"])


@router.post("/", status_code=status.HTTP_201_CREATED)
async def submit_contact(request: ContactSubmissionCreate, storage: StorageDep):
    submission = await storage.create_contact_submission(request)
    return ok(submission, message="Thank you for your message")
