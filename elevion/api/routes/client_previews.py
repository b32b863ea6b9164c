"""
Client Preview API Routes

Lookup and validation of the access codes handed to clients for
reviewing work in progress.
"""

from fastapi import APIRouter

from elevion.api.dependencies import StorageDep
from elevion.api.responses import ok, require_found


router = APIRouter(prefix="/api/client-previews", tags=["Client Previews"])


@router.get("/{code}")
async def get_client_preview(code: str, storage: StorageDep):
    """Get an active, unexpired preview by its code."""
    preview = await storage.get_client_preview_by_code(code)
    return ok(require_found(preview, "client_previews", code))


@router.get("/{code}/validate")
async def validate_client_preview(code: str, storage: StorageDep):
    valid = await storage.validate_client_preview_code(code)
    return ok({"code": code, "valid": valid})
