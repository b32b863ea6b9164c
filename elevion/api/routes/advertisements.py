"""
Advertisement API Routes
"""

from fastapi import APIRouter

from elevion.api.dependencies import StorageDep
from elevion.api.responses import ok, require_found


router = APIRouter(prefix="/api/advertisements", tags=["Advertisements"])


@router.get("/")
async def list_active_advertisements(storage: StorageDep):
    """Ads that are active and inside their run window right now."""
    return ok(await storage.get_active_advertisements())


@router.get("/type/{ad_type}")
async def list_active_advertisements_by_type(ad_type: str, storage: StorageDep):
    return ok(await storage.get_active_advertisements_by_type(ad_type))


@router.get("/{ad_id}")
async def get_advertisement(ad_id: int, storage: StorageDep):
    ad = await storage.get_advertisement(ad_id)
    return ok(require_found(ad, "advertisements", ad_id))


@router.post("/{ad_id}/impression")
async def record_impression(ad_id: int, storage: StorageDep):
    await storage.increment_ad_impressions(ad_id)
    return ok(message="Impression recorded")


@router.post("/{ad_id}/click")
async def record_click(ad_id: int, storage: StorageDep):
    await storage.increment_ad_clicks(ad_id)
    return ok(message="Click recorded")
