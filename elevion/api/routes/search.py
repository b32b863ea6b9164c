"""
Search API Routes

Free-text search over posts, marketplace items and services. A failing
search yields an empty result list.
"""

from fastapi import APIRouter, Query

from elevion.api.dependencies import StorageDep
from elevion.api.responses import ok


router = APIRouter(prefix="/api/search", tags=["Search"])


@router.get("/posts")
async def search_posts(storage: StorageDep, q: str = Query(..., min_length=1)):
    return ok(await storage.search_posts(q))


@router.get("/marketplace")
async def search_marketplace(storage: StorageDep, q: str = Query(..., min_length=1)):
    return ok(await storage.search_marketplace_items(q))


@router.get("/services")
async def search_services(storage: StorageDep, q: str = Query(..., min_length=1)):
    return ok(await storage.search_services(q))
