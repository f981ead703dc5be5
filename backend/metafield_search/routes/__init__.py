"""
Route aggregation module.

Mounts the search routes under the /api/v1 prefix.
Health routes and the unprefixed /search-sku path used by the admin UI
are exported separately for main.py to mount at root.
"""
from fastapi import APIRouter

from metafield_search.routes.health import router as health_router
from metafield_search.routes.search import router as search_router

v1_router = APIRouter(prefix="/api/v1")

v1_router.include_router(search_router)

__all__ = ["v1_router", "health_router", "search_router"]
