"""
Health routes: liveness and Shopify connectivity checks.

Provides:
- GET /health: process is up
- GET /health/shopify: credentials are configured and the store answers
Version: 1.0.0
"""
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from metafield_search.clients.shopify_client import ShopifyClient
from metafield_search.container import get_shopify_client
from metafield_search.core.exceptions import MetafieldSearchException

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check():
    """Basic health check endpoint."""
    return {"status": "healthy"}


@router.get("/health/shopify")
async def shopify_health_check(client: ShopifyClient = Depends(get_shopify_client)):
    """Query the shop name to verify the Admin API token works."""
    try:
        shop = await client.get_shop_info()
    except MetafieldSearchException as exc:
        return JSONResponse(
            status_code=exc.status_code,
            content={"status": "unhealthy", "error": str(exc), "errorKind": exc.kind},
        )
    return {"status": "healthy", "shop": shop.model_dump(by_alias=True)}
