import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from metafield_search.core.config import settings
from metafield_search.core.middleware import apply_cors
from metafield_search.routes import health_router, search_router, v1_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    FastAPI lifespan event handler.

    Shopify credentials are only checked when a request needs them, so a
    missing token does not stop the app from starting; it is logged here.
    """
    logger.info("=== Metafield Search Starting ===")
    if not settings.shopify_store_domain or not settings.shopify_admin_api_token:
        logger.warning("Shopify credentials missing (SHOPIFY_STORE_DOMAIN / SHOPIFY_ADMIN_API_TOKEN); searches will fail")
    else:
        logger.info(
            f"Shopify store={settings.shopify_store_domain} api_version={settings.shopify_api_version} "
            f"metaobject_types={list(settings.metaobject_types)}"
        )
    logger.info("=== Metafield Search Ready ===")

    yield

    logger.info("Shutdown complete")


app = FastAPI(title="DPP Metafield Search", lifespan=lifespan)
logging.basicConfig(level=settings.log_level.upper(), format="%(levelname)s:%(name)s:%(message)s")

apply_cors(app, settings.cors_allow_origins)

app.include_router(health_router)
app.include_router(search_router)
app.include_router(v1_router)
