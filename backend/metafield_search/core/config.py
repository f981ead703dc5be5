import os
from typing import Optional
from functools import lru_cache

from dotenv import load_dotenv
from pydantic import BaseModel


load_dotenv()


def _split_csv(raw: str) -> tuple[str, ...]:
    return tuple(part.strip() for part in raw.split(",") if part.strip())


class Settings(BaseModel):
    # Shopify
    shopify_store_domain: Optional[str] = os.getenv("SHOPIFY_STORE_DOMAIN")
    shopify_admin_api_token: Optional[str] = os.getenv("SHOPIFY_ADMIN_API_TOKEN")
    shopify_api_version: str = os.getenv("SHOPIFY_API_VERSION", "2025-10")
    shopify_request_timeout: float = float(os.getenv("SHOPIFY_REQUEST_TIMEOUT", "30"))

    # Overall budget for one search, across every page request
    search_deadline_seconds: float = float(os.getenv("SEARCH_DEADLINE_SECONDS", "120"))

    # Page sizes
    sku_candidate_limit: int = int(os.getenv("SKU_CANDIDATE_LIMIT", "10"))
    variants_per_product: int = int(os.getenv("VARIANTS_PER_PRODUCT", "50"))
    product_page_size: int = int(os.getenv("PRODUCT_PAGE_SIZE", "100"))
    metaobject_page_size: int = int(os.getenv("METAOBJECT_PAGE_SIZE", "100"))

    # Reference-carrying content. Metaobject types double as the product metafield keys
    # (custom.add_ons / custom.options).
    metaobject_types: tuple[str, ...] = _split_csv(os.getenv("METAOBJECT_TYPES", "add_ons,options"))
    metafield_namespace: str = os.getenv("METAFIELD_NAMESPACE", "custom")

    # App
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    cors_allow_origins: tuple[str, ...] = _split_csv(os.getenv("CORS_ALLOW_ORIGINS", "*"))


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = Settings()
