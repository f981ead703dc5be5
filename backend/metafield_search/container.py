"""
Lazy dependency-injection container.

Provides singleton access to the Shopify client and the reference resolver.
The resolver keeps no per-request state, so one instance serves every request.
Version: 1.0.0
"""

from functools import lru_cache

from metafield_search.core.config import settings
from metafield_search.clients.shopify_client import ShopifyClient
from metafield_search.services.reference_resolver import ReferenceResolver


@lru_cache()
def get_shopify_client() -> ShopifyClient:
    return ShopifyClient(settings)


@lru_cache()
def get_reference_resolver() -> ReferenceResolver:
    return ReferenceResolver(
        get_shopify_client(),
        metaobject_types=settings.metaobject_types,
        deadline_seconds=settings.search_deadline_seconds,
    )
