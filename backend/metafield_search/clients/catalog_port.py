"""
Catalog port: the read operations the reference resolver depends on.

ShopifyClient implements it against the Admin GraphQL API; tests pass
in-memory fakes.
"""
from typing import Optional, Protocol

from metafield_search.schemas.catalog import Metaobject, Page, Product


class CatalogClient(Protocol):
    async def fetch_products_page(self, filter: str, cursor: Optional[str] = None) -> Page[Product]:
        """One page of products matching an advisory search filter."""
        ...

    async def fetch_metaobjects_page(self, type: str, cursor: Optional[str] = None) -> Page[Metaobject]:
        """One page of metaobjects of the given type."""
        ...

    async def fetch_all_products_page(self, cursor: Optional[str] = None) -> Page[Product]:
        """One page of the unfiltered product collection, with reference fields."""
        ...
