"""
Pytest configuration and shared fixtures for the metafield search tests.

Provides settings, an in-memory paginating catalog client and factories
for products and metaobjects.
"""
import json
from typing import Any, Dict, Iterable, List, Optional
from unittest.mock import AsyncMock

import pytest

from metafield_search.schemas.catalog import Metaobject, Page, Product, Variant


# ---------------------------------------------------------------------------
# Factories
# ---------------------------------------------------------------------------

def _encode_refs(value: Any) -> Any:
    """Lists become the JSON text Shopify stores; anything else is passed through raw."""
    if isinstance(value, list):
        return json.dumps(value)
    return value


def build_product(
    product_id: str,
    *skus: Optional[str],
    title: Optional[str] = None,
    add_ons: Any = None,
    options: Any = None,
) -> Product:
    return Product(
        id=product_id,
        title=title or f"Product {product_id}",
        variants=[Variant(id=f"{product_id}-V{i}", sku=sku, title=f"Variant {i}") for i, sku in enumerate(skus, 1)],
        add_ons_refs=_encode_refs(add_ons),
        options_refs=_encode_refs(options),
    )


def build_metaobject(metaobject_id: str, name: Optional[str] = None, type: str = "add_ons", **fields: Any) -> Metaobject:
    return Metaobject(
        id=metaobject_id,
        display_name=name or f"Metaobject {metaobject_id}",
        type=type,
        fields={key: _encode_refs(value) for key, value in fields.items()},
    )


class FakeCatalogClient:
    """
    In-memory catalog that pages fixed data with integer-offset cursors.

    `candidates` is what the advisory SKU filter returns; by default it is
    every product, which exercises the client-side re-filtering.
    """

    def __init__(
        self,
        products: Iterable[Product] = (),
        metaobjects: Optional[Dict[str, List[Metaobject]]] = None,
        page_size: int = 2,
        candidates: Optional[Iterable[Product]] = None,
    ) -> None:
        self.products = list(products)
        self.metaobjects = metaobjects or {}
        self.page_size = page_size
        self.candidates = None if candidates is None else list(candidates)
        self.fetch_products_page = AsyncMock(side_effect=self._products_page)
        self.fetch_metaobjects_page = AsyncMock(side_effect=self._metaobjects_page)
        self.fetch_all_products_page = AsyncMock(side_effect=self._all_products_page)

    def _page(self, items: List[Any], cursor: Optional[str]) -> Page:
        start = int(cursor) if cursor else 0
        end = start + self.page_size
        has_next = end < len(items)
        return Page(items=items[start:end], has_next_page=has_next, next_cursor=str(end) if has_next else None)

    async def _products_page(self, filter: str, cursor: Optional[str] = None) -> Page:
        candidates = self.products if self.candidates is None else self.candidates
        return Page(items=list(candidates), has_next_page=False, next_cursor=None)

    async def _metaobjects_page(self, type: str, cursor: Optional[str] = None) -> Page:
        return self._page(self.metaobjects.get(type, []), cursor)

    async def _all_products_page(self, cursor: Optional[str] = None) -> Page:
        return self._page(self.products, cursor)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def make_product():
    return build_product


@pytest.fixture
def make_metaobject():
    return build_metaobject


@pytest.fixture
def fake_catalog():
    """Factory for FakeCatalogClient instances."""
    return FakeCatalogClient


@pytest.fixture
def mock_settings():
    """Settings object with test defaults (no real credentials)."""
    from metafield_search.core.config import Settings
    return Settings(
        shopify_store_domain="test-store.myshopify.com",
        shopify_admin_api_token="shpat_test_token",
        shopify_api_version="2025-10",
        shopify_request_timeout=5.0,
        search_deadline_seconds=30.0,
        sku_candidate_limit=10,
        variants_per_product=50,
        product_page_size=100,
        metaobject_page_size=100,
        metaobject_types=("add_ons", "options"),
        metafield_namespace="custom",
    )


@pytest.fixture
def scenario_a_catalog(fake_catalog, make_product, make_metaobject):
    """
    P1 carries the searched SKU, metaobject M1 references P1,
    and P2's add-ons field references M1.
    """
    p1 = make_product("gid://shopify/Product/1", "GAR-403069-0166", "GAR-403069-0167", title="Garage Door")
    p2 = make_product("gid://shopify/Product/2", "KIT-1", title="Install Kit", add_ons=["gid://shopify/Metaobject/M1"])
    p3 = make_product("gid://shopify/Product/3", "UNRELATED-9", title="Unrelated")
    m1 = make_metaobject("gid://shopify/Metaobject/M1", "Door add-ons", products=[p1.id])
    m2 = make_metaobject("gid://shopify/Metaobject/M2", "Other add-ons", products=[p3.id])
    return fake_catalog(products=[p1, p2, p3], metaobjects={"add_ons": [m1, m2]})
