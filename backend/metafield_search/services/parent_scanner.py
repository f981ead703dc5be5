"""
Parent-reference scanner: products whose add_ons / options fields
reference one of the relevant metaobjects.

The whole product collection is scanned on every search. The scan runs
until the last page even when every relevant metaobject has already been
seen, because a later page can hold the only product referencing one.
"""
import logging
from dataclasses import dataclass, field
from typing import Iterable, List

from metafield_search.clients.catalog_port import CatalogClient
from metafield_search.schemas.catalog import Product
from metafield_search.schemas.search import ParentProduct
from metafield_search.utils.pagination import collect_pages
from metafield_search.utils.reference_decode import dedupe_preserving_order

logger = logging.getLogger(__name__)

METAFIELD_TYPES = ("add_ons", "options")


@dataclass
class ParentScanResult:
    parents: List[ParentProduct] = field(default_factory=list)

    def for_metaobject(self, metaobject_id: str) -> List[ParentProduct]:
        return [parent for parent in self.parents if metaobject_id in parent.metaobject_ids]


def parents_from_product(product: Product, relevant_ids: frozenset) -> List[ParentProduct]:
    """One ParentProduct per field type that references a relevant metaobject."""
    parents = []
    for metafield_type in METAFIELD_TYPES:
        matched = [ref for ref in product.refs_for(metafield_type) if ref in relevant_ids]
        if not matched:
            continue
        parents.append(ParentProduct(
            product_id=product.id,
            product_title=product.title,
            product_sku=product.first_sku,
            metafield_type=metafield_type,
            metaobject_ids=dedupe_preserving_order(matched),
        ))
    return parents


class ParentReferenceScanner:
    def __init__(self, client: CatalogClient) -> None:
        self._client = client

    async def scan(self, relevant_metaobject_ids: Iterable[str]) -> ParentScanResult:
        relevant = frozenset(relevant_metaobject_ids)
        products = await collect_pages(self._client.fetch_all_products_page, label="products")

        result = ParentScanResult()
        seen: set[tuple[str, str]] = set()
        for product in products:
            for parent in parents_from_product(product, relevant):
                key = (parent.product_id, parent.metafield_type)
                if key in seen:
                    continue
                seen.add(key)
                result.parents.append(parent)

        logger.info(
            "parent scan products=%s relevant_metaobjects=%s parents=%s",
            len(products), len(relevant), len(result.parents),
        )
        return result
