"""
SKU matcher: find products whose variant SKU contains a search token.

Shopify's product search is only used to narrow candidates; it may
over-match, so every candidate is re-checked here with a
case-insensitive substring test on each variant SKU.
"""
import logging
from dataclasses import dataclass, field
from typing import List, Optional

from metafield_search.clients.catalog_port import CatalogClient
from metafield_search.core.exceptions import ValidationError
from metafield_search.schemas.catalog import Product, Variant
from metafield_search.schemas.search import FoundProduct

logger = logging.getLogger(__name__)


@dataclass
class SkuMatch:
    """A matched product and the first variant whose SKU matched."""
    product: Product
    matched_variant: Variant

    def to_found_product(self) -> FoundProduct:
        return FoundProduct(
            product_id=self.product.id,
            product_title=self.product.title,
            variant_id=self.matched_variant.id,
            variant_title=self.matched_variant.title,
            sku=self.matched_variant.sku,
            has_add_ons=bool(self.product.add_ons_refs),
            has_options=bool(self.product.options_refs),
        )


@dataclass
class SkuMatchResult:
    token: str
    matches: List[SkuMatch] = field(default_factory=list)

    @property
    def product_ids(self) -> set[str]:
        return {match.product.id for match in self.matches}

    def found_products(self) -> List[FoundProduct]:
        return [match.to_found_product() for match in self.matches]


def normalize_token(raw: Optional[str]) -> str:
    """Trim the search token; an empty token is a validation error."""
    token = (raw or "").strip()
    if not token:
        raise ValidationError("SKU search token must not be empty")
    return token


def build_sku_filter(token: str) -> str:
    """Advisory Shopify search filter for a SKU substring."""
    if '"' in token or any(c.isspace() for c in token):
        # Wildcards are not expanded inside quoted phrases
        escaped = token.replace("\\", "\\\\").replace('"', '\\"')
        return f'sku:"{escaped}"'
    return f"sku:*{token}*"


def first_matching_variant(product: Product, token: str) -> Optional[Variant]:
    needle = token.lower()
    for variant in product.variants:
        if variant.sku and needle in variant.sku.lower():
            return variant
    return None


class SkuMatcher:
    """Runs the bounded candidate query and filters it client-side."""

    def __init__(self, client: CatalogClient) -> None:
        self._client = client

    async def match(self, raw_token: Optional[str]) -> SkuMatchResult:
        token = normalize_token(raw_token)
        page = await self._client.fetch_products_page(build_sku_filter(token), None)

        result = SkuMatchResult(token=token)
        for product in page.items:
            variant = first_matching_variant(product, token)
            if variant is not None:
                result.matches.append(SkuMatch(product=product, matched_variant=variant))

        discarded = len(page.items) - len(result.matches)
        logger.info(
            "sku match token=%s candidates=%s matched=%s discarded=%s",
            token, len(page.items), len(result.matches), discarded,
        )
        return result
