import logging
from typing import Any, Dict, List, Optional

import httpx
from pydantic import ValidationError as PydanticValidationError

from metafield_search.core.config import Settings
from metafield_search.core.exceptions import (
    ConfigurationError,
    DecodeError,
    RateLimitError,
    UpstreamError,
    UpstreamTimeoutError,
)
from metafield_search.schemas.catalog import Metaobject, Page, Product
from metafield_search.schemas.search import ShopInfo

logger = logging.getLogger("shopify_client")

SERVICE = "Shopify"

PRODUCTS_QUERY = """
query ProductsPage(
    $first: Int!
    $after: String
    $query: String
    $variantsFirst: Int!
    $namespace: String!
) {
    products(first: $first, after: $after, query: $query) {
        pageInfo { hasNextPage endCursor }
        edges {
            node {
                id
                title
                variants(first: $variantsFirst) {
                    edges { node { id title sku } }
                }
                addOns: metafield(namespace: $namespace, key: "add_ons") { value }
                options: metafield(namespace: $namespace, key: "options") { value }
            }
        }
    }
}
"""

METAOBJECTS_QUERY = """
query MetaobjectsPage($type: String!, $first: Int!, $after: String) {
    metaobjects(type: $type, first: $first, after: $after) {
        pageInfo { hasNextPage endCursor }
        edges {
            node {
                id
                displayName
                type
                fields { key value }
            }
        }
    }
}
"""

SHOP_QUERY = "{ shop { name myshopifyDomain } }"


class ShopifyClient:
    """Read-only Shopify Admin GraphQL client implementing the catalog port."""

    def __init__(self, settings: Settings) -> None:
        raw_domain = settings.shopify_store_domain
        self._store_domain = self._normalize_store_domain(raw_domain)
        self._token = settings.shopify_admin_api_token
        self._api_version = settings.shopify_api_version
        self._timeout = settings.shopify_request_timeout
        self._sku_candidate_limit = settings.sku_candidate_limit
        self._variants_per_product = settings.variants_per_product
        self._product_page_size = settings.product_page_size
        self._metaobject_page_size = settings.metaobject_page_size
        self._namespace = settings.metafield_namespace
        logger.info(f"ShopifyClient initialized: domain={self._store_domain} (raw: {raw_domain}), api_version={self._api_version}")

    @staticmethod
    def _normalize_store_domain(domain: Optional[str]) -> Optional[str]:
        """
        Normalize Shopify store domain to ensure it has .myshopify.com suffix.

        Handles these formats:
        - "my-store" -> "my-store.myshopify.com"
        - "my-store.myshopify.com" -> "my-store.myshopify.com" (unchanged)
        - "https://my-store.myshopify.com" -> "my-store.myshopify.com" (strips protocol)
        """
        if not domain:
            return domain

        domain = domain.replace("https://", "").replace("http://", "")
        domain = domain.rstrip("/")

        if not domain.endswith(".myshopify.com"):
            domain = f"{domain}.myshopify.com"

        return domain

    def _base_url(self) -> str:
        if not self._store_domain or not self._token:
            raise ConfigurationError(
                "Shopify credentials not configured. Check SHOPIFY_STORE_DOMAIN and SHOPIFY_ADMIN_API_TOKEN in .env"
            )
        return f"https://{self._store_domain}/admin/api/{self._api_version}"

    async def call_shopify_graphql(self, query: str, variables: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Execute a GraphQL query and return its `data` object."""
        url = f"{self._base_url()}/graphql.json"
        headers = {
            "X-Shopify-Access-Token": self._token or "",
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        payload = {"query": query, "variables": variables or {}}
        logger.info("shopify graphql request variables=%s", variables)

        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                resp = await client.post(url, json=payload, headers=headers)
        except httpx.TimeoutException:
            raise UpstreamTimeoutError(SERVICE, f"request timed out after {self._timeout}s")
        except httpx.RequestError as exc:
            raise UpstreamError(SERVICE, f"network error: {exc}")

        logger.info("shopify graphql response status=%s", resp.status_code)
        if resp.status_code in (401, 403):
            raise UpstreamError(SERVICE, "authentication failed", upstream_status=resp.status_code)
        if resp.status_code == 429:
            raise RateLimitError(SERVICE, retry_after=self._retry_after(resp))
        if resp.status_code >= 400:
            raise UpstreamError(SERVICE, resp.text, upstream_status=resp.status_code)

        try:
            body = resp.json()
        except ValueError:
            raise DecodeError("Shopify returned a non-JSON response")
        if not isinstance(body, dict):
            raise DecodeError("Shopify response is not a JSON object")

        errors = body.get("errors")
        if errors:
            if self._is_throttled(errors):
                raise RateLimitError(SERVICE)
            raise UpstreamError(SERVICE, f"GraphQL error: {errors}")

        data = body.get("data")
        if not isinstance(data, dict):
            raise DecodeError("Shopify response is missing the data object")
        return data

    @staticmethod
    def _retry_after(resp: httpx.Response) -> int:
        try:
            return int(float(resp.headers.get("Retry-After", "2")))
        except ValueError:
            return 2

    @staticmethod
    def _is_throttled(errors: Any) -> bool:
        if not isinstance(errors, list):
            return False
        for error in errors:
            if isinstance(error, dict) and (error.get("extensions") or {}).get("code") == "THROTTLED":
                return True
        return False

    @staticmethod
    def _connection_nodes(data: Dict[str, Any], root: str) -> tuple[List[Dict[str, Any]], bool, Optional[str]]:
        """Split a GraphQL connection into (nodes, has_next_page, end_cursor)."""
        connection = data.get(root)
        if not isinstance(connection, dict):
            raise DecodeError(f"Shopify response has no '{root}' connection")
        page_info = connection.get("pageInfo")
        edges = connection.get("edges")
        if not isinstance(page_info, dict) or not isinstance(edges, list):
            raise DecodeError(f"Shopify '{root}' connection is missing pageInfo or edges")

        nodes = []
        for edge in edges:
            node = edge.get("node") if isinstance(edge, dict) else None
            if not isinstance(node, dict):
                raise DecodeError(f"Shopify '{root}' edge without a node")
            nodes.append(node)

        return nodes, bool(page_info.get("hasNextPage")), page_info.get("endCursor")

    @staticmethod
    def _metafield_value(node: Dict[str, Any], alias: str) -> Optional[str]:
        metafield = node.get(alias)
        if isinstance(metafield, dict):
            return metafield.get("value")
        return None

    def _parse_product(self, node: Dict[str, Any]) -> Product:
        try:
            variant_edges = (node.get("variants") or {}).get("edges") or []
            return Product.model_validate({
                "id": node.get("id"),
                "title": node.get("title") or "",
                "variants": [edge.get("node") for edge in variant_edges],
                "add_ons_refs": self._metafield_value(node, "addOns"),
                "options_refs": self._metafield_value(node, "options"),
            })
        except (PydanticValidationError, AttributeError) as exc:
            raise DecodeError(f"Unexpected product shape: {exc}")

    @staticmethod
    def _parse_metaobject(node: Dict[str, Any]) -> Metaobject:
        try:
            return Metaobject.model_validate({
                "id": node.get("id"),
                "display_name": node.get("displayName") or "",
                "type": node.get("type") or "",
                "fields": {f.get("key"): f.get("value") for f in node.get("fields") or []},
            })
        except (PydanticValidationError, AttributeError) as exc:
            raise DecodeError(f"Unexpected metaobject shape: {exc}")

    async def _products_page(self, first: int, query: Optional[str], cursor: Optional[str]) -> Page[Product]:
        variables = {
            "first": first,
            "after": cursor,
            "query": query,
            "variantsFirst": self._variants_per_product,
            "namespace": self._namespace,
        }
        data = await self.call_shopify_graphql(PRODUCTS_QUERY, variables)
        nodes, has_next, end_cursor = self._connection_nodes(data, "products")
        return Page(
            items=[self._parse_product(node) for node in nodes],
            has_next_page=has_next,
            next_cursor=end_cursor,
        )

    async def fetch_products_page(self, filter: str, cursor: Optional[str] = None) -> Page[Product]:
        """Bounded page of products matching a Shopify search filter (advisory)."""
        return await self._products_page(self._sku_candidate_limit, filter, cursor)

    async def fetch_all_products_page(self, cursor: Optional[str] = None) -> Page[Product]:
        return await self._products_page(self._product_page_size, None, cursor)

    async def fetch_metaobjects_page(self, type: str, cursor: Optional[str] = None) -> Page[Metaobject]:
        variables = {"type": type, "first": self._metaobject_page_size, "after": cursor}
        data = await self.call_shopify_graphql(METAOBJECTS_QUERY, variables)
        nodes, has_next, end_cursor = self._connection_nodes(data, "metaobjects")
        return Page(
            items=[self._parse_metaobject(node) for node in nodes],
            has_next_page=has_next,
            next_cursor=end_cursor,
        )

    async def get_shop_info(self) -> ShopInfo:
        """Fetch the store name and domain; used as a connectivity check."""
        data = await self.call_shopify_graphql(SHOP_QUERY)
        shop = data.get("shop")
        if not isinstance(shop, dict):
            raise DecodeError("Shopify response has no shop object")
        try:
            return ShopInfo.model_validate(shop)
        except PydanticValidationError as exc:
            raise DecodeError(f"Unexpected shop shape: {exc}")
