"""
Reference resolver: SKU → metaobjects referencing it → products referencing those.

Runs three dependent hops in sequence:
1. SkuMatcher: products whose variant SKU contains the token
2. MetaobjectIndexBuilder: add-on / option metaobjects referencing those products
3. ParentReferenceScanner: products whose reference fields point back at them

Every outcome, including failures, is returned as a SearchResponse.
A failure at any hop discards whatever earlier hops produced.
"""
import asyncio
import enum
import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from metafield_search.clients.catalog_port import CatalogClient
from metafield_search.core.exceptions import (
    MetafieldSearchException,
    UpstreamTimeoutError,
    ValidationError,
)
from metafield_search.schemas.search import MetaobjectMatch, SearchResponse
from metafield_search.services.metaobject_index import MetaobjectIndexBuilder
from metafield_search.services.parent_scanner import ParentReferenceScanner
from metafield_search.services.sku_matcher import SkuMatcher

logger = logging.getLogger(__name__)

NO_PRODUCT_MATCH_MESSAGE = "No products found with that SKU"
NO_METAOBJECT_MATCH_MESSAGE = "SKU found in products but not used in any metaobjects"


class ResolverState(str, enum.Enum):
    START = "start"
    MATCHING_SKU = "matching_sku"
    BUILDING_INDEX = "building_index"
    SCANNING_PARENTS = "scanning_parents"
    # Terminal
    VALIDATION_ERROR = "validation_error"
    NO_PRODUCT_MATCH = "no_product_match"
    NO_METAOBJECT_MATCH = "no_metaobject_match"
    DONE = "done"
    FAILED = "failed"


@dataclass
class Resolution:
    state: ResolverState
    response: SearchResponse


class _Run:
    """Per-request state; tracks the current state for logging and failure reporting."""

    def __init__(self, searched_sku: str) -> None:
        self.searched_sku = searched_sku
        self.state = ResolverState.START

    def enter(self, state: ResolverState) -> None:
        logger.debug("resolver sku=%s %s -> %s", self.searched_sku, self.state.value, state.value)
        self.state = state


class ReferenceResolver:
    def __init__(
        self,
        client: CatalogClient,
        metaobject_types: Sequence[str] = ("add_ons", "options"),
        deadline_seconds: Optional[float] = None,
    ) -> None:
        self._matcher = SkuMatcher(client)
        self._index_builder = MetaobjectIndexBuilder(client, metaobject_types)
        self._scanner = ParentReferenceScanner(client)
        self._deadline = deadline_seconds

    async def search(self, sku: Optional[str]) -> SearchResponse:
        """Resolve a SKU token into its reverse references."""
        resolution = await self.resolve(sku)
        return resolution.response

    async def resolve(self, sku: Optional[str]) -> Resolution:
        run = _Run((sku or "").strip())
        try:
            if self._deadline:
                try:
                    return await asyncio.wait_for(self._resolve(run, sku), timeout=self._deadline)
                except asyncio.TimeoutError:
                    raise UpstreamTimeoutError("Shopify", f"search exceeded {self._deadline}s deadline")
            return await self._resolve(run, sku)
        except ValidationError as exc:
            run.enter(ResolverState.VALIDATION_ERROR)
            logger.info("resolver rejected sku=%r error=%s", sku, exc)
            return Resolution(run.state, self._error_response(run, exc))
        except MetafieldSearchException as exc:
            failed_in = run.state
            run.enter(ResolverState.FAILED)
            logger.warning(
                "resolver failed sku=%s state=%s kind=%s error=%s",
                run.searched_sku, failed_in.value, exc.kind, exc,
            )
            return Resolution(run.state, self._error_response(run, exc))

    async def _resolve(self, run: _Run, sku: Optional[str]) -> Resolution:
        run.enter(ResolverState.MATCHING_SKU)
        matched = await self._matcher.match(sku)
        run.searched_sku = matched.token

        if not matched.matches:
            run.enter(ResolverState.NO_PRODUCT_MATCH)
            return Resolution(run.state, SearchResponse(
                searched_sku=matched.token,
                message=NO_PRODUCT_MATCH_MESSAGE,
            ))

        found = matched.found_products()

        run.enter(ResolverState.BUILDING_INDEX)
        index = await self._index_builder.build()
        relevant = index.relevant_to(matched.product_ids)

        if not relevant:
            run.enter(ResolverState.NO_METAOBJECT_MATCH)
            return Resolution(run.state, SearchResponse(
                searched_sku=matched.token,
                found_in_products=found,
                message=NO_METAOBJECT_MATCH_MESSAGE,
            ))

        run.enter(ResolverState.SCANNING_PARENTS)
        scan = await self._scanner.scan(entry.metaobject_id for entry in relevant)

        results = [
            MetaobjectMatch(
                metaobject_id=entry.metaobject_id,
                metaobject_name=entry.display_name,
                metaobject_type=entry.source_type,
                parent_products=scan.for_metaobject(entry.metaobject_id),
            )
            for entry in relevant
        ]

        run.enter(ResolverState.DONE)
        logger.info(
            "resolver done sku=%s products=%s metaobjects=%s parents=%s",
            matched.token, len(found), len(results), len(scan.parents),
        )
        return Resolution(run.state, SearchResponse(
            searched_sku=matched.token,
            found_in_products=found,
            results=results,
        ))

    @staticmethod
    def _error_response(run: _Run, exc: MetafieldSearchException) -> SearchResponse:
        return SearchResponse(
            searched_sku=run.searched_sku,
            error=str(exc),
            error_kind=exc.kind,
        )
