"""
Search routes: reverse metafield reference lookup by SKU.

Provides:
- GET /search-sku?sku=...: metaobjects referencing the matching products,
  and the products referencing those metaobjects
Version: 1.0.0
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from metafield_search.container import get_reference_resolver
from metafield_search.core.exceptions import (
    ConfigurationError,
    DecodeError,
    MetafieldSearchException,
    UpstreamError,
    UpstreamTimeoutError,
    ValidationError,
)
from metafield_search.schemas.search import SearchResponse
from metafield_search.services.reference_resolver import ReferenceResolver

router = APIRouter(tags=["search"])

STATUS_BY_ERROR_KIND = {
    cls.kind: cls.status_code
    for cls in (ValidationError, ConfigurationError, UpstreamError, UpstreamTimeoutError, DecodeError)
}


def status_for(response: SearchResponse) -> int:
    if response.error is None:
        return 200
    return STATUS_BY_ERROR_KIND.get(response.error_kind, MetafieldSearchException.status_code)


@router.get(
    "/search-sku",
    response_model=SearchResponse,
    summary="Find metaobjects and products referencing a SKU",
)
async def search_sku(
    sku: Optional[str] = Query(default=None, description="Full or partial SKU, matched case-insensitively"),
    resolver: ReferenceResolver = Depends(get_reference_resolver),
) -> JSONResponse:
    """Resolve which metaobjects reference the products matching `sku`."""
    response = await resolver.search(sku)
    return JSONResponse(
        status_code=status_for(response),
        content=response.model_dump(mode="json", by_alias=True),
    )
