"""
Pagination: cursor loop over a page-fetching coroutine.

Pages are requested one at a time: each cursor comes from the previous
response, so there is nothing to fan out. Items keep upstream document
order across pages.
"""
import logging
from typing import Awaitable, Callable, List, Optional, TypeVar

from metafield_search.core.exceptions import DecodeError
from metafield_search.schemas.catalog import Page

T = TypeVar("T")

logger = logging.getLogger(__name__)

PageFetcher = Callable[[Optional[str]], Awaitable[Page[T]]]


async def collect_pages(fetch_page: PageFetcher, *, label: str = "collection") -> List[T]:
    """
    Fetch every page of a collection and return all items in order.

    Errors raised by `fetch_page` propagate unchanged; nothing is retried here.
    """
    items: List[T] = []
    cursor: Optional[str] = None
    page_number = 0

    while True:
        page = await fetch_page(cursor)
        page_number += 1
        items.extend(page.items)
        logger.debug("%s page=%s items=%s has_next=%s", label, page_number, len(page.items), page.has_next_page)

        if not page.has_next_page:
            break
        if not page.next_cursor:
            raise DecodeError(f"{label} page {page_number} reports more pages but no cursor")
        if page.next_cursor == cursor:
            raise DecodeError(f"{label} cursor did not advance after page {page_number}")
        cursor = page.next_cursor

    logger.info("%s fetched pages=%s items=%s", label, page_number, len(items))
    return items
