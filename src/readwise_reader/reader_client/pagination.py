"""
Cursor pagination.

Follows ``nextPageCursor`` until the service stops returning one and
concatenates results in server order. There is no page cap: a server
that never returns an empty cursor keeps the loop running.
"""

import logging
from typing import TYPE_CHECKING, Awaitable, Callable, Optional, TypeVar

from ..schemas.document import Document, ListDocumentsParams

if TYPE_CHECKING:
    from .client import ReaderClient

logger = logging.getLogger(__name__)

T = TypeVar("T")

PageFetcher = Callable[[Optional[str]], Awaitable[tuple[list[T], Optional[str]]]]


async def fetch_all(fetch_page: PageFetcher) -> list[T]:
    """Collect every item from a cursor-paginated endpoint.

    Args:
        fetch_page: Coroutine taking a cursor (None for the first page)
            and returning ``(items, next_cursor)``

    Returns:
        All items, in page order
    """
    items: list[T] = []
    cursor: Optional[str] = None
    pages = 0
    while True:
        page_items, cursor = await fetch_page(cursor)
        items.extend(page_items)
        pages += 1
        if not cursor:
            break
    logger.debug("Fetched %d items across %d pages", len(items), pages)
    return items


async def fetch_all_documents(
    client: "ReaderClient", params: ListDocumentsParams
) -> list[Document]:
    """Fetch the complete result set for a query.

    Any cursor on ``params`` is ignored; aggregation always starts at the
    first page.
    """

    async def fetch_page(cursor: Optional[str]) -> tuple[list[Document], Optional[str]]:
        response = await client.list_documents(params.with_cursor(cursor))
        return response.data.results, response.data.next_page_cursor

    return await fetch_all(fetch_page)
