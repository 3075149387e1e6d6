"""
Paginated Feed Fetcher

Retrieves a complete remote feed by requesting pages with an increasing
offset until an empty page comes back.
"""

import logging
from typing import Any, Awaitable, Callable, Dict, List, Optional

logger = logging.getLogger(__name__)

PageFetcher = Callable[[int], Awaitable[Optional[List[Dict[str, Any]]]]]


class PaginatedFeedFetcher:
    """
    Sequential offset pagination over a page-fetching coroutine.

    The page function returns a list of raw items, an empty list at the end
    of the feed, or None when the request failed. A failure ends the run
    like an empty page would: there is no retry and whatever was collected
    so far is returned.

    Usage:
        fetcher = PaginatedFeedFetcher(client.query_products)
        items = await fetcher.fetch_all()
    """

    PAGE_SIZE = 100

    def __init__(self, fetch_page: PageFetcher, page_size: int = PAGE_SIZE, name: str = "feed"):
        """
        Args:
            fetch_page: Coroutine function taking an offset
            page_size: Offset increment after each non-empty page
            name: Feed name for log messages
        """
        self.fetch_page = fetch_page
        self.page_size = page_size
        self.name = name
        self.pages_requested = 0
        self.truncated = False

    async def fetch_all(self) -> List[Dict[str, Any]]:
        """
        Fetch every page, one request at a time.

        Returns:
            All items in page order (possibly partial, see `truncated`)
        """
        items: List[Dict[str, Any]] = []
        offset = 0
        self.pages_requested = 0
        self.truncated = False

        while True:
            page = await self.fetch_page(offset)
            self.pages_requested += 1

            if page is None:
                # Known gap: a transient failure is indistinguishable from end of feed downstream
                self.truncated = True
                logger.warning("%s: request failed at offset %d, stopping with %d items (feed may be truncated)",
                               self.name, offset, len(items))
                break

            if not page:
                break

            items.extend(page)
            offset += self.page_size

        logger.info("%s: fetched %d items in %d requests", self.name, len(items), self.pages_requested)
        return items
