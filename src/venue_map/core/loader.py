"""Paginated bulk loading of the full venue collection."""

import logging
from typing import Awaitable, Callable, Optional

from venue_map.models import VenueRecord

logger = logging.getLogger(__name__)

PAGE_SIZE = 1000
MAX_PAGES = 100

FetchPage = Callable[[int, int], Awaitable[list[VenueRecord]]]
ProgressCallback = Callable[[int, int], Awaitable[None]]


async def fetch_all_venues(
    fetch_page: FetchPage,
    page_size: int = PAGE_SIZE,
    max_pages: int = MAX_PAGES,
    on_progress: Optional[ProgressCallback] = None,
) -> list[VenueRecord]:
    """Fetch venues page by page until a short page or max_pages.

    fetch_page(offset, limit) is awaited once per page. After every page
    on_progress(pages_fetched, max_pages) is awaited; the fraction is
    relative to max_pages, not to the true dataset size.

    Any exception from fetch_page propagates; nothing accumulated so far is
    returned.
    """
    if page_size <= 0 or max_pages <= 0:
        raise ValueError("page_size and max_pages must be positive")

    venues: list[VenueRecord] = []
    page = 0
    while page < max_pages:
        offset = page * page_size
        batch = await fetch_page(offset, page_size)
        venues.extend(batch)
        logger.debug(
            "Fetched venue page %d (rows %d-%d): %d record(s)",
            page, offset, offset + page_size - 1, len(batch),
        )
        if on_progress is not None:
            await on_progress(page + 1, max_pages)
        if len(batch) < page_size:
            break
        page += 1

    return venues
