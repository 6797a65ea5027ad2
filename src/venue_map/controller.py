"""Single owner of the published map state.

Every change (viewport moved, page fetched, load finished, region filter,
selection) is posted as a message and applied in arrival order by one
worker task. Subscribers are notified with a snapshot after each message.
"""

import asyncio
import logging
from typing import Awaitable, Callable, Optional, Union

from pydantic import BaseModel

from .config import Settings, settings
from .core.loader import fetch_all_venues, ProgressCallback, PAGE_SIZE, MAX_PAGES
from .core.store import VenueStore
from .core.viewport import visible_annotations, filter_by_region, MARKER_LIMIT
from .models import VenueRecord
from .state import MapState, ViewportBounds, state

logger = logging.getLogger(__name__)

Subscriber = Callable[[MapState], Awaitable[None]]


class LoadStarted(BaseModel):
    pass


class ProgressUpdated(BaseModel):
    progress: float


class LoadSucceeded(BaseModel):
    venues: list[VenueRecord]


class LoadFailed(BaseModel):
    error: str


class ViewportChanged(BaseModel):
    bounds: ViewportBounds


class RegionFilterApplied(BaseModel):
    region: Optional[str] = None
    authority: Optional[str] = None


class VenueSelected(BaseModel):
    venue_id: Optional[int] = None


class RegionsLoaded(BaseModel):
    regions: list[str]


class AuthoritiesLoaded(BaseModel):
    region: str
    authorities: list[str]


class LookupFailed(BaseModel):
    error: str


Message = Union[
    LoadStarted, ProgressUpdated, LoadSucceeded, LoadFailed, ViewportChanged,
    RegionFilterApplied, VenueSelected, RegionsLoaded, AuthoritiesLoaded, LookupFailed,
]


class MapController:
    """Owns a MapState and serializes all writes to it.

    store must provide fetch_venue_page(offset, limit), fetch_regions() and
    fetch_authorities(region) coroutines (see core.store.VenueStore).
    """

    def __init__(
        self, store, state: Optional[MapState] = None,
        page_size: int = PAGE_SIZE, max_pages: int = MAX_PAGES,
        marker_limit: int = MARKER_LIMIT,
    ):
        self.store = store
        self.state = state if state is not None else MapState()
        self.page_size = page_size
        self.max_pages = max_pages
        self.marker_limit = marker_limit
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._inbox: Optional[asyncio.Queue] = None
        self._worker: Optional[asyncio.Task] = None
        self._subscribers: set[Subscriber] = set()

    # -- messaging -----------------------------------------------------

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register an async callback; returns a function that unsubscribes it."""
        self._subscribers.add(callback)
        return lambda: self._subscribers.discard(callback)

    def post(self, message: Message) -> None:
        """Queue a message for the worker. Must be called from the event loop."""
        self._ensure_worker()
        self._inbox.put_nowait(message)

    async def drain(self) -> None:
        """Wait until every message posted so far has been applied."""
        if self._inbox is not None:
            self._ensure_worker()
            await self._inbox.join()

    async def close(self) -> None:
        if self._worker is not None and not self._worker.done():
            self._worker.cancel()
            try:
                await self._worker
            except asyncio.CancelledError:
                pass
        self._worker = None
        self._inbox = None
        self._loop = None

    def _ensure_worker(self) -> None:
        loop = asyncio.get_running_loop()
        if self._loop is not loop:
            # Queue and worker are bound to the loop that created them
            self._loop = loop
            self._inbox = None
            self._worker = None
        if self._inbox is None:
            self._inbox = asyncio.Queue()
        if self._worker is None or self._worker.done():
            self._worker = loop.create_task(self._run())

    async def _run(self) -> None:
        while True:
            message = await self._inbox.get()
            try:
                self._apply(message)
                await self._notify()
            except Exception:
                logger.exception("Failed to apply %s", type(message).__name__)
            finally:
                self._inbox.task_done()

    async def _notify(self) -> None:
        if not self._subscribers:
            return
        snapshot = self.state.model_copy()
        results = await asyncio.gather(
            *[callback(snapshot) for callback in list(self._subscribers)],
            return_exceptions=True,
        )
        for result in results:
            if isinstance(result, Exception):
                logger.warning("Map state subscriber failed: %s", result)

    def _apply(self, message: Message) -> None:
        s = self.state
        if isinstance(message, LoadStarted):
            s.is_loading = True
            s.last_error = None
            s.loading_progress = 0.0
        elif isinstance(message, ProgressUpdated):
            s.loading_progress = message.progress
        elif isinstance(message, LoadSucceeded):
            s.full_collection = message.venues
            self._refresh_markers()
            s.is_loading = False
            s.loading_progress = 1.0
        elif isinstance(message, LoadFailed):
            s.full_collection = []
            s.annotations = []
            s.too_many_markers = False
            s.last_error = message.error
            s.is_loading = False
            s.loading_progress = 0.0
        elif isinstance(message, ViewportChanged):
            s.viewport = message.bounds
            self._refresh_markers()
        elif isinstance(message, RegionFilterApplied):
            s.full_collection = filter_by_region(
                s.full_collection, message.region, message.authority,
            )
            self._refresh_markers()
        elif isinstance(message, VenueSelected):
            s.selected_venue = None
            if message.venue_id is not None:
                s.selected_venue = next(
                    (v for v in s.full_collection if v.id == message.venue_id), None,
                )
        elif isinstance(message, RegionsLoaded):
            s.regions = message.regions
        elif isinstance(message, AuthoritiesLoaded):
            s.authorities_by_region = {
                **s.authorities_by_region, message.region: message.authorities,
            }
        elif isinstance(message, LookupFailed):
            s.last_error = message.error
        else:
            raise TypeError(f"Unknown map message: {type(message).__name__}")

    def _refresh_markers(self) -> None:
        result = visible_annotations(
            self.state.full_collection, self.state.viewport, self.marker_limit,
        )
        self.state.too_many_markers = result.too_many_markers
        self.state.annotations = result.annotations

    # -- operations ----------------------------------------------------

    async def load_venues(self, on_progress: Optional[ProgressCallback] = None) -> bool:
        """Run the bulk load and publish its outcome. Returns True on success.

        Errors are recorded in state.last_error and never raised.
        """
        if self.state.is_loading:
            logger.warning("Venue load requested while another load is in flight")
        self.post(LoadStarted())

        async def report(pages_fetched: int, max_pages: int) -> None:
            self.post(ProgressUpdated(progress=pages_fetched / max_pages))
            if on_progress is not None:
                await on_progress(pages_fetched, max_pages)

        try:
            venues = await fetch_all_venues(
                self.store.fetch_venue_page,
                page_size=self.page_size,
                max_pages=self.max_pages,
                on_progress=report,
            )
        except Exception as exc:
            logger.warning("Venue load failed: %s", exc)
            self.post(LoadFailed(error=str(exc) or type(exc).__name__))
            await self.drain()
            return False

        logger.info("Loaded %d venue(s)", len(venues))
        self.post(LoadSucceeded(venues=venues))
        await self.drain()
        return True

    async def viewport_changed(self, bounds: ViewportBounds) -> None:
        self.post(ViewportChanged(bounds=bounds))
        await self.drain()

    async def filter_venues(self, region: Optional[str], authority: Optional[str] = None) -> None:
        self.post(RegionFilterApplied(region=region, authority=authority))
        await self.drain()

    async def select_venue(self, venue_id: Optional[int]) -> Optional[VenueRecord]:
        self.post(VenueSelected(venue_id=venue_id))
        await self.drain()
        return self.state.selected_venue

    async def load_regions(self) -> Optional[list[str]]:
        """Fetch the region list into state. Returns None if the lookup failed."""
        try:
            regions = await self.store.fetch_regions()
        except Exception as exc:
            logger.warning("Region lookup failed: %s", exc)
            self.post(LookupFailed(error=f"Failed to fetch regions: {exc}"))
            await self.drain()
            return None
        self.post(RegionsLoaded(regions=regions))
        await self.drain()
        return regions

    async def load_authorities(self, region: str) -> Optional[list[str]]:
        try:
            authorities = await self.store.fetch_authorities(region)
        except Exception as exc:
            logger.warning("Authority lookup for %s failed: %s", region, exc)
            self.post(LookupFailed(error=f"Failed to fetch authorities: {exc}"))
            await self.drain()
            return None
        self.post(AuthoritiesLoaded(region=region, authorities=authorities))
        await self.drain()
        return authorities


def build_controller(config: Settings = settings, map_state: Optional[MapState] = None) -> MapController:
    store = VenueStore(
        base_url=config.store_url,
        api_key=config.store_key,
        venue_table=config.venue_table,
        timeout=config.request_timeout,
    )
    if map_state is None:
        map_state = MapState()
    map_state.viewport = ViewportBounds(
        center_lat=config.default_center_lat,
        center_lon=config.default_center_lon,
        lat_span=config.default_span,
        lon_span=config.default_span,
    )
    return MapController(
        store=store, state=map_state,
        page_size=config.page_size,
        max_pages=config.max_pages,
        marker_limit=config.marker_limit,
    )


# Global controller owning the global map state
controller = build_controller(map_state=state)
