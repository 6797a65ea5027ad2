"""Data acquisition tools: load_venues, list_venues, list_regions, list_authorities."""

import json
import logging

from mcp.server.fastmcp import FastMCP, Context
from mcp.types import ToolAnnotations

from ..controller import controller
from ..core.store import StoreError

logger = logging.getLogger(__name__)


def register_data_tools(mcp: FastMCP):

    @mcp.tool(annotations=ToolAnnotations(readOnlyHint=False, destructiveHint=True, openWorldHint=True))
    async def load_venues(ctx: Context) -> str:
        """Load every venue from the store into memory and refresh the map markers.

        Pages through the Venue table (1000 rows per page, at most 100 pages).
        Replaces any previously loaded collection, including a region filter.
        Reports progress once per page.
        **Next:** set_viewport to move the map, or filter_venues to narrow by region.
        """
        max_pages = controller.max_pages
        ok = await controller.load_venues(on_progress=ctx.report_progress)
        s = controller.state
        if not ok:
            return f"Error: venue load failed: {s.last_error}"

        await ctx.report_progress(max_pages, max_pages)
        markers = f"{len(s.annotations)} marker(s) in the current viewport"
        if s.too_many_markers:
            markers += f" (too many markers, showing the first {controller.marker_limit})"
        return f"Venues loaded: {len(s.full_collection)} record(s). {markers}."

    @mcp.tool(annotations=ToolAnnotations(readOnlyHint=True, openWorldHint=True))
    async def list_venues(page: int = 0, page_size: int = 20) -> str:
        """Return one page of venues straight from the store, ordered by id.

        Independent of the in-memory map collection; use it for list views.

        Args:
            page: 0-based page number.
            page_size: Rows per page (1-1000, default 20).
        """
        if page < 0:
            return "Error: page must be 0 or greater."
        page_size = max(1, min(1000, page_size))
        try:
            venues = await controller.store.fetch_venue_page(page * page_size, page_size)
        except StoreError as e:
            return f"Error: {e}"
        return json.dumps([v.model_dump() for v in venues], indent=2)

    @mcp.tool(annotations=ToolAnnotations(readOnlyHint=False, destructiveHint=False, openWorldHint=True))
    async def list_regions() -> str:
        """List the distinct regions (counties) venues are in.

        **Next:** list_authorities for a region, or filter_venues.
        """
        regions = await controller.load_regions()
        if regions is None:
            return f"Error: {controller.state.last_error}"
        return json.dumps(regions)

    @mcp.tool(annotations=ToolAnnotations(readOnlyHint=False, destructiveHint=False, openWorldHint=True))
    async def list_authorities(region: str) -> str:
        """List the local authorities within one region.

        Args:
            region: Exact region (county) name as returned by list_regions.
        """
        if not region.strip():
            return "Error: region must not be empty."
        authorities = await controller.load_authorities(region)
        if authorities is None:
            return f"Error: {controller.state.last_error}"
        if not authorities:
            logger.debug("No authorities found for region %r", region)
            return f"No local authorities found for '{region}'."
        return json.dumps(authorities)
