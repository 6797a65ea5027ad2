"""Map tools: set_viewport, get_annotations, filter_venues, select_venue."""

import json

from mcp.server.fastmcp import FastMCP
from mcp.types import ToolAnnotations
from pydantic import ValidationError

from ..controller import controller
from ..state import ViewportBounds
from ._prereqs import require_state


def register_viewport_tools(mcp: FastMCP):

    @mcp.tool(annotations=ToolAnnotations(readOnlyHint=False, destructiveHint=False))
    async def set_viewport(
        center_lat: float,
        center_lon: float,
        lat_span: float = 0.2,
        lon_span: float = 0.2,
    ) -> str:
        """Move the map and recompute the visible venue markers.

        The viewport is the rectangle center +/- span/2 on each axis; venues on
        the edge count as visible. At most 1000 markers are shown, taken in
        venue id order.
        **Next:** get_annotations to read the markers, select_venue for details.

        Args:
            center_lat: Viewport center latitude (degrees).
            center_lon: Viewport center longitude (degrees).
            lat_span: Visible latitude span in degrees (default 0.2).
            lon_span: Visible longitude span in degrees (default 0.2).
        """
        try:
            bounds = ViewportBounds(
                center_lat=center_lat, center_lon=center_lon,
                lat_span=lat_span, lon_span=lon_span,
            )
        except ValidationError as e:
            return f"Error: invalid viewport: {e.errors()[0]['msg']}"

        await controller.viewport_changed(bounds)
        s = controller.state
        result = (
            f"Viewport: lat {bounds.min_lat:.5f}..{bounds.max_lat:.5f}, "
            f"lon {bounds.min_lon:.5f}..{bounds.max_lon:.5f}. "
            f"{len(s.annotations)} marker(s) visible"
        )
        if s.too_many_markers:
            result += f" (too many markers, showing the first {controller.marker_limit}; zoom in)"
        if not s.full_collection:
            result += ". No venues loaded yet, call load_venues"
        return result + "."

    @mcp.tool(annotations=ToolAnnotations(readOnlyHint=True))
    def get_annotations() -> str:
        """Return the markers for the current viewport as JSON.

        Each marker has id (venue id), coordinate {lat, lon} and title.
        """
        s = controller.state
        return json.dumps({
            "too_many_markers": s.too_many_markers,
            "annotations": [a.model_dump() for a in s.annotations],
        }, indent=2)

    @mcp.tool(annotations=ToolAnnotations(readOnlyHint=False, destructiveHint=True))
    async def filter_venues(region: str | None = None, authority: str | None = None) -> str:
        """Narrow the loaded venues to one region and, optionally, one local authority.

        Matching is exact. The filter replaces the loaded collection, so filters
        stack; run load_venues again to get every venue back.
        **Requires:** load_venues first.

        Args:
            region: Region (county) name from list_regions. Empty leaves venues as they are.
            authority: Local authority name from list_authorities.
        """
        try:
            require_state(controller.state, venues=True, idle=True)
        except ValueError as e:
            return f"Error: {e}"
        if authority and not region:
            return "Error: authority requires a region."

        before = len(controller.state.full_collection)
        await controller.filter_venues(region, authority)
        s = controller.state
        return (
            f"Venues filtered: {len(s.full_collection)} of {before} kept. "
            f"{len(s.annotations)} marker(s) visible."
        )

    @mcp.tool(annotations=ToolAnnotations(readOnlyHint=False, destructiveHint=False))
    async def select_venue(venue_id: int | None = None) -> str:
        """Select a venue by marker id and return its full record.

        Call with no id to clear the selection.
        **Requires:** load_venues first.

        Args:
            venue_id: The id of a marker from get_annotations.
        """
        try:
            require_state(controller.state, venues=True)
        except ValueError as e:
            return f"Error: {e}"

        venue = await controller.select_venue(venue_id)
        if venue_id is None:
            return "Selection cleared."
        if venue is None:
            return f"Error: No loaded venue with id {venue_id}."
        return json.dumps(venue.model_dump(), indent=2)
