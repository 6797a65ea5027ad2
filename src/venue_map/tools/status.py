"""Status tool: get_status."""

import json
from mcp.server.fastmcp import FastMCP
from mcp.types import ToolAnnotations

from ..controller import controller


def register_status_tools(mcp: FastMCP):

    @mcp.tool(annotations=ToolAnnotations(readOnlyHint=True))
    def get_status() -> str:
        """Return a summary of the current map state.

        Shows how many venues are loaded, loading progress and errors, the
        viewport, and how many markers are visible.
        """
        return json.dumps(controller.state.summary(), indent=2)
