"""MCP server for venue-map.

Registers all tools and runs via stdio transport.
"""

import json

from mcp.server.fastmcp import FastMCP

from .controller import controller
from .tools.data import register_data_tools
from .tools.viewport import register_viewport_tools
from .tools.status import register_status_tools

mcp = FastMCP(
    "venue-map",
    instructions="Browse a venue directory on a map: load venues, move the viewport, filter by region",
)

# Register all tool groups
register_data_tools(mcp)
register_viewport_tools(mcp)
register_status_tools(mcp)


@mcp.resource("state://map")
def map_state() -> str:
    """Current map state summary as JSON."""
    return json.dumps(controller.state.summary(), indent=2)


def main():
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
