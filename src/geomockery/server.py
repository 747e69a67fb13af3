"""MCP server for geomockery.

Registers all tools and runs via stdio transport.
"""

import json

from mcp.server.fastmcp import FastMCP

from .state import state
from .tools.area import register_area_tools
from .tools.attributes import register_attribute_tools
from .tools.generate import register_generate_tools
from .tools.export import register_export_tools
from .tools.session import register_session_tools
from .tools.status import register_status_tools

mcp = FastMCP(
    "geomockery",
    instructions=(
        "Generate synthetic point, line and polygon features with random attributes "
        "inside a bounding box or drawn/uploaded area, and export them as GeoJSON"
    ),
)

# Register all tool groups
register_area_tools(mcp)
register_attribute_tools(mcp)
register_generate_tools(mcp)
register_export_tools(mcp)
register_session_tools(mcp)
register_status_tools(mcp)


@mcp.resource("state://session")
def session_state() -> str:
    """Current session summary as JSON."""
    return json.dumps(state.summary(), indent=2)


def main():
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
