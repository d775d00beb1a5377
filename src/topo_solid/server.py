"""MCP server for topo-solid.

Registers all tools and runs via stdio transport.
"""

import json

from mcp.server.fastmcp import FastMCP

from .state import state
from .tools.data import register_data_tools
from .tools.model import register_model_tools
from .tools.generate import register_generate_tools
from .tools.export import register_export_tools
from .tools.status import register_status_tools
from .tools.session import register_session_tools

mcp = FastMCP(
    "topo-solid",
    instructions="Turn elevation grids into watertight, elevation-colored solids for 3D printing",
)

# Register all tool groups
register_data_tools(mcp)
register_model_tools(mcp)
register_generate_tools(mcp)
register_export_tools(mcp)
register_status_tools(mcp)
register_session_tools(mcp)


@mcp.resource("state://session")
def session_state() -> str:
    """Current session summary as JSON."""
    return json.dumps(state.summary(), indent=2)


def main():
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
