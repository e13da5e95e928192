"""MCP server exposing the pantry tools and resources.

Mounted by the FastAPI app for streamable HTTP, or run directly for stdio:

    python -m src.interface.mcp_server
"""

import logging

from mcp.server.fastmcp import FastMCP

from src.core.logging import configure_logfire
from src.core.module_registry import get_modules, register_default_modules


logger = logging.getLogger(__name__)

MCP_INSTRUCTIONS = (
    "Tools and resources for a household pantry, recipe collection and shopping list stored in Notion. "
    "Item names are matched exactly, ignoring case."
)


def create_mcp_server() -> FastMCP:
    """Build a FastMCP server with every registered module's tools and resources."""
    register_default_modules()
    server = FastMCP("pantry-assistant", instructions=MCP_INSTRUCTIONS)
    for module in get_modules().values():
        module.register_mcp(server)
        logger.debug("Registered module with MCP server", extra={"module": module.name})
    return server


mcp = create_mcp_server()


if __name__ == "__main__":
    configure_logfire()
    mcp.run()
