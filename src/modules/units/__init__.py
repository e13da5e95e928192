"""Units module for cooking unit conversion."""

from typing import TYPE_CHECKING


if TYPE_CHECKING:
    from mcp.server.fastmcp import FastMCP
    from pydantic_ai import Agent

    from src.agents.base import Deps

from src.core.module import ConfigField


class UnitsModule:
    """Units module providing cooking unit conversion and reference tables. Needs no configuration."""

    @property
    def name(self) -> str:
        """Module name (unique identifier)."""
        return "units"

    @property
    def description(self) -> str:
        """Module description (human-readable)."""
        return "Cooking unit conversion"

    def register_tools(self, agent: "Agent[Deps, str]") -> None:
        """Register tools with the agent instance."""
        import src.modules.units.tools

        src.modules.units.tools.register_tools(agent)

    def register_mcp(self, server: "FastMCP") -> None:
        """Register tools with the MCP server."""
        import src.modules.units.tools

        for tool in src.modules.units.tools.TOOLS:
            server.add_tool(tool, name=tool.__name__.removeprefix("tool_"))

    def get_system_prompt_section(self) -> str:
        """Return the system prompt section for this module."""
        import src.modules.units.prompt

        return src.modules.units.prompt.UNITS_PROMPT_SECTION

    def get_config_fields(self) -> list[ConfigField]:
        """Return configuration fields for this module."""
        return []
