"""Module Protocol defining the plugin interface for modular architecture."""

from typing import TYPE_CHECKING, Protocol

from pydantic import BaseModel


if TYPE_CHECKING:
    from mcp.server.fastmcp import FastMCP
    from pydantic_ai import Agent

    from src.agents.base import Deps


class ConfigField(BaseModel):
    """Configuration field definition."""

    name: str
    required: bool
    description: str


class Module(Protocol):
    """Protocol defining the interface for feature modules. Self-contained plugins with tools, resources, and config."""

    @property
    def name(self) -> str:
        """Module name (unique identifier)."""
        ...

    @property
    def description(self) -> str:
        """Module description (human-readable)."""
        ...

    def register_tools(self, agent: "Agent[Deps, str]") -> None:
        """Register tools with the agent instance.

        Args:
            agent: Pydantic AI agent instance to register tools with
        """
        ...

    def register_mcp(self, server: "FastMCP") -> None:
        """Register tools and resources with the MCP server.

        Args:
            server: FastMCP server instance
        """
        ...

    def get_system_prompt_section(self) -> str:
        """Return the system prompt section for this module.

        Returns:
            System prompt text describing module capabilities
        """
        ...

    def get_config_fields(self) -> list[ConfigField]:
        """Return configuration fields for this module.

        Returns:
            List of ConfigField definitions (names are Settings attributes)
        """
        ...
