"""Pantry module for inventory, recipes, and shopping list management."""

from typing import TYPE_CHECKING


if TYPE_CHECKING:
    from mcp.server.fastmcp import FastMCP
    from pydantic_ai import Agent

    from src.agents.base import Deps

from src.core.module import ConfigField


class PantryModule:
    """Pantry module for inventory, recipes, and shopping list management.

    Provides:
    - Pantry inventory (view, add with merge, expiry sweep)
    - Cooking reconciliation with staple replenishment
    - Shopping list management (add, mark purchased, transfer to pantry)
    - JSON resources for pantry, recipe and shopping list context
    """

    @property
    def name(self) -> str:
        """Module name (unique identifier)."""
        return "pantry"

    @property
    def description(self) -> str:
        """Module description (human-readable)."""
        return "Pantry inventory, recipes and shopping list backed by Notion"

    def register_tools(self, agent: "Agent[Deps, str]") -> None:
        """Register tools with the agent instance."""
        import src.modules.pantry.tools

        src.modules.pantry.tools.register_tools(agent)

    def register_mcp(self, server: "FastMCP") -> None:
        """Register tools and resources with the MCP server."""
        import src.modules.pantry.resources
        import src.modules.pantry.tools

        for tool in src.modules.pantry.tools.TOOLS:
            server.add_tool(tool, name=tool.__name__.removeprefix("tool_"))
        for uri, name, func in src.modules.pantry.resources.RESOURCES:
            server.resource(uri, name=name, description=func.__doc__, mime_type="application/json")(func)

    def get_system_prompt_section(self) -> str:
        """Return the system prompt section for this module."""
        import src.modules.pantry.prompt

        return src.modules.pantry.prompt.PANTRY_PROMPT_SECTION

    def get_config_fields(self) -> list[ConfigField]:
        """Return configuration fields for this module."""
        return [
            ConfigField(name="notion_token", required=True, description="Notion integration token"),
            ConfigField(name="notion_pantry_db", required=True, description="Pantry database ID"),
            ConfigField(name="notion_recipes_db", required=True, description="Recipes database ID"),
            ConfigField(name="notion_shopping_list_db", required=True, description="Shopping list database ID"),
            ConfigField(name="notion_ingredients_db", required=False, description="Ingredient catalogue database ID"),
            ConfigField(
                name="notion_recipe_ingredients_db",
                required=False,
                description="Recipe-ingredient relation database ID",
            ),
        ]
