"""Cooking unit conversion tools."""

import json
import logging

import logfire
from pydantic import BaseModel, Field
from pydantic_ai import Agent

from src.agents.base import Deps
from src.services import unit_conversion
from src.services.unit_conversion import EquivalentCategory


logger = logging.getLogger(__name__)


class ConvertCookingUnits(BaseModel):
    """Parameters for converting a quantity between cooking units."""

    value: float = Field(description="The quantity to convert", ge=0)
    from_unit: str = Field(description="Unit to convert from (e.g., 'cup', 'tbsp', 'g')")
    to_unit: str = Field(description="Unit to convert to")
    ingredient: str | None = Field(
        default=None,
        description="Ingredient, for volume-to-weight conversions (e.g., 'flour', 'sugar')",
    )


class GetCookingEquivalents(BaseModel):
    """Parameters for the cooking equivalents reference table."""

    category: EquivalentCategory | None = Field(
        default=None,
        description="Only show one table: volume, weight, or ingredients",
    )


async def tool_convert_cooking_units(params: ConvertCookingUnits) -> str:
    """
    Convert a quantity between cooking units, optionally for a specific ingredient.

    Use when a user asks things like:
    - "How many tablespoons in a cup?"
    - "How much does a cup of flour weigh?"
    - "Convert 250 ml to cups"

    Args:
        params: Value, units and optional ingredient

    Returns:
        The converted amount, or an explanation when the units cannot be converted
    """
    with logfire.span("tool_convert_cooking_units", from_unit=params.from_unit, to_unit=params.to_unit):
        converted = unit_conversion.convert_unit(params.value, params.from_unit, params.to_unit, params.ingredient)
        source = f"{params.value:g} {params.from_unit}"

        if converted is None:
            logger.info(
                "Conversion not supported",
                extra={"from_unit": params.from_unit, "to_unit": params.to_unit, "ingredient": params.ingredient},
            )
            ingredient = f" for {params.ingredient}" if params.ingredient else ""
            return (
                f"Unable to convert {source} to {params.to_unit}{ingredient}. This conversion is not supported. "
                "Try using common units like cups, tablespoons, ounces, or grams."
            )

        ingredient = f" of {params.ingredient}" if params.ingredient else ""
        result = unit_conversion.format_quantity(converted)
        return f"# Unit Conversion Result\n\n{source}{ingredient} = {result:g} {params.to_unit}"


async def tool_get_cooking_equivalents(params: GetCookingEquivalents) -> str:
    """
    Get common cooking unit equivalents as reference tables.

    Args:
        params: Optional category filter

    Returns:
        Heading followed by the tables as JSON
    """
    with logfire.span("tool_get_cooking_equivalents", category=params.category or "all"):
        tables = unit_conversion.get_cooking_equivalents(params.category)
        title = "# Common Cooking Equivalents"
        if params.category:
            title = f"# Common {params.category.capitalize()} Cooking Equivalents"
        return (
            f"{title}\n\n"
            "Use these common conversion tables to help with cooking and pantry management.\n\n"
            f"{json.dumps(tables, indent=2)}"
        )


TOOLS = [tool_convert_cooking_units, tool_get_cooking_equivalents]


def register_tools(agent: Agent[Deps, str]) -> None:
    """Register tools with the agent."""
    for tool in TOOLS:
        agent.tool_plain(tool)
