"""Pantry, recipe and shopping list tools.

Every tool returns text. Store failures are caught here, logged, and turned into
a short message; nothing raises out to the agent or MCP client.
"""

import json
import logging
from datetime import date
from itertools import groupby
from typing import Literal

import logfire
from pydantic import BaseModel, Field
from pydantic_ai import Agent

from src.agents.base import Deps
from src.core.config import constants
from src.core.errors import format_tool_error
from src.domain.pantry import PantryItem, Priority
from src.domain.recipe import UsageIngredient
from src.services import cooking_service, pantry_service, recipe_service


logger = logging.getLogger(__name__)

# Raised by the Notion client (DatabaseError, RecordNotFoundError), by settings
# validation (ValueError), and by connectivity checks.
STORE_ERRORS = (RuntimeError, KeyError, ValueError, ConnectionError)

STAPLE_MARK = " ★"
_PRIORITY_MARK = {Priority.HIGH: "(!) ", Priority.MEDIUM: "", Priority.LOW: "(low) "}


def fmt(value: float) -> str:
    """Render a quantity without a trailing '.0'."""
    return f"{value:g}"


def _expiry_text(expiry: date, today: date) -> str:
    days = (expiry - today).days
    if days == 0:
        return "expires today"
    if days == 1:
        return "expires tomorrow"
    return f"expires in {days} days"


class GetPantryInfo(BaseModel):
    """Parameters for viewing the pantry."""

    include_expiring_soon: bool = Field(default=True, description="Include items that will expire soon")
    include_staples_low: bool = Field(default=True, description="Include staple items that are running low")
    sort_by: Literal["name", "category", "expiry"] = Field(default="category", description="How to sort the items")
    category: str | None = Field(default=None, description="Only show items in this category")


class GetPantryAndRecipes(BaseModel):
    """Parameters for fetching pantry and recipe data for meal planning."""

    filter_by_tag: str | None = Field(default=None, description="Only recipes with this tag (e.g., 'Breakfast')")
    include_tried_only: bool = Field(default=False, description="Only recipes that have been cooked before")
    max_recipes: int = Field(default=constants.DEFAULT_MAX_RECIPES, ge=1, description="Maximum recipes to return")


class AddPantryItem(BaseModel):
    """Parameters for adding stock to the pantry."""

    name: str = Field(description="Name of the item", min_length=1)
    quantity: float = Field(description="Quantity being added", gt=0)
    unit: str = Field(description="Unit of measurement (e.g., 'count', 'pounds')")
    category: str = Field(description="Category (e.g., 'Produce', 'Dairy & Eggs')")
    location: str = Field(default=constants.DEFAULT_LOCATION, description="Where the item is stored")
    expiry_date: date | None = Field(default=None, description="Expiry date (YYYY-MM-DD)")
    is_staple: bool = Field(default=False, description="Keep this item in stock")
    min_quantity: float | None = Field(default=None, ge=0, description="Minimum to keep on hand (staples only)")


class UpdatePantryAfterCooking(BaseModel):
    """Parameters for deducting used ingredients from the pantry."""

    recipe_id: str | None = Field(default=None, description="ID of the recipe that was cooked")
    ingredients: list[UsageIngredient] | None = Field(
        default=None,
        description="Ingredients used, when not cooking a saved recipe",
    )
    add_to_shopping_list: bool = Field(
        default=True,
        description="Automatically add staples that run low to the shopping list",
    )


class RemoveExpiredItems(BaseModel):
    """Parameters for the expiry sweep."""

    cutoff_date: date | None = Field(default=None, description="Remove items expiring on or before this date")
    dry_run: bool = Field(default=False, description="Only list expired items without removing them")
    add_replacements: bool = Field(default=True, description="Add expired staples back to the shopping list")


class AddToShoppingList(BaseModel):
    """Parameters for adding an item to the shopping list."""

    name: str | None = Field(default=None, description="Name of the item to add")
    quantity: float | None = Field(default=None, gt=0, description="Quantity to buy")
    unit: str | None = Field(default=None, description="Unit of measurement")
    category: str | None = Field(default=None, description="Category of the item")
    priority: Priority = Field(default=Priority.MEDIUM, description="Low, Medium or High")


class MarkItemPurchased(BaseModel):
    """Parameters for marking a shopping list item as purchased."""

    item_id: str | None = Field(default=None, description="ID of the shopping list item")


def format_pantry_info(params: GetPantryInfo, items: list[PantryItem], *, today: date) -> str:
    if params.sort_by == "name":
        items = sorted(items, key=lambda item: item.name.lower())
    elif params.sort_by == "expiry":
        items = sorted(items, key=lambda item: (item.expiry_date is None, item.expiry_date or today, item.name.lower()))
    else:
        items = sorted(items, key=lambda item: (item.category.lower(), item.name.lower()))

    lines = [f"# {params.category} Inventory" if params.category else "# Current Pantry Inventory", ""]

    if params.include_expiring_soon:
        expiring = pantry_service.get_expiring_soon(items, today=today)
        if expiring:
            lines.append("## Expiring Soon")
            lines.extend(
                f"- **{item.name}**: {fmt(item.quantity)} {item.unit} ({_expiry_text(item.expiry_date, today)})"
                for item in expiring
                if item.expiry_date is not None
            )
            lines.append("")

    if params.include_staples_low:
        low = pantry_service.get_low_staples(items)
        if low:
            lines.append("## Staples Running Low")
            for item in low:
                percent = round(item.quantity / item.min_quantity * 100) if item.min_quantity else 0
                lines.append(
                    f"- **{item.name}**: {fmt(item.quantity)} {item.unit} "
                    f"({percent}% of minimum {fmt(item.min_quantity or 0)} {item.unit})"
                )
            lines.append("")

    def describe(item: PantryItem, *, with_category: bool) -> str:
        category = f" ({item.category})" if with_category else ""
        location = f" [{item.location}]" if item.location and with_category else ""
        expiry = f" (expires {item.expiry_date.isoformat()})" if item.expiry_date else ""
        staple = STAPLE_MARK if item.is_staple else ""
        return f"- **{item.name}**{category}: {fmt(item.quantity)} {item.unit}{location}{expiry}{staple}"

    if params.sort_by == "category" and not params.category:
        for _, grouped in groupby(items, key=lambda item: item.category.lower()):
            group = list(grouped)
            lines.append(f"## {group[0].category or 'Uncategorized'}")
            lines.extend(describe(item, with_category=False) for item in group)
            lines.append("")
    else:
        if not params.category:
            lines.append("## All Items")
        lines.extend(describe(item, with_category=not params.category) for item in items)
        lines.append("")

    lines.append(f"Total items: {len(items)}")
    lines.append("")
    lines.append(f"*Legend:{STAPLE_MARK} = Staple item*")
    return "\n".join(lines)


async def tool_get_pantry_info(params: GetPantryInfo) -> str:
    """
    Get the current pantry inventory, highlighting items expiring soon and staples running low.

    Use when a user asks what's in the pantry, what's about to go off, or what's running low.

    Args:
        params: Display options

    Returns:
        Markdown inventory
    """
    try:
        with logfire.span("tool_get_pantry_info", sort_by=params.sort_by, category=params.category or ""):
            items = await pantry_service.get_pantry_items(category=params.category)
            return format_pantry_info(params, items, today=date.today())
    except STORE_ERRORS as e:
        logger.error("Failed to get pantry info", extra={"error": str(e)})
        return format_tool_error("retrieve pantry information", e)


async def tool_get_pantry_and_recipes(params: GetPantryAndRecipes) -> str:
    """
    Get the pantry inventory and recipes (with ingredients) as JSON for meal planning.

    Use when a user asks what they can cook, or wants meal ideas from what they have.

    Args:
        params: Recipe filters

    Returns:
        Heading followed by a JSON document with "pantry" and "recipes"
    """
    try:
        with logfire.span("tool_get_pantry_and_recipes", tag=params.filter_by_tag or ""):
            pantry = await pantry_service.get_pantry_items()
            recipes = await recipe_service.get_recipes_with_ingredients(tag=params.filter_by_tag)
            if params.include_tried_only:
                recipes = [entry for entry in recipes if entry.recipe.tried]
            recipes = recipes[: params.max_recipes]

            payload = {
                "pantry": [
                    {
                        "name": item.name,
                        "quantity": item.quantity,
                        "unit": item.unit,
                        "category": item.category,
                        "expiry": item.expiry_date.isoformat() if item.expiry_date else None,
                    }
                    for item in pantry
                ],
                "recipes": [
                    {
                        "id": entry.recipe.id,
                        "name": entry.recipe.name,
                        "tried": entry.recipe.tried,
                        "tags": entry.recipe.tags,
                        "link": entry.recipe.link,
                        "ingredients": [
                            {
                                "name": ingredient.name,
                                "quantity": ingredient.quantity,
                                "unit": ingredient.unit,
                                "optional": ingredient.is_optional,
                            }
                            for ingredient in entry.ingredients
                        ],
                    }
                    for entry in recipes
                ],
            }
            return (
                "# Pantry and Recipe Data\n\n"
                "Here is the current pantry inventory and available recipes. "
                "Use it to suggest meals that can be made with available ingredients.\n\n"
                f"{json.dumps(payload, indent=2)}"
            )
    except STORE_ERRORS as e:
        logger.error("Failed to get pantry and recipes", extra={"error": str(e)})
        return format_tool_error("retrieve pantry and recipe data", e)


async def tool_add_pantry_item(params: AddPantryItem) -> str:
    """
    Add stock to the pantry.

    If an item with the same name already exists its quantity is increased instead
    of creating a duplicate. New staples without a minimum default to 20% of the
    quantity added (rounded up).

    Args:
        params: Item details

    Returns:
        Summary of the added or updated item
    """
    try:
        with logfire.span("tool_add_pantry_item", item=params.name):
            item, merged = await pantry_service.add_pantry_item(
                name=params.name,
                quantity=params.quantity,
                unit=params.unit,
                category=params.category,
                location=params.location,
                expiry_date=params.expiry_date,
                is_staple=params.is_staple,
                min_quantity=params.min_quantity,
            )

            if merged:
                lines = [
                    "# Item Updated in Pantry",
                    "",
                    f"**{item.name}** has been updated. Quantity increased by {fmt(params.quantity)} {params.unit}.",
                    "",
                    "## Updated Details",
                    f"- Quantity: {fmt(item.quantity)} {item.unit}",
                    f"- Location: {item.location}",
                    f"- Category: {item.category}",
                ]
            else:
                lines = [
                    "# Item Added to Pantry",
                    "",
                    f"**{item.name}** has been added to your pantry in the {item.category} category.",
                    "",
                    "## Details",
                    f"- Quantity: {fmt(item.quantity)} {item.unit}",
                    f"- Location: {item.location}",
                ]
            if item.expiry_date:
                lines.append(f"- Expires: {item.expiry_date.isoformat()}")
            if item.is_staple:
                lines.append("- Staple item: Yes")
                if item.min_quantity:
                    lines.append(f"- Minimum quantity: {fmt(item.min_quantity)} {item.unit}")
            return "\n".join(lines)
    except STORE_ERRORS as e:
        logger.error("Failed to add pantry item", extra={"item_name": params.name, "error": str(e)})
        return format_tool_error("add pantry item", e)


def format_cooking_result(result: cooking_service.CookingResult) -> str:
    lines = ["# Pantry Updated", ""]
    if result.recipe_name:
        lines.append(f"Your pantry has been updated after preparing **{result.recipe_name}**.")
    else:
        lines.append("Your pantry has been updated.")
    lines.append("")

    lines.append("## Ingredients Used")
    if result.changes:
        lines.extend(
            f"- **{change.name}**: used {fmt(change.used)} {change.unit} (remaining: {fmt(change.after)} {change.unit})"
            for change in result.changes
        )
    else:
        lines.append("No ingredients were used from your pantry.")
    lines.append("")

    if result.not_found:
        lines.append("## Not in Pantry")
        lines.extend(f"- {name}" for name in result.not_found)
        lines.append("")

    if result.auto_added:
        lines.append("## Added to Shopping List")
        lines.extend(f"- **{name}** (staple item running low)" for name in result.auto_added)
        lines.append("")

    if result.marked_tried:
        lines.append("This was your first time trying this recipe. It has been marked as tried.")
    return "\n".join(lines).rstrip() + "\n"


async def tool_update_pantry_after_cooking(params: UpdatePantryAfterCooking) -> str:
    """
    Deduct the ingredients of a cooked meal from the pantry.

    Give either a recipe_id or an explicit ingredients list. Optional ingredients
    are skipped; quantities never go below zero. Staples that drop to or below
    their minimum are added to the shopping list.

    Args:
        params: Recipe ID or ingredient list

    Returns:
        Before/after summary of the pantry changes
    """
    if not params.recipe_id and not params.ingredients:
        return "Missing input: provide either a recipe_id or a list of ingredients used."

    try:
        with logfire.span("tool_update_pantry_after_cooking", recipe_id=params.recipe_id or ""):
            result = await cooking_service.update_pantry_after_cooking(
                recipe_id=params.recipe_id,
                ingredients=params.ingredients,
                add_to_shopping_list=params.add_to_shopping_list,
            )
            return format_cooking_result(result)
    except cooking_service.RecipeNotFoundError:
        return f"Recipe with ID {params.recipe_id} not found."
    except cooking_service.ReconciliationError as e:
        message = format_tool_error("finish updating the pantry", e.__cause__ or e)
        if e.applied:
            applied = ", ".join(f"{change.name} ({fmt(change.before)} -> {fmt(change.after)})" for change in e.applied)
            message += f" Changes already saved: {applied}."
        if e.auto_added:
            message += f" Added to shopping list: {', '.join(e.auto_added)}."
        return message
    except STORE_ERRORS as e:
        logger.error("Failed to update pantry after cooking", extra={"error": str(e)})
        return format_tool_error("update pantry", e)


async def tool_remove_expired_items(params: RemoveExpiredItems) -> str:
    """
    Remove pantry items that have expired and optionally re-add expired staples to the shopping list.

    Use dry_run to list what would be removed without changing anything.

    Args:
        params: Cutoff date and options

    Returns:
        Summary of expired items and replacements
    """
    try:
        with logfire.span("tool_remove_expired_items", dry_run=params.dry_run):
            result = await pantry_service.remove_expired_items(
                cutoff=params.cutoff_date,
                dry_run=params.dry_run,
                add_replacements=params.add_replacements,
            )

            if not result.expired:
                return f"No items expired on or before {result.cutoff.isoformat()}."

            heading = "# Expired Items (dry run)" if params.dry_run else "# Expired Items Removed"
            lines = [heading, ""]
            lines.extend(
                f"- **{item.name}**: {fmt(item.quantity)} {item.unit} "
                f"(expired {item.expiry_date.isoformat() if item.expiry_date else 'unknown'})"
                f"{STAPLE_MARK if item.is_staple else ''}"
                for item in result.expired
            )
            lines.append("")
            if params.dry_run:
                lines.append("Nothing was removed. Run again without dry_run to remove these items.")
            elif result.replacements:
                lines.append("## Added to Shopping List (High priority)")
                lines.extend(f"- **{name}**" for name in result.replacements)
            return "\n".join(lines)
    except STORE_ERRORS as e:
        logger.error("Failed to remove expired items", extra={"error": str(e)})
        return format_tool_error("remove expired items", e)


async def tool_view_shopping_list() -> str:
    """
    View the shopping list grouped by category.

    Returns:
        Markdown shopping list with purchase state and item IDs
    """
    try:
        with logfire.span("tool_view_shopping_list"):
            items = await pantry_service.get_shopping_list()
            if not items:
                return "# Shopping List\n\nYour shopping list is empty."

            lines = ["# Shopping List", ""]
            by_category = sorted(items, key=lambda item: item.category.lower())
            for _, grouped in groupby(by_category, key=lambda item: item.category.lower()):
                group = list(grouped)
                lines.append(f"## {group[0].category or 'Uncategorized'}")
                for item in group:
                    check = "[x]" if item.is_purchased else "[ ]"
                    lines.append(
                        f"- {check} {_PRIORITY_MARK[item.priority]}**{item.name}**: "
                        f"{fmt(item.quantity)} {item.unit} (id: {item.id})"
                    )
                lines.append("")

            purchased = sum(1 for item in items if item.is_purchased)
            lines.append(f"Total items: {len(items)} ({purchased} purchased)")
            return "\n".join(lines)
    except STORE_ERRORS as e:
        logger.error("Failed to view shopping list", extra={"error": str(e)})
        return format_tool_error("retrieve shopping list", e)


async def tool_add_to_shopping_list(params: AddToShoppingList) -> str:
    """
    Add an item to the shopping list.

    If the same item is already on the list and not yet purchased, the quantities
    are added together.

    Args:
        params: Item name, quantity, unit, category and priority

    Returns:
        Success or error message
    """
    missing = [field for field in ("name", "quantity", "unit", "category") if not getattr(params, field)]
    if missing:
        return (
            "Missing required fields for adding an item: "
            f"{', '.join(missing)}. Please provide name, quantity, unit, and category."
        )

    try:
        with logfire.span("tool_add_to_shopping_list", item=params.name):
            item, merged = await pantry_service.add_to_shopping_list(
                name=params.name or "",
                quantity=params.quantity or 0,
                unit=params.unit or "",
                category=params.category or "",
                priority=params.priority,
            )
            if merged:
                return f"**{item.name}** is already on the list. Quantity increased to {fmt(item.quantity)} {item.unit}."
            return (
                f"**{item.name}** ({fmt(item.quantity)} {item.unit}) has been added to your shopping list "
                f"in the {item.category} category."
            )
    except STORE_ERRORS as e:
        logger.error("Failed to add to shopping list", extra={"item_name": params.name, "error": str(e)})
        return format_tool_error("add item to shopping list", e)


async def tool_mark_item_purchased(params: MarkItemPurchased) -> str:
    """
    Mark a shopping list item as purchased.

    Args:
        params: Shopping list item ID (shown by view_shopping_list)

    Returns:
        Confirmation or error message
    """
    if not params.item_id:
        return "Missing item ID. Please provide the ID of the item to mark as purchased."

    try:
        with logfire.span("tool_mark_item_purchased", item_id=params.item_id):
            item = await pantry_service.mark_as_purchased(item_id=params.item_id)
            return (
                f"**{item.name}** has been marked as purchased. "
                "Use transfer_purchased_to_pantry to move purchased items into the pantry."
            )
    except KeyError:
        return f"Shopping list item with ID {params.item_id} not found."
    except STORE_ERRORS as e:
        logger.error("Failed to mark item purchased", extra={"item_id": params.item_id, "error": str(e)})
        return format_tool_error("mark item as purchased", e)


async def tool_transfer_purchased_to_pantry() -> str:
    """
    Move every purchased shopping list item into the pantry and clear it from the list.

    Returns:
        Summary of merged and newly created pantry items
    """
    try:
        with logfire.span("tool_transfer_purchased_to_pantry"):
            result = await pantry_service.transfer_purchased_items()
            if not result.total:
                return "There are no purchased items on the shopping list."

            lines = ["# Purchased Items Added to Pantry", ""]
            lines.extend(f"- **{name}**: quantity increased" for name in result.merged)
            lines.extend(f"- **{name}**: new pantry item" for name in result.created)
            lines.append("")
            lines.append(f"{result.total} item(s) moved to the pantry and removed from the shopping list.")
            return "\n".join(lines)
    except STORE_ERRORS as e:
        logger.error("Failed to transfer purchased items", extra={"error": str(e)})
        return format_tool_error("add purchased items to the pantry", e)


TOOLS = [
    tool_get_pantry_info,
    tool_get_pantry_and_recipes,
    tool_add_pantry_item,
    tool_update_pantry_after_cooking,
    tool_remove_expired_items,
    tool_view_shopping_list,
    tool_add_to_shopping_list,
    tool_mark_item_purchased,
    tool_transfer_purchased_to_pantry,
]


def register_tools(agent: Agent[Deps, str]) -> None:
    """Register tools with the agent."""
    for tool in TOOLS:
        agent.tool_plain(tool)
