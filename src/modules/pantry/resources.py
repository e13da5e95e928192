"""Read-only JSON context resources for the pantry, recipes and shopping list."""

import functools
import json
import logging
from collections import Counter
from collections.abc import Awaitable, Callable
from datetime import date
from typing import Any, ParamSpec

import logfire

from src.core.config import constants
from src.domain.pantry import PantryItem
from src.modules.pantry.tools import STORE_ERRORS
from src.services import pantry_service, recipe_service


logger = logging.getLogger(__name__)

P = ParamSpec("P")


def json_resource(error_message: str) -> Callable[[Callable[P, Awaitable[Any]]], Callable[P, Awaitable[str]]]:
    """Serialize a resource's result to JSON and turn store failures into ``{"error": ...}``."""

    def decorator(func: Callable[P, Awaitable[Any]]) -> Callable[P, Awaitable[str]]:
        @functools.wraps(func)
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> str:
            try:
                with logfire.span(f"resource.{func.__name__}"):
                    payload = await func(*args, **kwargs)
            except STORE_ERRORS as e:
                logger.error(error_message, extra={"resource": func.__name__, "error": str(e)})
                payload = {"error": error_message}
            return json.dumps(payload, indent=2, default=str)

        return wrapper

    return decorator


def _item_summary(item: PantryItem) -> dict[str, Any]:
    return {
        "id": item.id,
        "name": item.name,
        "quantity": f"{item.quantity:g} {item.unit}".strip(),
        "category": item.category,
        "location": item.location,
        "expiry": item.expiry_date.isoformat() if item.expiry_date else "No expiry",
    }


def _staple_status(item: PantryItem) -> str:
    if not item.is_staple:
        return "Not a staple item"
    return "Low" if item.is_low else "Good"


@json_resource("Failed to fetch pantry items")
async def pantry_summary() -> dict[str, Any]:
    """Pantry overview: counts by category, staples, expiring and low items, and every item."""
    items = await pantry_service.get_pantry_items()
    stats = pantry_service.compute_pantry_stats(items)
    return {
        "total": stats.total_items,
        "categories": sorted(stats.categories),
        "category_counts": stats.categories,
        "staple_count": stats.staple_count,
        "expiring_items_count": stats.expiring_soon_count,
        "low_staple_items_count": stats.low_staple_count,
        "items": [_item_summary(item) for item in items],
    }


@json_resource("Failed to generate pantry statistics")
async def pantry_stats() -> dict[str, Any]:
    """Breakdown of the pantry by category and location, with expiring and low staples."""
    items = await pantry_service.get_pantry_items()
    stats = pantry_service.compute_pantry_stats(items)
    total_quantity = sum(item.quantity for item in items)
    return {
        "total_items": stats.total_items,
        "total_quantity": total_quantity,
        "average_quantity": round(total_quantity / len(items), 2) if items else 0,
        "category_breakdown": stats.categories,
        "location_breakdown": stats.locations,
        "expiring_soon_count": stats.expiring_soon_count,
        "expired_count": stats.expired_count,
        "staples_low_count": stats.low_staple_count,
        "expiring_soon": [
            {"name": item.name, "expiry_date": item.expiry_date}
            for item in pantry_service.get_expiring_soon(items)
        ],
        "staples_low": [
            {"name": item.name, "quantity": item.quantity, "min_quantity": item.min_quantity}
            for item in pantry_service.get_low_staples(items)
        ],
    }


@json_resource("Failed to fetch pantry categories")
async def pantry_categories() -> list[str]:
    """Sorted list of categories in use."""
    items = await pantry_service.get_pantry_items()
    return sorted({item.category for item in items if item.category})


@json_resource("Failed to fetch pantry item")
async def pantry_item(item_id: str) -> dict[str, Any]:
    """A single pantry item with display-ready quantity, expiry and staple status."""
    item = await pantry_service.get_pantry_item(item_id=item_id)
    if item is None:
        return {"error": f"Item with ID {item_id} not found"}
    return {
        **item.model_dump(mode="json"),
        "formatted_quantity": f"{item.quantity:g} {item.unit}".strip(),
        "formatted_expiry": item.expiry_date.isoformat() if item.expiry_date else "No expiry date",
        "staple_status": _staple_status(item),
    }


@json_resource("Failed to fetch pantry items for category")
async def pantry_category(category: str) -> dict[str, Any]:
    """Items in one category."""
    items = await pantry_service.get_pantry_items(category=category)
    return {
        "category": category,
        "count": len(items),
        "items": [_item_summary(item) for item in items],
    }


@json_resource("Failed to fetch recipes")
async def recipes() -> dict[str, Any]:
    """All recipes with tags, tried state and link."""
    all_recipes = await recipe_service.get_recipes()
    return {
        "total": len(all_recipes),
        "tried_count": sum(1 for recipe in all_recipes if recipe.tried),
        "recipes": [
            {
                "id": recipe.id,
                "name": recipe.name,
                "tried": recipe.tried,
                "tags": recipe.tags,
                "link": recipe.link,
                "url": recipe.notion_url,
            }
            for recipe in all_recipes
        ],
    }


@json_resource("Failed to generate recipe suggestions")
async def recipe_suggestions() -> dict[str, Any]:
    """Recipes ranked by how much of each the pantry covers."""
    pantry = await pantry_service.get_pantry_items()
    suggestions = await recipe_service.suggest_meals(pantry=pantry, max_results=constants.DEFAULT_SUGGESTION_COUNT)
    return {
        "suggestions": [
            {
                "id": entry.recipe.id,
                "name": entry.recipe.name,
                "tags": entry.recipe.tags,
                "match_percentage": round(recipe_service.match_ratio(entry, pantry) * 100),
                "can_make": recipe_service.can_make_recipe(entry, pantry),
                "missing_ingredients": [
                    missing.model_dump() for missing in recipe_service.get_missing_ingredients(entry, pantry)
                ],
            }
            for entry in suggestions
        ],
    }


@json_resource("Failed to fetch recipe tags")
async def recipe_tags() -> dict[str, int]:
    """Every recipe tag with the number of recipes carrying it, most used first."""
    all_recipes = await recipe_service.get_recipes()
    counts = Counter(tag for recipe in all_recipes for tag in recipe.tags)
    return dict(counts.most_common())


@json_resource("Failed to fetch recipe")
async def recipe(recipe_id: str) -> dict[str, Any]:
    """One recipe with per-ingredient pantry availability."""
    entry = await recipe_service.get_recipe_with_ingredients(recipe_id=recipe_id)
    if entry is None:
        return {"error": f"Recipe with ID {recipe_id} not found"}

    pantry = await pantry_service.get_pantry_items()
    ingredients = []
    for ingredient in entry.ingredients:
        item = pantry_service.find_by_name(pantry, ingredient.name)
        have = item.quantity if item else 0
        ingredients.append(
            {
                **ingredient.model_dump(exclude={"recipe_id"}),
                "in_pantry": have,
                "available": have >= ingredient.quantity,
            }
        )
    return {
        **entry.recipe.model_dump(mode="json"),
        "ingredients": ingredients,
        "can_make": recipe_service.can_make_recipe(entry, pantry),
        "missing_ingredients": [
            missing.model_dump() for missing in recipe_service.get_missing_ingredients(entry, pantry)
        ],
    }


@json_resource("Failed to fetch recipes for tag")
async def recipes_by_tag(tag: str) -> dict[str, Any]:
    tagged = await recipe_service.get_recipes(tag=tag)
    return {
        "tag": tag,
        "count": len(tagged),
        "recipes": [{"id": recipe.id, "name": recipe.name, "tried": recipe.tried} for recipe in tagged],
    }


@json_resource("Failed to fetch shopping list")
async def shopping_list() -> dict[str, Any]:
    """Shopping list items grouped by category, with purchase counts."""
    items = await pantry_service.get_shopping_list()
    by_category: dict[str, list[dict[str, Any]]] = {}
    for item in items:
        by_category.setdefault(item.category or "Uncategorized", []).append(
            {
                "id": item.id,
                "name": item.name,
                "quantity": item.quantity,
                "unit": item.unit,
                "priority": item.priority,
                "purchased": item.is_purchased,
                "auto_added": item.is_auto_added,
                "notes": item.notes,
            }
        )
    purchased = sum(1 for item in items if item.is_purchased)
    return {
        "total": len(items),
        "purchased": purchased,
        "remaining": len(items) - purchased,
        "generated_on": date.today(),
        "categories": by_category,
    }


# (uri, name, function)
RESOURCES: list[tuple[str, str, Callable[..., Awaitable[str]]]] = [
    ("pantry://summary", "pantry", pantry_summary),
    ("pantry://stats", "pantry_stats", pantry_stats),
    ("pantry://categories", "pantry_categories", pantry_categories),
    ("pantry-item://{item_id}", "pantry_item", pantry_item),
    ("pantry-category://{category}", "pantry_category", pantry_category),
    ("recipes://all", "recipes", recipes),
    ("recipes://suggestions", "recipe_suggestions", recipe_suggestions),
    ("recipes://tags", "recipe_tags", recipe_tags),
    ("recipe://{recipe_id}", "recipe", recipe),
    ("recipes-by-tag://{tag}", "recipes_by_tag", recipes_by_tag),
    ("shopping-list://current", "shopping_list", shopping_list),
]
