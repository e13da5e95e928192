"""Recipe service for recipe lookup, ingredient resolution and meal suggestions."""

import asyncio
import logging

from pydantic import BaseModel

from src.core import notion_client
from src.core.config import constants
from src.core.logging import span
from src.domain.pantry import PantryItem
from src.domain.recipe import (
    Ingredient,
    Recipe,
    RecipeIngredient,
    RecipeIngredientRelation,
    RecipeWithIngredients,
    recipe_properties,
)
from src.services.ingredient_generator import generate_ingredients
from src.services.pantry_service import find_by_name


logger = logging.getLogger(__name__)


class MissingIngredient(BaseModel):
    """A required ingredient the pantry cannot fully cover."""

    name: str
    have: float
    need: float
    unit: str


async def get_recipes(*, tag: str | None = None) -> list[Recipe]:
    """Get recipes sorted by name, optionally limited to those carrying ``tag``."""
    with span("recipe_service.get_recipes"):
        filter_query = {"property": "Tags", "multi_select": {"contains": tag}} if tag else None
        records = await notion_client.list_records(
            collection="recipes",
            filter_query=filter_query,
            sorts=[{"property": "Name", "direction": "ascending"}],
        )
        return [Recipe.from_page(record) for record in records]


async def get_recipe(*, recipe_id: str) -> Recipe | None:
    """Get a recipe by ID, or None if it does not exist or has been archived."""
    with span("recipe_service.get_recipe"):
        try:
            record = await notion_client.get_record(collection="recipes", record_id=recipe_id)
        except KeyError:
            return None
        if record.get("archived"):
            return None
        return Recipe.from_page(record)


async def _ingredients_from_relations(recipe: Recipe) -> list[RecipeIngredient]:
    relations = [
        RecipeIngredientRelation.from_page(record)
        for record in await notion_client.list_records(
            collection="recipe_ingredients",
            filter_query={"property": "Recipe", "relation": {"contains": recipe.id}},
        )
    ]

    catalogue: dict[str, Ingredient] = {}
    if notion_client.is_configured("ingredients"):
        ids = {relation.ingredient_id for relation in relations if relation.ingredient_id}
        pages = await asyncio.gather(
            *(notion_client.get_record(collection="ingredients", record_id=ingredient_id) for ingredient_id in ids)
        )
        catalogue = {page["id"]: Ingredient.from_page(page) for page in pages}

    ingredients = []
    for relation in relations:
        linked = catalogue.get(relation.ingredient_id)
        ingredients.append(
            RecipeIngredient(
                recipe_id=recipe.id,
                name=linked.name if linked else relation.name,
                quantity=relation.quantity,
                unit=relation.unit,
                preparation=relation.preparation,
                is_optional=relation.is_optional,
            )
        )
    return ingredients


async def get_ingredients_for_recipe(recipe: Recipe) -> list[RecipeIngredient]:
    """Resolve a recipe's ingredient list.

    Uses the recipe-ingredient relation database when it is configured and has
    entries for the recipe; otherwise falls back to the placeholder generator.
    """
    with span("recipe_service.get_ingredients_for_recipe", recipe=recipe.name):
        if notion_client.is_configured("recipe_ingredients"):
            ingredients = await _ingredients_from_relations(recipe)
            if ingredients:
                return ingredients
            logger.debug("No relation records for recipe, generating", extra={"recipe_id": recipe.id})
        return generate_ingredients(recipe_id=recipe.id, name=recipe.name, tags=recipe.tags)


async def get_recipe_with_ingredients(*, recipe_id: str) -> RecipeWithIngredients | None:
    """Get a recipe together with its ingredients, or None if the recipe does not exist."""
    with span("recipe_service.get_recipe_with_ingredients"):
        recipe = await get_recipe(recipe_id=recipe_id)
        if recipe is None:
            return None
        return RecipeWithIngredients(recipe=recipe, ingredients=await get_ingredients_for_recipe(recipe))


async def get_recipes_with_ingredients(*, tag: str | None = None) -> list[RecipeWithIngredients]:
    with span("recipe_service.get_recipes_with_ingredients"):
        recipes = await get_recipes(tag=tag)
        ingredient_lists = await asyncio.gather(*(get_ingredients_for_recipe(recipe) for recipe in recipes))
        return [
            RecipeWithIngredients(recipe=recipe, ingredients=ingredients)
            for recipe, ingredients in zip(recipes, ingredient_lists, strict=True)
        ]


async def mark_recipe_tried(*, recipe: Recipe) -> bool:
    """Mark a recipe as tried.

    Returns:
        True if the recipe was updated, False if it was already tried
    """
    with span("recipe_service.mark_recipe_tried"):
        if recipe.tried:
            return False
        await notion_client.update_record(
            collection="recipes",
            record_id=recipe.id,
            data=recipe_properties(tried=True),
        )
        logger.info("Marked recipe as tried", extra={"recipe_id": recipe.id, "recipe": recipe.name})
        return True


def get_missing_ingredients(recipe: RecipeWithIngredients, pantry: list[PantryItem]) -> list[MissingIngredient]:
    """Required ingredients the pantry lacks or holds too little of."""
    missing = []
    for ingredient in recipe.ingredients:
        if ingredient.is_optional:
            continue
        item = find_by_name(pantry, ingredient.name)
        have = item.quantity if item else 0
        if have < ingredient.quantity:
            missing.append(MissingIngredient(name=ingredient.name, have=have, need=ingredient.quantity, unit=ingredient.unit))
    return missing


def can_make_recipe(recipe: RecipeWithIngredients, pantry: list[PantryItem]) -> bool:
    return not get_missing_ingredients(recipe, pantry)


def match_ratio(recipe: RecipeWithIngredients, pantry: list[PantryItem]) -> float:
    """Share of a recipe's ingredients that are optional or covered by the pantry."""
    if not recipe.ingredients:
        return 0.0
    covered = 0
    for ingredient in recipe.ingredients:
        item = find_by_name(pantry, ingredient.name)
        if ingredient.is_optional or (item is not None and item.quantity >= ingredient.quantity):
            covered += 1
    return covered / len(recipe.ingredients)


async def suggest_meals(
    *,
    pantry: list[PantryItem],
    max_results: int = constants.DEFAULT_SUGGESTION_COUNT,
) -> list[RecipeWithIngredients]:
    """Rank all recipes by how much of each the pantry covers and return the best."""
    with span("recipe_service.suggest_meals"):
        recipes = await get_recipes_with_ingredients()
        ranked = sorted(recipes, key=lambda recipe: match_ratio(recipe, pantry), reverse=True)
        return ranked[:max_results]
