"""Domain models and DTOs."""

from src.domain.pantry import PantryItem, Priority, RecordState, ShoppingListItem
from src.domain.recipe import (
    Ingredient,
    Recipe,
    RecipeIngredient,
    RecipeIngredientRelation,
    RecipeWithIngredients,
    UsageIngredient,
)


__all__ = [
    "Ingredient",
    "PantryItem",
    "Priority",
    "Recipe",
    "RecipeIngredient",
    "RecipeIngredientRelation",
    "RecipeWithIngredients",
    "RecordState",
    "ShoppingListItem",
    "UsageIngredient",
]
