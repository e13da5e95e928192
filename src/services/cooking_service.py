"""Cooking reconciliation: deduct used ingredients from the pantry and replenish staples.

The plan is computed by ``apply_usage`` without I/O, then written item by item.
Notion has no transactions, so a failed write leaves earlier writes in place;
``ReconciliationError`` reports which ones landed.
"""

import logging

from pydantic import BaseModel, Field

from src.core.logging import span
from src.domain.pantry import PantryItem, Priority
from src.domain.recipe import RecipeIngredient, UsageIngredient
from src.services import pantry_service, recipe_service


logger = logging.getLogger(__name__)


class IngredientChange(BaseModel):
    """Before/after quantities for one pantry item touched by a cooking run."""

    item_id: str
    name: str
    before: float
    after: float
    unit: str
    replenish: bool = Field(default=False, description="Crossed to or below its staple minimum in this step")
    min_quantity: float | None = None
    category: str = ""

    @property
    def used(self) -> float:
        return self.before - self.after


class UsagePlan(BaseModel):
    """Changes computed from a usage list against a pantry snapshot."""

    changes: list[IngredientChange] = Field(default_factory=list)
    not_found: list[str] = Field(default_factory=list)


class CookingResult(BaseModel):
    """Everything a cooking run changed."""

    recipe_name: str | None = None
    changes: list[IngredientChange] = Field(default_factory=list)
    auto_added: list[str] = Field(default_factory=list)
    not_found: list[str] = Field(default_factory=list)
    marked_tried: bool = False


class RecipeNotFoundError(LookupError):
    """Raised when a cooking run names a recipe that does not exist."""


class ReconciliationError(RuntimeError):
    """A store write failed part-way through a cooking run."""

    def __init__(self, message: str, *, applied: list[IngredientChange], auto_added: list[str]) -> None:
        super().__init__(message)
        self.applied = applied
        self.auto_added = auto_added


def crosses_minimum(item: PantryItem, before: float, after: float) -> bool:
    """True when a staple moves from above its minimum to at or below it."""
    return item.is_staple and item.min_quantity is not None and before > item.min_quantity and after <= item.min_quantity


def apply_usage(
    pantry: list[PantryItem],
    usage: list[UsageIngredient],
    *,
    replenish: bool = True,
) -> UsagePlan:
    """Compute the pantry changes for a usage list.

    Optional ingredients are skipped. Names match case-insensitively and exactly.
    Quantities never drop below zero. The snapshot is updated as it goes, so an
    ingredient listed twice deducts twice and crosses its minimum at most once.
    """
    quantities = {item.id: item.quantity for item in pantry}
    plan = UsagePlan()

    for ingredient in usage:
        if ingredient.is_optional:
            continue

        item = pantry_service.find_by_name(pantry, ingredient.name)
        if item is None:
            plan.not_found.append(ingredient.name)
            continue

        before = quantities[item.id]
        after = max(0, before - ingredient.quantity)
        quantities[item.id] = after
        plan.changes.append(
            IngredientChange(
                item_id=item.id,
                name=item.name,
                before=before,
                after=after,
                unit=item.unit,
                replenish=replenish and crosses_minimum(item, before, after),
                min_quantity=item.min_quantity,
                category=item.category,
            )
        )

    return plan


def _usage_from_recipe(ingredients: list[RecipeIngredient]) -> list[UsageIngredient]:
    return [
        UsageIngredient(
            name=ingredient.name,
            quantity=ingredient.quantity,
            unit=ingredient.unit,
            is_optional=ingredient.is_optional,
        )
        for ingredient in ingredients
    ]


async def update_pantry_after_cooking(
    *,
    recipe_id: str | None = None,
    ingredients: list[UsageIngredient] | None = None,
    add_to_shopping_list: bool = True,
) -> CookingResult:
    """Deduct a recipe's (or an explicit list's) ingredients from the pantry.

    Staples that cross their minimum are added to the shopping list with
    quantity equal to the minimum. Recipe-driven runs mark the recipe tried.

    Args:
        recipe_id: Recipe whose ingredient list to use
        ingredients: Explicit usage list, used when no recipe_id is given
        add_to_shopping_list: Set False to skip staple replenishment

    Returns:
        CookingResult describing every change

    Raises:
        ValueError: If neither recipe_id nor ingredients is given
        RecipeNotFoundError: If recipe_id does not exist
        ReconciliationError: If a store write fails after the run started
    """
    with span("cooking_service.update_pantry_after_cooking", recipe_id=recipe_id or ""):
        recipe = None
        if recipe_id:
            recipe = await recipe_service.get_recipe_with_ingredients(recipe_id=recipe_id)
            if recipe is None:
                raise RecipeNotFoundError(recipe_id)
            usage = _usage_from_recipe(recipe.ingredients)
        elif ingredients:
            usage = ingredients
        else:
            msg = "Either recipe_id or ingredients is required"
            raise ValueError(msg)

        pantry = await pantry_service.get_pantry_items()
        plan = apply_usage(pantry, usage, replenish=add_to_shopping_list)

        result = CookingResult(
            recipe_name=recipe.recipe.name if recipe else None,
            not_found=plan.not_found,
        )
        try:
            for change in plan.changes:
                await pantry_service.update_pantry_item(item_id=change.item_id, quantity=change.after)
                result.changes.append(change)

                if change.replenish and change.min_quantity is not None:
                    await pantry_service.create_shopping_list_item(
                        name=change.name,
                        quantity=change.min_quantity,
                        unit=change.unit,
                        category=change.category,
                        priority=Priority.MEDIUM,
                        is_auto_added=True,
                    )
                    result.auto_added.append(change.name)

            if recipe is not None:
                result.marked_tried = await recipe_service.mark_recipe_tried(recipe=recipe.recipe)
        except (RuntimeError, KeyError, ValueError, ConnectionError) as e:
            logger.error(
                "Cooking reconciliation aborted",
                extra={"applied": len(result.changes), "planned": len(plan.changes), "error": str(e)},
            )
            raise ReconciliationError(str(e), applied=result.changes, auto_added=result.auto_added) from e

        logger.info(
            "Pantry updated after cooking",
            extra={
                "recipe": result.recipe_name,
                "changed": len(result.changes),
                "auto_added": len(result.auto_added),
                "not_found": len(result.not_found),
            },
        )
        return result
