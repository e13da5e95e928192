"""Unit tests for cooking reconciliation."""

import pytest

from src.core import notion_client
from src.core import notion_properties as props
from src.core.config import settings
from src.domain.pantry import PantryItem, Priority
from src.domain.recipe import UsageIngredient
from src.services import cooking_service, pantry_service


@pytest.fixture
def seed_recipe_ingredient(monkeypatch, patched_db):
    """Configure the recipe-ingredient database and return a factory for relation rows."""
    monkeypatch.setattr(settings, "notion_recipe_ingredients_db", "db-recipe-ingredients")

    def _seed(recipe_id: str, name: str, quantity: float, unit: str = "count", *, optional: bool = False) -> str:
        return patched_db.seed(
            "recipe_ingredients",
            {
                "Name": props.title(name),
                "Recipe": props.relation([recipe_id]),
                "Quantity": props.number(quantity),
                "Unit": props.select(unit),
                "Optional": props.checkbox(optional),
            },
        )

    return _seed


def _use(name: str, quantity: float, *, optional: bool = False) -> UsageIngredient:
    return UsageIngredient(name=name, quantity=quantity, is_optional=optional)


@pytest.mark.unit
class TestApplyUsage:
    """Tests for the pure apply_usage planner."""

    def _eggs(self, quantity: float = 12, min_quantity: float | None = 6) -> PantryItem:
        return PantryItem(id="eggs", name="Eggs", quantity=quantity, unit="count", is_staple=True, min_quantity=min_quantity)

    def test_crossing_minimum_flags_replenish(self):
        """Test dropping from above to at-or-below the minimum flags the item."""
        plan = cooking_service.apply_usage([self._eggs()], [_use("eggs", 7)])

        assert len(plan.changes) == 1
        change = plan.changes[0]
        assert (change.before, change.after, change.used) == (12, 5, 7)
        assert change.replenish is True

    def test_already_below_minimum_does_not_flag(self):
        """Test an item already at or below its minimum is not flagged again."""
        plan = cooking_service.apply_usage([self._eggs(quantity=4, min_quantity=5)], [_use("Eggs", 1)])

        assert plan.changes[0].after == 3
        assert plan.changes[0].replenish is False

    def test_quantity_clamped_at_zero(self):
        """Test using more than is on hand leaves zero."""
        plan = cooking_service.apply_usage([self._eggs(quantity=2)], [_use("Eggs", 5)])

        assert plan.changes[0].after == 0

    def test_non_staple_never_flags(self):
        """Test only staples are replenished."""
        saffron = PantryItem(id="s", name="Saffron", quantity=2, unit="g")

        plan = cooking_service.apply_usage([saffron], [_use("Saffron", 2)])

        assert plan.changes[0].after == 0
        assert plan.changes[0].replenish is False

    def test_optional_and_unknown_ingredients(self):
        """Test optional lines are skipped and unknown names reported."""
        plan = cooking_service.apply_usage(
            [self._eggs()],
            [_use("Eggs", 1, optional=True), _use("Dragon Fruit", 1)],
        )

        assert plan.changes == []
        assert plan.not_found == ["Dragon Fruit"]

    def test_duplicate_lines_deduct_twice_and_flag_once(self):
        """Test the running snapshot carries between lines for the same item."""
        plan = cooking_service.apply_usage([self._eggs()], [_use("Eggs", 4), _use("eggs", 4)])

        assert [(c.before, c.after) for c in plan.changes] == [(12, 8), (8, 4)]
        assert [c.replenish for c in plan.changes] == [False, True]

    def test_replenish_disabled(self):
        """Test replenish=False never flags."""
        plan = cooking_service.apply_usage([self._eggs()], [_use("Eggs", 7)], replenish=False)

        assert plan.changes[0].replenish is False


@pytest.mark.unit
class TestUpdatePantryAfterCooking:
    """Tests for update_pantry_after_cooking."""

    async def test_staple_crossing_adds_to_shopping_list(self, patched_db, seed_pantry):
        """Test eggs going 12 -> 5 with minimum 6 enqueue 6 eggs."""
        seed_pantry("Eggs", 12, category="Dairy & Eggs", is_staple=True, min_quantity=6)

        result = await cooking_service.update_pantry_after_cooking(ingredients=[_use("Eggs", 7)])

        assert result.auto_added == ["Eggs"]
        pantry = await pantry_service.get_pantry_items()
        assert pantry[0].quantity == 5

        shopping = await pantry_service.get_shopping_list()
        assert len(shopping) == 1
        assert shopping[0].name == "Eggs"
        assert shopping[0].quantity == 6
        assert shopping[0].priority == Priority.MEDIUM
        assert shopping[0].is_auto_added is True
        assert shopping[0].category == "Dairy & Eggs"

    async def test_replenishment_fires_only_on_the_crossing_run(self, patched_db, seed_pantry):
        """Test 6 -> 4 (minimum 5) enqueues once; a later 4 -> 3 does not."""
        seed_pantry("Eggs", 6, is_staple=True, min_quantity=5)

        first = await cooking_service.update_pantry_after_cooking(ingredients=[_use("Eggs", 2)])
        second = await cooking_service.update_pantry_after_cooking(ingredients=[_use("Eggs", 1)])

        assert first.auto_added == ["Eggs"]
        assert second.auto_added == []
        assert len(patched_db.pages("shopping_list")) == 1

    async def test_restock_then_cross_again_adds_a_second_entry(self, patched_db, seed_pantry):
        """Test runs are not de-duplicated against existing shopping list entries."""
        seed_pantry("Eggs", 6, is_staple=True, min_quantity=5)

        await cooking_service.update_pantry_after_cooking(ingredients=[_use("Eggs", 2)])
        await pantry_service.add_pantry_item(name="Eggs", quantity=8, unit="count", category="Pantry Staples")
        await cooking_service.update_pantry_after_cooking(ingredients=[_use("Eggs", 8)])

        assert len(patched_db.pages("shopping_list")) == 2

    async def test_skip_shopping_list(self, patched_db, seed_pantry):
        """Test add_to_shopping_list=False only deducts."""
        seed_pantry("Eggs", 12, is_staple=True, min_quantity=6)

        result = await cooking_service.update_pantry_after_cooking(
            ingredients=[_use("Eggs", 7)], add_to_shopping_list=False
        )

        assert result.auto_added == []
        assert patched_db.pages("shopping_list") == []

    async def test_unknown_ingredients_reported(self, patched_db, seed_pantry):
        """Test names with no pantry match are returned, not raised."""
        seed_pantry("Rice", 4, "cup")

        result = await cooking_service.update_pantry_after_cooking(
            ingredients=[_use("Rice", 1), _use("Truffle", 1)]
        )

        assert [c.name for c in result.changes] == ["Rice"]
        assert result.not_found == ["Truffle"]
        assert result.recipe_name is None
        assert result.marked_tried is False

    async def test_recipe_run_deducts_and_marks_tried(self, patched_db, seed_pantry, seed_recipe, seed_recipe_ingredient):
        """Test a recipe's relation rows drive the deduction and the recipe is marked tried."""
        seed_pantry("Pasta", 16, "oz")
        seed_pantry("Parmesan", 1, "cup")
        recipe_id = seed_recipe("Cacio e Pepe", tags=["dinner"])
        seed_recipe_ingredient(recipe_id, "Pasta", 8, "oz")
        seed_recipe_ingredient(recipe_id, "Parmesan", 0.5, "cup")
        seed_recipe_ingredient(recipe_id, "Lemon", 1, optional=True)

        result = await cooking_service.update_pantry_after_cooking(recipe_id=recipe_id)

        assert result.recipe_name == "Cacio e Pepe"
        assert result.marked_tried is True
        assert result.not_found == []
        quantities = {item.name: item.quantity for item in await pantry_service.get_pantry_items()}
        assert quantities == {"Parmesan": 0.5, "Pasta": 8}

        recipe_page = patched_db.pages("recipes")[0]
        assert recipe_page["properties"]["Tried?"]["checkbox"] is True

    async def test_already_tried_recipe_not_rewritten(self, patched_db, seed_pantry, seed_recipe, seed_recipe_ingredient):
        """Test marked_tried is False when the recipe was already tried."""
        seed_pantry("Pasta", 16, "oz")
        recipe_id = seed_recipe("Pasta Bake", tried=True)
        seed_recipe_ingredient(recipe_id, "Pasta", 8, "oz")

        result = await cooking_service.update_pantry_after_cooking(recipe_id=recipe_id)

        assert result.marked_tried is False
        assert ("update", "recipes") not in patched_db.writes()

    async def test_unknown_recipe_raises(self, patched_db):
        """Test a missing recipe raises RecipeNotFoundError."""
        with pytest.raises(cooking_service.RecipeNotFoundError):
            await cooking_service.update_pantry_after_cooking(recipe_id="no-such-recipe")

    async def test_no_input_raises(self, patched_db):
        """Test a call with neither recipe nor ingredients is rejected."""
        with pytest.raises(ValueError, match="recipe_id or ingredients"):
            await cooking_service.update_pantry_after_cooking()

    async def test_failed_write_reports_partial_progress(self, patched_db, seed_pantry):
        """Test a store failure mid-run surfaces the writes that already landed."""
        seed_pantry("Eggs", 12, is_staple=True, min_quantity=6)
        rice_id = seed_pantry("Rice", 4, "cup")
        patched_db.fail_update_ids.add(rice_id)

        with pytest.raises(cooking_service.ReconciliationError) as exc_info:
            await cooking_service.update_pantry_after_cooking(ingredients=[_use("Eggs", 7), _use("Rice", 1)])

        error = exc_info.value
        assert [c.name for c in error.applied] == ["Eggs"]
        assert error.auto_added == ["Eggs"]
        assert "409" in str(error)

        quantities = {item.name: item.quantity for item in await pantry_service.get_pantry_items()}
        assert quantities == {"Eggs": 5, "Rice": 4}

    async def test_unconfigured_shopping_list_keeps_partial_progress(self, patched_db, seed_pantry, monkeypatch):
        """Test a configuration error while adding to the shopping list still reports saved writes."""
        seed_pantry("Eggs", 12, is_staple=True, min_quantity=6)
        monkeypatch.setattr(settings, "notion_shopping_list_db", None)

        async def create_checked(*, collection, data):
            notion_client.get_database_id(collection)
            return await patched_db.create_record(collection=collection, data=data)

        monkeypatch.setattr("src.core.notion_client.create_record", create_checked)

        with pytest.raises(cooking_service.ReconciliationError) as exc_info:
            await cooking_service.update_pantry_after_cooking(ingredients=[_use("Eggs", 7)])

        error = exc_info.value
        assert [c.name for c in error.applied] == ["Eggs"]
        assert error.auto_added == []
        assert isinstance(error.__cause__, ValueError)
        assert "NOTION_SHOPPING_LIST_DB" in str(error)

        eggs = await pantry_service.get_pantry_items()
        assert eggs[0].quantity == 5
