"""Unit tests for recipe_service."""

import pytest

from src.core import notion_properties as props
from src.core.config import settings
from src.domain.pantry import PantryItem
from src.domain.recipe import Recipe, RecipeIngredient, RecipeWithIngredients
from src.services import recipe_service
from src.services.ingredient_generator import generate_ingredients


def _recipe(name: str, ingredients: list[tuple[str, float]], *, optional: tuple[str, ...] = ()) -> RecipeWithIngredients:
    return RecipeWithIngredients(
        recipe=Recipe(id=name.lower(), name=name),
        ingredients=[
            RecipeIngredient(name=ingredient, quantity=quantity, is_optional=ingredient in optional)
            for ingredient, quantity in ingredients
        ],
    )


def _pantry(**quantities: float) -> list[PantryItem]:
    return [PantryItem(id=name, name=name.replace("_", " ").title(), quantity=q) for name, q in quantities.items()]


@pytest.mark.unit
class TestRecipeLookup:
    """Tests for reading recipes and their ingredients."""

    async def test_get_recipes_sorted_and_filtered_by_tag(self, seed_recipe):
        """Test tag filtering and name ordering."""
        seed_recipe("Waffles", tags=["breakfast"])
        seed_recipe("Chili", tags=["dinner"])
        seed_recipe("Omelette", tags=["breakfast", "quick"])

        everything = await recipe_service.get_recipes()
        breakfast = await recipe_service.get_recipes(tag="breakfast")

        assert [r.name for r in everything] == ["Chili", "Omelette", "Waffles"]
        assert [r.name for r in breakfast] == ["Omelette", "Waffles"]

    async def test_get_recipe_missing_returns_none(self, patched_db):
        """Test an unknown recipe ID gives None."""
        assert await recipe_service.get_recipe(recipe_id="missing") is None

    async def test_get_recipe_archived_returns_none(self, patched_db):
        """Test archived recipes are treated as missing."""
        recipe_id = patched_db.seed("recipes", {"Name": props.title("Gone")}, archived=True)

        assert await recipe_service.get_recipe(recipe_id=recipe_id) is None

    async def test_generated_ingredients_without_relation_database(self, seed_recipe):
        """Test the placeholder list is used when no relation database is configured."""
        recipe_id = seed_recipe("Chicken Soup", tags=["dinner"])

        result = await recipe_service.get_recipe_with_ingredients(recipe_id=recipe_id)

        expected = generate_ingredients(recipe_id=recipe_id, name="Chicken Soup", tags=["dinner"])
        assert result is not None
        assert result.ingredients == expected

    async def test_relation_rows_named_from_catalogue(self, monkeypatch, patched_db, seed_recipe):
        """Test relation rows resolve names through the ingredient catalogue when it is configured."""
        monkeypatch.setattr(settings, "notion_recipe_ingredients_db", "db-recipe-ingredients")
        monkeypatch.setattr(settings, "notion_ingredients_db", "db-ingredients")
        recipe_id = seed_recipe("Guacamole")
        avocado_id = patched_db.seed("ingredients", {"Name": props.title("Avocado")})
        patched_db.seed(
            "recipe_ingredients",
            {
                "Name": props.title("Guacamole - avocado"),
                "Recipe": props.relation([recipe_id]),
                "Ingredient": props.relation([avocado_id]),
                "Quantity": props.number(3),
                "Unit": props.select("count"),
                "Preparation": props.rich_text("mashed"),
            },
        )
        patched_db.seed(
            "recipe_ingredients",
            {
                "Name": props.title("Lime"),
                "Recipe": props.relation([recipe_id]),
                "Quantity": props.number(1),
                "Optional": props.checkbox(True),
            },
        )

        result = await recipe_service.get_recipe_with_ingredients(recipe_id=recipe_id)

        assert result is not None
        by_name = {i.name: i for i in result.ingredients}
        assert set(by_name) == {"Avocado", "Lime"}
        assert by_name["Avocado"].quantity == 3
        assert by_name["Avocado"].preparation == "mashed"
        assert by_name["Lime"].is_optional is True

    async def test_empty_relation_database_falls_back_to_generator(self, monkeypatch, seed_recipe):
        """Test a configured relation database with no rows for the recipe still yields ingredients."""
        monkeypatch.setattr(settings, "notion_recipe_ingredients_db", "db-recipe-ingredients")
        recipe_id = seed_recipe("Pancakes")

        result = await recipe_service.get_recipe_with_ingredients(recipe_id=recipe_id)

        assert result is not None
        assert result.ingredients == generate_ingredients(recipe_id=recipe_id, name="Pancakes")

    async def test_mark_recipe_tried(self, patched_db, seed_recipe):
        """Test marking a recipe tried once, then reporting it as already tried."""
        recipe_id = seed_recipe("Risotto")
        recipe = await recipe_service.get_recipe(recipe_id=recipe_id)
        assert recipe is not None

        assert await recipe_service.mark_recipe_tried(recipe=recipe) is True

        updated = await recipe_service.get_recipe(recipe_id=recipe_id)
        assert updated is not None
        assert updated.tried is True
        assert await recipe_service.mark_recipe_tried(recipe=updated) is False


@pytest.mark.unit
class TestPantryMatching:
    """Tests for missing-ingredient checks and meal suggestions."""

    def test_missing_ingredients(self):
        """Test short and absent ingredients are reported with have/need."""
        recipe = _recipe("Omelette", [("Eggs", 3), ("Milk", 1), ("Chives", 1)], optional=("Chives",))

        missing = recipe_service.get_missing_ingredients(recipe, _pantry(eggs=2))

        assert [(m.name, m.have, m.need) for m in missing] == [("Eggs", 2, 3), ("Milk", 0, 1)]

    def test_can_make_recipe_ignores_optional(self):
        """Test optional ingredients do not block a recipe."""
        recipe = _recipe("Omelette", [("Eggs", 3), ("Chives", 1)], optional=("Chives",))

        assert recipe_service.can_make_recipe(recipe, _pantry(eggs=3)) is True
        assert recipe_service.can_make_recipe(recipe, _pantry(eggs=2)) is False

    def test_match_ratio(self):
        """Test the share of covered ingredients."""
        recipe = _recipe("Stir Fry", [("Rice", 1), ("Soy Sauce", 1), ("Tofu", 1), ("Scallions", 1)])

        assert recipe_service.match_ratio(recipe, _pantry(rice=2, soy_sauce=1)) == 0.5
        assert recipe_service.match_ratio(_recipe("Empty", []), _pantry(rice=2)) == 0.0

    async def test_suggest_meals_ranks_by_coverage(self, monkeypatch):
        """Test recipes are ordered by how much of each the pantry covers."""
        recipes = {
            "Toast": _recipe("Toast", [("Bread", 1), ("Butter", 1)]),
            "Curry": _recipe("Curry", [("Rice", 1), ("Curry Powder", 1), ("Coconut Milk", 1)]),
            "Sandwich": _recipe("Sandwich", [("Bread", 2), ("Cheese", 1)]),
        }

        async def fake_recipes_with_ingredients(*, tag=None):
            return list(recipes.values())

        monkeypatch.setattr(recipe_service, "get_recipes_with_ingredients", fake_recipes_with_ingredients)

        suggestions = await recipe_service.suggest_meals(pantry=_pantry(bread=2, butter=1, rice=1), max_results=2)

        assert [s.recipe.name for s in suggestions] == ["Toast", "Sandwich"]
