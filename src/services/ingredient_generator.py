"""Placeholder ingredient lists for recipes without relation records.

Recipes in the Notion recipe database carry no structured ingredients unless the
recipe-ingredient relation database is configured. Until it is, ingredient
lists are synthesized here: a SHA-256 digest of the recipe name and tags picks
a few staples from a fixed pool, and keywords in the name add recipe-specific
ingredients. The output is stable for a given recipe but says nothing about
what the recipe actually needs.
"""

import hashlib
import math

from src.domain.recipe import RecipeIngredient


# (name, quantity, unit)
STAPLE_POOL: list[tuple[str, float, str]] = [
    ("Salt", 1, "tsp"),
    ("Black Pepper", 0.5, "tsp"),
    ("Olive Oil", 2, "tbsp"),
    ("Butter", 2, "tbsp"),
    ("Garlic", 2, "count"),
    ("Onion", 1, "count"),
    ("Eggs", 2, "count"),
    ("Flour", 1, "cup"),
    ("Sugar", 0.5, "cup"),
    ("Milk", 1, "cup"),
]

KEYWORD_INGREDIENTS: dict[str, list[tuple[str, float, str]]] = {
    "pasta": [("Pasta", 8, "oz"), ("Parmesan", 0.5, "cup")],
    "spaghetti": [("Pasta", 8, "oz"), ("Tomato Sauce", 1, "can")],
    "chicken": [("Chicken Breast", 1, "pound")],
    "beef": [("Ground Beef", 1, "pound")],
    "salmon": [("Salmon", 1, "pound"), ("Lemon", 1, "count")],
    "rice": [("Rice", 1, "cup")],
    "salad": [("Lettuce", 1, "count"), ("Tomato", 2, "count")],
    "soup": [("Vegetable Broth", 4, "cup"), ("Carrots", 2, "count")],
    "curry": [("Curry Powder", 2, "tbsp"), ("Coconut Milk", 1, "can")],
    "pancake": [("Baking Powder", 2, "tsp")],
    "cake": [("Baking Powder", 2, "tsp"), ("Vanilla Extract", 1, "tsp")],
    "cookie": [("Brown Sugar", 0.5, "cup"), ("Chocolate Chips", 1, "cup")],
    "taco": [("Tortillas", 8, "count"), ("Cheddar", 1, "cup")],
    "pizza": [("Pizza Dough", 1, "package"), ("Mozzarella", 2, "cup")],
    "bread": [("Yeast", 1, "package")],
    "oat": [("Oats", 1, "cup")],
}

_MIN_STAPLES = 3
_MAX_STAPLES = 5


def _digest(name: str, tags: list[str]) -> bytes:
    key = "|".join([name.strip().lower(), *sorted(tag.lower() for tag in tags)])
    return hashlib.sha256(key.encode("utf-8")).digest()


def generate_ingredients(*, recipe_id: str, name: str, tags: list[str] | None = None) -> list[RecipeIngredient]:
    """Return a deterministic placeholder ingredient list for a recipe.

    Args:
        recipe_id: ID written onto each ingredient line
        name: Recipe name (hashed and keyword-matched)
        tags: Recipe tags (hashed)

    Returns:
        Ingredient lines; the same inputs always produce the same list
    """
    digest = _digest(name, tags or [])
    count = _MIN_STAPLES + digest[0] % (_MAX_STAPLES - _MIN_STAPLES + 1)

    # A stride coprime to the pool size never revisits an index.
    start = digest[1] % len(STAPLE_POOL)
    stride = 1 + digest[2] % (len(STAPLE_POOL) - 1)
    while math.gcd(stride, len(STAPLE_POOL)) != 1:
        stride -= 1
    picks = [STAPLE_POOL[(start + i * stride) % len(STAPLE_POOL)] for i in range(count)]

    lowered = name.lower()
    for keyword, extras in KEYWORD_INGREDIENTS.items():
        if keyword in lowered:
            picks.extend(extras)

    ingredients: list[RecipeIngredient] = []
    seen: set[str] = set()
    for position, (ingredient_name, quantity, unit) in enumerate(picks):
        if ingredient_name.lower() in seen:
            continue
        seen.add(ingredient_name.lower())
        ingredients.append(
            RecipeIngredient(
                recipe_id=recipe_id,
                name=ingredient_name,
                quantity=quantity,
                unit=unit,
                is_optional=position < count and digest[3 + position] % 5 == 0,
            )
        )
    return ingredients
