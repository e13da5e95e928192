from src.services import (
    cooking_service,
    ingredient_generator,
    pantry_service,
    recipe_service,
    unit_conversion,
)


__all__ = [
    "cooking_service",
    "ingredient_generator",
    "pantry_service",
    "recipe_service",
    "unit_conversion",
]
