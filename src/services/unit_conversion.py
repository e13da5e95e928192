"""Cooking unit normalization and conversion.

Pure functions over static tables; no I/O. ``convert_unit`` returns None when
no conversion path exists so callers can report it as a message.
"""

from typing import Literal


# Alias sets, checked in order. The empty string counts as "count".
_UNIT_ALIASES: list[tuple[str, frozenset[str]]] = [
    ("tbsp", frozenset({"tablespoon", "tablespoons", "tbsp", "tbs", "tb"})),
    ("tsp", frozenset({"teaspoon", "teaspoons", "tsp", "ts"})),
    ("cup", frozenset({"cup", "cups", "c"})),
    ("oz", frozenset({"fluid ounce", "fluid ounces", "fluid oz", "fl oz", "fl. oz.", "ounce", "ounces", "oz"})),
    ("pint", frozenset({"pint", "pints", "pt"})),
    ("quart", frozenset({"quart", "quarts", "qt"})),
    ("gallon", frozenset({"gallon", "gallons", "gal"})),
    ("ml", frozenset({"milliliter", "milliliters", "millilitre", "millilitres", "ml"})),
    ("liter", frozenset({"liter", "liters", "litre", "litres", "l"})),
    ("pound", frozenset({"pound", "pounds", "lb", "lbs"})),
    ("g", frozenset({"gram", "grams", "g"})),
    ("kg", frozenset({"kilogram", "kilograms", "kg"})),
    ("count", frozenset({"each", "ea", "count", "ct", "piece", "pieces", ""})),
    ("dozen", frozenset({"dozen", "doz"})),
    ("half_dozen", frozenset({"half dozen", "half-dozen", "half_dozen"})),
    ("can", frozenset({"can", "cans"})),
    ("package", frozenset({"package", "packages", "pkg", "pack"})),
    ("bottle", frozenset({"bottle", "bottles", "btl"})),
    ("box", frozenset({"box", "boxes"})),
    ("jar", frozenset({"jar", "jars"})),
    ("stick", frozenset({"stick", "sticks"})),
]

# (from, to) -> multiplier
DIRECT_FACTORS: dict[tuple[str, str], float] = {
    # Volume
    ("tbsp", "oz"): 0.5,
    ("tsp", "oz"): 0.1667,
    ("cup", "oz"): 8,
    ("cup", "ml"): 236.59,
    ("oz", "ml"): 29.57,
    ("cup", "tbsp"): 16,
    ("cup", "tsp"): 48,
    ("tbsp", "tsp"): 3,
    ("pint", "cup"): 2,
    ("quart", "cup"): 4,
    ("gallon", "cup"): 16,
    ("liter", "ml"): 1000,
    # Weight
    ("pound", "oz"): 16,
    ("kg", "pound"): 2.20462,
    ("g", "oz"): 0.03527396,
    # Count
    ("dozen", "count"): 12,
    ("half_dozen", "count"): 6,
    # Containers
    ("can", "oz"): 14.5,
    ("package", "oz"): 16,
}

# (from, ingredient) -> ounces by weight
INGREDIENT_FACTORS: dict[tuple[str, str], float] = {
    ("cup", "flour"): 4.25,
    ("cup", "sugar"): 7.05,
    ("cup", "brown_sugar"): 7.5,
    ("cup", "rice"): 6.53,  # uncooked
    ("cup", "oats"): 2.65,  # dry
    ("cup", "milk"): 8.6,
    ("cup", "butter"): 8,
    ("cup", "oil"): 7.63,
    ("cup", "honey"): 12,
    ("cup", "yogurt"): 8.6,
    ("tbsp", "honey"): 0.75,
    ("tbsp", "oil"): 0.5,
    ("tbsp", "butter"): 0.5,
    ("tbsp", "flour"): 0.27,
    ("tbsp", "sugar"): 0.44,
    ("stick", "butter"): 4,
}

# Two-hop bases: volume in fluid ounces, weight in ounces.
# Metric volume reaches fluid ounces through milliliters.
_FL_OZ_PER_ML = 1 / DIRECT_FACTORS[("oz", "ml")]
VOLUME_IN_FL_OZ: dict[str, float] = {
    "tsp": DIRECT_FACTORS[("tsp", "oz")],
    "tbsp": DIRECT_FACTORS[("tbsp", "oz")],
    "oz": 1,
    "cup": DIRECT_FACTORS[("cup", "oz")],
    "pint": DIRECT_FACTORS[("pint", "cup")] * DIRECT_FACTORS[("cup", "oz")],
    "quart": DIRECT_FACTORS[("quart", "cup")] * DIRECT_FACTORS[("cup", "oz")],
    "gallon": DIRECT_FACTORS[("gallon", "cup")] * DIRECT_FACTORS[("cup", "oz")],
    "ml": _FL_OZ_PER_ML,
    "liter": DIRECT_FACTORS[("liter", "ml")] * _FL_OZ_PER_ML,
}
WEIGHT_IN_OZ: dict[str, float] = {
    "oz": 1,
    "pound": DIRECT_FACTORS[("pound", "oz")],
    "g": DIRECT_FACTORS[("g", "oz")],
    "kg": DIRECT_FACTORS[("kg", "pound")] * DIRECT_FACTORS[("pound", "oz")],
}


def normalize_unit(unit: str) -> str:
    """Map a free-text unit to its canonical token.

    Unrecognized units are returned lower-cased and trimmed, not rejected.
    """
    cleaned = unit.lower().strip()
    for canonical, aliases in _UNIT_ALIASES:
        if cleaned in aliases:
            return canonical
    return cleaned


def normalize_ingredient(ingredient: str) -> str:
    return "_".join(ingredient.lower().split())


def _via_base(value: float, from_unit: str, to_unit: str, table: dict[str, float]) -> float | None:
    if from_unit in table and to_unit in table:
        return value * table[from_unit] / table[to_unit]
    return None


def convert_unit(value: float, from_unit: str, to_unit: str, ingredient: str | None = None) -> float | None:
    """Convert ``value`` between cooking units.

    Resolution order: identical units, ingredient-specific weight, direct
    factor, reverse factor, then a two-hop path through fluid ounces (volume)
    or ounces (weight).

    Args:
        value: Quantity to convert
        from_unit: Source unit (any alias)
        to_unit: Target unit (any alias)
        ingredient: Optional ingredient name for volume-to-weight conversions

    Returns:
        The converted value, or None if the units cannot be converted
    """
    source = normalize_unit(from_unit)
    target = normalize_unit(to_unit)

    if source == target:
        return value

    if ingredient:
        factor = INGREDIENT_FACTORS.get((source, normalize_ingredient(ingredient)))
        if factor is not None:
            if target == "oz":
                return value * factor
            if target in WEIGHT_IN_OZ:
                return value * factor / WEIGHT_IN_OZ[target]

    if (source, target) in DIRECT_FACTORS:
        return value * DIRECT_FACTORS[(source, target)]

    if (target, source) in DIRECT_FACTORS:
        return value / DIRECT_FACTORS[(target, source)]

    converted = _via_base(value, source, target, VOLUME_IN_FL_OZ)
    if converted is None:
        converted = _via_base(value, source, target, WEIGHT_IN_OZ)
    return converted


def format_quantity(value: float) -> float:
    """Round for display: 2 decimals above 0.1, otherwise 3 so small amounts survive."""
    return round(value, 2) if value > 0.1 else round(value, 3)


EquivalentCategory = Literal["volume", "weight", "ingredients"]

VOLUME_EQUIVALENTS: list[dict[str, str]] = [
    {"from": "1 tablespoon (tbsp)", "to": "3 teaspoons (tsp)"},
    {"from": "1 fluid ounce (fl oz)", "to": "2 tablespoons (tbsp)"},
    {"from": "1 cup", "to": "8 fluid ounces (fl oz)"},
    {"from": "1 cup", "to": "16 tablespoons (tbsp)"},
    {"from": "1 cup", "to": "48 teaspoons (tsp)"},
    {"from": "1 cup", "to": "237 milliliters (ml)"},
    {"from": "1 pint", "to": "2 cups"},
    {"from": "1 quart", "to": "2 pints"},
    {"from": "1 quart", "to": "4 cups"},
    {"from": "1 gallon", "to": "4 quarts"},
    {"from": "1 gallon", "to": "16 cups"},
    {"from": "1 liter", "to": "4.22 cups"},
    {"from": "1 liter", "to": "1000 milliliters (ml)"},
]

WEIGHT_EQUIVALENTS: list[dict[str, str]] = [
    {"from": "1 pound (lb)", "to": "16 ounces (oz)"},
    {"from": "1 kilogram (kg)", "to": "2.2 pounds (lb)"},
    {"from": "1 ounce (oz)", "to": "28.35 grams (g)"},
    {"from": "1 pound (lb)", "to": "453.6 grams (g)"},
]

INGREDIENT_EQUIVALENTS: list[dict[str, str]] = [
    {"ingredient": "All-purpose flour", "amount": "1 cup", "equivalents": "4.25 oz / 120g"},
    {"ingredient": "Granulated sugar", "amount": "1 cup", "equivalents": "7.05 oz / 200g"},
    {"ingredient": "Brown sugar", "amount": "1 cup", "equivalents": "7.5 oz / 213g"},
    {"ingredient": "Butter", "amount": "1 cup", "equivalents": "8 oz / 227g"},
    {"ingredient": "Butter", "amount": "1 stick", "equivalents": "4 oz / 113g / 1/2 cup"},
    {"ingredient": "Vegetable oil", "amount": "1 cup", "equivalents": "7.63 oz / 216g"},
    {"ingredient": "Honey", "amount": "1 cup", "equivalents": "12 oz / 340g"},
    {"ingredient": "Milk", "amount": "1 cup", "equivalents": "8.6 oz / 244g"},
    {"ingredient": "Water", "amount": "1 cup", "equivalents": "8.3 oz / 236g"},
    {"ingredient": "Quick oats", "amount": "1 cup", "equivalents": "2.65 oz / 75g"},
    {"ingredient": "Rice (uncooked)", "amount": "1 cup", "equivalents": "6.53 oz / 185g"},
    {"ingredient": "Salt", "amount": "1 tbsp", "equivalents": "0.63 oz / 18g"},
]


def get_cooking_equivalents(category: EquivalentCategory | None = None) -> dict[str, list[dict[str, str]]]:
    """Return the reference equivalence tables, optionally limited to one category."""
    tables = {
        "volume": ("volumeEquivalents", VOLUME_EQUIVALENTS),
        "weight": ("weightEquivalents", WEIGHT_EQUIVALENTS),
        "ingredients": ("ingredientEquivalents", INGREDIENT_EQUIVALENTS),
    }
    return {key: rows for name, (key, rows) in tables.items() if category is None or category == name}
