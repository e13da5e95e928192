"""Unit conversion system prompt section for the pantry agent."""

UNITS_PROMPT_SECTION = """
## Cooking Units

- Use `tool_convert_cooking_units` for conversions between cups, spoons, ounces, grams, milliliters and so on.
  Pass the ingredient when converting volume to weight ("1 cup of flour" weighs less than "1 cup of sugar").
- Use `tool_get_cooking_equivalents` when the user wants a reference table.
- Pantry quantities are compared by number only, so convert a recipe amount into the pantry item's unit
  before reporting whether there is enough.
"""
