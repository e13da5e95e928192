"""Recipe, ingredient and usage domain models."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from src.core import notion_properties as props


class Recipe(BaseModel):
    """Recipe record backed by a page in the recipes database."""

    id: str = Field(..., description="Notion page ID")
    name: str = Field(..., description="Recipe name")
    tried: bool = Field(default=False, description="Whether the recipe has been cooked before")
    kitchen_tools: list[str] = Field(default_factory=list, description="Related kitchen tool page IDs")
    link: str = Field(default="", description="Source URL")
    tags: list[str] = Field(default_factory=list)
    ai_modified: bool = Field(default=False, description="Created or edited by the assistant")
    notion_url: str = Field(default="")
    created_at: datetime | None = None

    @classmethod
    def from_page(cls, page: dict[str, Any]) -> "Recipe":
        p = page.get("properties", {})
        return cls(
            id=page["id"],
            name=props.read_title(p, "Name"),
            tried=props.read_checkbox(p, "Tried?"),
            kitchen_tools=props.read_relation_ids(p, "Kitchen Tools"),
            link=props.read_url(p, "Link"),
            tags=props.read_multi_select(p, "Tags"),
            ai_modified=props.read_checkbox(p, "AI Modified"),
            notion_url=page.get("url") or "",
            created_at=props.parse_timestamp(page.get("created_time")),
        )


def recipe_properties(**fields: Any) -> dict[str, Any]:
    """Build a Notion properties payload from the given Recipe fields."""
    writers = {
        "name": ("Name", props.title),
        "tried": ("Tried?", props.checkbox),
        "kitchen_tools": ("Kitchen Tools", props.relation),
        "link": ("Link", props.url),
        "tags": ("Tags", props.multi_select),
        "ai_modified": ("AI Modified", props.checkbox),
    }
    return props.build_properties(writers, fields)


class RecipeIngredient(BaseModel):
    """An ingredient line needed by a recipe."""

    recipe_id: str = Field(default="")
    name: str = Field(..., description="Ingredient name; should match a pantry item name")
    quantity: float = Field(default=0, ge=0)
    unit: str = Field(default="")
    preparation: str = Field(default="", description="e.g. 'finely chopped'")
    is_optional: bool = Field(default=False)


class RecipeWithIngredients(BaseModel):
    """A recipe together with its ingredient list."""

    recipe: Recipe
    ingredients: list[RecipeIngredient] = Field(default_factory=list)


class Ingredient(BaseModel):
    """Catalogue entry from the ingredients database."""

    id: str
    name: str
    units: list[str] = Field(default_factory=list)
    category: str = ""
    perishable: bool = False
    storage: str = ""
    shelf_life_days: float | None = None
    notes: str = ""

    @classmethod
    def from_page(cls, page: dict[str, Any]) -> "Ingredient":
        p = page.get("properties", {})
        return cls(
            id=page["id"],
            name=props.read_title(p, "Name"),
            units=props.read_multi_select(p, "Units"),
            category=props.read_select(p, "Category"),
            perishable=props.read_checkbox(p, "Perishable"),
            storage=props.read_select(p, "Storage"),
            shelf_life_days=props.read_optional_number(p, "ShelfLifeDays"),
            notes=props.read_rich_text(p, "Notes"),
        )


class RecipeIngredientRelation(BaseModel):
    """Join record linking a recipe to an ingredient with a quantity."""

    id: str
    name: str = ""
    recipe_id: str = ""
    ingredient_id: str = ""
    quantity: float = 0
    unit: str = ""
    is_optional: bool = False
    preparation: str = ""

    @classmethod
    def from_page(cls, page: dict[str, Any]) -> "RecipeIngredientRelation":
        p = page.get("properties", {})
        recipe_ids = props.read_relation_ids(p, "Recipe")
        ingredient_ids = props.read_relation_ids(p, "Ingredient")
        return cls(
            id=page["id"],
            name=props.read_title(p, "Name"),
            recipe_id=recipe_ids[0] if recipe_ids else "",
            ingredient_id=ingredient_ids[0] if ingredient_ids else "",
            quantity=props.read_number(p, "Quantity"),
            unit=props.read_select(p, "Unit"),
            is_optional=props.read_checkbox(p, "Optional"),
            preparation=props.read_rich_text(p, "Preparation"),
        )


class UsageIngredient(BaseModel):
    """One line of a cooking usage request."""

    name: str = Field(description="Ingredient name (matched case-insensitively to pantry items)", min_length=1)
    quantity: float = Field(description="Quantity used", ge=0)
    unit: str = Field(default="", description="Unit of the quantity used")
    is_optional: bool = Field(default=False, description="Optional ingredients are not deducted")
