"""Pantry and shopping list domain models and enums."""

from datetime import date, datetime
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field

from src.core import notion_properties as props


class Priority(StrEnum):
    """Shopping list item priority (Notion select option names)."""

    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class RecordState(StrEnum):
    """Lifecycle state of a Notion page. Deletion is always an archive."""

    ACTIVE = "active"
    ARCHIVED = "archived"


def _state(page: dict[str, Any]) -> RecordState:
    return RecordState.ARCHIVED if page.get("archived") else RecordState.ACTIVE


class PantryItem(BaseModel):
    """Pantry inventory record backed by a page in the pantry database."""

    id: str = Field(..., description="Notion page ID")
    name: str = Field(..., description="Item name; matched case-insensitively")
    quantity: float = Field(default=0, ge=0, description="Quantity on hand")
    unit: str = Field(default="", description="Unit of measurement (e.g. 'count', 'pounds')")
    category: str = Field(default="", description="Category (e.g. 'Produce', 'Dairy & Eggs')")
    location: str = Field(default="", description="Where the item is stored")
    expiry_date: date | None = Field(default=None, description="Expiry date, if any")
    notes: str = Field(default="", description="Free-text notes")
    is_staple: bool = Field(default=False, description="Replenish automatically when running low")
    min_quantity: float | None = Field(default=None, description="Replenishment threshold for staples")
    tags: list[str] = Field(default_factory=list)
    state: RecordState = Field(default=RecordState.ACTIVE)
    created_at: datetime | None = None
    last_updated: datetime | None = None

    @property
    def is_low(self) -> bool:
        """True for staples at or below their minimum."""
        return self.is_staple and self.min_quantity is not None and self.quantity <= self.min_quantity

    @classmethod
    def from_page(cls, page: dict[str, Any]) -> "PantryItem":
        p = page.get("properties", {})
        return cls(
            id=page["id"],
            name=props.read_title(p, "Name"),
            quantity=max(0, props.read_number(p, "Quantity")),
            unit=props.read_select(p, "Unit"),
            category=props.read_select(p, "Category"),
            location=props.read_select(p, "Location"),
            expiry_date=props.read_date(p, "Expiry"),
            notes=props.read_rich_text(p, "Notes"),
            is_staple=props.read_checkbox(p, "Staple"),
            min_quantity=props.read_optional_number(p, "MinQuantity"),
            tags=props.read_multi_select(p, "Tags"),
            state=_state(page),
            created_at=props.parse_timestamp(page.get("created_time")),
            last_updated=props.parse_timestamp(page.get("last_edited_time")),
        )


def pantry_properties(**fields: Any) -> dict[str, Any]:
    """Build a Notion properties payload from the given PantryItem fields.

    Only the fields passed are included, so the result works for partial updates.
    """
    writers = {
        "name": ("Name", props.title),
        "quantity": ("Quantity", props.number),
        "unit": ("Unit", props.select),
        "category": ("Category", props.select),
        "location": ("Location", props.select),
        "expiry_date": ("Expiry", props.date_value),
        "notes": ("Notes", props.rich_text),
        "is_staple": ("Staple", props.checkbox),
        "min_quantity": ("MinQuantity", props.number),
        "tags": ("Tags", props.multi_select),
    }
    return props.build_properties(writers, fields)


class ShoppingListItem(BaseModel):
    """Shopping list record backed by a page in the shopping list database."""

    id: str = Field(..., description="Notion page ID")
    name: str = Field(..., description="Item name")
    quantity: float = Field(default=0, description="Quantity to buy")
    unit: str = Field(default="")
    category: str = Field(default="")
    priority: Priority = Field(default=Priority.MEDIUM)
    is_purchased: bool = Field(default=False)
    is_auto_added: bool = Field(default=False, description="Added by staple replenishment or expiry sweep")
    notes: str = Field(default="", description="Optional notes (e.g. 'organic only')")
    state: RecordState = Field(default=RecordState.ACTIVE)
    added_at: datetime | None = None
    last_updated: datetime | None = None

    @classmethod
    def from_page(cls, page: dict[str, Any]) -> "ShoppingListItem":
        p = page.get("properties", {})
        return cls(
            id=page["id"],
            name=props.read_title(p, "Name"),
            quantity=props.read_number(p, "Quantity"),
            unit=props.read_select(p, "Unit"),
            category=props.read_select(p, "Category"),
            priority=_parse_priority(props.read_select(p, "Priority")),
            is_purchased=props.read_checkbox(p, "Purchased"),
            is_auto_added=props.read_checkbox(p, "AutoAdded"),
            notes=props.read_rich_text(p, "Notes"),
            state=_state(page),
            added_at=props.parse_timestamp(page.get("created_time")),
            last_updated=props.parse_timestamp(page.get("last_edited_time")),
        )


def shopping_list_properties(**fields: Any) -> dict[str, Any]:
    """Build a Notion properties payload from the given ShoppingListItem fields."""
    writers = {
        "name": ("Name", props.title),
        "quantity": ("Quantity", props.number),
        "unit": ("Unit", props.select),
        "category": ("Category", props.select),
        "priority": ("Priority", lambda value: props.select(str(value))),
        "is_purchased": ("Purchased", props.checkbox),
        "is_auto_added": ("AutoAdded", props.checkbox),
        "notes": ("Notes", props.rich_text),
    }
    return props.build_properties(writers, fields)


def _parse_priority(value: str) -> Priority:
    try:
        return Priority(value)
    except ValueError:
        return Priority.MEDIUM
