"""Pantry service for inventory and shopping list management."""

import logging
import math
from collections import Counter
from datetime import date, timedelta
from typing import Any

from pydantic import BaseModel, Field

from src.core import notion_client
from src.core.config import constants
from src.core.logging import span
from src.domain.pantry import (
    PantryItem,
    Priority,
    ShoppingListItem,
    pantry_properties,
    shopping_list_properties,
)


logger = logging.getLogger(__name__)

_BY_NAME = [{"property": "Name", "direction": "ascending"}]
_BY_CATEGORY_THEN_NAME = [
    {"property": "Category", "direction": "ascending"},
    {"property": "Name", "direction": "ascending"},
]


class ExpirySweepResult(BaseModel):
    """Outcome of an expiry sweep."""

    cutoff: date
    expired: list[PantryItem] = Field(default_factory=list)
    removed: bool = Field(default=False, description="False for dry runs")
    replacements: list[str] = Field(default_factory=list, description="Names enqueued on the shopping list")


class TransferResult(BaseModel):
    """Outcome of moving purchased shopping list items into the pantry."""

    merged: list[str] = Field(default_factory=list, description="Existing pantry items that were incremented")
    created: list[str] = Field(default_factory=list, description="New pantry items")

    @property
    def total(self) -> int:
        return len(self.merged) + len(self.created)


class PantryStats(BaseModel):
    """Aggregate counts over the pantry."""

    total_items: int = 0
    categories: dict[str, int] = Field(default_factory=dict)
    locations: dict[str, int] = Field(default_factory=dict)
    staple_count: int = 0
    low_staple_count: int = 0
    expiring_soon_count: int = 0
    expired_count: int = 0


def find_by_name(items: list[Any], name: str) -> Any | None:
    """Return the first item whose name equals ``name`` ignoring case, or None."""
    wanted = name.strip().lower()
    return next((item for item in items if item.name.strip().lower() == wanted), None)


async def get_pantry_items(*, category: str | None = None) -> list[PantryItem]:
    """Get pantry items sorted by name, optionally limited to one category."""
    with span("pantry_service.get_pantry_items"):
        filter_query = {"property": "Category", "select": {"equals": category}} if category else None
        records = await notion_client.list_records(collection="pantry", filter_query=filter_query, sorts=_BY_NAME)
        return [PantryItem.from_page(record) for record in records]


async def get_pantry_item(*, item_id: str) -> PantryItem | None:
    """Get a pantry item by ID.

    Returns:
        The item, or None if it does not exist or has been archived
    """
    with span("pantry_service.get_pantry_item"):
        try:
            record = await notion_client.get_record(collection="pantry", record_id=item_id)
        except KeyError:
            return None
        if record.get("archived"):
            return None
        return PantryItem.from_page(record)


async def create_pantry_item(
    *,
    name: str,
    quantity: float,
    unit: str,
    category: str = "",
    location: str = constants.DEFAULT_LOCATION,
    expiry_date: date | None = None,
    notes: str = "",
    is_staple: bool = False,
    min_quantity: float | None = None,
) -> PantryItem:
    """Create a pantry item without checking for an existing one."""
    with span("pantry_service.create_pantry_item"):
        fields: dict[str, Any] = {
            "name": name,
            "quantity": quantity,
            "unit": unit,
            "category": category,
            "location": location,
            "notes": notes,
            "is_staple": is_staple,
        }
        if expiry_date is not None:
            fields["expiry_date"] = expiry_date
        if min_quantity is not None:
            fields["min_quantity"] = min_quantity

        record = await notion_client.create_record(collection="pantry", data=pantry_properties(**fields))
        logger.info("Created pantry item", extra={"item_name": name, "quantity": quantity})
        return PantryItem.from_page(record)


async def add_pantry_item(
    *,
    name: str,
    quantity: float,
    unit: str,
    category: str,
    location: str = constants.DEFAULT_LOCATION,
    expiry_date: date | None = None,
    is_staple: bool = False,
    min_quantity: float | None = None,
) -> tuple[PantryItem, bool]:
    """Add stock to the pantry.

    If an item with the same name (case-insensitive) exists, its quantity is
    incremented and its expiry replaced when a new one is given. Otherwise a new
    item is created; new staples without a minimum get ``ceil(quantity * 0.2)``.

    Returns:
        Tuple of (item, merged) where merged is True when an existing item was updated
    """
    with span("pantry_service.add_pantry_item"):
        existing = find_by_name(await get_pantry_items(), name)

        if existing:
            update_data: dict[str, Any] = {"quantity": existing.quantity + quantity}
            if expiry_date is not None:
                update_data["expiry_date"] = expiry_date
            item = await update_pantry_item(item_id=existing.id, **update_data)
            logger.info("Merged into existing pantry item", extra={"item_name": existing.name, "added": quantity})
            return item, True

        if is_staple and min_quantity is None:
            min_quantity = math.ceil(quantity * constants.STAPLE_MIN_QUANTITY_RATIO)

        item = await create_pantry_item(
            name=name,
            quantity=quantity,
            unit=unit,
            category=category,
            location=location,
            expiry_date=expiry_date,
            is_staple=is_staple,
            min_quantity=min_quantity if is_staple else None,
        )
        return item, False


async def update_pantry_item(*, item_id: str, **fields: Any) -> PantryItem:
    """Update a subset of a pantry item's fields.

    Raises:
        ValueError: If a field name is unknown or no fields are given
        KeyError: If the item does not exist
    """
    with span("pantry_service.update_pantry_item"):
        record = await notion_client.update_record(
            collection="pantry",
            record_id=item_id,
            data=pantry_properties(**fields),
        )
        logger.debug("Updated pantry item", extra={"record_id": item_id, "fields": sorted(fields)})
        return PantryItem.from_page(record)


async def archive_pantry_item(*, item_id: str) -> None:
    """Remove a pantry item. Items are archived, never hard-deleted."""
    with span("pantry_service.archive_pantry_item"):
        await notion_client.archive_record(collection="pantry", record_id=item_id)
        logger.info("Archived pantry item", extra={"record_id": item_id})


async def get_shopping_list() -> list[ShoppingListItem]:
    """Get the shopping list sorted by category then name."""
    with span("pantry_service.get_shopping_list"):
        records = await notion_client.list_records(collection="shopping_list", sorts=_BY_CATEGORY_THEN_NAME)
        return [ShoppingListItem.from_page(record) for record in records]


async def create_shopping_list_item(
    *,
    name: str,
    quantity: float,
    unit: str = "",
    category: str = "",
    priority: Priority = Priority.MEDIUM,
    is_auto_added: bool = False,
    notes: str = "",
) -> ShoppingListItem:
    """Create a new shopping list entry without merging into an existing one."""
    with span("pantry_service.create_shopping_list_item"):
        data = shopping_list_properties(
            name=name,
            quantity=quantity,
            unit=unit,
            category=category,
            priority=priority,
            is_purchased=False,
            is_auto_added=is_auto_added,
            notes=notes,
        )
        record = await notion_client.create_record(collection="shopping_list", data=data)
        logger.info(
            "Added to shopping list",
            extra={"item_name": name, "quantity": quantity, "auto_added": is_auto_added},
        )
        return ShoppingListItem.from_page(record)


async def add_to_shopping_list(
    *,
    name: str,
    quantity: float,
    unit: str,
    category: str,
    priority: Priority = Priority.MEDIUM,
) -> tuple[ShoppingListItem, bool]:
    """Add an item to the shopping list.

    If an unpurchased entry with the same name (case-insensitive) already exists,
    the quantities are added together and its priority replaced.

    Returns:
        Tuple of (item, merged) where merged is True when an existing entry was updated
    """
    with span("pantry_service.add_to_shopping_list"):
        pending = [item for item in await get_shopping_list() if not item.is_purchased]
        existing = find_by_name(pending, name)

        if existing:
            record = await notion_client.update_record(
                collection="shopping_list",
                record_id=existing.id,
                data=shopping_list_properties(quantity=existing.quantity + quantity, priority=priority),
            )
            logger.info("Updated shopping list item", extra={"item_name": existing.name, "added": quantity})
            return ShoppingListItem.from_page(record), True

        item = await create_shopping_list_item(
            name=name,
            quantity=quantity,
            unit=unit,
            category=category,
            priority=priority,
        )
        return item, False


async def mark_as_purchased(*, item_id: str) -> ShoppingListItem:
    """Mark a shopping list item as purchased.

    Raises:
        KeyError: If the item does not exist
    """
    with span("pantry_service.mark_as_purchased"):
        record = await notion_client.update_record(
            collection="shopping_list",
            record_id=item_id,
            data=shopping_list_properties(is_purchased=True),
        )
        logger.info("Marked shopping list item purchased", extra={"record_id": item_id})
        return ShoppingListItem.from_page(record)


async def remove_expired_items(
    *,
    cutoff: date | None = None,
    dry_run: bool = False,
    add_replacements: bool = True,
) -> ExpirySweepResult:
    """Find pantry items expiring on or before ``cutoff`` (default today) and remove them.

    Staples are re-added to the shopping list with High priority when
    ``add_replacements`` is set. A dry run only reports what would be removed.
    """
    cutoff = cutoff or date.today()
    with span("pantry_service.remove_expired_items", cutoff=cutoff.isoformat(), dry_run=dry_run):
        items = await get_pantry_items()
        expired = [item for item in items if item.expiry_date is not None and item.expiry_date <= cutoff]
        result = ExpirySweepResult(cutoff=cutoff, expired=expired)

        if dry_run or not expired:
            return result

        for item in expired:
            await archive_pantry_item(item_id=item.id)
            if add_replacements and item.is_staple:
                quantity = item.min_quantity if item.min_quantity is not None else max(item.quantity, 1)
                await create_shopping_list_item(
                    name=item.name,
                    quantity=quantity,
                    unit=item.unit,
                    category=item.category,
                    priority=Priority.HIGH,
                    is_auto_added=True,
                    notes=f"Replacement for item expired on {item.expiry_date.isoformat()}",
                )
                result.replacements.append(item.name)

        result.removed = True
        logger.info(
            "Removed expired pantry items",
            extra={"count": len(expired), "replacements": len(result.replacements)},
        )
        return result


async def transfer_purchased_items() -> TransferResult:
    """Move every purchased shopping list item into the pantry.

    Matching pantry items (case-insensitive name) are incremented; otherwise a
    non-staple item is created in the default location. Each transferred
    shopping list entry is then archived. With nothing purchased, nothing is written.
    """
    with span("pantry_service.transfer_purchased_items"):
        purchased = [item for item in await get_shopping_list() if item.is_purchased]
        result = TransferResult()
        if not purchased:
            return result

        pantry = await get_pantry_items()
        for item in purchased:
            existing = find_by_name(pantry, item.name)
            if existing:
                updated = await update_pantry_item(item_id=existing.id, quantity=existing.quantity + item.quantity)
                pantry[pantry.index(existing)] = updated
                result.merged.append(item.name)
            else:
                created = await create_pantry_item(
                    name=item.name,
                    quantity=item.quantity,
                    unit=item.unit,
                    category=item.category,
                    notes=item.notes,
                )
                pantry.append(created)
                result.created.append(item.name)

            await notion_client.archive_record(collection="shopping_list", record_id=item.id)

        logger.info(
            "Transferred purchased items to pantry",
            extra={"merged": len(result.merged), "created": len(result.created)},
        )
        return result


def get_expiring_soon(
    items: list[PantryItem],
    *,
    days: int = constants.EXPIRING_SOON_DAYS,
    today: date | None = None,
) -> list[PantryItem]:
    """Items expiring between today and ``days`` from now, soonest first."""
    today = today or date.today()
    horizon = today + timedelta(days=days)
    soon = [item for item in items if item.expiry_date is not None and today <= item.expiry_date <= horizon]
    return sorted(soon, key=lambda item: item.expiry_date or horizon)


def get_low_staples(items: list[PantryItem]) -> list[PantryItem]:
    """Staples at or below their minimum quantity."""
    return [item for item in items if item.is_low]


def compute_pantry_stats(items: list[PantryItem], *, today: date | None = None) -> PantryStats:
    today = today or date.today()
    return PantryStats(
        total_items=len(items),
        categories=dict(Counter(item.category or "Uncategorized" for item in items)),
        locations=dict(Counter(item.location or "Unspecified" for item in items)),
        staple_count=sum(1 for item in items if item.is_staple),
        low_staple_count=len(get_low_staples(items)),
        expiring_soon_count=len(get_expiring_soon(items, today=today)),
        expired_count=sum(1 for item in items if item.expiry_date is not None and item.expiry_date < today),
    )
