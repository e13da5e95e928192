"""Pytest configuration and fixtures for unit tests."""

from datetime import date

import pytest

from src.core.config import settings
from src.domain.pantry import pantry_properties, shopping_list_properties
from src.domain.recipe import recipe_properties
from tests.unit.mocks import InMemoryNotionClient


@pytest.fixture(autouse=True)
def notion_databases(monkeypatch):
    """Point the required collections at fake database IDs.

    The optional ingredient catalogue and recipe-ingredient databases stay
    unconfigured, so recipes fall back to generated ingredient lists unless a
    test configures them.
    """
    monkeypatch.setattr(settings, "notion_token", "secret_test_token")
    monkeypatch.setattr(settings, "notion_pantry_db", "db-pantry")
    monkeypatch.setattr(settings, "notion_recipes_db", "db-recipes")
    monkeypatch.setattr(settings, "notion_shopping_list_db", "db-shopping")
    monkeypatch.setattr(settings, "notion_ingredients_db", None)
    monkeypatch.setattr(settings, "notion_recipe_ingredients_db", None)


@pytest.fixture
def in_memory_db():
    """Provides a fresh InMemoryNotionClient for each test."""
    return InMemoryNotionClient()


@pytest.fixture
def patched_db(monkeypatch, in_memory_db):
    """Patches src.core.notion_client functions to use InMemoryNotionClient."""
    monkeypatch.setattr("src.core.notion_client.create_record", in_memory_db.create_record)
    monkeypatch.setattr("src.core.notion_client.get_record", in_memory_db.get_record)
    monkeypatch.setattr("src.core.notion_client.update_record", in_memory_db.update_record)
    monkeypatch.setattr("src.core.notion_client.archive_record", in_memory_db.archive_record)
    monkeypatch.setattr("src.core.notion_client.list_records", in_memory_db.list_records)

    return in_memory_db


@pytest.fixture
def seed_pantry(patched_db):
    """Factory that inserts a pantry item and returns its page ID."""

    def _seed(name: str, quantity: float, unit: str = "count", **fields) -> str:
        fields.setdefault("category", "Pantry Staples")
        fields.setdefault("location", "Pantry")
        return patched_db.seed("pantry", pantry_properties(name=name, quantity=quantity, unit=unit, **fields))

    return _seed


@pytest.fixture
def seed_shopping(patched_db):
    """Factory that inserts a shopping list entry and returns its page ID."""

    def _seed(name: str, quantity: float, unit: str = "count", **fields) -> str:
        fields.setdefault("category", "Pantry Staples")
        fields.setdefault("priority", "Medium")
        fields.setdefault("is_purchased", False)
        return patched_db.seed(
            "shopping_list", shopping_list_properties(name=name, quantity=quantity, unit=unit, **fields)
        )

    return _seed


@pytest.fixture
def seed_recipe(patched_db):
    """Factory that inserts a recipe and returns its page ID."""

    def _seed(name: str, **fields) -> str:
        return patched_db.seed("recipes", recipe_properties(name=name, **fields))

    return _seed


@pytest.fixture
def today() -> date:
    """Fixed reference date for expiry calculations."""
    return date(2025, 3, 10)
