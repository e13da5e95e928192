"""Read and write helpers for Notion page property values.

Readers take a page's ``properties`` dict and a property name and fall back to
a default when the property is missing or empty (string -> "", number -> 0,
checkbox -> False). Writers build the payload shape Notion expects on create
and update.
"""

from datetime import date, datetime
from typing import Any

from dateutil import parser as dateutil_parser


def _prop(properties: dict[str, Any], name: str) -> dict[str, Any]:
    return properties.get(name) or {}


def read_title(properties: dict[str, Any], name: str) -> str:
    return "".join(part.get("plain_text", "") for part in _prop(properties, name).get("title") or [])


def read_rich_text(properties: dict[str, Any], name: str) -> str:
    return "".join(part.get("plain_text", "") for part in _prop(properties, name).get("rich_text") or [])


def read_number(properties: dict[str, Any], name: str) -> float:
    return _prop(properties, name).get("number") or 0


def read_optional_number(properties: dict[str, Any], name: str) -> float | None:
    """Like read_number but keeps the difference between "unset" and zero."""
    return _prop(properties, name).get("number")


def read_select(properties: dict[str, Any], name: str, default: str = "") -> str:
    selected = _prop(properties, name).get("select")
    return selected.get("name", default) if selected else default


def read_multi_select(properties: dict[str, Any], name: str) -> list[str]:
    return [option.get("name", "") for option in _prop(properties, name).get("multi_select") or []]


def read_checkbox(properties: dict[str, Any], name: str) -> bool:
    return bool(_prop(properties, name).get("checkbox"))


def read_date(properties: dict[str, Any], name: str) -> date | None:
    value = _prop(properties, name).get("date")
    if not value or not value.get("start"):
        return None
    return dateutil_parser.isoparse(value["start"]).date()


def read_url(properties: dict[str, Any], name: str) -> str:
    return _prop(properties, name).get("url") or ""


def read_relation_ids(properties: dict[str, Any], name: str) -> list[str]:
    return [rel["id"] for rel in _prop(properties, name).get("relation") or [] if "id" in rel]


def parse_timestamp(value: str | None) -> datetime | None:
    """Parse a page-level timestamp such as ``created_time``."""
    return dateutil_parser.isoparse(value) if value else None


def title(value: str) -> dict[str, Any]:
    return {"title": [{"text": {"content": value}}]}


def rich_text(value: str) -> dict[str, Any]:
    return {"rich_text": [{"text": {"content": value}}] if value else []}


def number(value: float | None) -> dict[str, Any]:
    return {"number": value}


def select(value: str) -> dict[str, Any]:
    return {"select": {"name": value} if value else None}


def multi_select(values: list[str]) -> dict[str, Any]:
    return {"multi_select": [{"name": value} for value in values]}


def checkbox(value: bool) -> dict[str, Any]:
    return {"checkbox": value}


def date_value(value: date | None) -> dict[str, Any]:
    return {"date": {"start": value.isoformat()} if value else None}


def url(value: str) -> dict[str, Any]:
    return {"url": value or None}


def relation(ids: list[str]) -> dict[str, Any]:
    return {"relation": [{"id": record_id} for record_id in ids]}


def build_properties(writers: dict[str, tuple[str, Any]], fields: dict[str, Any]) -> dict[str, Any]:
    """Map model field names to Notion property payloads using ``writers``.

    Args:
        writers: field name -> (Notion property name, writer function)
        fields: field values to write; only these are included

    Raises:
        ValueError: If a field has no writer
    """
    unknown = set(fields) - set(writers)
    if unknown:
        msg = f"Unknown fields: {sorted(unknown)}"
        raise ValueError(msg)
    return {writers[key][0]: writers[key][1](value) for key, value in fields.items()}
