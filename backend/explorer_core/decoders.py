"""Decode DB rows into domain entities.

Every reader goes through these functions so a row with a missing or badly shaped
required field raises MalformedRecord instead of leaking a half-filled entity.
Optional fields (custom_url, subcategory, descriptions) may be empty.
"""
from typing import Any

from explorer_core.entities import Category, Location, Product, Subcategory, UserProfile
from explorer_core.errors import MalformedRecord


def _require_str(record_type: str, record_id: Any, row: Any, attr: str) -> str:
    """Return a non-empty string attribute or raise MalformedRecord."""
    value = getattr(row, attr, None)
    if not isinstance(value, str) or not value.strip():
        raise MalformedRecord(record_type, record_id, f"missing or empty '{attr}'")
    return value


def _optional_str(row: Any, attr: str) -> str | None:
    value = getattr(row, attr, None)
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def _require_float(record_type: str, record_id: Any, row: Any, attr: str, low: float, high: float) -> float:
    value = getattr(row, attr, None)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise MalformedRecord(record_type, record_id, f"'{attr}' must be a number")
    value = float(value)
    if not low <= value <= high:
        raise MalformedRecord(record_type, record_id, f"'{attr}' {value} outside [{low}, {high}]")
    return value


def decode_location(row: Any) -> Location:
    """Decode a location row. Tags must be a non-empty list of strings."""
    record_id = getattr(row, "id", None)
    if not record_id:
        raise MalformedRecord("location", record_id, "missing 'id'")
    tags = getattr(row, "tags", None)
    if not isinstance(tags, list) or not tags:
        raise MalformedRecord("location", record_id, "'tags' must be a non-empty list")
    if not all(isinstance(t, str) for t in tags):
        raise MalformedRecord("location", record_id, "'tags' must contain only strings")
    return Location(
        id=str(record_id),
        name=_require_str("location", record_id, row, "name"),
        description=_require_str("location", record_id, row, "description"),
        address=_require_str("location", record_id, row, "address"),
        photo=_require_str("location", record_id, row, "photo"),
        maps_url=_require_str("location", record_id, row, "maps_url"),
        waze_url=_require_str("location", record_id, row, "waze_url"),
        custom_url=_optional_str(row, "custom_url"),
        tags=tuple(tags),
        category=_require_str("location", record_id, row, "category_id"),
        subcategory=_optional_str(row, "subcategory_id"),
        coordinates=(
            _require_float("location", record_id, row, "latitude", -90.0, 90.0),
            _require_float("location", record_id, row, "longitude", -180.0, 180.0),
        ),
    )


def decode_subcategory(row: Any, category_id: str) -> Subcategory:
    record_id = f"{category_id}/{getattr(row, 'id', None)}"
    return Subcategory(
        id=_require_str("subcategory", record_id, row, "id"),
        name=_require_str("subcategory", record_id, row, "name"),
        description=_optional_str(row, "description"),
    )


def decode_category(row: Any) -> Category:
    """Decode a category row with its subcategories (already ordered by position)."""
    record_id = getattr(row, "id", None)
    category_id = _require_str("category", record_id, row, "id")
    subs = getattr(row, "subcategories", None)
    if subs is None:
        subs = []
    return Category(
        id=category_id,
        name=_require_str("category", record_id, row, "name"),
        subcategories=tuple(decode_subcategory(s, category_id) for s in subs),
    )


def decode_product(row: Any) -> Product:
    record_id = getattr(row, "id", None)
    if not isinstance(record_id, int) or isinstance(record_id, bool):
        raise MalformedRecord("product", record_id, "'id' must be an integer")
    return Product(
        id=record_id,
        name=_require_str("product", record_id, row, "name"),
        description=_require_str("product", record_id, row, "description"),
        price=_require_str("product", record_id, row, "price"),
        image=_require_str("product", record_id, row, "image"),
        link_url=_require_str("product", record_id, row, "link_url"),
    )


def decode_admin(row: Any) -> UserProfile:
    """Decode an admin row into the public profile. Name falls back to the email local part."""
    record_id = getattr(row, "id", None)
    email = _require_str("admin_user", record_id, row, "email")
    name = _optional_str(row, "display_name") or email.split("@")[0] or "Usuario"
    return UserProfile(id=str(record_id), email=email, name=name)
