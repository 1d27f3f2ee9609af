"""Text helpers: slugs for category and subcategory ids."""
import re
import unicodedata

_NON_SLUG = re.compile(r"[^a-z0-9]+")


def slugify(value: str) -> str:
    """ASCII slug: "Cafés & Bares" -> "cafes-bares". Empty input gives ""."""
    normalized = unicodedata.normalize("NFKD", value or "")
    ascii_only = normalized.encode("ascii", "ignore").decode("ascii").lower()
    return _NON_SLUG.sub("-", ascii_only).strip("-")


def price_digits(price: str) -> int | None:
    """Integer value of the digits in a display price ("$45.000" -> 45000), or None."""
    digits = re.sub(r"[^\d]", "", price or "")
    return int(digits) if digits else None
