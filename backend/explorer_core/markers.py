"""Map marker styles per category: icon and colour, with a documented default."""
import logging
from dataclasses import dataclass
from typing import Iterable

from explorer_core.entities import Category

LOG = logging.getLogger(__name__)


@dataclass(frozen=True)
class MarkerStyle:
    icon: str
    color: str


# Used for any category without an explicit entry below.
DEFAULT_MARKER_STYLE = MarkerStyle(icon="📍", color="#6b7280")

# Known taxonomy (category slug -> style). Keep in sync with utils/seed_data.py.
MARKER_STYLES: dict[str, MarkerStyle] = {
    "comidas": MarkerStyle(icon="🍽️", color="#f59e0b"),
    "hospedajes": MarkerStyle(icon="🛏️", color="#0ea5e9"),
    "aventura": MarkerStyle(icon="🏔️", color="#10b981"),
    "market": MarkerStyle(icon="🛒", color="#84cc16"),
    "shops": MarkerStyle(icon="🛍️", color="#3b82f6"),
    "drogueria": MarkerStyle(icon="💊", color="#ef4444"),
    "recomendado-pet": MarkerStyle(icon="🐾", color="#a16207"),
    "recomendado-kits": MarkerStyle(icon="🎒", color="#7c3aed"),
    "artesanias": MarkerStyle(icon="🧺", color="#d97706"),
    "mall": MarkerStyle(icon="🏬", color="#6366f1"),
    "emergencias": MarkerStyle(icon="🚑", color="#dc2626"),
    "recomendado-del-mes": MarkerStyle(icon="⭐", color="#eab308"),
    "cultural": MarkerStyle(icon="🏛️", color="#8b5cf6"),
    "vecinos": MarkerStyle(icon="🏘️", color="#14b8a6"),
    "emprendedores": MarkerStyle(icon="💡", color="#ec4899"),
}


def style_for(category_id: str | None) -> MarkerStyle:
    """Style for a category slug; DEFAULT_MARKER_STYLE when unknown."""
    if category_id is None:
        return DEFAULT_MARKER_STYLE
    return MARKER_STYLES.get(category_id, DEFAULT_MARKER_STYLE)


def validate_marker_styles(categories: Iterable[Category]) -> list[str]:
    """
    Check the style table against the stored categories (run at startup).
    Returns the slugs that will fall back to the default style.
    """
    missing = [c.id for c in categories if c.id not in MARKER_STYLES]
    for slug in missing:
        LOG.warning("No marker style for category %r; using default %s", slug, DEFAULT_MARKER_STYLE.icon)
    return missing


def legend(categories: Iterable[Category]) -> list[dict]:
    """Legend entries (id, name, icon, color) for the given categories, in order."""
    entries = []
    for c in categories:
        style = style_for(c.id)
        entries.append({"id": c.id, "name": c.name, "icon": style.icon, "color": style.color})
    return entries
