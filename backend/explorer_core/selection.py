"""Category/subcategory selection model for the explorer filter bar.

Scope is one of ALL, CATEGORY(C) or CATEGORY(C)+SUB(S). Transitions:

    ALL                 select_category(C)       -> CATEGORY(C)
    CATEGORY(C)         select_category(C)       -> ALL
    CATEGORY(C)         select_category(C2)      -> CATEGORY(C2)
    CATEGORY(C)         select_subcategory(S)    -> CATEGORY(C)+SUB(S)
    CATEGORY(C)+SUB(S)  select_subcategory(S)    -> CATEGORY(C)
    CATEGORY(C)+SUB(S)  select_subcategory(S2)   -> CATEGORY(C)+SUB(S2)
    any                 select_category(ALL)     -> ALL

visible_locations and available_subcategories are pure derivations over the full
location and category sets.
"""
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional, Sequence

from explorer_core.entities import Category, Location, Subcategory

LOG = logging.getLogger(__name__)

# Sentinel category id meaning "no category filter".
ALL = "all"


class ScopeKind(str, Enum):
    All = "all"
    Category = "category"
    CategorySubcategory = "category+subcategory"


def _is_all(category_id: Optional[str]) -> bool:
    return category_id is None or category_id == "" or category_id == ALL


@dataclass(frozen=True)
class SelectionState:
    """Immutable visitor scope. category is ALL or a category slug."""

    category: str = ALL
    subcategory: Optional[str] = None

    def __post_init__(self) -> None:
        if _is_all(self.category):
            object.__setattr__(self, "category", ALL)
            object.__setattr__(self, "subcategory", None)
        elif self.subcategory == "":
            object.__setattr__(self, "subcategory", None)

    @property
    def kind(self) -> ScopeKind:
        if self.category == ALL:
            return ScopeKind.All
        if self.subcategory is None:
            return ScopeKind.Category
        return ScopeKind.CategorySubcategory

    @property
    def active_category(self) -> Optional[str]:
        """Category slug, or None under ALL."""
        return None if self.category == ALL else self.category


def select_category(state: SelectionState, category_id: Optional[str]) -> SelectionState:
    """Apply a category click. Clears the subcategory; re-selecting the active category toggles to ALL."""
    if _is_all(category_id):
        return SelectionState()
    if state.category == category_id:
        return SelectionState()
    return SelectionState(category=category_id)


def select_subcategory(state: SelectionState, subcategory_id: Optional[str]) -> SelectionState:
    """Apply a subcategory click. Ignored under ALL; re-selecting the active subcategory clears it."""
    if state.category == ALL:
        return state
    if subcategory_id is None or subcategory_id == "" or state.subcategory == subcategory_id:
        return SelectionState(category=state.category)
    return SelectionState(category=state.category, subcategory=subcategory_id)


def find_category(categories: Iterable[Category], category_id: str) -> Optional[Category]:
    for category in categories:
        if category.id == category_id:
            return category
    return None


def visible_locations(
    all_locations: Sequence[Location],
    active_category: Optional[str],
    active_subcategory: Optional[str],
    categories: Optional[Iterable[Category]] = None,
) -> list[Location]:
    """
    Locations to display for the scope, in source order.
    When categories is given and active_category is not among them, the scope is
    inconsistent with the store and an empty list is returned.
    """
    if _is_all(active_category):
        return list(all_locations)
    if categories is not None and find_category(categories, active_category) is None:
        LOG.warning("visible_locations: unknown category %r, showing no locations", active_category)
        return []
    matches = [loc for loc in all_locations if loc.category == active_category]
    if active_subcategory:
        matches = [loc for loc in matches if loc.subcategory == active_subcategory]
    return matches


def available_subcategories(
    active_category: Optional[str],
    categories: Iterable[Category],
) -> list[Subcategory]:
    """Subcategory options for the active category; [] under ALL or for an unknown category."""
    if _is_all(active_category):
        return []
    category = find_category(categories, active_category)
    if category is None:
        LOG.warning("available_subcategories: unknown category %r", active_category)
        return []
    return list(category.subcategories)


class SelectionModel:
    """
    Holds the current scope and derives the view from the latest location and
    category sets. Each call to a select_* method replaces the state.
    """

    __slots__ = ("state",)

    def __init__(self, state: Optional[SelectionState] = None) -> None:
        self.state = state or SelectionState()

    def select_category(self, category_id: Optional[str]) -> SelectionState:
        self.state = select_category(self.state, category_id)
        return self.state

    def select_subcategory(self, subcategory_id: Optional[str]) -> SelectionState:
        self.state = select_subcategory(self.state, subcategory_id)
        return self.state

    def reset(self) -> SelectionState:
        self.state = SelectionState()
        return self.state

    def visible_locations(
        self,
        all_locations: Sequence[Location],
        categories: Optional[Iterable[Category]] = None,
    ) -> list[Location]:
        return visible_locations(all_locations, self.state.active_category, self.state.subcategory, categories)

    def available_subcategories(self, categories: Iterable[Category]) -> list[Subcategory]:
        return available_subcategories(self.state.active_category, categories)
