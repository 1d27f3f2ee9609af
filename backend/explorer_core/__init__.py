# Explorer core: entities, decoders, selection model, query cache, marker styles, blob store
from explorer_core.entities import Category, Location, Product, Subcategory, UserProfile
from explorer_core.errors import ErrorKind, MalformedRecord
from explorer_core.selection import (
    ALL,
    ScopeKind,
    SelectionModel,
    SelectionState,
    available_subcategories,
    select_category,
    select_subcategory,
    visible_locations,
)

__all__ = [
    "ALL",
    "Category",
    "ErrorKind",
    "Location",
    "MalformedRecord",
    "Product",
    "ScopeKind",
    "SelectionModel",
    "SelectionState",
    "Subcategory",
    "UserProfile",
    "available_subcategories",
    "select_category",
    "select_subcategory",
    "visible_locations",
]
