"""Pydantic schemas for the explorer view (filter bar, map markers, legend)."""
from pydantic import BaseModel, Field

from schemas.categories import SubcategoryResponse
from schemas.locations import LocationResponse


class ScopeIn(BaseModel):
    """Client-held scope. category "all" (or null) means no filter."""

    category: str | None = "all"
    subcategory: str | None = None


class ScopeOut(BaseModel):
    kind: str  # "all" | "category" | "category+subcategory"
    category: str
    subcategory: str | None = None


class SelectCategoryRequest(BaseModel):
    scope: ScopeIn = Field(default_factory=ScopeIn)
    category: str | None = None


class SelectSubcategoryRequest(BaseModel):
    scope: ScopeIn = Field(default_factory=ScopeIn)
    subcategory: str | None = None


class MarkerResponse(BaseModel):
    """Map marker for one visible location."""

    location_id: str
    name: str
    coordinates: list[float]
    category: str
    icon: str
    color: str


class LegendEntry(BaseModel):
    id: str
    name: str
    icon: str
    color: str


class ExplorerView(BaseModel):
    """Scope plus everything derived from it."""

    scope: ScopeOut
    locations: list[LocationResponse]
    subcategories: list[SubcategoryResponse]
    markers: list[MarkerResponse]
