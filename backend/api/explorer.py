"""Explorer API: filter bar scope, visible locations, map markers and legend.

The server keeps no visitor state: the client sends its current scope and gets
back the new scope plus everything derived from it.
"""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from api.categories import load_categories
from api.deps import get_query_cache
from api.locations import load_locations, location_to_response
from db import get_db
from explorer_core.markers import legend, style_for
from explorer_core.query_cache import QueryCache
from explorer_core.selection import (
    SelectionState,
    available_subcategories,
    select_category as apply_select_category,
    select_subcategory as apply_select_subcategory,
    visible_locations,
)
from schemas.categories import SubcategoryResponse
from schemas.explorer import (
    ExplorerView,
    LegendEntry,
    MarkerResponse,
    ScopeIn,
    ScopeOut,
    SelectCategoryRequest,
    SelectSubcategoryRequest,
)

router = APIRouter(prefix="/explorer", tags=["explorer"])


def _state_from_scope(scope: ScopeIn) -> SelectionState:
    return SelectionState(category=scope.category, subcategory=scope.subcategory)


def _build_view(state: SelectionState, db: Session, cache: QueryCache) -> ExplorerView:
    """Derive the visible locations, subcategory options and markers for a scope."""
    categories = load_categories(db, cache)
    locations = load_locations(db, cache)
    visible = visible_locations(locations, state.active_category, state.subcategory, categories)
    subs = available_subcategories(state.active_category, categories)
    markers = []
    for loc in visible:
        style = style_for(loc.category)
        markers.append(
            MarkerResponse(
                location_id=loc.id,
                name=loc.name,
                coordinates=[loc.latitude, loc.longitude],
                category=loc.category,
                icon=style.icon,
                color=style.color,
            )
        )
    return ExplorerView(
        scope=ScopeOut(kind=state.kind.value, category=state.category, subcategory=state.subcategory),
        locations=[location_to_response(loc) for loc in visible],
        subcategories=[SubcategoryResponse(id=s.id, name=s.name, description=s.description) for s in subs],
        markers=markers,
    )


@router.get("", response_model=ExplorerView)
def get_view(
    category: str | None = Query(default="all"),
    subcategory: str | None = Query(default=None),
    db: Session = Depends(get_db),
    cache: QueryCache = Depends(get_query_cache),
) -> ExplorerView:
    """View for a scope given as query parameters (category=all for no filter)."""
    return _build_view(SelectionState(category=category, subcategory=subcategory), db, cache)


@router.post("/select-category", response_model=ExplorerView)
def select_category(
    body: SelectCategoryRequest,
    db: Session = Depends(get_db),
    cache: QueryCache = Depends(get_query_cache),
) -> ExplorerView:
    """Apply a category click to the given scope (toggles back to all when re-selected)."""
    state = apply_select_category(_state_from_scope(body.scope), body.category)
    return _build_view(state, db, cache)


@router.post("/select-subcategory", response_model=ExplorerView)
def select_subcategory(
    body: SelectSubcategoryRequest,
    db: Session = Depends(get_db),
    cache: QueryCache = Depends(get_query_cache),
) -> ExplorerView:
    """Apply a subcategory click to the given scope (toggles off when re-selected)."""
    state = apply_select_subcategory(_state_from_scope(body.scope), body.subcategory)
    return _build_view(state, db, cache)


@router.get("/legend", response_model=list[LegendEntry])
def get_legend(
    db: Session = Depends(get_db),
    cache: QueryCache = Depends(get_query_cache),
) -> list[LegendEntry]:
    """Marker icon and colour for each stored category."""
    return [LegendEntry(**entry) for entry in legend(load_categories(db, cache))]
