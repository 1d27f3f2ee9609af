"""Category API routes (categories with embedded subcategories)."""
import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from api.deps import get_query_cache, require_admin
from db import get_db
from explorer_core.decoders import decode_category
from explorer_core.entities import Category, UserProfile
from explorer_core.query_cache import QueryCache, category_keys_list
from repositories.category_repository import (
    add_subcategory as repo_add_subcategory,
    create_category as repo_create_category,
    delete_category as repo_delete_category,
    get_category as repo_get_category,
    list_all_subcategory_names as repo_list_all_subcategory_names,
    list_categories as repo_list_categories,
    remove_subcategory as repo_remove_subcategory,
    update_category as repo_update_category,
)
from repositories.location_repository import count_locations_by_category, count_locations_by_subcategory
from schemas.categories import (
    CategoryCreate,
    CategoryResponse,
    CategoryUpdate,
    SubcategoryIn,
    SubcategoryResponse,
)

LOG = logging.getLogger(__name__)

router = APIRouter(tags=["categories"])


def load_categories(db: Session, cache: QueryCache) -> list[Category]:
    """All categories (decoded), through the query cache."""
    return cache.fetch(
        category_keys_list(),
        lambda: [decode_category(row) for row in repo_list_categories(db)],
    )


def category_to_response(c: Category) -> CategoryResponse:
    """Build CategoryResponse from a decoded category."""
    return CategoryResponse(
        id=c.id,
        name=c.name,
        subcategories=[
            SubcategoryResponse(id=s.id, name=s.name, description=s.description)
            for s in c.subcategories
        ],
    )


def _invalidate(cache: QueryCache) -> None:
    cache.invalidate(("categories",))


def _get_or_404(db: Session, category_id: str):
    row = repo_get_category(db, category_id)
    if row is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Category not found")
    return row


@router.get("/categories", response_model=list[CategoryResponse])
def list_categories(
    db: Session = Depends(get_db),
    cache: QueryCache = Depends(get_query_cache),
) -> list[CategoryResponse]:
    """List all categories ordered by name."""
    return [category_to_response(c) for c in load_categories(db, cache)]


@router.get("/subcategories", response_model=list[str])
def list_all_subcategories(db: Session = Depends(get_db)) -> list[str]:
    """Distinct subcategory names across all categories, sorted."""
    return repo_list_all_subcategory_names(db)


@router.get("/categories/{category_id}", response_model=CategoryResponse)
def get_category(category_id: str, db: Session = Depends(get_db)) -> CategoryResponse:
    """Get one category by slug."""
    return category_to_response(decode_category(_get_or_404(db, category_id)))


@router.get("/categories/{category_id}/subcategories", response_model=list[SubcategoryResponse])
def list_subcategories(category_id: str, db: Session = Depends(get_db)) -> list[SubcategoryResponse]:
    """Subcategories of one category, in display order."""
    category = decode_category(_get_or_404(db, category_id))
    return category_to_response(category).subcategories


@router.post("/categories", response_model=CategoryResponse, status_code=status.HTTP_201_CREATED)
def create_category(
    body: CategoryCreate,
    db: Session = Depends(get_db),
    cache: QueryCache = Depends(get_query_cache),
    admin: UserProfile = Depends(require_admin),
) -> CategoryResponse:
    """Create a category (admin)."""
    if repo_get_category(db, body.id) is not None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Category '{body.id}' already exists",
        )
    try:
        row = repo_create_category(
            db,
            category_id=body.id,
            name=body.name,
            subcategories=[s.model_dump() for s in body.subcategories],
        )
    except IntegrityError as e:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Category already exists") from e
    _invalidate(cache)
    LOG.info("Category %s created by %s", row.id, admin.email)
    return category_to_response(decode_category(row))


@router.patch("/categories/{category_id}", response_model=CategoryResponse)
def update_category(
    category_id: str,
    body: CategoryUpdate,
    db: Session = Depends(get_db),
    cache: QueryCache = Depends(get_query_cache),
    admin: UserProfile = Depends(require_admin),
) -> CategoryResponse:
    """Rename a category and/or replace its subcategory list (admin).
    Subcategories still referenced by locations cannot be dropped."""
    existing = decode_category(_get_or_404(db, category_id))
    subcategories = None
    if body.subcategories is not None:
        kept = {s.id for s in body.subcategories}
        for sub_id in existing.subcategory_ids():
            if sub_id not in kept and count_locations_by_subcategory(db, category_id, sub_id) > 0:
                raise HTTPException(
                    status_code=status.HTTP_409_CONFLICT,
                    detail=f"Subcategory '{sub_id}' is still used by locations",
                )
        subcategories = [s.model_dump() for s in body.subcategories]
    row = repo_update_category(db, category_id, name=body.name, subcategories=subcategories)
    if row is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Category not found")
    _invalidate(cache)
    LOG.info("Category %s updated by %s", category_id, admin.email)
    return category_to_response(decode_category(row))


@router.delete("/categories/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_category(
    category_id: str,
    db: Session = Depends(get_db),
    cache: QueryCache = Depends(get_query_cache),
    admin: UserProfile = Depends(require_admin),
) -> None:
    """Delete a category and its subcategories (admin). 409 while locations reference it."""
    _get_or_404(db, category_id)
    in_use = count_locations_by_category(db, category_id)
    if in_use:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Category '{category_id}' is still used by {in_use} location(s)",
        )
    repo_delete_category(db, category_id)
    _invalidate(cache)
    LOG.info("Category %s deleted by %s", category_id, admin.email)


@router.post(
    "/categories/{category_id}/subcategories",
    response_model=CategoryResponse,
    status_code=status.HTTP_201_CREATED,
)
def add_subcategory(
    category_id: str,
    body: SubcategoryIn,
    db: Session = Depends(get_db),
    cache: QueryCache = Depends(get_query_cache),
    admin: UserProfile = Depends(require_admin),
) -> CategoryResponse:
    """Append a subcategory to a category (admin)."""
    existing = decode_category(_get_or_404(db, category_id))
    if existing.has_subcategory(body.id):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Subcategory '{body.id}' already exists in '{category_id}'",
        )
    row = repo_add_subcategory(
        db,
        category_id,
        subcategory_id=body.id,
        name=body.name,
        description=body.description,
    )
    _invalidate(cache)
    LOG.info("Subcategory %s/%s added by %s", category_id, body.id, admin.email)
    return category_to_response(decode_category(row))


@router.delete("/categories/{category_id}/subcategories/{subcategory_id}", response_model=CategoryResponse)
def remove_subcategory(
    category_id: str,
    subcategory_id: str,
    db: Session = Depends(get_db),
    cache: QueryCache = Depends(get_query_cache),
    admin: UserProfile = Depends(require_admin),
) -> CategoryResponse:
    """Remove a subcategory (admin). 409 while locations reference it."""
    existing = decode_category(_get_or_404(db, category_id))
    if not existing.has_subcategory(subcategory_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Subcategory not found")
    if count_locations_by_subcategory(db, category_id, subcategory_id) > 0:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Subcategory '{subcategory_id}' is still used by locations",
        )
    row = repo_remove_subcategory(db, category_id, subcategory_id)
    _invalidate(cache)
    LOG.info("Subcategory %s/%s removed by %s", category_id, subcategory_id, admin.email)
    return category_to_response(decode_category(row))
