"""Location API routes."""
import json
import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import Response
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from api.categories import load_categories
from api.deps import get_blob_store, get_query_cache, require_admin
from db import get_db
from explorer_core.blob_store import LocalBlobStore
from explorer_core.decoders import decode_location
from explorer_core.entities import Location, UserProfile
from explorer_core.query_cache import QueryCache, location_keys_detail, location_keys_list
from explorer_core.selection import find_category
from repositories.location_repository import (
    create_location as repo_create_location,
    delete_location as repo_delete_location,
    get_location as repo_get_location,
    list_locations as repo_list_locations,
    list_locations_by_category as repo_list_locations_by_category,
    list_locations_by_subcategory as repo_list_locations_by_subcategory,
    search_locations as repo_search_locations,
    update_location as repo_update_location,
)
from schemas.locations import LocationCreate, LocationResponse, LocationUpdate

LOG = logging.getLogger(__name__)

router = APIRouter(prefix="/locations", tags=["locations"])


def location_to_response(loc: Location) -> LocationResponse:
    """Build LocationResponse from a decoded location."""
    return LocationResponse(
        id=loc.id,
        name=loc.name,
        description=loc.description,
        address=loc.address,
        photo=loc.photo,
        maps_url=loc.maps_url,
        waze_url=loc.waze_url,
        custom_url=loc.custom_url,
        tags=list(loc.tags),
        category=loc.category,
        subcategory=loc.subcategory,
        coordinates=[loc.latitude, loc.longitude],
    )


def load_locations(db: Session, cache: QueryCache) -> list[Location]:
    """All locations (decoded), through the query cache."""
    return cache.fetch(
        location_keys_list(),
        lambda: [decode_location(row) for row in repo_list_locations(db)],
    )


def _check_references(db: Session, cache: QueryCache, category_id: str, subcategory_id: str | None) -> None:
    """422 unless category exists and subcategory (if any) belongs to it."""
    categories = load_categories(db, cache)
    category = find_category(categories, category_id)
    if category is None:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Unknown category '{category_id}'",
        )
    if subcategory_id is not None and not category.has_subcategory(subcategory_id):
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Subcategory '{subcategory_id}' does not belong to category '{category_id}'",
        )


def _invalidate(cache: QueryCache) -> None:
    cache.invalidate(("locations",))


@router.get("", response_model=list[LocationResponse])
def list_locations(
    category: str | None = Query(default=None),
    subcategory: str | None = Query(default=None),
    q: str | None = Query(default=None, description="Search name, description, address and tags"),
    db: Session = Depends(get_db),
    cache: QueryCache = Depends(get_query_cache),
) -> list[LocationResponse]:
    """List locations, optionally filtered by category, subcategory and search term."""
    if q and q.strip():
        term = q.strip().lower()
        locations = cache.fetch(
            ("locations", "list", "search", term),
            lambda: [decode_location(row) for row in repo_search_locations(db, term)],
            stale_time=60.0,
        )
    elif subcategory:
        locations = cache.fetch(
            ("locations", "list", "subcategory", subcategory),
            lambda: [decode_location(row) for row in repo_list_locations_by_subcategory(db, subcategory)],
        )
    elif category:
        locations = cache.fetch(
            ("locations", "list", "category", category),
            lambda: [decode_location(row) for row in repo_list_locations_by_category(db, category)],
        )
    else:
        locations = load_locations(db, cache)
    if category:
        locations = [loc for loc in locations if loc.category == category]
    if subcategory:
        locations = [loc for loc in locations if loc.subcategory == subcategory]
    return [location_to_response(loc) for loc in locations]


@router.get("/export.json", response_class=Response)
def export_locations(
    db: Session = Depends(get_db),
    admin: UserProfile = Depends(require_admin),
):
    """Download all locations as a JSON file (admin)."""
    data = [location_to_response(decode_location(row)).model_dump() for row in repo_list_locations(db)]
    LOG.info("Location export (%d records) by %s", len(data), admin.email)
    return Response(
        content=json.dumps(data, ensure_ascii=False, indent=2),
        media_type="application/json",
        headers={"Content-Disposition": 'attachment; filename="locations-export.json"'},
    )


@router.get("/{location_id}", response_model=LocationResponse)
def get_location(
    location_id: str,
    db: Session = Depends(get_db),
    cache: QueryCache = Depends(get_query_cache),
) -> LocationResponse:
    """Get one location by id."""
    def load():
        row = repo_get_location(db, location_id)
        return None if row is None else decode_location(row)

    loc = cache.fetch(location_keys_detail(location_id), load)
    if loc is None:
        cache.remove(location_keys_detail(location_id))
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Location not found")
    return location_to_response(loc)


@router.post("", response_model=LocationResponse, status_code=status.HTTP_201_CREATED)
def create_location(
    body: LocationCreate,
    db: Session = Depends(get_db),
    cache: QueryCache = Depends(get_query_cache),
    admin: UserProfile = Depends(require_admin),
) -> LocationResponse:
    """Create a new location (admin)."""
    _check_references(db, cache, body.category, body.subcategory)
    if body.id and repo_get_location(db, body.id) is not None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Location '{body.id}' already exists",
        )
    try:
        row = repo_create_location(
            db,
            location_id=body.id,
            name=body.name,
            description=body.description,
            address=body.address,
            photo=body.photo,
            maps_url=body.maps_url,
            waze_url=body.waze_url,
            custom_url=body.custom_url,
            tags=body.tags,
            category_id=body.category,
            subcategory_id=body.subcategory,
            latitude=body.coordinates[0],
            longitude=body.coordinates[1],
        )
    except IntegrityError as e:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Location already exists") from e
    loc = decode_location(row)
    _invalidate(cache)
    cache.set(location_keys_detail(loc.id), loc)
    LOG.info("Location %s created by %s", loc.id, admin.email)
    return location_to_response(loc)


@router.patch("/{location_id}", response_model=LocationResponse)
def update_location(
    location_id: str,
    body: LocationUpdate,
    db: Session = Depends(get_db),
    cache: QueryCache = Depends(get_query_cache),
    blob_store: LocalBlobStore = Depends(get_blob_store),
    admin: UserProfile = Depends(require_admin),
) -> LocationResponse:
    """Update a location (admin). Only fields present in the body change."""
    row = repo_get_location(db, location_id)
    if row is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Location not found")
    sent = body.model_dump(exclude_unset=True)
    old_photo = row.photo

    updates: dict = {}
    for key in ("name", "description", "address", "photo", "maps_url", "waze_url", "custom_url", "tags"):
        if key in sent:
            if sent[key] is None and key != "custom_url":
                raise HTTPException(
                    status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                    detail=f"'{key}' cannot be null",
                )
            updates[key] = sent[key]
    if "coordinates" in sent:
        if sent["coordinates"] is None:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail="'coordinates' cannot be null",
            )
        updates["latitude"], updates["longitude"] = sent["coordinates"]

    category_id = sent.get("category") or row.category_id
    if "subcategory" in sent:
        subcategory_id = sent["subcategory"]
    elif category_id != row.category_id:
        subcategory_id = None
    else:
        subcategory_id = row.subcategory_id
    if "category" in sent or "subcategory" in sent:
        _check_references(db, cache, category_id, subcategory_id)
        updates["category_id"] = category_id
        updates["subcategory_id"] = subcategory_id

    row = repo_update_location(db, location_id, updates)
    loc = decode_location(row)
    if "photo" in updates:
        blob_store.cleanup_old_image(old_photo, loc.photo)
    _invalidate(cache)
    cache.set(location_keys_detail(loc.id), loc)
    LOG.info("Location %s updated by %s (%s)", loc.id, admin.email, ", ".join(sorted(updates)) or "no changes")
    return location_to_response(loc)


@router.delete("/{location_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_location(
    location_id: str,
    db: Session = Depends(get_db),
    cache: QueryCache = Depends(get_query_cache),
    blob_store: LocalBlobStore = Depends(get_blob_store),
    admin: UserProfile = Depends(require_admin),
) -> None:
    """Delete a location by id (admin). Its stored photo is removed too."""
    row = repo_get_location(db, location_id)
    if row is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Location not found")
    photo = row.photo
    repo_delete_location(db, location_id)
    blob_store.cleanup_old_image(photo, None)
    cache.remove(location_keys_detail(location_id))
    _invalidate(cache)
    LOG.info("Location %s deleted by %s", location_id, admin.email)
