"""Location repository: list, get, create, update, delete, category filters, search."""
import uuid
from typing import Any, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from models.location import Location

# Columns a caller may change through update_location.
_UPDATABLE_FIELDS = (
    "name",
    "description",
    "address",
    "photo",
    "maps_url",
    "waze_url",
    "custom_url",
    "tags",
    "category_id",
    "subcategory_id",
    "latitude",
    "longitude",
)


def list_locations(session: Session) -> list[Location]:
    """Return all locations ordered by name (the source order the explorer keeps)."""
    result = session.execute(select(Location).order_by(Location.name, Location.id))
    return list(result.scalars().all())


def get_location(session: Session, location_id: str) -> Optional[Location]:
    """Return a location by id or None."""
    return session.get(Location, location_id)


def create_location(
    session: Session,
    *,
    name: str,
    description: str,
    address: str,
    photo: str,
    maps_url: str,
    waze_url: str,
    tags: list[str],
    category_id: str,
    latitude: float,
    longitude: float,
    subcategory_id: str | None = None,
    custom_url: str | None = None,
    location_id: str | None = None,
) -> Location:
    """Create a location, commit, and return it. Id is generated if not provided."""
    loc = Location(
        id=location_id or str(uuid.uuid4()),
        name=name,
        description=description,
        address=address,
        photo=photo,
        maps_url=maps_url,
        waze_url=waze_url,
        custom_url=custom_url,
        tags=list(tags),
        category_id=category_id,
        subcategory_id=subcategory_id,
        latitude=latitude,
        longitude=longitude,
    )
    session.add(loc)
    session.commit()
    session.refresh(loc)
    return loc


def update_location(session: Session, location_id: str, updates: dict[str, Any]) -> Optional[Location]:
    """Apply updates (only known fields), commit, and return the location. None if not found."""
    loc = get_location(session, location_id)
    if loc is None:
        return None
    for key, value in updates.items():
        if key not in _UPDATABLE_FIELDS:
            continue
        if key == "tags":
            value = list(value)
        setattr(loc, key, value)
    session.commit()
    session.refresh(loc)
    return loc


def delete_location(session: Session, location_id: str) -> bool:
    """Delete a location by id. Returns True if deleted, False if not found."""
    loc = get_location(session, location_id)
    if loc is None:
        return False
    session.delete(loc)
    session.commit()
    return True


def count_locations(session: Session) -> int:
    """Return the number of locations (for seeding)."""
    result = session.execute(select(func.count()).select_from(Location))
    return result.scalar() or 0


def count_locations_by_category(session: Session, category_id: str) -> int:
    """Number of locations referencing a category (blocks category deletion)."""
    result = session.execute(
        select(func.count()).select_from(Location).where(Location.category_id == category_id)
    )
    return result.scalar() or 0


def count_locations_by_subcategory(session: Session, category_id: str, subcategory_id: str) -> int:
    """Number of locations referencing a subcategory of a category."""
    result = session.execute(
        select(func.count())
        .select_from(Location)
        .where(Location.category_id == category_id, Location.subcategory_id == subcategory_id)
    )
    return result.scalar() or 0


def list_locations_by_category(session: Session, category_id: str) -> list[Location]:
    """Return locations in a category."""
    return [loc for loc in list_locations(session) if loc.category_id == category_id]


def list_locations_by_subcategory(session: Session, subcategory_id: str) -> list[Location]:
    """Return locations with this subcategory id (in any category)."""
    return [loc for loc in list_locations(session) if loc.subcategory_id == subcategory_id]


def search_locations(session: Session, term: str) -> list[Location]:
    """Case-insensitive scan over name, description, address and tags."""
    needle = (term or "").strip().lower()
    if not needle:
        return list_locations(session)
    matches = []
    for loc in list_locations(session):
        haystack = [loc.name, loc.description, loc.address, *(loc.tags or [])]
        if any(needle in (text or "").lower() for text in haystack):
            matches.append(loc)
    return matches
