"""Pydantic schemas for location API."""
from urllib.parse import urlparse

from pydantic import BaseModel, Field, field_validator

# Client-supplied ids (e.g. "loc-7") must be URL-safe.
LOCATION_ID_PATTERN = r"^[A-Za-z0-9_-]{1,64}$"


def _check_url(value: str) -> str:
    value = value.strip()
    parsed = urlparse(value)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ValueError("must be a valid http(s) URL")
    return value


def _clean_tags(tags: list[str]) -> list[str]:
    """Strip tags, drop blanks and duplicates (first occurrence wins)."""
    seen: set[str] = set()
    cleaned = []
    for tag in tags:
        tag = tag.strip()
        if tag and tag not in seen:
            seen.add(tag)
            cleaned.append(tag)
    if not cleaned:
        raise ValueError("at least one tag is required")
    return cleaned


def _check_coordinates(value: tuple[float, float]) -> tuple[float, float]:
    lat, lng = value
    if not -90 <= lat <= 90:
        raise ValueError("latitude must be between -90 and 90")
    if not -180 <= lng <= 180:
        raise ValueError("longitude must be between -180 and 180")
    return value


def _blank_to_none(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


class LocationCreate(BaseModel):
    """Payload for creating a location. coordinates is [latitude, longitude]."""

    id: str | None = Field(default=None, pattern=LOCATION_ID_PATTERN)
    name: str = Field(..., min_length=2)
    description: str = Field(..., min_length=10)
    address: str = Field(..., min_length=5)
    photo: str = Field(..., min_length=1)
    maps_url: str
    waze_url: str
    custom_url: str | None = None
    tags: list[str] = Field(..., min_length=1)
    category: str = Field(..., min_length=1)
    subcategory: str | None = None
    coordinates: tuple[float, float]

    @field_validator("name", "description", "address", "photo", "category", mode="before")
    @classmethod
    def _strip(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("maps_url", "waze_url")
    @classmethod
    def _url(cls, v: str) -> str:
        return _check_url(v)

    @field_validator("custom_url")
    @classmethod
    def _optional_url(cls, v: str | None) -> str | None:
        v = _blank_to_none(v)
        return None if v is None else _check_url(v)

    @field_validator("subcategory")
    @classmethod
    def _subcategory(cls, v: str | None) -> str | None:
        return _blank_to_none(v)

    @field_validator("tags")
    @classmethod
    def _tags(cls, v: list[str]) -> list[str]:
        return _clean_tags(v)

    @field_validator("coordinates")
    @classmethod
    def _coordinates(cls, v: tuple[float, float]) -> tuple[float, float]:
        return _check_coordinates(v)


class LocationUpdate(BaseModel):
    """Payload for updating a location (all fields optional).

    Sending subcategory as null or "" clears it. Changing category without sending
    subcategory also clears it.
    """

    name: str | None = Field(default=None, min_length=2)
    description: str | None = Field(default=None, min_length=10)
    address: str | None = Field(default=None, min_length=5)
    photo: str | None = Field(default=None, min_length=1)
    maps_url: str | None = None
    waze_url: str | None = None
    custom_url: str | None = None
    tags: list[str] | None = None
    category: str | None = Field(default=None, min_length=1)
    subcategory: str | None = None
    coordinates: tuple[float, float] | None = None

    @field_validator("name", "description", "address", "photo", "category", mode="before")
    @classmethod
    def _strip(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("maps_url", "waze_url")
    @classmethod
    def _url(cls, v: str | None) -> str | None:
        return None if v is None else _check_url(v)

    @field_validator("custom_url")
    @classmethod
    def _optional_url(cls, v: str | None) -> str | None:
        v = _blank_to_none(v)
        return None if v is None else _check_url(v)

    @field_validator("subcategory")
    @classmethod
    def _subcategory(cls, v: str | None) -> str | None:
        return _blank_to_none(v)

    @field_validator("tags")
    @classmethod
    def _tags(cls, v: list[str] | None) -> list[str] | None:
        return None if v is None else _clean_tags(v)

    @field_validator("coordinates")
    @classmethod
    def _coordinates(cls, v: tuple[float, float] | None) -> tuple[float, float] | None:
        return None if v is None else _check_coordinates(v)


class LocationResponse(BaseModel):
    """Location in API responses."""

    id: str
    name: str
    description: str
    address: str
    photo: str
    maps_url: str
    waze_url: str
    custom_url: str | None = None
    tags: list[str]
    category: str
    subcategory: str | None = None
    coordinates: list[float]
