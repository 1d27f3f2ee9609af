"""Pydantic schemas for category API."""
from pydantic import BaseModel, Field, field_validator, model_validator

from utils.text import slugify

SLUG_PATTERN = r"^[a-z0-9]+(?:-[a-z0-9]+)*$"


class SubcategoryIn(BaseModel):
    """Subcategory in a write payload. id defaults to the slug of name."""

    id: str | None = Field(default=None, pattern=SLUG_PATTERN, max_length=64)
    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = None

    @model_validator(mode="after")
    def _default_id(self) -> "SubcategoryIn":
        if not self.id:
            self.id = slugify(self.name)
            if not self.id:
                raise ValueError(f"cannot derive an id from subcategory name {self.name!r}")
        return self


def _unique_ids(subs: list[SubcategoryIn]) -> list[SubcategoryIn]:
    seen: set[str] = set()
    for sub in subs:
        if sub.id in seen:
            raise ValueError(f"duplicate subcategory id '{sub.id}'")
        seen.add(sub.id)
    return subs


class CategoryCreate(BaseModel):
    """Payload for creating a category. id is the slug locations refer to."""

    id: str = Field(..., pattern=SLUG_PATTERN, max_length=64)
    name: str = Field(..., min_length=1, max_length=255)
    subcategories: list[SubcategoryIn] = Field(default_factory=list)

    @field_validator("subcategories")
    @classmethod
    def _subs(cls, v: list[SubcategoryIn]) -> list[SubcategoryIn]:
        return _unique_ids(v)


class CategoryUpdate(BaseModel):
    """Payload for updating a category. subcategories, when given, replaces the list."""

    name: str | None = Field(default=None, min_length=1, max_length=255)
    subcategories: list[SubcategoryIn] | None = None

    @field_validator("subcategories")
    @classmethod
    def _subs(cls, v: list[SubcategoryIn] | None) -> list[SubcategoryIn] | None:
        return None if v is None else _unique_ids(v)


class SubcategoryResponse(BaseModel):
    id: str
    name: str
    description: str | None = None


class CategoryResponse(BaseModel):
    """Category with its ordered subcategories."""

    id: str
    name: str
    subcategories: list[SubcategoryResponse] = []
