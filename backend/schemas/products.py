"""Pydantic schemas for product API."""
from pydantic import BaseModel, Field, field_validator


def _strip_text(value):
    return value.strip() if isinstance(value, str) else value


class ProductCreate(BaseModel):
    """Payload for creating a product. price is free display text."""

    name: str = Field(..., min_length=1, max_length=255)
    description: str = Field(..., min_length=1)
    price: str = Field(..., min_length=1, max_length=64)
    image: str = Field(..., min_length=1)
    link_url: str = Field(..., min_length=1)

    @field_validator("name", "description", "price", "image", "link_url", mode="before")
    @classmethod
    def _strip(cls, v):
        return _strip_text(v)


class ProductUpdate(BaseModel):
    """Payload for updating a product (all fields optional)."""

    name: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = Field(default=None, min_length=1)
    price: str | None = Field(default=None, min_length=1, max_length=64)
    image: str | None = Field(default=None, min_length=1)
    link_url: str | None = Field(default=None, min_length=1)

    @field_validator("name", "description", "price", "image", "link_url", mode="before")
    @classmethod
    def _strip(cls, v):
        return _strip_text(v)


class ProductResponse(BaseModel):
    id: int
    name: str
    description: str
    price: str
    image: str
    link_url: str
