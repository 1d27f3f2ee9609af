"""Location model for DB persistence."""
import uuid

from sqlalchemy import Float, String, Text
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.types import JSON

from models import Base


class Location(Base):
    """Location table: a point of interest shown on the explorer map.

    category_id holds the category slug; subcategory_id (optional) must belong to
    that category. Both are checked by the API at write time rather than by FKs so
    that reads can degrade gracefully on inconsistent data.
    """

    __tablename__ = "location"

    id: Mapped[str] = mapped_column(
        String(64),
        primary_key=True,
        default=lambda: str(uuid.uuid4()),
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    address: Mapped[str] = mapped_column(String(512), nullable=False)
    photo: Mapped[str] = mapped_column(String(1024), nullable=False)
    maps_url: Mapped[str] = mapped_column(String(1024), nullable=False)
    waze_url: Mapped[str] = mapped_column(String(1024), nullable=False)
    custom_url: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    tags: Mapped[list] = mapped_column(JSON(), nullable=False, default=list)
    category_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    subcategory_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    latitude: Mapped[float] = mapped_column(Float, nullable=False)
    longitude: Mapped[float] = mapped_column(Float, nullable=False)
