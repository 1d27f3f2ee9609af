"""Product model for DB persistence."""
from sqlalchemy import Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from models import Base


class Product(Base):
    """Merchandise item: price is a display string (e.g. "$45.000"), not an amount."""

    __tablename__ = "product"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    price: Mapped[str] = mapped_column(String(64), nullable=False)
    image: Mapped[str] = mapped_column(String(1024), nullable=False)
    link_url: Mapped[str] = mapped_column(String(1024), nullable=False)
