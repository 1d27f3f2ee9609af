"""Subcategory model: ordered subcategories embedded in a category."""
from sqlalchemy import ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from models import Base


class Subcategory(Base):
    """subcategory table: one row per subcategory; id is unique within its category."""

    __tablename__ = "subcategory"

    category_id: Mapped[str] = mapped_column(
        String(64),
        ForeignKey("category.id", ondelete="CASCADE"),
        primary_key=True,
    )
    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    # Display order inside the category (0-based).
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    category: Mapped["Category"] = relationship("Category", back_populates="subcategories")
