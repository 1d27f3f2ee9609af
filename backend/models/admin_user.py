"""AdminUser model: back-office credentials."""
import uuid

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from models import Base


class AdminUser(Base):
    """admin_user table: id, email (unique), display_name, bcrypt password_hash."""

    __tablename__ = "admin_user"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4()),
    )
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    display_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
