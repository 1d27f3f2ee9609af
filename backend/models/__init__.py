"""SQLAlchemy declarative base and models."""
from datetime import datetime, timezone

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class for all DB models."""
    pass


def utcnow() -> datetime:
    """Timezone-aware now, used for created_at/updated_at defaults."""
    return datetime.now(timezone.utc)
