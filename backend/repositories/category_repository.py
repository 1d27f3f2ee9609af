"""Category repository: categories with their embedded, ordered subcategories."""
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session, selectinload

from models.category import Category
from models.subcategory import Subcategory


def list_categories(session: Session) -> list[Category]:
    """Return all categories ordered by name, with subcategories loaded."""
    result = session.execute(
        select(Category)
        .order_by(Category.name)
        .options(selectinload(Category.subcategories))
    )
    return list(result.scalars().all())


def get_category(session: Session, category_id: str) -> Optional[Category]:
    """Return category by slug or None."""
    return session.get(Category, category_id)


def count_categories(session: Session) -> int:
    result = session.execute(select(func.count()).select_from(Category))
    return result.scalar() or 0


def _build_subcategories(category_id: str, subcategories: list[dict]) -> list[Subcategory]:
    return [
        Subcategory(
            category_id=category_id,
            id=sub["id"],
            name=sub["name"],
            description=sub.get("description"),
            position=i,
        )
        for i, sub in enumerate(subcategories)
    ]


def create_category(
    session: Session,
    *,
    category_id: str,
    name: str,
    subcategories: list[dict] | None = None,
) -> Category:
    """
    Create a category with subcategories (list of {id, name, description?} in display
    order), commit, and return it.
    """
    category = Category(id=category_id, name=name)
    category.subcategories = _build_subcategories(category_id, subcategories or [])
    session.add(category)
    session.commit()
    session.refresh(category)
    return category


def update_category(
    session: Session,
    category_id: str,
    *,
    name: str | None = None,
    subcategories: list[dict] | None = None,
) -> Optional[Category]:
    """Rename and/or replace the subcategory list. Returns None if not found."""
    category = get_category(session, category_id)
    if category is None:
        return None
    if name is not None:
        category.name = name
    if subcategories is not None:
        category.subcategories.clear()
        session.flush()
        category.subcategories.extend(_build_subcategories(category_id, subcategories))
    session.commit()
    session.refresh(category)
    return category


def delete_category(session: Session, category_id: str) -> bool:
    """Delete category (and its subcategories). Returns True if deleted, False if not found."""
    category = get_category(session, category_id)
    if category is None:
        return False
    session.delete(category)
    session.commit()
    return True


def add_subcategory(
    session: Session,
    category_id: str,
    *,
    subcategory_id: str,
    name: str,
    description: str | None = None,
) -> Optional[Category]:
    """Append a subcategory at the end of the list. Returns None if the category is not found."""
    category = get_category(session, category_id)
    if category is None:
        return None
    position = max((s.position for s in category.subcategories), default=-1) + 1
    category.subcategories.append(
        Subcategory(
            category_id=category_id,
            id=subcategory_id,
            name=name,
            description=description,
            position=position,
        )
    )
    session.commit()
    session.refresh(category)
    return category


def remove_subcategory(session: Session, category_id: str, subcategory_id: str) -> Optional[Category]:
    """Remove a subcategory. Returns the category, or None if the category is not found."""
    category = get_category(session, category_id)
    if category is None:
        return None
    category.subcategories[:] = [s for s in category.subcategories if s.id != subcategory_id]
    session.commit()
    session.refresh(category)
    return category


def list_all_subcategory_names(session: Session) -> list[str]:
    """Distinct subcategory display names across all categories, sorted."""
    result = session.execute(select(Subcategory.name).distinct())
    return sorted(result.scalars().all())
