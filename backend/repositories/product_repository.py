"""Product repository: merchandise catalog CRUD, search and price filter."""
from typing import Any, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from models.product import Product
from utils.text import price_digits

_UPDATABLE_FIELDS = ("name", "description", "price", "image", "link_url")


def list_products(session: Session) -> list[Product]:
    """Return all products ordered by id."""
    result = session.execute(select(Product).order_by(Product.id))
    return list(result.scalars().all())


def get_product(session: Session, product_id: int) -> Optional[Product]:
    """Return product by id or None."""
    return session.get(Product, product_id)


def count_products(session: Session) -> int:
    result = session.execute(select(func.count()).select_from(Product))
    return result.scalar() or 0


def create_product(
    session: Session,
    *,
    name: str,
    description: str,
    price: str,
    image: str,
    link_url: str,
) -> Product:
    """Create a product (id assigned by the DB), commit, and return it."""
    product = Product(
        name=name,
        description=description,
        price=price,
        image=image,
        link_url=link_url,
    )
    session.add(product)
    session.commit()
    session.refresh(product)
    return product


def update_product(session: Session, product_id: int, updates: dict[str, Any]) -> Optional[Product]:
    """Apply updates (known fields only), commit, and return the product. None if not found."""
    product = get_product(session, product_id)
    if product is None:
        return None
    for key, value in updates.items():
        if key in _UPDATABLE_FIELDS:
            setattr(product, key, value)
    session.commit()
    session.refresh(product)
    return product


def delete_product(session: Session, product_id: int) -> bool:
    """Delete product by id. Returns True if deleted, False if not found."""
    product = get_product(session, product_id)
    if product is None:
        return False
    session.delete(product)
    session.commit()
    return True


def search_products(session: Session, term: str) -> list[Product]:
    """Case-insensitive scan over name, description and price."""
    needle = (term or "").strip().lower()
    if not needle:
        return list_products(session)
    return [
        p for p in list_products(session)
        if needle in p.name.lower() or needle in p.description.lower() or needle in p.price.lower()
    ]


def list_products_by_price_range(session: Session, min_price: int, max_price: int) -> list[Product]:
    """Products whose display price (digits only) is within [min_price, max_price]."""
    matches = []
    for p in list_products(session):
        value = price_digits(p.price)
        if value is not None and min_price <= value <= max_price:
            matches.append(p)
    return matches
