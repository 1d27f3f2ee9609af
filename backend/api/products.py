"""Product (merchandise) API routes."""
import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from api.deps import get_query_cache, require_admin
from db import get_db
from explorer_core.decoders import decode_product
from explorer_core.entities import Product, UserProfile
from explorer_core.query_cache import QueryCache, product_keys_list
from repositories.product_repository import (
    create_product as repo_create_product,
    delete_product as repo_delete_product,
    get_product as repo_get_product,
    list_products as repo_list_products,
    list_products_by_price_range as repo_list_products_by_price_range,
    search_products as repo_search_products,
    update_product as repo_update_product,
)
from schemas.products import ProductCreate, ProductResponse, ProductUpdate

LOG = logging.getLogger(__name__)

router = APIRouter(prefix="/products", tags=["products"])


def _product_to_response(p: Product) -> ProductResponse:
    return ProductResponse(
        id=p.id,
        name=p.name,
        description=p.description,
        price=p.price,
        image=p.image,
        link_url=p.link_url,
    )


@router.get("", response_model=list[ProductResponse])
def list_products(
    q: str | None = Query(default=None),
    min_price: int | None = Query(default=None, ge=0),
    max_price: int | None = Query(default=None, ge=0),
    db: Session = Depends(get_db),
    cache: QueryCache = Depends(get_query_cache),
) -> list[ProductResponse]:
    """List products; q searches name/description/price, min/max filter on the display price digits."""
    if min_price is not None or max_price is not None:
        low = min_price if min_price is not None else 0
        high = max_price if max_price is not None else 10**12
        if low > high:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="min_price must not exceed max_price",
            )
        products = [decode_product(row) for row in repo_list_products_by_price_range(db, low, high)]
    else:
        products = cache.fetch(
            product_keys_list(),
            lambda: [decode_product(row) for row in repo_list_products(db)],
        )
    if q and q.strip():
        matched = {row.id for row in repo_search_products(db, q)}
        products = [p for p in products if p.id in matched]
    return [_product_to_response(p) for p in products]


@router.get("/{product_id}", response_model=ProductResponse)
def get_product(product_id: int, db: Session = Depends(get_db)) -> ProductResponse:
    """Get one product by id."""
    row = repo_get_product(db, product_id)
    if row is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Product not found")
    return _product_to_response(decode_product(row))


@router.post("", response_model=ProductResponse, status_code=status.HTTP_201_CREATED)
def create_product(
    body: ProductCreate,
    db: Session = Depends(get_db),
    cache: QueryCache = Depends(get_query_cache),
    admin: UserProfile = Depends(require_admin),
) -> ProductResponse:
    """Create a product (admin)."""
    row = repo_create_product(db, **body.model_dump())
    cache.invalidate(("products",))
    LOG.info("Product %s created by %s", row.id, admin.email)
    return _product_to_response(decode_product(row))


@router.patch("/{product_id}", response_model=ProductResponse)
def update_product(
    product_id: int,
    body: ProductUpdate,
    db: Session = Depends(get_db),
    cache: QueryCache = Depends(get_query_cache),
    admin: UserProfile = Depends(require_admin),
) -> ProductResponse:
    """Update a product (admin)."""
    updates = {k: v for k, v in body.model_dump(exclude_unset=True).items() if v is not None}
    row = repo_update_product(db, product_id, updates)
    if row is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Product not found")
    cache.invalidate(("products",))
    LOG.info("Product %s updated by %s", product_id, admin.email)
    return _product_to_response(decode_product(row))


@router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_product(
    product_id: int,
    db: Session = Depends(get_db),
    cache: QueryCache = Depends(get_query_cache),
    admin: UserProfile = Depends(require_admin),
) -> None:
    """Delete a product (admin)."""
    if not repo_delete_product(db, product_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Product not found")
    cache.invalidate(("products",))
    LOG.info("Product %s deleted by %s", product_id, admin.email)
