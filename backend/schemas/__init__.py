# Schemas package
from .categories import CategoryCreate, CategoryResponse, CategoryUpdate, SubcategoryIn, SubcategoryResponse
from .health import HealthResponse
from .locations import LocationCreate, LocationResponse, LocationUpdate
from .products import ProductCreate, ProductResponse, ProductUpdate

__all__ = [
    "CategoryCreate",
    "CategoryResponse",
    "CategoryUpdate",
    "HealthResponse",
    "LocationCreate",
    "LocationResponse",
    "LocationUpdate",
    "ProductCreate",
    "ProductResponse",
    "ProductUpdate",
    "SubcategoryIn",
    "SubcategoryResponse",
]
