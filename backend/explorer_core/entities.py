"""Plain domain entities decoded from DB rows."""
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Subcategory:
    id: str
    name: str
    description: Optional[str] = None


@dataclass(frozen=True)
class Category:
    """Category with its ordered, embedded subcategories."""
    id: str
    name: str
    subcategories: tuple[Subcategory, ...] = ()

    def subcategory_ids(self) -> list[str]:
        return [s.id for s in self.subcategories]

    def has_subcategory(self, subcategory_id: str) -> bool:
        return any(s.id == subcategory_id for s in self.subcategories)


@dataclass(frozen=True)
class Location:
    """Point of interest. coordinates is (latitude, longitude)."""
    id: str
    name: str
    description: str
    address: str
    photo: str
    maps_url: str
    waze_url: str
    tags: tuple[str, ...]
    category: str
    coordinates: tuple[float, float]
    subcategory: Optional[str] = None
    custom_url: Optional[str] = None

    @property
    def latitude(self) -> float:
        return self.coordinates[0]

    @property
    def longitude(self) -> float:
        return self.coordinates[1]


@dataclass(frozen=True)
class Product:
    id: int
    name: str
    description: str
    price: str
    image: str
    link_url: str


@dataclass(frozen=True)
class UserProfile:
    """Signed-in administrator as seen by the client."""
    id: str
    email: str
    name: str
