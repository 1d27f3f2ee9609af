"""Bootstrap data for an empty directory: taxonomy, sample San Gil locations, merchandise."""
import logging

from sqlalchemy.orm import Session

from repositories.admin_repository import count_admins, create_admin, get_admin_by_email
from repositories.category_repository import count_categories, create_category
from repositories.location_repository import count_locations, create_location
from repositories.product_repository import count_products, create_product
from utils.config import ADMIN_EMAIL, ADMIN_NAME, ADMIN_PASSWORD
from utils.security import hash_password
from utils.text import slugify

LOG = logging.getLogger(__name__)


def _subs(*names: str) -> list[dict]:
    return [{"id": slugify(name), "name": name} for name in names]


CATEGORIES: list[dict] = [
    {
        "id": "comidas",
        "name": "Comidas",
        "subcategories": _subs(
            "Lunch",
            "Cafés",
            "Comidas rápidas",
            "Panaderías",
            "Postres y Heladerías",
            "Gastro Bar & Bar",
            "Dinner",
        ),
    },
    {"id": "hospedajes", "name": "Hospedajes", "subcategories": _subs("Hoteles", "Glamping")},
    {
        "id": "aventura",
        "name": "Aventura",
        "subcategories": _subs("Actividades extremas", "Naturaleza", "Tours guiados"),
    },
    {"id": "market", "name": "Market", "subcategories": _subs("Supermercados")},
    {
        "id": "shops",
        "name": "Shops",
        "subcategories": _subs("Fitness", "Todo a $5.000", "Tendero / Tiendas de barrio"),
    },
    {"id": "drogueria", "name": "Droguería", "subcategories": []},
    {"id": "recomendado-pet", "name": "Recomendado Pet", "subcategories": []},
    {"id": "recomendado-kits", "name": "Recomendado Kits", "subcategories": []},
    {"id": "artesanias", "name": "Artesanías", "subcategories": []},
    {
        "id": "mall",
        "name": "Mall",
        "subcategories": _subs(
            "Tiendas de ropa",
            "Restaurantes",
            "Entretenimiento (cine, bolera, juegos)",
            "Servicios",
        ),
    },
    {
        "id": "emergencias",
        "name": "Emergencias",
        "subcategories": _subs("Policía", "Hospital", "Bomberos", "Ambulancia"),
    },
    {"id": "recomendado-del-mes", "name": "Recomendado del mes", "subcategories": []},
    {
        "id": "cultural",
        "name": "Cultural",
        "subcategories": _subs(
            "Rutas por hacer",
            "Museos",
            "Senderismo",
            "Calles con historia",
            "Parques",
            "Catedrales",
        ),
    },
    {
        "id": "vecinos",
        "name": "Vecinos",
        "subcategories": _subs(
            "Barichara",
            "Socorro",
            "Curití",
            "Charalá",
            "Valle de San José",
            "Otros pueblos cercanos",
        ),
    },
    {
        "id": "emprendedores",
        "name": "Emprendedores",
        "subcategories": _subs(
            "Tiendas locales destacadas",
            "Productos únicos de la región",
            "Startups / Nuevos negocios",
        ),
    },
]


def _maps(lat: float, lng: float) -> str:
    return f"https://maps.google.com/?q={lat},{lng}"


def _waze(lat: float, lng: float) -> str:
    return f"https://waze.com/ul?ll={lat},{lng}&navigate=yes"


def _location(
    location_id: str,
    name: str,
    description: str,
    address: str,
    photo: str,
    tags: list[str],
    category: str,
    subcategory: str | None,
    lat: float,
    lng: float,
    custom_url: str | None = None,
) -> dict:
    return {
        "location_id": location_id,
        "name": name,
        "description": description,
        "address": address,
        "photo": photo,
        "maps_url": _maps(lat, lng),
        "waze_url": _waze(lat, lng),
        "custom_url": custom_url,
        "tags": tags,
        "category_id": category,
        "subcategory_id": subcategory,
        "latitude": lat,
        "longitude": lng,
    }


LOCATIONS: list[dict] = [
    _location(
        "loc-1",
        "Restaurante Jenny",
        "Auténtica comida santandereana con platos tradicionales como cabrito, mute y pescado "
        "fresco de río en un ambiente familiar acogedor.",
        "Calle 10 #5-20, San Gil",
        "restaurant-jenny.jpg",
        ["familiar", "comida local", "tradicional"],
        "comidas",
        "lunch",
        6.556,
        -73.133,
        custom_url="https://reservations.mock/jenny",
    ),
    _location(
        "loc-2",
        "Café del Río",
        "Cafetería especializada con granos cultivados localmente y pasteles caseros. Lugar "
        "perfecto para relajarse después de actividades de aventura.",
        "Carrera 9 #8-15, San Gil",
        "cafe-del-rio.jpg",
        ["café", "pasteles", "relajante"],
        "comidas",
        "cafes",
        6.558,
        -73.135,
    ),
    _location(
        "loc-3",
        "Cueva del Indio",
        "Sistema histórico de cuevas de piedra caliza con antiguos petroglifos indígenas y "
        "visitas guiadas a través de impresionantes formaciones rocosas.",
        "Vereda Curití, San Gil",
        "cueva-del-indio.jpg",
        ["patrimonio", "visitas guiadas", "naturaleza"],
        "cultural",
        "rutas-por-hacer",
        6.559,
        -73.14,
    ),
    _location(
        "loc-4",
        "Catedral de San Gil",
        "Hermosa catedral colonial que data del siglo XVIII, con impresionante arquitectura y "
        "arte religioso.",
        "Parque Principal, San Gil",
        "catedral.jpg",
        ["colonial", "arquitectura", "religioso"],
        "cultural",
        "catedrales",
        6.554,
        -73.134,
    ),
    _location(
        "loc-5",
        "Paragliding San Gil",
        "Experiencia de parapente en tándem sobre el impresionante Cañón del Chicamocha con "
        "instructores certificados y vistas impresionantes.",
        "Mesa de Los Santos, San Gil",
        "paragliding.jpg",
        ["adrenalina", "adultos", "vistas panorámicas"],
        "aventura",
        "actividades-extremas",
        6.56,
        -73.135,
        custom_url="https://adventure.mock/paragliding",
    ),
    _location(
        "loc-6",
        "Rafting Río Suarez",
        "Emocionante aventura de rafting en aguas blancas a través de rápidos Clase II-III con "
        "guías profesionales y equipo de seguridad incluido.",
        "Puerto Bogotá, San Gil",
        "rafting.jpg",
        ["deportes acuáticos", "adrenalina", "grupos"],
        "aventura",
        "actividades-extremas",
        6.545,
        -73.12,
        custom_url="https://adventure.mock/rafting",
    ),
    _location(
        "loc-7",
        "FixMyPhone",
        "Servicios profesionales de reparación de teléfonos y dispositivos electrónicos con "
        "piezas genuinas y tiempos de entrega rápidos.",
        "Carrera 8 #7-12, San Gil",
        "phone-repair.jpg",
        ["servicios", "electrónica", "reparación"],
        "shops",
        None,
        6.553,
        -73.137,
    ),
    _location(
        "loc-8",
        "Artesanías del Fonce",
        "Artesanías y souvenirs tradicionales hechos por artesanos locales, incluyendo textiles "
        "tejidos y cerámica.",
        "Calle 12 #9-8, San Gil",
        "artesanias-fonce.jpg",
        ["artesanías", "souvenirs", "arte local"],
        "artesanias",
        None,
        6.555,
        -73.132,
    ),
]

PRODUCTS: list[dict] = [
    {
        "name": "Camiseta de Aventura San Gil",
        "description": "Camiseta de algodón premium con el paisaje icónico de San Gil y gráficos "
        "de deportes de aventura.",
        "price": "$25.000 COP",
        "image": "tshirt-mockup.jpg",
        "link_url": "https://instagram.com/sangiltourism",
    },
    {
        "name": "Sudadera Cañón del Chicamocha",
        "description": "Sudadera cómoda con impresionante diseño del cañón y marca de San Gil.",
        "price": "$45.000 COP",
        "image": "hoodie-mockup.jpg",
        "link_url": "https://instagram.com/sangiltourism",
    },
]


def seed_directory(session: Session) -> dict[str, int]:
    """
    Insert categories, locations and products, each only when its table is empty.
    Returns how many rows of each kind were inserted.
    """
    inserted = {"categories": 0, "locations": 0, "products": 0}
    if count_categories(session) == 0:
        for category in CATEGORIES:
            create_category(
                session,
                category_id=category["id"],
                name=category["name"],
                subcategories=category["subcategories"],
            )
            inserted["categories"] += 1
    if count_locations(session) == 0:
        for location in LOCATIONS:
            create_location(session, **location)
            inserted["locations"] += 1
    if count_products(session) == 0:
        for product in PRODUCTS:
            create_product(session, **product)
            inserted["products"] += 1
    if any(inserted.values()):
        LOG.info(
            "Seeded %d categories, %d locations, %d products",
            inserted["categories"],
            inserted["locations"],
            inserted["products"],
        )
    return inserted


def ensure_bootstrap_admin(
    session: Session,
    email: str = ADMIN_EMAIL,
    password: str = ADMIN_PASSWORD,
    name: str = ADMIN_NAME,
) -> bool:
    """
    Create the configured admin when no admin account exists yet.
    Returns True if an account was created.
    """
    if not email or not password:
        if count_admins(session) == 0:
            LOG.warning("No admin account exists; set ADMIN_EMAIL and ADMIN_PASSWORD to create one")
        return False
    if count_admins(session) > 0 or get_admin_by_email(session, email) is not None:
        return False
    create_admin(session, email=email, password_hash=hash_password(password), display_name=name or None)
    LOG.info("Created bootstrap admin %s", email.strip().lower())
    return True
