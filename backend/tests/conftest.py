# Set test environment before any application or db imports.
import os

os.environ["TESTING"] = "true"
os.environ["TESTING_DATABASE_URL"] = "sqlite:///:memory:"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import event
from sqlalchemy.orm import Session

from db import SessionLocal, get_db
from explorer_core.blob_store import LocalBlobStore
from explorer_core.query_cache import QueryCache
from main import app
from models import Base
from models.admin_user import AdminUser  # noqa: F401 - register with Base
from models.category import Category  # noqa: F401
from models.location import Location  # noqa: F401
from models.product import Product  # noqa: F401
from models.subcategory import Subcategory  # noqa: F401
from repositories.admin_repository import create_admin
from repositories.category_repository import create_category
from repositories.location_repository import create_location
from utils.security import hash_password

ADMIN_EMAIL = "admin@sangil.test"
ADMIN_PASSWORD = "chicamocha-2024"


def _get_engine():
    """Engine used by the app (in-memory when TESTING=true)."""
    return SessionLocal.kw["bind"]


@pytest.fixture(scope="session")
def engine():
    """One in-memory engine per test run; create tables once."""
    eng = _get_engine()
    if eng.dialect.name == "sqlite":
        # pysqlite does not emit BEGIN itself, so the per-test outer transaction and
        # SAVEPOINT would not isolate tests; let SQLAlchemy control BEGIN instead.
        @event.listens_for(eng, "connect")
        def _sqlite_connect(dbapi_conn, connection_record):
            dbapi_conn.isolation_level = None

        @event.listens_for(eng, "begin")
        def _sqlite_begin(conn):
            conn.exec_driver_sql("BEGIN")

    Base.metadata.create_all(eng)
    return eng


@pytest.fixture
def db_session(engine):
    """Function-scoped session; each test runs in a transaction that is rolled back."""
    connection = engine.connect()
    trans = connection.begin()
    session = Session(bind=connection)
    session.begin_nested()
    try:
        yield session
    finally:
        session.close()
        if trans.is_active:
            trans.rollback()
        connection.close()


def _override_get_db(session):
    """Return a generator that yields the given session (for dependency override)."""
    def override():
        yield session
    return override


@pytest.fixture
def query_cache():
    return QueryCache()


@pytest.fixture
def blob_store(tmp_path):
    return LocalBlobStore(tmp_path / "media", base_url="/media")


@pytest.fixture
def client(db_session, query_cache, blob_store):
    """API test client on the test db_session with a fresh query cache and a temp blob store."""
    app.dependency_overrides[get_db] = _override_get_db(db_session)
    saved = (app.state.query_cache, app.state.blob_store)
    app.state.query_cache = query_cache
    app.state.blob_store = blob_store
    try:
        with TestClient(app) as c:
            yield c
    finally:
        app.dependency_overrides.clear()
        app.state.query_cache, app.state.blob_store = saved


@pytest.fixture
def admin_user(db_session):
    """A stored admin account (password ADMIN_PASSWORD)."""
    return create_admin(
        db_session,
        email=ADMIN_EMAIL,
        password_hash=hash_password(ADMIN_PASSWORD),
        display_name="Admin San Gil",
    )


@pytest.fixture
def auth_headers(client, admin_user):
    """Bearer header obtained through POST /api/auth/login."""
    r = client.post("/api/auth/login", json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD})
    assert r.status_code == 200, r.text
    return {"Authorization": f"Bearer {r.json()['access_token']}"}


@pytest.fixture
def categories(db_session):
    """Two categories: comidas (lunch, cafes) and aventura (actividades-extremas, naturaleza)."""
    return [
        create_category(
            db_session,
            category_id="comidas",
            name="Comidas",
            subcategories=[{"id": "lunch", "name": "Lunch"}, {"id": "cafes", "name": "Cafés"}],
        ),
        create_category(
            db_session,
            category_id="aventura",
            name="Aventura",
            subcategories=[
                {"id": "actividades-extremas", "name": "Actividades extremas"},
                {"id": "naturaleza", "name": "Naturaleza"},
            ],
        ),
    ]


def location_fields(**overrides) -> dict:
    """Keyword arguments for create_location with sensible defaults."""
    fields = {
        "name": "Restaurante Jenny",
        "description": "Comida santandereana tradicional en ambiente familiar.",
        "address": "Calle 10 #5-20, San Gil",
        "photo": "restaurant-jenny.jpg",
        "maps_url": "https://maps.google.com/?q=6.556,-73.133",
        "waze_url": "https://waze.com/ul?ll=6.556,-73.133&navigate=yes",
        "tags": ["familiar", "comida local"],
        "category_id": "comidas",
        "subcategory_id": "lunch",
        "latitude": 6.556,
        "longitude": -73.133,
    }
    fields.update(overrides)
    return fields


@pytest.fixture
def make_location(db_session):
    """Factory: make_location(location_id="loc-1", **overrides) stores a location."""
    def make(location_id: str, **overrides):
        return create_location(db_session, location_id=location_id, **location_fields(**overrides))
    return make


def pytest_sessionfinish(session, exitstatus):
    """Remove any temporary test DB files created during the run (e.g. under /tmp)."""
    import glob
    for pattern in ["/tmp/test_*.db", "test_*.db"]:
        for path in glob.glob(pattern):
            try:
                os.remove(path)
            except OSError:
                pass
