"""Database engine and sessions for the directory (SQLite in dev, PostgreSQL in prod)."""
from collections.abc import Generator, Iterator
from contextlib import contextmanager
import os

from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from utils.config import DATABASE_URL

# Refuse to run the test suite against the directory database.
if os.environ.get("TESTING") == "true":
    url = DATABASE_URL
    if "explorer.db" in url or (":memory:" not in url and "test" not in url.lower().split("?")[0]):
        raise RuntimeError(
            "Tests must not run against the directory database. Set TESTING_DATABASE_URL to "
            "sqlite:///:memory: (or another URL containing :memory: or 'test')."
        )

_is_sqlite = DATABASE_URL.startswith("sqlite")
_engine_kw = {"connect_args": {"check_same_thread": False} if _is_sqlite else {}, "echo": False}
# One shared connection so every session sees the same in-memory database.
if _is_sqlite and ":memory:" in DATABASE_URL:
    _engine_kw["poolclass"] = StaticPool

engine = create_engine(DATABASE_URL, **_engine_kw)

if _is_sqlite:

    @event.listens_for(engine, "connect")
    def _sqlite_fk(dbapi_conn, connection_record):
        # Subcategory rows cascade with their category.
        dbapi_conn.execute("PRAGMA foreign_keys=ON")

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Generator[Session, None, None]:
    """FastAPI dependency: yield a session and close it after the request."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def session_scope() -> Iterator[Session]:
    """Session for startup hooks and scripts; rolled back if the block raises."""
    db = SessionLocal()
    try:
        yield db
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()
