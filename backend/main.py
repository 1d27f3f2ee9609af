"""San Gil Explorer: FastAPI backend for the tourism directory."""
import logging
import os
import subprocess
import sys

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from api.auth import router as auth_router
from api.categories import router as categories_router
from api.explorer import router as explorer_router
from api.locations import router as locations_router
from api.products import router as products_router
from api.routes import router
from api.uploads import router as uploads_router
from db import session_scope
from explorer_core.blob_store import LocalBlobStore
from explorer_core.decoders import decode_category
from explorer_core.errors import MalformedRecord
from explorer_core.markers import validate_marker_styles
from explorer_core.query_cache import QueryCache
from repositories.category_repository import list_categories as repo_list_categories
from utils.config import (
    BOOTSTRAP_ON_STARTUP,
    CORS_ORIGINS,
    MAX_UPLOAD_BYTES,
    MEDIA_BASE_URL,
    MEDIA_ROOT,
    QUERY_GC_SECONDS,
    QUERY_STALE_SECONDS,
    RUN_MIGRATIONS_ON_STARTUP,
    SEED_ON_STARTUP,
)
from utils.seed_data import ensure_bootstrap_admin, seed_directory

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logging.getLogger("explorer_core").setLevel(logging.INFO)

LOG = logging.getLogger(__name__)

app = FastAPI(
    title="San Gil Explorer",
    description="Tourism directory for San Gil: locations, categories, merchandise and admin back office",
    version="0.1.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.state.query_cache = QueryCache(stale_time=QUERY_STALE_SECONDS, gc_time=QUERY_GC_SECONDS)
app.state.blob_store = LocalBlobStore(MEDIA_ROOT, base_url=MEDIA_BASE_URL, max_size=MAX_UPLOAD_BYTES)

# API routes under /api; uploaded images are served from MEDIA_BASE_URL.
app.include_router(router, prefix="/api")
app.include_router(locations_router, prefix="/api")
app.include_router(categories_router, prefix="/api")
app.include_router(products_router, prefix="/api")
app.include_router(explorer_router, prefix="/api")
app.include_router(auth_router, prefix="/api")
app.include_router(uploads_router, prefix="/api")
app.mount(MEDIA_BASE_URL, StaticFiles(directory=MEDIA_ROOT, check_dir=False), name="media")


@app.exception_handler(MalformedRecord)
async def malformed_record_handler(request: Request, exc: MalformedRecord) -> JSONResponse:
    """A stored record failed to decode: report it instead of serving partial data."""
    LOG.error("%s %s: %s", request.method, request.url.path, exc.message)
    return JSONResponse(
        status_code=500,
        content={"detail": exc.message, "kind": exc.kind.value},
    )


@app.on_event("startup")
def startup() -> None:
    """Run DB migrations, seed an empty directory and create the bootstrap admin."""
    if RUN_MIGRATIONS_ON_STARTUP:
        _run_migrations()
    if not BOOTSTRAP_ON_STARTUP:
        return
    with session_scope() as db:
        if SEED_ON_STARTUP:
            seed_directory(db)
        ensure_bootstrap_admin(db)
        validate_marker_styles(decode_category(row) for row in repo_list_categories(db))


def _run_migrations() -> None:
    backend_dir = os.path.dirname(os.path.abspath(__file__))
    result = subprocess.run(
        [sys.executable, "-m", "alembic", "upgrade", "head"],
        cwd=backend_dir,
        capture_output=True,
        text=True,
    )
    if result.returncode != 0:
        raise RuntimeError(f"Alembic upgrade failed: {result.stderr or result.stdout}")


@app.get("/")
def root() -> dict:
    """Root redirect/info."""
    return {"service": "san-gil-explorer", "docs": "/docs", "health": "/api/health"}
