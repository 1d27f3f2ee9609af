"""Configuration from environment."""
import os

PORT = int(os.environ.get("PORT", "8001"))

TESTING = os.environ.get("TESTING") == "true"

# When TESTING=true, use test DB URL so tests never touch production.
if TESTING:
    DATABASE_URL = os.environ.get("TESTING_DATABASE_URL", "sqlite:///:memory:")
else:
    DATABASE_URL = os.environ.get(
        "DATABASE_URL",
        "sqlite:///./explorer.db",
    )


def _flag(name: str, default: bool) -> bool:
    """Read a boolean env flag ("1", "true", "yes" are true)."""
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


# Startup behaviour (tests create tables themselves and seed per test).
BOOTSTRAP_ON_STARTUP = _flag("BOOTSTRAP_ON_STARTUP", not TESTING)
SEED_ON_STARTUP = _flag("SEED_ON_STARTUP", not TESTING)
RUN_MIGRATIONS_ON_STARTUP = _flag("RUN_MIGRATIONS_ON_STARTUP", not TESTING)

CORS_ORIGINS = [
    o.strip()
    for o in os.environ.get("CORS_ORIGINS", "http://localhost:8080,http://127.0.0.1:8080").split(",")
    if o.strip()
]

# Admin tokens
SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-change-me")
TOKEN_ALGORITHM = "HS256"
TOKEN_TTL_MINUTES = int(os.environ.get("TOKEN_TTL_MINUTES", "720"))

# Bootstrap admin, created at startup when no admin exists.
ADMIN_EMAIL = os.environ.get("ADMIN_EMAIL", "")
ADMIN_PASSWORD = os.environ.get("ADMIN_PASSWORD", "")
ADMIN_NAME = os.environ.get("ADMIN_NAME", "")

# Image storage
MEDIA_ROOT = os.environ.get("MEDIA_ROOT", "./media")
MEDIA_BASE_URL = os.environ.get("MEDIA_BASE_URL", "/media").rstrip("/")
MAX_UPLOAD_BYTES = int(os.environ.get("MAX_UPLOAD_BYTES", str(5 * 1024 * 1024)))

# Query cache windows (seconds)
QUERY_STALE_SECONDS = float(os.environ.get("QUERY_STALE_SECONDS", "300"))
QUERY_GC_SECONDS = float(os.environ.get("QUERY_GC_SECONDS", "600"))
