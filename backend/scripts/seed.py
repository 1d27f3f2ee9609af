#!/usr/bin/env python3
"""Apply migrations and seed the taxonomy, sample locations and products into an empty database."""
import argparse
import logging
import subprocess
import sys
from pathlib import Path

BACKEND_DIR = Path(__file__).resolve().parent.parent
if str(BACKEND_DIR) not in sys.path:
    sys.path.insert(0, str(BACKEND_DIR))

from db import session_scope  # noqa: E402
from utils.seed_data import ensure_bootstrap_admin, seed_directory  # noqa: E402


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--skip-migrations", action="store_true", help="do not run alembic upgrade head first")
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s %(message)s")

    if not args.skip_migrations:
        result = subprocess.run(
            [sys.executable, "-m", "alembic", "upgrade", "head"],
            cwd=BACKEND_DIR,
            capture_output=True,
            text=True,
        )
        if result.returncode != 0:
            print(f"Alembic upgrade failed: {result.stderr or result.stdout}", file=sys.stderr)
            return result.returncode

    with session_scope() as db:
        inserted = seed_directory(db)
        ensure_bootstrap_admin(db)
    if not any(inserted.values()):
        print("Database already has data; nothing seeded.")
    else:
        print(
            f"Seeded {inserted['categories']} categories, {inserted['locations']} locations, "
            f"{inserted['products']} products."
        )
    return 0


if __name__ == "__main__":
    sys.exit(main())
