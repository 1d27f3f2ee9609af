#!/usr/bin/env python3
"""Create a back-office admin account."""
import argparse
import getpass
import sys
from pathlib import Path

BACKEND_DIR = Path(__file__).resolve().parent.parent
if str(BACKEND_DIR) not in sys.path:
    sys.path.insert(0, str(BACKEND_DIR))

from db import session_scope  # noqa: E402
from repositories.admin_repository import create_admin, get_admin_by_email  # noqa: E402
from utils.security import hash_password  # noqa: E402


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("email")
    parser.add_argument("--name", default=None, help="display name (defaults to the email local part)")
    parser.add_argument("--password", default=None, help="prompted for when omitted")
    args = parser.parse_args(argv)

    password = args.password or getpass.getpass("Password: ")
    if not password:
        print("Password must not be empty.", file=sys.stderr)
        return 2

    with session_scope() as db:
        if get_admin_by_email(db, args.email) is not None:
            print(f"Admin {args.email} already exists.", file=sys.stderr)
            return 1
        admin = create_admin(db, email=args.email, password_hash=hash_password(password), display_name=args.name)
        print(f"Created admin {admin.email} ({admin.id})")
    return 0


if __name__ == "__main__":
    sys.exit(main())
