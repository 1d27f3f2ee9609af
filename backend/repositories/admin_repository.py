"""Admin user repository: lookup and create back-office accounts."""
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from models.admin_user import AdminUser


def get_admin(session: Session, admin_id: str) -> Optional[AdminUser]:
    """Return admin by id or None."""
    return session.get(AdminUser, admin_id)


def get_admin_by_email(session: Session, email: str) -> Optional[AdminUser]:
    """Return admin by email (case-insensitive) or None."""
    return session.execute(
        select(AdminUser).where(func.lower(AdminUser.email) == email.strip().lower())
    ).scalar_one_or_none()


def create_admin(
    session: Session,
    *,
    email: str,
    password_hash: str,
    display_name: str | None = None,
) -> AdminUser:
    """Create an admin, commit, and return it. Email is stored lower-cased."""
    admin = AdminUser(
        email=email.strip().lower(),
        password_hash=password_hash,
        display_name=display_name or None,
    )
    session.add(admin)
    session.commit()
    session.refresh(admin)
    return admin


def count_admins(session: Session) -> int:
    result = session.execute(select(func.count()).select_from(AdminUser))
    return result.scalar() or 0
