"""Admin authentication routes: login, session, logout."""
import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from api.deps import get_optional_admin, require_admin
from db import get_db
from explorer_core.decoders import decode_admin
from explorer_core.entities import UserProfile
from repositories.admin_repository import get_admin_by_email
from schemas.auth import LoginRequest, LoginResponse, SessionResponse, UserProfileResponse
from utils.security import create_access_token, verify_password

LOG = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


def _profile_to_response(profile: UserProfile) -> UserProfileResponse:
    return UserProfileResponse(id=profile.id, email=profile.email, name=profile.name)


@router.post("/login", response_model=LoginResponse)
def login(body: LoginRequest, db: Session = Depends(get_db)) -> LoginResponse:
    """Exchange email + password for a bearer token."""
    admin = get_admin_by_email(db, body.email)
    if admin is None or not verify_password(body.password, admin.password_hash):
        LOG.warning("Failed admin login for %s", body.email)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )
    profile = decode_admin(admin)
    token, expires_at = create_access_token(subject=profile.id, email=profile.email, name=profile.name)
    LOG.info("Admin %s signed in", profile.email)
    return LoginResponse(access_token=token, expires_at=expires_at, user=_profile_to_response(profile))


@router.get("/session", response_model=SessionResponse)
def session(profile: UserProfile | None = Depends(get_optional_admin)) -> SessionResponse:
    """Current admin profile, or user=null when signed out."""
    return SessionResponse(user=_profile_to_response(profile) if profile else None)


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
def logout(profile: UserProfile = Depends(require_admin)) -> None:
    """Acknowledge sign-out; tokens are stateless so the client discards its token."""
    LOG.info("Admin %s signed out", profile.email)
