"""Shared FastAPI dependencies: query cache, blob store, admin authentication."""
import logging

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from db import get_db
from explorer_core.blob_store import LocalBlobStore
from explorer_core.decoders import decode_admin
from explorer_core.entities import UserProfile
from explorer_core.query_cache import QueryCache
from repositories.admin_repository import get_admin
from utils.security import InvalidToken, decode_access_token

LOG = logging.getLogger(__name__)

_bearer = HTTPBearer(auto_error=False)


def get_query_cache(request: Request) -> QueryCache:
    """Process-wide query cache created at app startup."""
    return request.app.state.query_cache


def get_blob_store(request: Request) -> LocalBlobStore:
    return request.app.state.blob_store


def _profile_from_credentials(
    credentials: HTTPAuthorizationCredentials | None,
    db: Session,
) -> UserProfile | None:
    """Resolve a bearer token to an existing admin. Raises InvalidToken."""
    if credentials is None:
        return None
    payload = decode_access_token(credentials.credentials)
    admin = get_admin(db, payload["sub"])
    if admin is None:
        raise InvalidToken("Unknown user")
    return decode_admin(admin)


def get_optional_admin(
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer),
    db: Session = Depends(get_db),
) -> UserProfile | None:
    """Current admin or None; invalid tokens count as signed out."""
    try:
        return _profile_from_credentials(credentials, db)
    except InvalidToken as e:
        LOG.info("Ignoring invalid session token: %s", e)
        return None


def require_admin(
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer),
    db: Session = Depends(get_db),
) -> UserProfile:
    """Admin guard for back-office routes: 401 without a valid bearer token."""
    try:
        profile = _profile_from_credentials(credentials, db)
    except InvalidToken as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
            headers={"WWW-Authenticate": "Bearer"},
        ) from e
    if profile is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return profile
