"""
FastAPI dependencies: session resolution and role guards.

The resolved Session is passed to handlers explicitly; handlers read the
tenant from it rather than from any shared state.
"""

from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from ghscore.core.auth.sessions import (
    ADMIN_ROLES,
    WRITE_ROLES,
    SessionManager,
    get_session_manager,
    require_role,
)
from ghscore.data.models.user import Session

bearer_scheme = HTTPBearer(auto_error=False)


def get_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Optional[str]:
    return credentials.credentials if credentials else None


def get_session(
    token: Optional[str] = Depends(get_token),
    manager: SessionManager = Depends(get_session_manager),
) -> Session:
    """Resolve the bearer token; AuthError (401) when missing or invalid."""
    return manager.resolve(token)


def get_writer_session(session: Session = Depends(get_session)) -> Session:
    return require_role(session, WRITE_ROLES)


def get_admin_session(session: Session = Depends(get_session)) -> Session:
    return require_role(session, ADMIN_ROLES)
