"""
Login, logout and current-user endpoints.
"""

from fastapi import APIRouter, Depends

from ghscore.api.dependencies import get_session, get_token
from ghscore.core.auth.sessions import SessionManager, get_session_manager
from ghscore.data.models.user import LoginRequest, Session

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login")
def login(body: LoginRequest, manager: SessionManager = Depends(get_session_manager)) -> dict:
    session = manager.login(body.email, body.password)
    user = manager.current_user(session)
    return {
        "token": session.token,
        "expires_at": session.expires_at.isoformat(),
        "user": {
            "id": str(user.id),
            "email": user.email,
            "full_name": user.full_name,
            "role": user.role,
            "tenant_id": user.tenant_id,
        },
    }


@router.post("/logout")
def logout(
    session: Session = Depends(get_session),
    token: str = Depends(get_token),
    manager: SessionManager = Depends(get_session_manager),
) -> dict:
    return {"success": manager.logout(token)}


@router.get("/me")
def me(
    session: Session = Depends(get_session),
    manager: SessionManager = Depends(get_session_manager),
) -> dict:
    user = manager.current_user(session)
    return {
        "id": str(user.id),
        "email": user.email,
        "full_name": user.full_name,
        "role": user.role,
        "tenant_id": user.tenant_id,
        "session_expires_at": session.expires_at.isoformat(),
    }
