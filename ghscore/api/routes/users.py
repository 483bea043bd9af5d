"""
Staff account administration endpoints.

Reading the recruiter roster and the assignable roles needs any session;
everything else needs an admin role.
"""

from typing import Any

from fastapi import APIRouter, Depends, status

from ghscore.api.dependencies import get_admin_session, get_session
from ghscore.core.auth.users import UserDirectory, assignable_roles, get_user_directory
from ghscore.data.models.user import PasswordReset, Session, UserCreate, UserStatusUpdate

router = APIRouter(prefix="/users", tags=["users"])


@router.get("")
def list_users(
    session: Session = Depends(get_admin_session),
    directory: UserDirectory = Depends(get_user_directory),
) -> list[dict[str, Any]]:
    return [u.model_dump_public() for u in directory.list_users(session.tenant_id)]


@router.post("", status_code=status.HTTP_201_CREATED)
def create_user(
    body: UserCreate,
    session: Session = Depends(get_admin_session),
    directory: UserDirectory = Depends(get_user_directory),
) -> dict[str, Any]:
    return directory.create_user(session, body).model_dump_public()


@router.get("/roles")
def list_roles(session: Session = Depends(get_session)) -> list[str]:
    return [role.value for role in assignable_roles(session)]


@router.get("/recruiters")
def list_recruiters(
    session: Session = Depends(get_session),
    directory: UserDirectory = Depends(get_user_directory),
) -> list[dict[str, Any]]:
    return [
        {"id": str(u.id), "full_name": u.full_name, "email": u.email}
        for u in directory.list_recruiters(session.tenant_id)
    ]


@router.put("/{user_id}/status")
def set_status(
    user_id: str,
    body: UserStatusUpdate,
    session: Session = Depends(get_admin_session),
    directory: UserDirectory = Depends(get_user_directory),
) -> dict[str, Any]:
    return directory.set_active(session, user_id, body.is_active).model_dump_public()


@router.put("/{user_id}/password")
def reset_password(
    user_id: str,
    body: PasswordReset,
    session: Session = Depends(get_admin_session),
    directory: UserDirectory = Depends(get_user_directory),
) -> dict[str, Any]:
    directory.reset_password(session, user_id, body)
    return {"success": True}


@router.delete("/{user_id}")
def delete_user(
    user_id: str,
    session: Session = Depends(get_admin_session),
    directory: UserDirectory = Depends(get_user_directory),
) -> dict[str, Any]:
    directory.delete_user(session, user_id)
    return {"deleted": True}
