"""
Staff account administration.

Admins manage the recruiter and viewer accounts of their own tenant. Only
a superadmin may grant or manage admin-level roles, or provision into
another tenant. Nobody can deactivate or delete their own account.
Deactivating, deleting or resetting the password of an account ends its
open sessions.
"""

from typing import Any, Optional

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError
from werkzeug.security import generate_password_hash

from ghscore.core.auth.sessions import ADMIN_ROLES, SessionManager, get_session_manager
from ghscore.core.errors import ForbiddenError, NotFoundError, ValidationError
from ghscore.data.models.user import PasswordReset, Session, User, UserCreate
from ghscore.data.repositories.user_repository import (
    SessionRepository,
    UserRepository,
    get_session_repository,
    get_user_repository,
)
from ghscore.utils.constants import AuditAction, AuditType, UserRole
from ghscore.utils.logger import LoggerMixin, audit_log

# Accounts that can own a vacancy as responsible recruiter
RECRUITER_ROLES = (UserRole.ADMIN, UserRole.RECRUITER)


def _parse(schema: type[BaseModel], data: Any, message: str) -> Any:
    if isinstance(data, schema):
        return data
    try:
        return schema.model_validate(data)
    except PydanticValidationError as e:
        raise ValidationError.from_pydantic(e, message) from e


def assignable_roles(actor: Session) -> list[UserRole]:
    """Roles the acting session may hand out."""
    if UserRole(actor.role) == UserRole.SUPERADMIN:
        return list(UserRole)
    return [role for role in UserRole if role not in ADMIN_ROLES]


class UserDirectory(LoggerMixin):
    """List, provision, (de)activate and remove staff accounts."""

    def __init__(
        self,
        users: Optional[UserRepository] = None,
        sessions: Optional[SessionRepository] = None,
        manager: Optional[SessionManager] = None,
    ):
        self.users = users or get_user_repository()
        self.sessions = sessions or get_session_repository()
        self.manager = manager or get_session_manager()

    def list_users(self, tenant_id: str) -> list[User]:
        """Accounts of the tenant, newest first."""
        return self.users.list_for_tenant(tenant_id)

    def list_recruiters(self, tenant_id: str) -> list[User]:
        """Active accounts that can be named responsible recruiter, by name."""
        return self.users.list_active_by_roles(
            tenant_id, [role.value for role in RECRUITER_ROLES]
        )

    def get_user(self, tenant_id: str, user_id: str) -> User:
        user = self.users.get_by_id(user_id)
        if user is None or user.tenant_id != tenant_id:
            raise NotFoundError(f"User {user_id} not found")
        return user

    def create_user(self, actor: Session, data: UserCreate | dict[str, Any]) -> User:
        """
        Provision an account.

        Raises:
            ForbiddenError: the role, or a foreign tenant, is beyond the actor
            ConflictError: the email is already registered
        """
        data = _parse(UserCreate, data, "Invalid user")
        role = UserRole(data.role)
        if role not in assignable_roles(actor):
            raise ForbiddenError(f"Your role cannot create {role.value} accounts")

        tenant_id = data.tenant_id or actor.tenant_id
        if tenant_id != actor.tenant_id and UserRole(actor.role) != UserRole.SUPERADMIN:
            raise ForbiddenError("Only a superadmin can create accounts for another tenant")

        user = self.manager.create_user(
            email=data.email,
            password=data.password,
            full_name=data.full_name,
            tenant_id=tenant_id,
            role=role,
        )
        audit_log(
            AuditAction.USER_CREATED,
            {"tenant_id": tenant_id, "user_id": str(user.id), "role": role.value, "by": actor.user_id},
            audit_type=AuditType.ACCESS,
        )
        return user

    def set_active(self, actor: Session, user_id: str, is_active: bool) -> User:
        user = self._get_managed(actor, user_id, "deactivate")
        updated = self.users.update(user.id, {"is_active": is_active}) or user
        if not is_active:
            self.sessions.delete_for_user(str(user.id))

        audit_log(
            AuditAction.USER_STATUS_CHANGED,
            {
                "tenant_id": actor.tenant_id,
                "user_id": str(user.id),
                "is_active": is_active,
                "by": actor.user_id,
            },
            audit_type=AuditType.ACCESS,
        )
        return updated

    def reset_password(
        self, actor: Session, user_id: str, data: PasswordReset | dict[str, Any]
    ) -> User:
        data = _parse(PasswordReset, data, "Invalid password")
        user = self._get_managed(actor, user_id, "reset the password of", allow_self=True)
        updated = self.users.update(
            user.id, {"password_hash": generate_password_hash(data.new_password)}
        ) or user
        ended = self.sessions.delete_for_user(str(user.id))
        self.logger.info(f"Password reset for user {user.id}; {ended} sessions ended")

        audit_log(
            AuditAction.USER_PASSWORD_RESET,
            {"tenant_id": actor.tenant_id, "user_id": str(user.id), "by": actor.user_id},
            audit_type=AuditType.ACCESS,
        )
        return updated

    def delete_user(self, actor: Session, user_id: str) -> None:
        user = self._get_managed(actor, user_id, "delete")
        self.sessions.delete_for_user(str(user.id))
        self.users.delete(user.id)

        audit_log(
            AuditAction.USER_DELETED,
            {"tenant_id": actor.tenant_id, "user_id": str(user.id), "by": actor.user_id},
            audit_type=AuditType.ACCESS,
        )

    # -------------------------------------------------------------------------
    # Internal Methods
    # -------------------------------------------------------------------------

    def _get_managed(
        self, actor: Session, user_id: str, verb: str, allow_self: bool = False
    ) -> User:
        user = self.get_user(actor.tenant_id, user_id)
        is_self = str(user.id) == actor.user_id
        if not is_self and UserRole(user.role) not in assignable_roles(actor):
            raise ForbiddenError(f"Your role cannot {verb} {user.role} accounts")
        if is_self and not allow_self:
            raise ValidationError(
                f"You cannot {verb} your own account",
                details=[{"field": "user_id", "message": "own account"}],
            )
        return user


# Singleton instance
_user_directory: Optional[UserDirectory] = None


def get_user_directory() -> UserDirectory:
    """Get the user directory singleton instance."""
    global _user_directory
    if _user_directory is None:
        _user_directory = UserDirectory()
    return _user_directory
