"""
Session management.

Sessions are explicit objects: they are created at login, looked up from
the bearer token on every request and handed to the handler. There is no
process-wide "current user".
"""

import secrets
from datetime import datetime, timedelta
from typing import Iterable, Optional

from werkzeug.security import check_password_hash, generate_password_hash

from ghscore.core.errors import AuthError, ConflictError, ForbiddenError
from ghscore.data.models.user import Session, User
from ghscore.data.repositories.user_repository import (
    SessionRepository,
    UserRepository,
    get_session_repository,
    get_user_repository,
)
from ghscore.utils.config import get_settings
from ghscore.utils.constants import UserRole
from ghscore.utils.logger import LoggerMixin

# Roles allowed to write recruiting data
WRITE_ROLES = (UserRole.SUPERADMIN, UserRole.ADMIN, UserRole.RECRUITER)
ADMIN_ROLES = (UserRole.SUPERADMIN, UserRole.ADMIN)


class SessionManager(LoggerMixin):
    """Login, logout and per-request session resolution."""

    def __init__(
        self,
        users: Optional[UserRepository] = None,
        sessions: Optional[SessionRepository] = None,
    ):
        self.users = users or get_user_repository()
        self.sessions = sessions or get_session_repository()
        self.settings = get_settings().auth

    def create_user(
        self,
        email: str,
        password: str,
        full_name: str,
        tenant_id: str,
        role: UserRole = UserRole.RECRUITER,
    ) -> User:
        if self.users.get_by_email(email) is not None:
            raise ConflictError(f"A user with email {email} already exists")
        user = User(
            email=email,
            full_name=full_name,
            role=role,
            tenant_id=tenant_id,
            password_hash=generate_password_hash(password),
        )
        return self.users.create(user)

    def login(self, email: str, password: str, now: Optional[datetime] = None) -> Session:
        """Check credentials and open a session."""
        user = self.users.get_by_email(email)
        if user is None or not user.is_active or not check_password_hash(user.password_hash, password):
            self.logger.warning("Failed login attempt")
            raise AuthError("Invalid email or password")

        now = now or datetime.utcnow()
        self.sessions.purge_expired(now)
        session = Session(
            token=secrets.token_hex(self.settings.token_bytes),
            user_id=str(user.id),
            tenant_id=user.tenant_id,
            role=user.role,
            expires_at=now + timedelta(hours=self.settings.session_ttl_hours),
        )
        self.logger.info(f"User {user.id} logged in")
        return self.sessions.create(session)

    def logout(self, token: str) -> bool:
        return self.sessions.delete_by_token(token)

    def resolve(self, token: Optional[str], now: Optional[datetime] = None) -> Session:
        """
        Return the live session for a token.

        Raises:
            AuthError: missing, unknown or expired token; expired sessions
                are deleted
        """
        if not token:
            raise AuthError("Authentication required")
        session = self.sessions.get_by_token(token)
        if session is None:
            raise AuthError("Invalid session")
        if session.is_expired(now):
            self.sessions.delete_by_token(token)
            raise AuthError("Session expired")
        return session

    def current_user(self, session: Session) -> User:
        user = self.users.get_by_id(session.user_id)
        if user is None or not user.is_active:
            raise AuthError("Invalid session")
        return user


def require_role(session: Session, roles: Iterable[UserRole]) -> Session:
    """Raise ForbiddenError unless the session has one of the roles."""
    allowed = {UserRole(r).value for r in roles}
    if UserRole(session.role).value not in allowed:
        raise ForbiddenError("Your role does not allow this operation")
    return session


# Singleton instance
_session_manager: Optional[SessionManager] = None


def get_session_manager() -> SessionManager:
    """Get the session manager singleton instance."""
    global _session_manager
    if _session_manager is None:
        _session_manager = SessionManager()
    return _session_manager
