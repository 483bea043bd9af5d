"""
User and session repositories for GH Score.
"""

from datetime import datetime
from typing import Optional

from ghscore.data.models.user import Session, User

from .base import BaseRepository


class UserRepository(BaseRepository[User]):
    """Repository for user account operations."""

    @property
    def collection_name(self) -> str:
        return "users"

    @property
    def model_class(self) -> type[User]:
        return User

    def get_by_email(self, email: str) -> Optional[User]:
        return self.find_one({"email": email.strip().lower()})

    def list_for_tenant(self, tenant_id: str) -> list[User]:
        return self.find({"tenant_id": tenant_id})

    def list_active_by_roles(self, tenant_id: str, roles: list[str]) -> list[User]:
        return self.find(
            {"tenant_id": tenant_id, "role": {"$in": roles}, "is_active": True},
            sort_by="full_name",
            sort_order=1,
        )


class SessionRepository(BaseRepository[Session]):
    """Repository for session operations."""

    @property
    def collection_name(self) -> str:
        return "sessions"

    @property
    def model_class(self) -> type[Session]:
        return Session

    def get_by_token(self, token: str) -> Optional[Session]:
        return self.find_one({"token": token})

    def delete_by_token(self, token: str) -> bool:
        result = self._get_collection().delete_one({"token": token})
        return result.deleted_count > 0

    def delete_for_user(self, user_id: str) -> int:
        return self.delete_many({"user_id": user_id})

    def purge_expired(self, now: Optional[datetime] = None) -> int:
        return self.delete_many({"expires_at": {"$lte": now or datetime.utcnow()}})


# Singleton instances
_user_repository: Optional[UserRepository] = None
_session_repository: Optional[SessionRepository] = None


def get_user_repository() -> UserRepository:
    """Get the user repository singleton instance."""
    global _user_repository
    if _user_repository is None:
        _user_repository = UserRepository()
    return _user_repository


def get_session_repository() -> SessionRepository:
    """Get the session repository singleton instance."""
    global _session_repository
    if _session_repository is None:
        _session_repository = SessionRepository()
    return _session_repository
