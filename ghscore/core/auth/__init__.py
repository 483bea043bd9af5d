"""
Authentication: explicit sessions and role checks.
"""

from .sessions import (
    ADMIN_ROLES,
    WRITE_ROLES,
    SessionManager,
    get_session_manager,
    require_role,
)
from .users import RECRUITER_ROLES, UserDirectory, assignable_roles, get_user_directory

__all__ = [
    "ADMIN_ROLES",
    "WRITE_ROLES",
    "SessionManager",
    "get_session_manager",
    "require_role",
    "RECRUITER_ROLES",
    "UserDirectory",
    "assignable_roles",
    "get_user_directory",
]
