"""
User account and session models for GH Score.
"""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, EmailStr, Field, field_validator

from ghscore.utils.constants import UserRole

from .base import BaseDocument


class User(BaseDocument):
    """A platform account. Emails are unique across tenants."""

    email: EmailStr
    full_name: str = Field(..., min_length=1, max_length=200)
    role: UserRole = UserRole.RECRUITER
    password_hash: str
    tenant_id: str = Field(..., min_length=1)
    is_active: bool = True

    def model_dump_public(self) -> dict[str, Any]:
        """API view of the account; the password hash never leaves the store."""
        data = self.model_dump_api()
        data.pop("password_hash", None)
        return data

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, v):
        return v.strip().lower() if isinstance(v, str) else v

    class Settings:
        name = "users"


class Session(BaseDocument):
    """An authenticated session, resolved from its bearer token per request."""

    token: str
    user_id: str
    tenant_id: str
    role: UserRole
    expires_at: datetime

    def is_expired(self, now: datetime | None = None) -> bool:
        return (now or datetime.utcnow()) >= self.expires_at

    class Settings:
        name = "sessions"


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class UserCreate(BaseModel):
    """Payload for provisioning a staff account."""

    email: EmailStr
    password: str = Field(..., min_length=6)
    full_name: str = Field(..., min_length=1, max_length=200)
    role: UserRole = UserRole.RECRUITER
    tenant_id: Optional[str] = None

    @field_validator("full_name", mode="before")
    @classmethod
    def strip_name(cls, v):
        return v.strip() if isinstance(v, str) else v


class UserStatusUpdate(BaseModel):
    is_active: bool


class PasswordReset(BaseModel):
    new_password: str = Field(..., min_length=6)
