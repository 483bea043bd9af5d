"""
Notification data model for GH Score.
"""

from datetime import datetime
from typing import Any, Optional

from pydantic import Field

from ghscore.utils.constants import NotificationType

from .base import TenantDocument


class Notification(TenantDocument):
    """A recruiter notification; the audience is every recruiter of the tenant."""

    type: NotificationType
    title: str
    body: str = ""
    read: bool = False
    read_at: Optional[datetime] = None
    payload: dict[str, Any] = Field(default_factory=dict)

    class Settings:
        """MongoDB collection settings."""

        name = "notifications"
