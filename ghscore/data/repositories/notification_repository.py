"""
Notification repository for GH Score.
"""

from datetime import datetime
from typing import Optional

from ghscore.data.models.notification import Notification

from .base import TenantRepository


class NotificationRepository(TenantRepository[Notification]):
    """Repository for notification document operations."""

    @property
    def collection_name(self) -> str:
        return "notifications"

    @property
    def model_class(self) -> type[Notification]:
        return Notification

    def recent(self, tenant_id: str, limit: int) -> list[Notification]:
        # _id breaks ties between notifications raised in the same millisecond
        return self.find(
            {"tenant_id": tenant_id},
            limit=limit,
            sort=[("created_at", -1), ("_id", -1)],
        )

    def unread_count(self, tenant_id: str) -> int:
        return self.count({"tenant_id": tenant_id, "read": False})

    def mark_all_read(self, tenant_id: str) -> int:
        """Flip every unread notification of the tenant to read."""
        now = datetime.utcnow()
        result = self._get_collection().update_many(
            {"tenant_id": tenant_id, "read": False},
            {"$set": {"read": True, "read_at": now, "updated_at": now}},
        )
        return result.modified_count


# Singleton instance
_notification_repository: Optional[NotificationRepository] = None


def get_notification_repository() -> NotificationRepository:
    """Get the notification repository singleton instance."""
    global _notification_repository
    if _notification_repository is None:
        _notification_repository = NotificationRepository()
    return _notification_repository
