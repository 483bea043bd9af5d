"""
Recruiter notification fanout.

Notifications are tenant-wide: every recruiter account of a tenant sees
the same feed, so a single document is stored per event. Clients poll
for the unread count at the advertised interval.
"""

from typing import Any, Optional

from ghscore.data.models.notification import Notification
from ghscore.data.repositories.notification_repository import (
    NotificationRepository,
    get_notification_repository,
)
from ghscore.utils.config import get_settings
from ghscore.utils.constants import NotificationType
from ghscore.utils.logger import LoggerMixin

_TITLES = {
    NotificationType.NEW_APPLICATION: "Nueva postulación",
    NotificationType.VACANCY_FILLED: "Vacante cubierta",
    NotificationType.CANDIDATE_HIRED: "Candidato contratado",
}


class NotificationFanout(LoggerMixin):
    """Raises, lists and acknowledges recruiter notifications."""

    def __init__(self, repository: Optional[NotificationRepository] = None):
        self.repository = repository or get_notification_repository()
        self.settings = get_settings().notifications

    def notify(
        self,
        type: NotificationType,
        payload: dict[str, Any],
        tenant_id: str,
        body: str = "",
        title: Optional[str] = None,
    ) -> Notification:
        """Store a notification for all recruiters of the tenant."""
        notification = Notification(
            tenant_id=tenant_id,
            type=NotificationType(type),
            title=title or _TITLES[NotificationType(type)],
            body=body,
            payload={k: str(v) for k, v in payload.items() if v is not None},
        )
        created = self.repository.create(notification)
        self.logger.info(f"Notification {created.type} raised for tenant {tenant_id}")
        return created

    def notify_best_effort(
        self,
        type: NotificationType,
        payload: dict[str, Any],
        tenant_id: str,
        body: str = "",
    ) -> Optional[Notification]:
        """Like notify(), but any failure is logged instead of raised."""
        try:
            return self.notify(type, payload, tenant_id, body=body)
        except Exception:
            self.logger.exception(f"Failed to raise {type} notification for tenant {tenant_id}")
            return None

    def list_notifications(self, tenant_id: str, limit: Optional[int] = None) -> list[Notification]:
        """Most recent notifications first."""
        return self.repository.recent(tenant_id, limit or self.settings.list_limit)

    def unread_count(self, tenant_id: str) -> int:
        return self.repository.unread_count(tenant_id)

    def mark_all_read(self, tenant_id: str) -> int:
        """Mark every unread notification read; returns how many changed."""
        changed = self.repository.mark_all_read(tenant_id)
        if changed:
            self.logger.debug(f"Marked {changed} notifications read for tenant {tenant_id}")
        return changed

    @property
    def poll_interval_seconds(self) -> int:
        return self.settings.poll_interval_seconds


# Singleton instance
_fanout: Optional[NotificationFanout] = None


def get_notification_fanout() -> NotificationFanout:
    """Get the notification fanout singleton instance."""
    global _fanout
    if _fanout is None:
        _fanout = NotificationFanout()
    return _fanout
