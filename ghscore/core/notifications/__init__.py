"""
Recruiter notifications.
"""

from .fanout import NotificationFanout, get_notification_fanout

__all__ = ["NotificationFanout", "get_notification_fanout"]
