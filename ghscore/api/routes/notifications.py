"""
Recruiter notification feed endpoints.
"""

from typing import Any

from fastapi import APIRouter, Depends, Query

from ghscore.api.dependencies import get_session
from ghscore.core.notifications.fanout import NotificationFanout, get_notification_fanout
from ghscore.data.models.user import Session

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("")
def list_notifications(
    limit: int = Query(default=20, ge=1, le=200),
    session: Session = Depends(get_session),
    fanout: NotificationFanout = Depends(get_notification_fanout),
) -> list[dict[str, Any]]:
    return [n.model_dump_api() for n in fanout.list_notifications(session.tenant_id, limit)]


@router.post("/mark-read")
def mark_read(
    session: Session = Depends(get_session),
    fanout: NotificationFanout = Depends(get_notification_fanout),
) -> dict[str, int]:
    return {"updated": fanout.mark_all_read(session.tenant_id)}


@router.get("/unread-count")
def unread_count(
    session: Session = Depends(get_session),
    fanout: NotificationFanout = Depends(get_notification_fanout),
) -> dict[str, int]:
    return {
        "count": fanout.unread_count(session.tenant_id),
        "poll_interval_seconds": fanout.poll_interval_seconds,
    }
