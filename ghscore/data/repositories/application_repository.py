"""
Application repository for GH Score.

Applications are written once at submission; afterwards only the mirrored
state and the tracking view counter change.
"""

from datetime import datetime
from typing import Any, Optional

from pymongo import ReturnDocument

from ghscore.data.models.application import Application
from ghscore.utils.constants import ApplicationState
from ghscore.utils.logger import get_logger

from .base import TenantRepository

logger = get_logger(__name__)

IMMUTABLE_FIELDS = frozenset({"match_score", "tracking_token", "score_degraded"})


class ApplicationRepository(TenantRepository[Application]):
    """Repository for application document operations."""

    @property
    def collection_name(self) -> str:
        return "applications"

    @property
    def model_class(self) -> type[Application]:
        return Application

    def update(self, id_value, update_data: dict[str, Any]) -> Optional[Application]:
        """Update an application; the score and token are write-once."""
        blocked = IMMUTABLE_FIELDS.intersection(update_data)
        if blocked:
            raise ValueError(f"Fields cannot be changed: {', '.join(sorted(blocked))}")
        return super().update(id_value, update_data)

    def get_by_token(self, token: str) -> Optional[Application]:
        return self.find_one({"tracking_token": token})

    def sync_state(self, candidate_id: str, state: ApplicationState) -> int:
        """Mirror a candidate's public state onto its application(s)."""
        result = self._get_collection().update_many(
            {"candidate_id": candidate_id},
            {"$set": {"state": ApplicationState(state).value, "updated_at": datetime.utcnow()}},
        )
        return result.modified_count

    def record_view(self, token: str) -> Optional[Application]:
        """Increment the view counter of a tracking token."""
        document = self._get_collection().find_one_and_update(
            {"tracking_token": token},
            {"$inc": {"tracking_views": 1}},
            return_document=ReturnDocument.AFTER,
        )
        return self._to_model(document)


# Singleton instance
_application_repository: Optional[ApplicationRepository] = None


def get_application_repository() -> ApplicationRepository:
    """Get the application repository singleton instance."""
    global _application_repository
    if _application_repository is None:
        _application_repository = ApplicationRepository()
    return _application_repository
