"""
Candidate repository for GH Score.

Provides data access operations for candidate documents.
"""

from typing import Any, Optional

from ghscore.data.models.candidate import Candidate
from ghscore.utils.constants import CandidateStage
from ghscore.utils.logger import get_logger

from .base import TenantRepository

logger = get_logger(__name__)


class CandidateRepository(TenantRepository[Candidate]):
    """Repository for candidate document operations."""

    @property
    def collection_name(self) -> str:
        return "candidates"

    @property
    def model_class(self) -> type[Candidate]:
        return Candidate

    def list_candidates(
        self,
        tenant_id: str,
        vacancy_id: Optional[str] = None,
        stage: Optional[CandidateStage] = None,
    ) -> list[Candidate]:
        """List a tenant's candidates, newest first."""
        query: dict[str, Any] = {"tenant_id": tenant_id}
        if vacancy_id:
            query["vacancy_id"] = vacancy_id
        if stage:
            query["stage"] = CandidateStage(stage).value
        return self.find(query)

    def count_by_vacancy(self, vacancy_id: str) -> int:
        return self.count({"vacancy_id": vacancy_id})

    def save_history(self, candidate: Candidate, extra: dict[str, Any]) -> Optional[Candidate]:
        """Write the candidate's stage history along with other changed fields."""
        update = dict(extra)
        update["stage_history"] = [
            entry.model_dump() for entry in candidate.stage_history
        ]
        return self.update(candidate.id, update)


# Singleton instance
_candidate_repository: Optional[CandidateRepository] = None


def get_candidate_repository() -> CandidateRepository:
    """Get the candidate repository singleton instance."""
    global _candidate_repository
    if _candidate_repository is None:
        _candidate_repository = CandidateRepository()
    return _candidate_repository
