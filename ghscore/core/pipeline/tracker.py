"""
Candidate pipeline tracking.

Moves candidates through the ordered hiring stages, keeps a history entry
per visited stage, and mirrors the public application state.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import ValidationError as PydanticValidationError

from ghscore.core.errors import NotFoundError, ValidationError
from ghscore.core.notifications.fanout import NotificationFanout, get_notification_fanout
from ghscore.data.models.candidate import (
    Candidate,
    CandidateCreate,
    CandidateUpdate,
    StageHistoryEntry,
)
from ghscore.data.repositories.application_repository import (
    ApplicationRepository,
    get_application_repository,
)
from ghscore.data.repositories.candidate_repository import (
    CandidateRepository,
    get_candidate_repository,
)
from ghscore.data.repositories.vacancy_repository import (
    VacancyRepository,
    get_vacancy_repository,
)
from ghscore.utils.constants import (
    PIPELINE_ORDER,
    ApplicationState,
    AuditAction,
    AuditType,
    CandidateResult,
    CandidateStage,
    InterviewStatus,
    NotificationType,
    RecruitmentSource,
    TechnicalScoreLevel,
)
from ghscore.utils.logger import LoggerMixin, audit_log


def classify_technical_score(score: float) -> TechnicalScoreLevel:
    """Band a 0-5 technical score: strong, adequate or weak."""
    return TechnicalScoreLevel.from_score(score)


def validate_stage_transition(current: CandidateStage, target: CandidateStage) -> None:
    """
    Check a stage move against the pipeline order.

    Forward moves (skips included) are allowed, as is discarding from any
    non-terminal stage. Backward moves and leaving a terminal stage are
    rejected.
    """
    current = CandidateStage(current)
    target = CandidateStage(target)
    if current == target:
        return
    if current.is_terminal:
        raise ValidationError(
            f"Candidate is already {current.value}",
            details=[{"field": "stage", "message": "terminal stage"}],
        )
    if target == CandidateStage.DISCARDED:
        return
    if PIPELINE_ORDER.index(target) < PIPELINE_ORDER.index(current):
        raise ValidationError(
            f"Cannot move candidate back from {current.value} to {target.value}",
            details=[{"field": "stage", "message": "backward move"}],
        )


def _plain(value: Any) -> Any:
    return value.value if isinstance(value, Enum) else value


class CandidatePipelineTracker(LoggerMixin):
    """Service for candidate creation and stage progression."""

    def __init__(
        self,
        candidates: Optional[CandidateRepository] = None,
        vacancies: Optional[VacancyRepository] = None,
        applications: Optional[ApplicationRepository] = None,
        fanout: Optional[NotificationFanout] = None,
    ):
        self.candidates = candidates or get_candidate_repository()
        self.vacancies = vacancies or get_vacancy_repository()
        self.applications = applications or get_application_repository()
        self.fanout = fanout or get_notification_fanout()

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def get_candidate(self, tenant_id: str, candidate_id: str) -> Candidate:
        candidate = self.candidates.get_for_tenant(tenant_id, candidate_id)
        if candidate is None:
            raise NotFoundError(f"Candidate {candidate_id} not found")
        return candidate

    def list_candidates(
        self,
        tenant_id: str,
        vacancy_id: Optional[str] = None,
        stage: Optional[CandidateStage] = None,
    ) -> list[Candidate]:
        return self.candidates.list_candidates(tenant_id, vacancy_id=vacancy_id, stage=stage)

    # -------------------------------------------------------------------------
    # Create
    # -------------------------------------------------------------------------

    def create_candidate(
        self,
        tenant_id: str,
        data: CandidateCreate | dict[str, Any],
        source: Optional[RecruitmentSource] = None,
        now: Optional[datetime] = None,
    ) -> Candidate:
        """
        Create a candidate at the application stage.

        Raises:
            ValidationError: missing or malformed fields
            NotFoundError: the vacancy does not exist in the tenant
        """
        if isinstance(data, dict):
            try:
                data = CandidateCreate.model_validate(data)
            except PydanticValidationError as e:
                raise ValidationError.from_pydantic(e, "Invalid candidate") from e

        if self.vacancies.get_for_tenant(tenant_id, data.vacancy_id) is None:
            raise NotFoundError(f"Vacancy {data.vacancy_id} not found")

        now = now or datetime.utcnow()
        fields = data.model_dump(exclude_none=True)
        if source is not None:
            fields["recruitment_source"] = source

        candidate = Candidate(
            tenant_id=tenant_id,
            stage=CandidateStage.APPLICATION,
            interview_status=InterviewStatus.PENDING,
            applied_at=now,
            stage_history=[StageHistoryEntry(stage=CandidateStage.APPLICATION, started_at=now)],
            **fields,
        )
        created = self.candidates.create(candidate)

        audit_log(
            AuditAction.CANDIDATE_ADDED.value,
            {"tenant_id": tenant_id, "candidate_id": str(created.id), "vacancy_id": data.vacancy_id},
            audit_type=AuditType.TRANSITION,
        )
        return created

    # -------------------------------------------------------------------------
    # Update
    # -------------------------------------------------------------------------

    def update_candidate(
        self,
        tenant_id: str,
        candidate_id: str,
        patch: CandidateUpdate | dict[str, Any],
        now: Optional[datetime] = None,
    ) -> Candidate:
        """
        Patch a candidate.

        A stage change closes the open history entry and opens a new one,
        mirrors the public application state, and entering ``hired``
        stamps the hire date and notifies recruiters.
        """
        if isinstance(patch, dict):
            try:
                patch = CandidateUpdate.model_validate(patch)
            except PydanticValidationError as e:
                raise ValidationError.from_pydantic(e, "Invalid candidate update") from e

        candidate = self.get_candidate(tenant_id, candidate_id)
        now = now or datetime.utcnow()

        changes = {
            key: _plain(value)
            for key, value in patch.model_dump(exclude_unset=True).items()
        }
        if changes.get("stage") is None:
            changes.pop("stage", None)
        if changes.get("interview_status") is None:
            changes.pop("interview_status", None)

        current_stage = CandidateStage(candidate.stage)
        new_stage = CandidateStage(changes["stage"]) if "stage" in changes else current_stage
        validate_stage_transition(current_stage, new_stage)

        result = changes.get("result", candidate.result)
        reason = changes.get("not_fit_reason", candidate.not_fit_reason)
        if result == CandidateResult.NOT_FIT and not (reason and reason.strip()):
            raise ValidationError(
                "A reason is required when the candidate is not fit",
                details=[{"field": "not_fit_reason", "message": "required for not_fit"}],
            )

        if changes.get("retention_90d") is not None and new_stage != CandidateStage.HIRED:
            raise ValidationError(
                "Retention can only be recorded for hired candidates",
                details=[{"field": "retention_90d", "message": "candidate not hired"}],
            )

        stage_changed = new_stage != current_stage
        if stage_changed:
            self._advance_history(candidate, new_stage, now)
            if new_stage == CandidateStage.HIRED:
                changes["hired_at"] = now

        if not changes:
            return candidate

        if stage_changed:
            updated = self.candidates.save_history(candidate, changes)
        else:
            updated = self.candidates.update(candidate.id, changes)
        if updated is None:
            raise NotFoundError(f"Candidate {candidate_id} not found")

        if stage_changed:
            self._on_stage_changed(updated, current_stage)
        return updated

    # -------------------------------------------------------------------------
    # Internal Methods
    # -------------------------------------------------------------------------

    @staticmethod
    def _advance_history(candidate: Candidate, stage: CandidateStage, now: datetime) -> None:
        open_entry = candidate.current_history_entry
        if open_entry is not None:
            open_entry.ended_at = now
        candidate.stage_history.append(StageHistoryEntry(stage=stage, started_at=now))

    def _on_stage_changed(self, candidate: Candidate, previous: CandidateStage) -> None:
        self.applications.sync_state(
            str(candidate.id), ApplicationState.from_stage(candidate.stage)
        )
        audit_log(
            AuditAction.CANDIDATE_STAGE_CHANGED.value,
            {
                "tenant_id": candidate.tenant_id,
                "candidate_id": str(candidate.id),
                "from": previous.value,
                "to": candidate.stage,
            },
            audit_type=AuditType.TRANSITION,
        )
        if candidate.stage == CandidateStage.HIRED:
            self.fanout.notify_best_effort(
                NotificationType.CANDIDATE_HIRED,
                {"candidate_id": candidate.id, "vacancy_id": candidate.vacancy_id},
                candidate.tenant_id,
                body=candidate.name,
            )


# Singleton instance
_pipeline_tracker: Optional[CandidatePipelineTracker] = None


def get_pipeline_tracker() -> CandidatePipelineTracker:
    """Get the candidate pipeline tracker singleton instance."""
    global _pipeline_tracker
    if _pipeline_tracker is None:
        _pipeline_tracker = CandidatePipelineTracker()
    return _pipeline_tracker
