"""
Public application intake.

Lists published vacancies, accepts applications from the public portal and
answers tracking-token status lookups. Submission is the one multi-step
unit of work in the system: the candidate and the scored application are
written together, the recruiter notification is best effort.
"""

from datetime import datetime, timedelta
from typing import Any, Optional

from pydantic import ValidationError as PydanticValidationError
from pymongo.errors import PyMongoError

from ghscore.core.errors import NotFoundError, StoreError, ValidationError
from ghscore.core.matching.matching_engine import (
    ApplicantProfile,
    MatchingEngine,
    get_matching_engine,
    issue_tracking_token,
)
from ghscore.core.notifications.fanout import NotificationFanout, get_notification_fanout
from ghscore.core.pipeline.tracker import CandidatePipelineTracker, get_pipeline_tracker
from ghscore.data.models.application import (
    Application,
    ApplicationReceipt,
    ApplicationStatusView,
    ApplicationSubmission,
)
from ghscore.data.models.candidate import CandidateCreate
from ghscore.data.repositories.application_repository import (
    ApplicationRepository,
    get_application_repository,
)
from ghscore.data.repositories.candidate_repository import (
    CandidateRepository,
    get_candidate_repository,
)
from ghscore.data.repositories.organization_repository import (
    SiteRepository,
    get_site_repository,
)
from ghscore.data.repositories.vacancy_repository import (
    VacancyRepository,
    get_vacancy_repository,
)
from ghscore.utils.config import get_settings
from ghscore.utils.constants import (
    ApplicationState,
    NotificationType,
    RecruitmentSource,
    VacancyState,
)
from ghscore.utils.logger import LoggerMixin


class ApplicationService(LoggerMixin):
    """Service behind the public job portal."""

    def __init__(
        self,
        vacancies: Optional[VacancyRepository] = None,
        candidates: Optional[CandidateRepository] = None,
        applications: Optional[ApplicationRepository] = None,
        sites: Optional[SiteRepository] = None,
        tracker: Optional[CandidatePipelineTracker] = None,
        engine: Optional[MatchingEngine] = None,
        fanout: Optional[NotificationFanout] = None,
    ):
        self.vacancies = vacancies or get_vacancy_repository()
        self.candidates = candidates or get_candidate_repository()
        self.applications = applications or get_application_repository()
        self.sites = sites or get_site_repository()
        self.tracker = tracker or get_pipeline_tracker()
        self.engine = engine or get_matching_engine()
        self.fanout = fanout or get_notification_fanout()
        self.settings = get_settings().tracking

    # -------------------------------------------------------------------------
    # Public job listing
    # -------------------------------------------------------------------------

    def list_public_jobs(self, tenant_id: str) -> list[dict[str, Any]]:
        """Open, published vacancies with their site name."""
        site_names = self.sites.names_by_id(tenant_id)
        return [
            {
                "id": str(vacancy.id),
                "requisition_code": vacancy.requisition_code,
                "title": vacancy.title,
                "site_name": site_names.get(vacancy.site_id),
                "priority": vacancy.priority,
                "opened_at": vacancy.opened_at.isoformat(),
                "estimated_close_at": vacancy.estimated_close_at.isoformat(),
            }
            for vacancy in self.vacancies.list_public(tenant_id)
        ]

    # -------------------------------------------------------------------------
    # Submission
    # -------------------------------------------------------------------------

    def submit_application(
        self,
        submission: ApplicationSubmission | dict[str, Any],
        now: Optional[datetime] = None,
    ) -> ApplicationReceipt:
        """
        Submit an application to an open vacancy.

        The candidate is created at the application stage with source
        ``portal``, scored once, and the application is stored with a fresh
        tracking token. If storing the application fails the candidate is
        removed again.

        Raises:
            ValidationError: malformed submission
            NotFoundError: the vacancy does not exist or is not open
            StoreError: the application could not be stored
        """
        if isinstance(submission, dict):
            try:
                submission = ApplicationSubmission.model_validate(submission)
            except PydanticValidationError as e:
                raise ValidationError.from_pydantic(e, "Invalid application") from e

        vacancy = self.vacancies.get_by_id(submission.vacancy_id)
        if vacancy is None or vacancy.state != VacancyState.OPEN:
            raise NotFoundError(f"Vacancy {submission.vacancy_id} is not open for applications")

        now = now or datetime.utcnow()
        tenant_id = vacancy.tenant_id

        candidate = self.tracker.create_candidate(
            tenant_id,
            CandidateCreate(
                name=submission.full_name,
                vacancy_id=str(vacancy.id),
                email=submission.email,
                phone=submission.phone,
                cv_url=submission.cv_url,
                expected_salary=submission.expected_salary,
            ),
            source=RecruitmentSource.PORTAL,
            now=now,
        )

        score = self.engine.score_application(ApplicantProfile.from_submission(submission), vacancy)

        application = Application(
            tenant_id=tenant_id,
            vacancy_id=str(vacancy.id),
            candidate_id=str(candidate.id),
            full_name=submission.full_name,
            email=submission.email,
            phone=submission.phone,
            city=submission.city,
            current_title=submission.current_title,
            current_company=submission.current_company,
            education_level=submission.education_level,
            years_experience=submission.years_experience,
            skills=submission.skills,
            message=submission.message,
            referral_channel=submission.referral_channel,
            match_score=score.match_score,
            score_degraded=score.degraded,
            recommendation=score.recommendation,
            tracking_token=issue_tracking_token(),
            tracking_expires_at=now + timedelta(days=self.settings.expiry_days),
            state=ApplicationState.NEW,
        )
        try:
            application = self.applications.create(application)
        except PyMongoError as e:
            self.logger.error(f"Storing application failed, removing candidate {candidate.id}: {e}")
            self.candidates.delete(candidate.id)
            raise StoreError("The application could not be saved, please retry") from e

        self.fanout.notify_best_effort(
            NotificationType.NEW_APPLICATION,
            {
                "vacancy_id": vacancy.id,
                "candidate_id": candidate.id,
                "application_id": application.id,
            },
            tenant_id,
            body=f"{submission.full_name} - {vacancy.title}",
        )

        self.logger.info(
            f"Application {application.id} received for {vacancy.requisition_code} "
            f"(score {application.match_score})"
        )
        return ApplicationReceipt(
            application_id=str(application.id),
            candidate_id=str(candidate.id),
            match_score=application.match_score,
            tracking_token=application.tracking_token,
            tracking_url=self.tracking_url(application.tracking_token),
        )

    def tracking_url(self, token: str) -> str:
        return f"{self.settings.base_url}/{token}"

    # -------------------------------------------------------------------------
    # Tracking
    # -------------------------------------------------------------------------

    def get_application_status(
        self, token: str, now: Optional[datetime] = None
    ) -> ApplicationStatusView:
        """
        Look up an application by its tracking token.

        Unknown and expired tokens are indistinguishable to the caller.
        """
        now = now or datetime.utcnow()
        application = self.applications.get_by_token(token)
        if application is None or application.tracking_expires_at <= now:
            raise NotFoundError("Application not found")

        application = self.applications.record_view(token) or application
        vacancy = self.vacancies.get_by_id(application.vacancy_id)

        return ApplicationStatusView(
            full_name=application.full_name,
            vacancy_title=vacancy.title if vacancy else "",
            requisition_code=vacancy.requisition_code if vacancy else "",
            state=application.state,
            applied_at=application.created_at,
            updated_at=application.updated_at,
            tracking_views=application.tracking_views,
        )


# Singleton instance
_application_service: Optional[ApplicationService] = None


def get_application_service() -> ApplicationService:
    """Get the application service singleton instance."""
    global _application_service
    if _application_service is None:
        _application_service = ApplicationService()
    return _application_service
