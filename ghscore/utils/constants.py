"""
Application-wide constants for GH Score.

This module contains the closed value sets (states, stages, outcomes) and
the thresholds used throughout the application.
"""

from enum import Enum
from typing import Final


# =============================================================================
# Vacancy Constants
# =============================================================================

DEFAULT_SLA_TARGET_DAYS: Final[int] = 15

# Days remaining at or below which an open vacancy is flagged as urgent
SLA_URGENT_THRESHOLD_DAYS: Final[int] = 3

REQUISITION_CODE_PREFIX: Final[str] = "REQ-"
REQUISITION_CODE_WIDTH: Final[int] = 3


# =============================================================================
# Candidate Constants
# =============================================================================

TECHNICAL_SCORE_MIN: Final[float] = 0.0
TECHNICAL_SCORE_MAX: Final[float] = 5.0

TECHNICAL_SCORE_THRESHOLDS: Final[dict[str, float]] = {
    "strong": 4.0,
    "adequate": 3.0,
}


# =============================================================================
# Matching Constants
# =============================================================================

MATCH_SCORE_MIN: Final[int] = 0
MATCH_SCORE_MAX: Final[int] = 100

# Education degree levels (ordered by level), Spanish and English labels
EDUCATION_LEVELS: Final[dict[str, int]] = {
    "bachiller": 1,
    "high school": 1,
    "tecnico": 2,
    "técnico": 2,
    "technical": 2,
    "tecnologo": 3,
    "tecnólogo": 3,
    "associate": 3,
    "profesional": 4,
    "pregrado": 4,
    "bachelor": 4,
    "especializacion": 5,
    "especialización": 5,
    "maestria": 5,
    "maestría": 5,
    "master": 5,
    "doctorado": 6,
    "phd": 6,
}


# =============================================================================
# Enums
# =============================================================================


class VacancyState(str, Enum):
    """Lifecycle state of a vacancy."""

    OPEN = "open"
    IN_PROGRESS = "in_progress"
    FILLED = "filled"
    CANCELLED = "cancelled"
    SUSPENDED = "suspended"

    @property
    def is_active(self) -> bool:
        """Open and in-progress vacancies count as active workload."""
        return self in (VacancyState.OPEN, VacancyState.IN_PROGRESS)


# Ordered columns of the Kanban board
KANBAN_COLUMNS: Final[tuple[VacancyState, ...]] = (
    VacancyState.OPEN,
    VacancyState.IN_PROGRESS,
    VacancyState.FILLED,
)

VACANCY_TRANSITIONS: Final[dict[VacancyState, frozenset[VacancyState]]] = {
    VacancyState.OPEN: frozenset({
        VacancyState.IN_PROGRESS,
        VacancyState.FILLED,
        VacancyState.CANCELLED,
        VacancyState.SUSPENDED,
    }),
    VacancyState.IN_PROGRESS: frozenset({
        VacancyState.OPEN,
        VacancyState.FILLED,
        VacancyState.CANCELLED,
        VacancyState.SUSPENDED,
    }),
    VacancyState.FILLED: frozenset({
        VacancyState.IN_PROGRESS,
        VacancyState.OPEN,
    }),
    VacancyState.SUSPENDED: frozenset({
        VacancyState.OPEN,
        VacancyState.IN_PROGRESS,
        VacancyState.CANCELLED,
    }),
    VacancyState.CANCELLED: frozenset({
        VacancyState.OPEN,
    }),
}


class VacancyPriority(str, Enum):
    """Business priority of a vacancy."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

    @property
    def rank(self) -> int:
        return list(VacancyPriority).index(self)


class SlaLevel(str, Enum):
    """SLA adherence level of a vacancy."""

    COMPLETED = "completed"
    OVERDUE = "overdue"
    URGENT = "urgent"
    ON_TRACK = "on_track"


class MoveDirection(str, Enum):
    """Direction of a Kanban card move."""

    NEXT = "next"
    PREV = "prev"


class CandidateStage(str, Enum):
    """Ordered hiring pipeline stages."""

    APPLICATION = "application"
    HR_INTERVIEW = "hr_interview"
    TECHNICAL_TEST = "technical_test"
    TECHNICAL_INTERVIEW = "technical_interview"
    FINAL_INTERVIEW = "final_interview"
    OFFER = "offer"
    HIRED = "hired"
    DISCARDED = "discarded"

    @property
    def is_terminal(self) -> bool:
        return self in (CandidateStage.HIRED, CandidateStage.DISCARDED)


# Linear order of the pipeline; DISCARDED sits outside it
PIPELINE_ORDER: Final[tuple[CandidateStage, ...]] = (
    CandidateStage.APPLICATION,
    CandidateStage.HR_INTERVIEW,
    CandidateStage.TECHNICAL_TEST,
    CandidateStage.TECHNICAL_INTERVIEW,
    CandidateStage.FINAL_INTERVIEW,
    CandidateStage.OFFER,
    CandidateStage.HIRED,
)


class RecruitmentSource(str, Enum):
    """Channel through which a candidate was sourced."""

    LINKEDIN = "linkedin"
    JOB_BOARD = "job_board"
    REFERRAL = "referral"
    SENA = "sena"
    FLYER = "flyer"
    OTHER_NETWORKS = "other_networks"
    PORTAL = "portal"


class InterviewStatus(str, Enum):
    """Status of the candidate's interview."""

    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    DONE = "done"
    NO_SHOW = "no_show"


class CandidateResult(str, Enum):
    """Recruiter verdict on a candidate."""

    FIT = "fit"
    NOT_FIT = "not_fit"
    ON_HOLD = "on_hold"


class RetentionStatus(str, Enum):
    """Post-hire status after the first 90 days."""

    CONTINUING = "continuing"
    VOLUNTARY_EXIT = "voluntary_exit"
    PERFORMANCE_EXIT = "performance_exit"


class TechnicalScoreLevel(str, Enum):
    """Color-coding band of a technical score."""

    STRONG = "strong"
    ADEQUATE = "adequate"
    WEAK = "weak"

    @classmethod
    def from_score(cls, score: float) -> "TechnicalScoreLevel":
        """Convert a 0-5 technical score to a band."""
        if score >= TECHNICAL_SCORE_THRESHOLDS["strong"]:
            return cls.STRONG
        elif score >= TECHNICAL_SCORE_THRESHOLDS["adequate"]:
            return cls.ADEQUATE
        return cls.WEAK


class ApplicationState(str, Enum):
    """Externally visible state of a public application."""

    NEW = "Nueva"
    IN_REVIEW = "En Revisión"
    INTERVIEW = "Entrevista"
    FINALIST = "Finalista"
    DISCARDED = "Descartado"
    HIRED = "Contratado"

    @classmethod
    def from_stage(cls, stage: "CandidateStage") -> "ApplicationState":
        """Collapse an internal pipeline stage to its public label."""
        return STAGE_TO_APPLICATION_STATE[CandidateStage(stage)]


STAGE_TO_APPLICATION_STATE: Final[dict[CandidateStage, ApplicationState]] = {
    CandidateStage.APPLICATION: ApplicationState.NEW,
    CandidateStage.HR_INTERVIEW: ApplicationState.IN_REVIEW,
    CandidateStage.TECHNICAL_TEST: ApplicationState.IN_REVIEW,
    CandidateStage.TECHNICAL_INTERVIEW: ApplicationState.INTERVIEW,
    CandidateStage.FINAL_INTERVIEW: ApplicationState.INTERVIEW,
    CandidateStage.OFFER: ApplicationState.FINALIST,
    CandidateStage.HIRED: ApplicationState.HIRED,
    CandidateStage.DISCARDED: ApplicationState.DISCARDED,
}


class NotificationType(str, Enum):
    """Kinds of recruiter notifications."""

    NEW_APPLICATION = "new_application"
    VACANCY_FILLED = "vacancy_filled"
    CANDIDATE_HIRED = "candidate_hired"


class UserRole(str, Enum):
    """Role of a platform user."""

    SUPERADMIN = "superadmin"
    ADMIN = "admin"
    RECRUITER = "recruiter"
    VIEWER = "viewer"


class AuditType(str, Enum):
    """Category of an audit trail entry."""

    DECISION = "DECISION"
    TRANSITION = "TRANSITION"
    ACCESS = "ACCESS"


class AuditAction(str, Enum):
    """Types of actions written to the audit log."""

    VACANCY_CREATED = "vacancy_created"
    VACANCY_STATE_CHANGED = "vacancy_state_changed"
    CANDIDATE_ADDED = "candidate_added"
    CANDIDATE_STAGE_CHANGED = "candidate_stage_changed"
    APPLICATION_SCORED = "application_scored"
    COMPANY_DELETED = "company_deleted"
    USER_CREATED = "user_created"
    USER_STATUS_CHANGED = "user_status_changed"
    USER_PASSWORD_RESET = "user_password_reset"
    USER_DELETED = "user_deleted"
