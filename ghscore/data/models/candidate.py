"""
Candidate data models for GH Score.

Defines the schema for a person moving through a vacancy's hiring
pipeline, including interview outcome, scores and stage history.
"""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from ghscore.utils.constants import (
    MATCH_SCORE_MAX,
    MATCH_SCORE_MIN,
    TECHNICAL_SCORE_MAX,
    TECHNICAL_SCORE_MIN,
    CandidateResult,
    CandidateStage,
    InterviewStatus,
    RecruitmentSource,
    RetentionStatus,
)

from .base import EmbeddedModel, TenantDocument, to_naive_utc


def clamp_technical_score(value: Any) -> Any:
    """Clamp a technical score into the 0.0-5.0 range."""
    if value is None or value == "":
        return None
    try:
        score = float(value)
    except (TypeError, ValueError):
        return value
    return max(TECHNICAL_SCORE_MIN, min(TECHNICAL_SCORE_MAX, score))


def clamp_ai_score(value: Any) -> Any:
    if value is None or value == "":
        return None
    try:
        score = float(value)
    except (TypeError, ValueError):
        return value
    return max(float(MATCH_SCORE_MIN), min(float(MATCH_SCORE_MAX), score))


class StageHistoryEntry(EmbeddedModel):
    """A period spent in one pipeline stage."""

    stage: CandidateStage
    started_at: datetime = Field(default_factory=datetime.utcnow)
    ended_at: Optional[datetime] = None

    @property
    def days_spent(self) -> Optional[float]:
        """Days spent in the stage, or None while it is still open."""
        if self.ended_at is None:
            return None
        return (self.ended_at - self.started_at).total_seconds() / 86400


class Candidate(TenantDocument):
    """
    Main candidate model.

    A candidate belongs to exactly one vacancy. The stage history keeps one
    entry per visited stage; only the last one may be open.
    """

    # Basic Information
    name: str = Field(..., min_length=1, max_length=200)
    vacancy_id: str
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    cv_url: Optional[str] = None

    # Pipeline
    stage: CandidateStage = CandidateStage.APPLICATION
    recruitment_source: Optional[RecruitmentSource] = None
    stage_history: list[StageHistoryEntry] = Field(default_factory=list)

    # Interview
    interview_status: InterviewStatus = InterviewStatus.PENDING
    interview_date: Optional[datetime] = None
    technical_score: Optional[float] = None
    ai_technical_score: Optional[float] = None

    # Outcome
    result: Optional[CandidateResult] = None
    not_fit_reason: Optional[str] = None
    final_result: Optional[str] = None
    retention_90d: Optional[RetentionStatus] = None
    expected_salary: Optional[float] = Field(None, ge=0)

    applied_at: datetime = Field(default_factory=datetime.utcnow)
    hired_at: Optional[datetime] = None

    @field_validator("interview_date", "applied_at", "hired_at", mode="before")
    @classmethod
    def normalize_dates(cls, v):
        return to_naive_utc(v)

    @field_validator("technical_score", mode="before")
    @classmethod
    def clamp_technical(cls, v):
        return clamp_technical_score(v)

    @field_validator("ai_technical_score", mode="before")
    @classmethod
    def clamp_ai(cls, v):
        return clamp_ai_score(v)

    @property
    def current_history_entry(self) -> Optional[StageHistoryEntry]:
        if self.stage_history and self.stage_history[-1].ended_at is None:
            return self.stage_history[-1]
        return None

    class Settings:
        """MongoDB collection settings."""

        name = "candidates"


class CandidateCreate(BaseModel):
    """Schema for creating a new candidate."""

    model_config = ConfigDict(extra="ignore")

    name: str = Field(..., min_length=1, max_length=200)
    vacancy_id: str = Field(..., min_length=1)
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    cv_url: Optional[str] = None
    recruitment_source: Optional[RecruitmentSource] = None
    interview_date: Optional[datetime] = None
    expected_salary: Optional[float] = Field(None, ge=0)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v

    @field_validator("interview_date", mode="before")
    @classmethod
    def normalize_dates(cls, v):
        return to_naive_utc(v)


class CandidateUpdate(BaseModel):
    """Schema for patching a candidate; unknown fields are rejected."""

    model_config = ConfigDict(extra="forbid")

    stage: Optional[CandidateStage] = None
    recruitment_source: Optional[RecruitmentSource] = None
    cv_url: Optional[str] = None
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    interview_status: Optional[InterviewStatus] = None
    interview_date: Optional[datetime] = None
    result: Optional[CandidateResult] = None
    not_fit_reason: Optional[str] = None
    retention_90d: Optional[RetentionStatus] = None
    technical_score: Optional[float] = None
    ai_technical_score: Optional[float] = None
    final_result: Optional[str] = None
    expected_salary: Optional[float] = Field(None, ge=0)

    @field_validator("interview_date", mode="before")
    @classmethod
    def normalize_dates(cls, v):
        return to_naive_utc(v)

    @field_validator("technical_score", mode="before")
    @classmethod
    def clamp_technical(cls, v):
        return clamp_technical_score(v)

    @field_validator("ai_technical_score", mode="before")
    @classmethod
    def clamp_ai(cls, v):
        return clamp_ai_score(v)
