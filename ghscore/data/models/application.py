"""
Application (public tracking) data models for GH Score.

An application is the public-portal view of a candidacy: the applicant's
submitted profile, the one-time match score and the tracking token used to
check status without an account.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from ghscore.utils.constants import MATCH_SCORE_MAX, MATCH_SCORE_MIN, ApplicationState

from .base import TenantDocument


class Application(TenantDocument):
    """Stored application with its score and tracking credential."""

    vacancy_id: str
    candidate_id: str

    # Applicant contact
    full_name: str = Field(..., min_length=1, max_length=200)
    email: EmailStr
    phone: Optional[str] = None
    city: Optional[str] = None

    # Profile
    current_title: Optional[str] = None
    current_company: Optional[str] = None
    education_level: Optional[str] = None
    years_experience: float = Field(default=0.0, ge=0)
    skills: list[str] = Field(default_factory=list)
    message: Optional[str] = None
    referral_channel: Optional[str] = None

    # Scoring
    match_score: int = Field(default=0, ge=MATCH_SCORE_MIN, le=MATCH_SCORE_MAX)
    score_degraded: bool = False
    recommendation: Optional[str] = None

    # Tracking
    tracking_token: str = Field(..., min_length=64, max_length=64)
    tracking_expires_at: datetime
    tracking_views: int = 0
    state: ApplicationState = ApplicationState.NEW

    class Settings:
        """MongoDB collection settings."""

        name = "applications"


class ApplicationSubmission(BaseModel):
    """Payload submitted by an applicant through the public portal."""

    model_config = ConfigDict(extra="ignore")

    vacancy_id: str = Field(..., min_length=1)
    full_name: str = Field(..., min_length=1, max_length=200)
    email: EmailStr
    phone: Optional[str] = None
    city: Optional[str] = None
    current_title: Optional[str] = None
    current_company: Optional[str] = None
    education_level: Optional[str] = None
    years_experience: float = Field(default=0.0, ge=0, le=70)
    skills: list[str] = Field(default_factory=list)
    message: Optional[str] = Field(None, max_length=5000)
    referral_channel: Optional[str] = None
    cv_url: Optional[str] = None
    expected_salary: Optional[float] = Field(None, ge=0)

    @field_validator("full_name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v

    @field_validator("skills", mode="before")
    @classmethod
    def split_skills(cls, v):
        """Accept a comma separated string as well as a list."""
        if isinstance(v, str):
            v = v.split(",")
        return [s.strip() for s in v if s and s.strip()]


class ApplicationReceipt(BaseModel):
    """Returned to the applicant after a successful submission."""

    application_id: str
    candidate_id: str
    match_score: int
    tracking_token: str
    tracking_url: str


class ApplicationStatusView(BaseModel):
    """What an unauthenticated tracking-token holder is allowed to see."""

    full_name: str
    vacancy_title: str
    requisition_code: str
    state: ApplicationState
    applied_at: datetime
    updated_at: datetime
    tracking_views: int
