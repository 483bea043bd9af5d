"""
Vacancy (job requisition) data models for GH Score.

Defines the requisition document, its budget fields, and the create and
update schemas accepted by the lifecycle manager.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ghscore.utils.constants import (
    DEFAULT_SLA_TARGET_DAYS,
    VacancyPriority,
    VacancyState,
)

from .base import TenantDocument, to_naive_utc

DATE_FIELDS = ("opened_at", "estimated_close_at", "actual_close_at")


class Vacancy(TenantDocument):
    """
    Main requisition model.

    Represents one position to fill, tracked from intake until it is
    filled, cancelled or suspended.
    """

    # Identity
    requisition_code: str = Field(..., min_length=1, max_length=40)

    # Basic Information
    title: str = Field(..., min_length=1, max_length=200)
    site_id: str
    company_id: Optional[str] = None
    notes: Optional[str] = None

    # Opaque taxonomy keys
    process_id: Optional[str] = None
    project_id: Optional[str] = None
    cost_center_id: Optional[str] = None
    subcenter_id: Optional[str] = None
    work_type_id: Optional[str] = None
    project_type_id: Optional[str] = None

    # Status
    state: VacancyState = VacancyState.OPEN
    priority: VacancyPriority = VacancyPriority.MEDIUM
    responsible_recruiter: Optional[str] = None
    is_public: bool = False

    # Dates
    opened_at: datetime
    estimated_close_at: datetime
    actual_close_at: Optional[datetime] = None
    sla_target_days: int = Field(default=DEFAULT_SLA_TARGET_DAYS, ge=0)

    # Budget
    approved_budget: float = 0.0
    max_budget: float = 0.0
    base_salary: float = 0.0
    offered_salary: float = 0.0
    agreed_salary: Optional[float] = None
    vacancy_cost: float = 0.0
    daily_vacancy_cost: Optional[float] = None
    final_hiring_cost: Optional[float] = None

    @field_validator(*DATE_FIELDS, mode="before")
    @classmethod
    def normalize_dates(cls, v):
        return to_naive_utc(v)

    @property
    def is_filled(self) -> bool:
        return self.state == VacancyState.FILLED

    @property
    def is_active(self) -> bool:
        return VacancyState(self.state).is_active

    class Settings:
        """MongoDB collection settings."""

        name = "vacancies"


class VacancyCreate(BaseModel):
    """Schema for creating a new vacancy."""

    model_config = ConfigDict(extra="ignore")

    requisition_code: Optional[str] = Field(None, min_length=1, max_length=40)
    title: str = Field(..., min_length=1, max_length=200)
    site_id: str = Field(..., min_length=1)
    notes: Optional[str] = None
    process_id: Optional[str] = None
    project_id: Optional[str] = None
    cost_center_id: Optional[str] = None
    subcenter_id: Optional[str] = None
    work_type_id: Optional[str] = None
    project_type_id: Optional[str] = None
    priority: VacancyPriority = VacancyPriority.MEDIUM
    responsible_recruiter: Optional[str] = None
    opened_at: datetime
    estimated_close_at: datetime
    sla_target_days: int = Field(default=DEFAULT_SLA_TARGET_DAYS, ge=0)
    approved_budget: float = Field(default=0.0, ge=0)
    max_budget: float = Field(default=0.0, ge=0)
    base_salary: float = Field(default=0.0, ge=0)
    offered_salary: float = Field(default=0.0, ge=0)
    vacancy_cost: float = Field(default=0.0, ge=0)
    daily_vacancy_cost: Optional[float] = Field(default=None, ge=0)
    quantity: int = Field(default=1, ge=1, le=50)

    @field_validator("title", "site_id")
    @classmethod
    def strip_required_text(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v

    @field_validator("opened_at", "estimated_close_at", mode="before")
    @classmethod
    def normalize_dates(cls, v):
        return to_naive_utc(v)


class VacancyUpdate(BaseModel):
    """
    Schema for patching an existing vacancy.

    Only the mutable subset is accepted; the requisition code is deliberately
    absent, and extra keys are rejected so an attempt to change it fails.
    """

    model_config = ConfigDict(extra="forbid")

    title: Optional[str] = Field(None, min_length=1, max_length=200)
    site_id: Optional[str] = None
    notes: Optional[str] = None
    process_id: Optional[str] = None
    project_id: Optional[str] = None
    cost_center_id: Optional[str] = None
    subcenter_id: Optional[str] = None
    work_type_id: Optional[str] = None
    project_type_id: Optional[str] = None
    state: Optional[VacancyState] = None
    priority: Optional[VacancyPriority] = None
    responsible_recruiter: Optional[str] = None
    opened_at: Optional[datetime] = None
    estimated_close_at: Optional[datetime] = None
    actual_close_at: Optional[datetime] = None
    sla_target_days: Optional[int] = Field(None, ge=0)
    approved_budget: Optional[float] = Field(None, ge=0)
    max_budget: Optional[float] = Field(None, ge=0)
    base_salary: Optional[float] = Field(None, ge=0)
    offered_salary: Optional[float] = Field(None, ge=0)
    agreed_salary: Optional[float] = Field(None, ge=0)
    vacancy_cost: Optional[float] = Field(None, ge=0)
    daily_vacancy_cost: Optional[float] = Field(None, ge=0)
    final_hiring_cost: Optional[float] = Field(None, ge=0)

    @field_validator(*DATE_FIELDS, mode="before")
    @classmethod
    def normalize_dates(cls, v):
        return to_naive_utc(v)

    @model_validator(mode="after")
    def check_close_after_open(self) -> "VacancyUpdate":
        if self.opened_at and self.estimated_close_at and self.estimated_close_at < self.opened_at:
            raise ValueError("estimated_close_at must not be earlier than opened_at")
        return self

