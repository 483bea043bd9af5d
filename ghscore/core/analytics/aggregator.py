"""
Dashboard analytics.

All indicators are recomputed from current state on every request; nothing
is persisted. Each pass over the vacancies and candidates is linear.
"""

from collections import Counter, defaultdict
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from ghscore.core.vacancies.lifecycle import compute_days_open, compute_sla_status
from ghscore.data.models.candidate import Candidate
from ghscore.data.models.vacancy import Vacancy
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
from ghscore.utils.constants import SlaLevel, VacancyState
from ghscore.utils.logger import get_logger

logger = get_logger(__name__)

UNASSIGNED_RECRUITER = "Sin asignar"
UNKNOWN_SITE = "Sin sede"


class LabelCount(BaseModel):
    label: str
    count: int


class StageDuration(BaseModel):
    stage: str
    average_days: float
    samples: int


class DashboardStats(BaseModel):
    """Dashboard KPIs for one tenant."""

    avg_lead_time: float = 0.0
    efficiency: float = 0.0
    open_count: int = 0
    closed_count: int = 0
    expired_count: int = 0
    total_financial_impact: float = 0.0
    geo_distribution: list[LabelCount] = Field(default_factory=list)
    recruiter_workload: list[LabelCount] = Field(default_factory=list)
    top_site: Optional[str] = None
    sla_breakdown: dict[str, int] = Field(default_factory=dict)
    stage_bottlenecks: list[StageDuration] = Field(default_factory=list)
    computed_at: datetime = Field(default_factory=datetime.utcnow)


def _ranked(counter: Counter) -> list[LabelCount]:
    """Descending by count, ties broken alphabetically."""
    return [
        LabelCount(label=label, count=count)
        for label, count in sorted(counter.items(), key=lambda item: (-item[1], item[0]))
    ]


def compute_vacancy_stats(
    vacancies: list[Vacancy],
    site_names: dict[str, str],
    now: datetime,
) -> DashboardStats:
    """Aggregate vacancy KPIs in a single pass."""
    stats = DashboardStats(computed_at=now)

    total_lead_time = 0
    on_time = 0
    geo: Counter = Counter()
    workload: Counter = Counter()
    sla_breakdown: Counter = Counter({level.value: 0 for level in SlaLevel})

    for vacancy in vacancies:
        state = VacancyState(vacancy.state)
        sla = compute_sla_status(vacancy, now)
        sla_breakdown[sla.level.value] += 1

        if state == VacancyState.FILLED:
            stats.closed_count += 1
            total_lead_time += compute_days_open(vacancy, now)
            if vacancy.actual_close_at and vacancy.actual_close_at <= vacancy.estimated_close_at:
                on_time += 1
            continue

        if state == VacancyState.OPEN:
            stats.open_count += 1

        # impact covers every unfilled vacancy, active or not
        if sla.is_overdue:
            stats.total_financial_impact += (vacancy.daily_vacancy_cost or 0.0) * sla.days

        if not state.is_active:
            continue

        geo[site_names.get(vacancy.site_id, UNKNOWN_SITE)] += 1
        workload[vacancy.responsible_recruiter or UNASSIGNED_RECRUITER] += 1

        if sla.is_overdue:
            stats.expired_count += 1

    if stats.closed_count:
        stats.avg_lead_time = round(total_lead_time / stats.closed_count, 1)
        stats.efficiency = round(on_time / stats.closed_count * 100, 1)

    stats.total_financial_impact = round(stats.total_financial_impact, 2)
    stats.geo_distribution = _ranked(geo)
    stats.recruiter_workload = _ranked(workload)
    stats.top_site = stats.geo_distribution[0].label if stats.geo_distribution else None
    stats.sla_breakdown = dict(sla_breakdown)
    return stats


def compute_stage_bottlenecks(candidates: list[Candidate], now: datetime) -> list[StageDuration]:
    """
    Average days candidates spend in each stage, slowest first.

    Stages still in progress are measured up to ``now``.
    """
    totals: dict[str, float] = defaultdict(float)
    samples: Counter = Counter()

    for candidate in candidates:
        for entry in candidate.stage_history:
            end = entry.ended_at or now
            totals[entry.stage] += max((end - entry.started_at).total_seconds(), 0) / 86400
            samples[entry.stage] += 1

    durations = [
        StageDuration(stage=stage, average_days=round(totals[stage] / count, 1), samples=count)
        for stage, count in samples.items()
    ]
    return sorted(durations, key=lambda d: (-d.average_days, d.stage))


class AnalyticsAggregator:
    """Computes the dashboard KPIs of a tenant on demand."""

    def __init__(
        self,
        vacancies: Optional[VacancyRepository] = None,
        candidates: Optional[CandidateRepository] = None,
        sites: Optional[SiteRepository] = None,
    ):
        self.vacancies = vacancies or get_vacancy_repository()
        self.candidates = candidates or get_candidate_repository()
        self.sites = sites or get_site_repository()

    def dashboard(self, tenant_id: str, now: Optional[datetime] = None) -> DashboardStats:
        now = now or datetime.utcnow()
        vacancies = self.vacancies.list_vacancies(tenant_id)
        stats = compute_vacancy_stats(vacancies, self.sites.names_by_id(tenant_id), now)
        stats.stage_bottlenecks = compute_stage_bottlenecks(
            self.candidates.list_candidates(tenant_id), now
        )
        logger.debug(
            f"Dashboard for {tenant_id}: {len(vacancies)} vacancies, "
            f"{stats.expired_count} overdue"
        )
        return stats


# Singleton instance
_aggregator: Optional[AnalyticsAggregator] = None


def get_analytics_aggregator() -> AnalyticsAggregator:
    """Get the analytics aggregator singleton instance."""
    global _aggregator
    if _aggregator is None:
        _aggregator = AnalyticsAggregator()
    return _aggregator
