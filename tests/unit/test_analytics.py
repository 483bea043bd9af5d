"""
Tests for ghscore.core.analytics.aggregator: dashboard KPIs.
"""

from datetime import datetime

import pytest

from ghscore.core.analytics.aggregator import (
    UNASSIGNED_RECRUITER,
    UNKNOWN_SITE,
    compute_stage_bottlenecks,
    compute_vacancy_stats,
    get_analytics_aggregator,
)
from ghscore.core.pipeline.tracker import get_pipeline_tracker
from ghscore.core.vacancies.lifecycle import get_vacancy_lifecycle_manager
from ghscore.data.models import Candidate, StageHistoryEntry
from ghscore.utils.constants import VacancyState

NOW = datetime(2024, 1, 25)
SITES = {"site-1": "Cartagena", "site-2": "Barranquilla"}


# ── compute_vacancy_stats ────────────────────────────────────────────────────


class TestComputeVacancyStats:
    def test_overdue_vacancy_financial_impact(self, build_vacancy):
        vacancy = build_vacancy(daily_vacancy_cost=150000)
        stats = compute_vacancy_stats([vacancy], SITES, NOW)
        assert stats.expired_count == 1
        assert stats.total_financial_impact == 150000 * 5
        assert stats.open_count == 1
        assert stats.sla_breakdown["overdue"] == 1

    def test_missing_daily_cost_counts_zero(self, build_vacancy):
        stats = compute_vacancy_stats([build_vacancy()], SITES, NOW)
        assert stats.expired_count == 1
        assert stats.total_financial_impact == 0.0

    def test_filled_vacancies_lead_time_and_efficiency(self, build_vacancy):
        on_time = build_vacancy(state=VacancyState.FILLED, actual_close_at=datetime(2024, 1, 11))
        late = build_vacancy(state=VacancyState.FILLED, actual_close_at=datetime(2024, 1, 31))
        stats = compute_vacancy_stats([on_time, late], SITES, NOW)
        assert stats.closed_count == 2
        assert stats.avg_lead_time == 20.0
        assert stats.efficiency == 50.0
        assert stats.expired_count == 0
        assert stats.sla_breakdown["completed"] == 2

    def test_no_filled_vacancies(self, build_vacancy):
        stats = compute_vacancy_stats([build_vacancy()], SITES, NOW)
        assert stats.avg_lead_time == 0.0
        assert stats.efficiency == 0.0

    def test_inactive_vacancies_not_counted_as_expired(self, build_vacancy):
        cancelled = build_vacancy(state=VacancyState.CANCELLED, daily_vacancy_cost=1000)
        suspended = build_vacancy(state=VacancyState.SUSPENDED, daily_vacancy_cost=1000)
        stats = compute_vacancy_stats([cancelled, suspended], SITES, NOW)
        assert stats.expired_count == 0
        assert stats.geo_distribution == []
        assert stats.top_site is None

    def test_inactive_overdue_vacancies_still_cost(self, build_vacancy):
        suspended = build_vacancy(state=VacancyState.SUSPENDED, daily_vacancy_cost=1000)
        cancelled = build_vacancy(state=VacancyState.CANCELLED, daily_vacancy_cost=500)
        stats = compute_vacancy_stats([suspended, cancelled], SITES, NOW)
        assert stats.total_financial_impact == 1000 * 5 + 500 * 5
        assert stats.expired_count == 0

    def test_in_progress_counts_as_workload_not_open(self, build_vacancy):
        stats = compute_vacancy_stats(
            [build_vacancy(state=VacancyState.IN_PROGRESS, responsible_recruiter="Laura")],
            SITES,
            NOW,
        )
        assert stats.open_count == 0
        assert [(r.label, r.count) for r in stats.recruiter_workload] == [("Laura", 1)]

    def test_geo_distribution_and_top_site(self, build_vacancy):
        vacancies = [
            build_vacancy(site_id="site-2"),
            build_vacancy(site_id="site-2"),
            build_vacancy(site_id="site-1"),
            build_vacancy(site_id="gone"),
        ]
        stats = compute_vacancy_stats(vacancies, SITES, NOW)
        assert [(g.label, g.count) for g in stats.geo_distribution] == [
            ("Barranquilla", 2),
            ("Cartagena", 1),
            (UNKNOWN_SITE, 1),
        ]
        assert stats.top_site == "Barranquilla"

    def test_workload_labels_unassigned(self, build_vacancy):
        vacancies = [
            build_vacancy(responsible_recruiter="Laura"),
            build_vacancy(responsible_recruiter=None),
            build_vacancy(responsible_recruiter=None),
        ]
        stats = compute_vacancy_stats(vacancies, SITES, NOW)
        assert [(r.label, r.count) for r in stats.recruiter_workload] == [
            (UNASSIGNED_RECRUITER, 2),
            ("Laura", 1),
        ]

    def test_empty(self):
        stats = compute_vacancy_stats([], SITES, NOW)
        assert stats.open_count == 0
        assert stats.closed_count == 0
        assert stats.sla_breakdown == {"completed": 0, "overdue": 0, "urgent": 0, "on_track": 0}


# ── compute_stage_bottlenecks ────────────────────────────────────────────────


def _candidate(history):
    return Candidate(tenant_id="acme", name="Ana", vacancy_id="v1", stage_history=history)


class TestStageBottlenecks:
    def test_averages_and_order(self):
        candidates = [
            _candidate([
                StageHistoryEntry(stage="application", started_at=datetime(2024, 1, 1), ended_at=datetime(2024, 1, 3)),
                StageHistoryEntry(stage="hr_interview", started_at=datetime(2024, 1, 3), ended_at=datetime(2024, 1, 13)),
            ]),
            _candidate([
                StageHistoryEntry(stage="application", started_at=datetime(2024, 1, 1), ended_at=datetime(2024, 1, 5)),
            ]),
        ]
        result = compute_stage_bottlenecks(candidates, NOW)
        assert [(d.stage, d.average_days, d.samples) for d in result] == [
            ("hr_interview", 10.0, 1),
            ("application", 3.0, 2),
        ]

    def test_open_stage_measured_to_now(self):
        candidates = [_candidate([StageHistoryEntry(stage="offer", started_at=datetime(2024, 1, 20))])]
        result = compute_stage_bottlenecks(candidates, NOW)
        assert result[0].average_days == 5.0


# ── AnalyticsAggregator ──────────────────────────────────────────────────────


class TestDashboard:
    def test_end_to_end(self, tenant_id, vacancy, make_vacancy, make_candidate, site):
        get_vacancy_lifecycle_manager().update_vacancy(
            tenant_id, str(vacancy.id), {"daily_vacancy_cost": 200000}
        )
        make_vacancy(estimated_close_at="2024-02-20", responsible_recruiter=None)
        candidate = make_candidate(vacancy_id=str(vacancy.id), now=datetime(2024, 1, 10))
        get_pipeline_tracker().update_candidate(
            tenant_id, str(candidate.id), {"stage": "hr_interview"}, now=datetime(2024, 1, 12)
        )

        stats = get_analytics_aggregator().dashboard(tenant_id, now=NOW)

        assert stats.open_count == 2
        assert stats.expired_count == 1
        assert stats.total_financial_impact == 1_000_000
        assert stats.top_site == site.name
        assert stats.sla_breakdown["on_track"] == 1
        assert {(r.label, r.count) for r in stats.recruiter_workload} == {
            ("Laura", 1),
            (UNASSIGNED_RECRUITER, 1),
        }
        by_stage = {d.stage: d for d in stats.stage_bottlenecks}
        assert by_stage["application"].average_days == 2.0
        assert by_stage["hr_interview"].average_days == 13.0

    def test_other_tenant_is_empty(self, make_vacancy):
        make_vacancy()
        stats = get_analytics_aggregator().dashboard("other-tenant", now=NOW)
        assert stats.open_count == 0
        assert stats.stage_bottlenecks == []
