"""
Dashboard analytics computed on demand.
"""

from .aggregator import (
    AnalyticsAggregator,
    DashboardStats,
    LabelCount,
    StageDuration,
    compute_stage_bottlenecks,
    compute_vacancy_stats,
    get_analytics_aggregator,
)

__all__ = [
    "AnalyticsAggregator",
    "DashboardStats",
    "LabelCount",
    "StageDuration",
    "compute_stage_bottlenecks",
    "compute_vacancy_stats",
    "get_analytics_aggregator",
]
