"""
Vacancy lifecycle: creation, updates, Kanban moves and SLA indicators.
"""

from .lifecycle import (
    SlaStatus,
    StageMoveCommand,
    VacancyLifecycleManager,
    compute_days_open,
    compute_sla_status,
    get_vacancy_lifecycle_manager,
    next_column,
)

__all__ = [
    "SlaStatus",
    "StageMoveCommand",
    "VacancyLifecycleManager",
    "compute_days_open",
    "compute_sla_status",
    "get_vacancy_lifecycle_manager",
    "next_column",
]
