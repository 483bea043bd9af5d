"""
Vacancy endpoints: board listing, CRUD, Kanban moves and dashboard stats.
"""

from datetime import datetime
from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, status
from pydantic import BaseModel

from ghscore.api.dependencies import get_session, get_writer_session
from ghscore.core.analytics.aggregator import (
    AnalyticsAggregator,
    DashboardStats,
    get_analytics_aggregator,
)
from ghscore.core.vacancies.lifecycle import (
    VacancyLifecycleManager,
    get_vacancy_lifecycle_manager,
)
from ghscore.data.models.user import Session
from ghscore.data.models.vacancy import VacancyCreate
from ghscore.data.repositories.organization_repository import get_site_repository
from ghscore.utils.constants import MoveDirection, VacancyState

router = APIRouter(prefix="/vacancies", tags=["vacancies"])


class MoveRequest(BaseModel):
    direction: MoveDirection


@router.get("")
def list_vacancies(
    state: Optional[VacancyState] = None,
    site_id: Optional[str] = None,
    recruiter: Optional[str] = None,
    session: Session = Depends(get_session),
    manager: VacancyLifecycleManager = Depends(get_vacancy_lifecycle_manager),
) -> list[dict[str, Any]]:
    now = datetime.utcnow()
    site_names = get_site_repository().names_by_id(session.tenant_id)
    return [
        manager.summarize(vacancy, now, site_names)
        for vacancy in manager.list_vacancies(
            session.tenant_id, state=state, site_id=site_id, recruiter=recruiter
        )
    ]


@router.post("", status_code=status.HTTP_201_CREATED)
def create_vacancy(
    body: VacancyCreate,
    session: Session = Depends(get_writer_session),
    manager: VacancyLifecycleManager = Depends(get_vacancy_lifecycle_manager),
) -> dict[str, Any]:
    created = manager.create_vacancy(session.tenant_id, body)
    return {
        "items": [manager.summarize(vacancy) for vacancy in created],
        "count": len(created),
    }


@router.get("/stats")
def vacancy_stats(
    session: Session = Depends(get_session),
    aggregator: AnalyticsAggregator = Depends(get_analytics_aggregator),
) -> DashboardStats:
    return aggregator.dashboard(session.tenant_id)


@router.get("/next-code")
def next_code(
    session: Session = Depends(get_session),
    manager: VacancyLifecycleManager = Depends(get_vacancy_lifecycle_manager),
) -> dict[str, str]:
    return {"next_code": manager.get_next_code(session.tenant_id)}


@router.get("/{vacancy_id}")
def get_vacancy(
    vacancy_id: str,
    session: Session = Depends(get_session),
    manager: VacancyLifecycleManager = Depends(get_vacancy_lifecycle_manager),
) -> dict[str, Any]:
    vacancy = manager.get_vacancy(session.tenant_id, vacancy_id)
    site_names = get_site_repository().names_by_id(session.tenant_id)
    return manager.summarize(vacancy, site_names=site_names)


@router.put("/{vacancy_id}")
def update_vacancy(
    vacancy_id: str,
    body: dict[str, Any] = Body(...),
    session: Session = Depends(get_writer_session),
    manager: VacancyLifecycleManager = Depends(get_vacancy_lifecycle_manager),
) -> dict[str, Any]:
    vacancy = manager.update_vacancy(session.tenant_id, vacancy_id, body)
    return manager.summarize(vacancy)


@router.post("/{vacancy_id}/move")
def move_vacancy(
    vacancy_id: str,
    body: MoveRequest,
    session: Session = Depends(get_writer_session),
    manager: VacancyLifecycleManager = Depends(get_vacancy_lifecycle_manager),
) -> dict[str, Any]:
    vacancy = manager.move_stage(session.tenant_id, vacancy_id, body.direction)
    return manager.summarize(vacancy)
