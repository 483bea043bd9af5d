"""
Candidate endpoints.
"""

from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, status

from ghscore.api.dependencies import get_session, get_writer_session
from ghscore.core.pipeline.tracker import (
    CandidatePipelineTracker,
    classify_technical_score,
    get_pipeline_tracker,
)
from ghscore.data.models.candidate import Candidate, CandidateCreate
from ghscore.data.models.user import Session
from ghscore.utils.constants import CandidateStage

router = APIRouter(prefix="/candidates", tags=["candidates"])


def _present(candidate: Candidate) -> dict[str, Any]:
    data = candidate.model_dump_api()
    data["technical_level"] = (
        classify_technical_score(candidate.technical_score).value
        if candidate.technical_score is not None
        else None
    )
    return data


@router.get("")
def list_candidates(
    vacancy_id: Optional[str] = None,
    stage: Optional[CandidateStage] = None,
    session: Session = Depends(get_session),
    tracker: CandidatePipelineTracker = Depends(get_pipeline_tracker),
) -> list[dict[str, Any]]:
    return [
        _present(c)
        for c in tracker.list_candidates(session.tenant_id, vacancy_id=vacancy_id, stage=stage)
    ]


@router.post("", status_code=status.HTTP_201_CREATED)
def create_candidate(
    body: CandidateCreate,
    session: Session = Depends(get_writer_session),
    tracker: CandidatePipelineTracker = Depends(get_pipeline_tracker),
) -> dict[str, Any]:
    return _present(tracker.create_candidate(session.tenant_id, body))


@router.get("/{candidate_id}")
def get_candidate(
    candidate_id: str,
    session: Session = Depends(get_session),
    tracker: CandidatePipelineTracker = Depends(get_pipeline_tracker),
) -> dict[str, Any]:
    return _present(tracker.get_candidate(session.tenant_id, candidate_id))


@router.put("/{candidate_id}")
def update_candidate(
    candidate_id: str,
    body: dict[str, Any] = Body(...),
    session: Session = Depends(get_writer_session),
    tracker: CandidatePipelineTracker = Depends(get_pipeline_tracker),
) -> dict[str, Any]:
    return _present(tracker.update_candidate(session.tenant_id, candidate_id, body))
