"""
Public portal endpoints. None of these require a session.
"""

from typing import Any, Optional

from fastapi import APIRouter, Depends, status

from ghscore.core.applications.service import ApplicationService, get_application_service
from ghscore.data.models.application import (
    ApplicationReceipt,
    ApplicationStatusView,
    ApplicationSubmission,
)
from ghscore.utils.config import get_settings

router = APIRouter(prefix="/applications", tags=["applications"])


@router.get("/public/jobs")
def public_jobs(
    tenant: Optional[str] = None,
    service: ApplicationService = Depends(get_application_service),
) -> list[dict[str, Any]]:
    return service.list_public_jobs(tenant or get_settings().default_tenant)


@router.post("/apply", status_code=status.HTTP_201_CREATED)
def apply(
    body: ApplicationSubmission,
    service: ApplicationService = Depends(get_application_service),
) -> ApplicationReceipt:
    return service.submit_application(body)


@router.get("/track/{token}")
def track(
    token: str,
    service: ApplicationService = Depends(get_application_service),
) -> ApplicationStatusView:
    return service.get_application_status(token)
