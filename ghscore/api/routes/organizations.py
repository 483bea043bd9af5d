"""
Company and site endpoints. Reads are open to any session, writes need an
admin role.
"""

from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, status

from ghscore.api.dependencies import get_admin_session, get_session
from ghscore.core.organizations.directory import (
    OrganizationDirectory,
    get_organization_directory,
)
from ghscore.data.models.organization import CompanyCreate, SiteCreate
from ghscore.data.models.user import Session

router = APIRouter(tags=["organizations"])


# -----------------------------------------------------------------------------
# Companies
# -----------------------------------------------------------------------------


@router.get("/companies")
def list_companies(
    session: Session = Depends(get_session),
    directory: OrganizationDirectory = Depends(get_organization_directory),
) -> list[dict[str, Any]]:
    return [c.model_dump_api() for c in directory.list_companies(session.tenant_id)]


@router.post("/companies", status_code=status.HTTP_201_CREATED)
def create_company(
    body: CompanyCreate,
    session: Session = Depends(get_admin_session),
    directory: OrganizationDirectory = Depends(get_organization_directory),
) -> dict[str, Any]:
    return directory.create_company(session.tenant_id, body).model_dump_api()


@router.put("/companies/{company_id}")
def update_company(
    company_id: str,
    body: dict[str, Any] = Body(...),
    session: Session = Depends(get_admin_session),
    directory: OrganizationDirectory = Depends(get_organization_directory),
) -> dict[str, Any]:
    return directory.update_company(session.tenant_id, company_id, body).model_dump_api()


@router.delete("/companies/{company_id}")
def delete_company(
    company_id: str,
    cascade: bool = False,
    session: Session = Depends(get_admin_session),
    directory: OrganizationDirectory = Depends(get_organization_directory),
) -> dict[str, Any]:
    removed = directory.delete_company(session.tenant_id, company_id, cascade=cascade)
    return {"deleted": True, "sites_removed": removed}


# -----------------------------------------------------------------------------
# Sites
# -----------------------------------------------------------------------------


@router.get("/sites")
def list_sites(
    company_id: Optional[str] = None,
    session: Session = Depends(get_session),
    directory: OrganizationDirectory = Depends(get_organization_directory),
) -> list[dict[str, Any]]:
    return [s.model_dump_api() for s in directory.list_sites(session.tenant_id, company_id)]


@router.post("/sites", status_code=status.HTTP_201_CREATED)
def create_site(
    body: SiteCreate,
    session: Session = Depends(get_admin_session),
    directory: OrganizationDirectory = Depends(get_organization_directory),
) -> dict[str, Any]:
    return directory.create_site(session.tenant_id, body).model_dump_api()


@router.put("/sites/{site_id}")
def update_site(
    site_id: str,
    body: dict[str, Any] = Body(...),
    session: Session = Depends(get_admin_session),
    directory: OrganizationDirectory = Depends(get_organization_directory),
) -> dict[str, Any]:
    return directory.update_site(session.tenant_id, site_id, body).model_dump_api()


@router.delete("/sites/{site_id}")
def delete_site(
    site_id: str,
    session: Session = Depends(get_admin_session),
    directory: OrganizationDirectory = Depends(get_organization_directory),
) -> dict[str, bool]:
    directory.delete_site(session.tenant_id, site_id)
    return {"deleted": True}
