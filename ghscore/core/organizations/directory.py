"""
Company and site reference data.

Deletion is explicit about dependents: a company with sites is only
removed with ``cascade=True``, and a site used by any vacancy is never
removed.
"""

from typing import Any, Optional

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from ghscore.core.errors import ConflictError, NotFoundError, ValidationError
from ghscore.data.models.organization import (
    Company,
    CompanyCreate,
    CompanyUpdate,
    Site,
    SiteCreate,
    SiteUpdate,
)
from ghscore.data.repositories.organization_repository import (
    CompanyRepository,
    SiteRepository,
    get_company_repository,
    get_site_repository,
)
from ghscore.data.repositories.vacancy_repository import (
    VacancyRepository,
    get_vacancy_repository,
)
from ghscore.utils.constants import AuditAction, AuditType
from ghscore.utils.logger import LoggerMixin, audit_log


def _parse(schema: type[BaseModel], data: Any, message: str) -> Any:
    if isinstance(data, schema):
        return data
    try:
        return schema.model_validate(data)
    except PydanticValidationError as e:
        raise ValidationError.from_pydantic(e, message) from e


class OrganizationDirectory(LoggerMixin):
    """CRUD for companies and their sites, scoped per tenant."""

    def __init__(
        self,
        companies: Optional[CompanyRepository] = None,
        sites: Optional[SiteRepository] = None,
        vacancies: Optional[VacancyRepository] = None,
    ):
        self.companies = companies or get_company_repository()
        self.sites = sites or get_site_repository()
        self.vacancies = vacancies or get_vacancy_repository()

    # -------------------------------------------------------------------------
    # Companies
    # -------------------------------------------------------------------------

    def list_companies(self, tenant_id: str) -> list[Company]:
        return self.companies.list_companies(tenant_id)

    def get_company(self, tenant_id: str, company_id: str) -> Company:
        company = self.companies.get_for_tenant(tenant_id, company_id)
        if company is None:
            raise NotFoundError(f"Company {company_id} not found")
        return company

    def create_company(self, tenant_id: str, data: CompanyCreate | dict[str, Any]) -> Company:
        data = _parse(CompanyCreate, data, "Invalid company")
        return self.companies.create(Company(tenant_id=tenant_id, **data.model_dump()))

    def update_company(
        self, tenant_id: str, company_id: str, data: CompanyUpdate | dict[str, Any]
    ) -> Company:
        data = _parse(CompanyUpdate, data, "Invalid company update")
        company = self.get_company(tenant_id, company_id)
        changes = data.model_dump(exclude_unset=True, exclude_none=True)
        if not changes:
            return company
        return self.companies.update(company.id, changes) or company

    def delete_company(self, tenant_id: str, company_id: str, cascade: bool = False) -> int:
        """
        Delete a company.

        Returns the number of sites removed along with it.

        Raises:
            ConflictError: the company has sites and cascade is not set, or
                one of its sites is still used by a vacancy
        """
        company = self.get_company(tenant_id, company_id)
        sites = self.sites.list_sites(tenant_id, company_id=str(company.id))

        if sites and not cascade:
            raise ConflictError(
                f"Company has {len(sites)} sites; delete them first or use cascade",
                details={"sites": len(sites)},
            )
        for site in sites:
            self._ensure_site_unused(site)

        for site in sites:
            self.sites.delete(site.id)
        self.companies.delete(company.id)

        audit_log(
            AuditAction.COMPANY_DELETED.value,
            {"tenant_id": tenant_id, "company_id": str(company.id), "sites_removed": len(sites)},
            audit_type=AuditType.TRANSITION,
        )
        return len(sites)

    # -------------------------------------------------------------------------
    # Sites
    # -------------------------------------------------------------------------

    def list_sites(self, tenant_id: str, company_id: Optional[str] = None) -> list[Site]:
        return self.sites.list_sites(tenant_id, company_id=company_id)

    def get_site(self, tenant_id: str, site_id: str) -> Site:
        site = self.sites.get_for_tenant(tenant_id, site_id)
        if site is None:
            raise NotFoundError(f"Site {site_id} not found")
        return site

    def create_site(self, tenant_id: str, data: SiteCreate | dict[str, Any]) -> Site:
        data = _parse(SiteCreate, data, "Invalid site")
        self._require_company(tenant_id, data.company_id)
        return self.sites.create(Site(tenant_id=tenant_id, **data.model_dump()))

    def update_site(
        self, tenant_id: str, site_id: str, data: SiteUpdate | dict[str, Any]
    ) -> Site:
        data = _parse(SiteUpdate, data, "Invalid site update")
        site = self.get_site(tenant_id, site_id)
        changes = data.model_dump(exclude_unset=True, exclude_none=True)
        if "company_id" in changes:
            self._require_company(tenant_id, changes["company_id"])
        if not changes:
            return site
        updated = self.sites.update(site.id, changes) or site

        if changes.get("company_id", site.company_id) != site.company_id:
            moved = self.vacancies.reassign_company(str(site.id), changes["company_id"])
            self.logger.info(f"Site {site.name} moved company; {moved} vacancies follow it")
        return updated

    def delete_site(self, tenant_id: str, site_id: str) -> None:
        site = self.get_site(tenant_id, site_id)
        self._ensure_site_unused(site)
        self.sites.delete(site.id)
        self.logger.info(f"Deleted site {site.name} of tenant {tenant_id}")

    # -------------------------------------------------------------------------
    # Internal Methods
    # -------------------------------------------------------------------------

    def _require_company(self, tenant_id: str, company_id: str) -> None:
        if self.companies.get_for_tenant(tenant_id, company_id) is None:
            raise ValidationError(
                "Unknown company",
                details=[{"field": "company_id", "message": "unknown company"}],
            )

    def _ensure_site_unused(self, site: Site) -> None:
        used_by = self.vacancies.count_by_site(str(site.id))
        if used_by:
            raise ConflictError(
                f"Site {site.name} is used by {used_by} vacancies",
                details={"site_id": str(site.id), "vacancies": used_by},
            )


# Singleton instance
_directory: Optional[OrganizationDirectory] = None


def get_organization_directory() -> OrganizationDirectory:
    """Get the organization directory singleton instance."""
    global _directory
    if _directory is None:
        _directory = OrganizationDirectory()
    return _directory
