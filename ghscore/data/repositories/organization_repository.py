"""
Company and site repositories for GH Score.
"""

from typing import Optional

from ghscore.data.models.organization import Company, Site

from .base import TenantRepository


class CompanyRepository(TenantRepository[Company]):
    """Repository for company document operations."""

    @property
    def collection_name(self) -> str:
        return "companies"

    @property
    def model_class(self) -> type[Company]:
        return Company

    def list_companies(self, tenant_id: str) -> list[Company]:
        return self.list_for_tenant(tenant_id, sort_by="name", sort_order=1)


class SiteRepository(TenantRepository[Site]):
    """Repository for site document operations."""

    @property
    def collection_name(self) -> str:
        return "sites"

    @property
    def model_class(self) -> type[Site]:
        return Site

    def list_sites(self, tenant_id: str, company_id: Optional[str] = None) -> list[Site]:
        filters = {"company_id": company_id} if company_id else None
        return self.list_for_tenant(tenant_id, filters, sort_by="name", sort_order=1)

    def names_by_id(self, tenant_id: str) -> dict[str, str]:
        """Map site id to site name for a tenant."""
        return {str(site.id): site.name for site in self.list_sites(tenant_id)}


# Singleton instances
_company_repository: Optional[CompanyRepository] = None
_site_repository: Optional[SiteRepository] = None


def get_company_repository() -> CompanyRepository:
    """Get the company repository singleton instance."""
    global _company_repository
    if _company_repository is None:
        _company_repository = CompanyRepository()
    return _company_repository


def get_site_repository() -> SiteRepository:
    """Get the site repository singleton instance."""
    global _site_repository
    if _site_repository is None:
        _site_repository = SiteRepository()
    return _site_repository
