"""
Organization reference data for GH Score.

Companies group the physical sites where vacancies are located.
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from .base import TenantDocument


class Company(TenantDocument):
    """A client or internal company."""

    name: str = Field(..., min_length=1, max_length=200)
    tax_id: Optional[str] = None
    sector: Optional[str] = None
    attributes: dict[str, Any] = Field(default_factory=dict)

    class Settings:
        name = "companies"


class Site(TenantDocument):
    """A physical site (sede) belonging to exactly one company."""

    name: str = Field(..., min_length=1, max_length=200)
    company_id: str
    address: Optional[str] = None
    contact: Optional[str] = None

    class Settings:
        name = "sites"


class CompanyCreate(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str = Field(..., min_length=1, max_length=200)
    tax_id: Optional[str] = None
    sector: Optional[str] = None
    attributes: dict[str, Any] = Field(default_factory=dict)


class CompanyUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: Optional[str] = Field(None, min_length=1, max_length=200)
    tax_id: Optional[str] = None
    sector: Optional[str] = None
    attributes: Optional[dict[str, Any]] = None


class SiteCreate(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str = Field(..., min_length=1, max_length=200)
    company_id: str = Field(..., min_length=1)
    address: Optional[str] = None
    contact: Optional[str] = None


class SiteUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: Optional[str] = Field(None, min_length=1, max_length=200)
    company_id: Optional[str] = None
    address: Optional[str] = None
    contact: Optional[str] = None
