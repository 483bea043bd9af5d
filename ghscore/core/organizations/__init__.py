"""
Company and site reference data.
"""

from .directory import OrganizationDirectory, get_organization_directory

__all__ = ["OrganizationDirectory", "get_organization_directory"]
