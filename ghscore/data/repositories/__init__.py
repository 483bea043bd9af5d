"""
Database repositories for GH Score data access.

This module provides repository classes for all database collections,
implementing the repository pattern for clean data access.
"""

# Base repository
from .base import BaseRepository, TenantRepository

# Entity repositories
from .vacancy_repository import (
    VacancyRepository,
    format_requisition_code,
    get_vacancy_repository,
    parse_requisition_code,
)
from .candidate_repository import CandidateRepository, get_candidate_repository
from .application_repository import ApplicationRepository, get_application_repository
from .notification_repository import NotificationRepository, get_notification_repository
from .organization_repository import (
    CompanyRepository,
    SiteRepository,
    get_company_repository,
    get_site_repository,
)
from .user_repository import (
    SessionRepository,
    UserRepository,
    get_session_repository,
    get_user_repository,
)

__all__ = [
    # Base
    "BaseRepository",
    "TenantRepository",
    # Vacancy
    "VacancyRepository",
    "format_requisition_code",
    "get_vacancy_repository",
    "parse_requisition_code",
    # Candidate
    "CandidateRepository",
    "get_candidate_repository",
    # Application
    "ApplicationRepository",
    "get_application_repository",
    # Notification
    "NotificationRepository",
    "get_notification_repository",
    # Organization
    "CompanyRepository",
    "SiteRepository",
    "get_company_repository",
    "get_site_repository",
    # Users
    "SessionRepository",
    "UserRepository",
    "get_session_repository",
    "get_user_repository",
]
