"""
Pydantic data models and schemas for GH Score.

This module provides all data models used throughout the application,
including database documents, embedded models, and API schemas.
"""

# Base models
from .base import (
    BaseDocument,
    EmbeddedModel,
    PyObjectId,
    TenantDocument,
    TimestampMixin,
    to_naive_utc,
)

# Vacancy models
from .vacancy import Vacancy, VacancyCreate, VacancyUpdate

# Candidate models
from .candidate import (
    Candidate,
    CandidateCreate,
    CandidateUpdate,
    StageHistoryEntry,
)

# Application models
from .application import (
    Application,
    ApplicationReceipt,
    ApplicationStatusView,
    ApplicationSubmission,
)

# Notification models
from .notification import Notification

# Organization models
from .organization import (
    Company,
    CompanyCreate,
    CompanyUpdate,
    Site,
    SiteCreate,
    SiteUpdate,
)

# User models
from .user import (
    LoginRequest,
    PasswordReset,
    Session,
    User,
    UserCreate,
    UserStatusUpdate,
)

__all__ = [
    # Base
    "BaseDocument",
    "EmbeddedModel",
    "PyObjectId",
    "TenantDocument",
    "TimestampMixin",
    "to_naive_utc",
    # Vacancy
    "Vacancy",
    "VacancyCreate",
    "VacancyUpdate",
    # Candidate
    "Candidate",
    "CandidateCreate",
    "CandidateUpdate",
    "StageHistoryEntry",
    # Application
    "Application",
    "ApplicationReceipt",
    "ApplicationStatusView",
    "ApplicationSubmission",
    # Notification
    "Notification",
    # Organization
    "Company",
    "CompanyCreate",
    "CompanyUpdate",
    "Site",
    "SiteCreate",
    "SiteUpdate",
    # User
    "LoginRequest",
    "PasswordReset",
    "Session",
    "User",
    "UserCreate",
    "UserStatusUpdate",
]
