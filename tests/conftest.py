"""
Shared test fixtures for the GH Score test suite.

Sets environment variables before any ghscore imports so settings resolve
to test values, swaps the MongoDB client for mongomock, and provides
factory fixtures for vacancies, candidates and sessions.
"""

import os

# === Set environment BEFORE any ghscore imports ===
os.environ.setdefault("APP_ENVIRONMENT", "testing")
os.environ.setdefault("DB_NAME", "ghscore_test")
os.environ.setdefault("LOG_FILE_OUTPUT", "false")
os.environ.setdefault("LOG_CONSOLE_OUTPUT", "false")
os.environ.setdefault("SCORING_PROVIDER", "heuristic")

from datetime import datetime, timedelta
from typing import Any, Optional

import mongomock
import pytest

from ghscore.core.auth.sessions import get_session_manager
from ghscore.core.organizations.directory import get_organization_directory
from ghscore.core.pipeline.tracker import get_pipeline_tracker
from ghscore.core.vacancies.lifecycle import get_vacancy_lifecycle_manager
from ghscore.data.database import get_database_manager
from ghscore.data.models import Candidate, Site, Vacancy
from ghscore.utils.constants import UserRole, VacancyState

TEST_DB_NAME = "ghscore_test"
TENANT = "acme"
PASSWORD = "s3cret-pass"

# Whole seconds: the store keeps millisecond precision only
NOW = datetime(2024, 1, 25, 12, 0, 0)


# ---------------------------------------------------------------------------
# Database
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def mongo():
    """Fresh in-memory database for every test."""
    client = mongomock.MongoClient()
    manager = get_database_manager()
    manager.use_client(client, TEST_DB_NAME)
    manager.ensure_indexes()
    yield manager.get_database()
    client.drop_database(TEST_DB_NAME)


@pytest.fixture
def tenant_id() -> str:
    return TENANT


@pytest.fixture
def now() -> datetime:
    return NOW


# ---------------------------------------------------------------------------
# Organization fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def company(tenant_id):
    return get_organization_directory().create_company(
        tenant_id, {"name": "Grupo Heroica", "sector": "Construcción"}
    )


@pytest.fixture
def site(tenant_id, company) -> Site:
    return get_organization_directory().create_site(
        tenant_id, {"name": "Cartagena", "company_id": str(company.id)}
    )


# ---------------------------------------------------------------------------
# Vacancy fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def build_vacancy():
    """Factory for in-memory Vacancy models (not persisted)."""

    def _factory(**overrides: Any) -> Vacancy:
        data: dict[str, Any] = {
            "tenant_id": TENANT,
            "requisition_code": "REQ-001",
            "title": "Ingeniero Residente",
            "site_id": "site-1",
            "state": VacancyState.OPEN,
            "opened_at": datetime(2024, 1, 1),
            "estimated_close_at": datetime(2024, 1, 20),
        }
        data.update(overrides)
        return Vacancy(**data)

    return _factory


@pytest.fixture
def make_vacancy(tenant_id, site):
    """Factory that creates vacancies through the lifecycle manager."""

    def _factory(**overrides: Any) -> Vacancy:
        data: dict[str, Any] = {
            "title": "Ingeniero Residente",
            "site_id": str(site.id),
            "opened_at": "2024-01-01",
            "estimated_close_at": "2024-01-20",
            "responsible_recruiter": "Laura",
        }
        data.update(overrides)
        return get_vacancy_lifecycle_manager().create_vacancy(tenant_id, data)[0]

    return _factory


@pytest.fixture
def vacancy(make_vacancy) -> Vacancy:
    return make_vacancy()


# ---------------------------------------------------------------------------
# Candidate fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def make_candidate(tenant_id, vacancy):
    """Factory that creates candidates through the pipeline tracker."""

    def _factory(now: Optional[datetime] = None, **overrides: Any) -> Candidate:
        data: dict[str, Any] = {
            "name": "Ana Torres",
            "vacancy_id": str(vacancy.id),
            "email": "ana.torres@example.com",
        }
        data.update(overrides)
        return get_pipeline_tracker().create_candidate(tenant_id, data, now=now)

    return _factory


# ---------------------------------------------------------------------------
# Users and sessions
# ---------------------------------------------------------------------------


@pytest.fixture
def make_user(tenant_id):
    def _factory(
        email: str = "recruiter@example.com",
        role: UserRole = UserRole.RECRUITER,
        tenant: Optional[str] = None,
        full_name: str = "Test User",
    ):
        return get_session_manager().create_user(
            email=email,
            password=PASSWORD,
            full_name=full_name,
            tenant_id=tenant or tenant_id,
            role=role,
        )

    return _factory


@pytest.fixture
def recruiter(make_user):
    return make_user()


@pytest.fixture
def admin(make_user):
    return make_user(email="admin@example.com", role=UserRole.ADMIN)


@pytest.fixture
def expired_session(recruiter):
    """A session whose expiry already passed."""
    return get_session_manager().login(
        recruiter.email, PASSWORD, now=datetime.utcnow() - timedelta(days=2)
    )
