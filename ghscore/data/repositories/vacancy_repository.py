"""
Vacancy repository for GH Score.

Provides data access for vacancy documents and the per-tenant
requisition-code counter.
"""

import re
from datetime import datetime
from typing import Any, Optional

from pymongo import ReturnDocument

from ghscore.data.models.vacancy import Vacancy
from ghscore.utils.constants import (
    REQUISITION_CODE_PREFIX,
    REQUISITION_CODE_WIDTH,
    VacancyPriority,
    VacancyState,
)
from ghscore.utils.logger import get_logger

from .base import TenantRepository

logger = get_logger(__name__)

COUNTERS_COLLECTION = "counters"

_CODE_PATTERN = re.compile(rf"^{re.escape(REQUISITION_CODE_PREFIX)}(\d+)$")


def format_requisition_code(sequence: int) -> str:
    """Format a sequence number as a requisition code (REQ-001)."""
    return f"{REQUISITION_CODE_PREFIX}{sequence:0{REQUISITION_CODE_WIDTH}d}"


def parse_requisition_code(code: str) -> Optional[int]:
    """Return the sequence number of a code, or None if it is free-form."""
    match = _CODE_PATTERN.match(code.strip())
    return int(match.group(1)) if match else None


class VacancyRepository(TenantRepository[Vacancy]):
    """Repository for vacancy document operations."""

    @property
    def collection_name(self) -> str:
        return "vacancies"

    @property
    def model_class(self) -> type[Vacancy]:
        return Vacancy

    # -------------------------------------------------------------------------
    # Requisition Codes
    # -------------------------------------------------------------------------

    def _counters(self):
        return self._db_manager.get_collection(COUNTERS_COLLECTION)

    @staticmethod
    def _counter_id(tenant_id: str) -> str:
        return f"{tenant_id}:requisition"

    def code_exists(self, tenant_id: str, code: str) -> bool:
        return self.exists({"tenant_id": tenant_id, "requisition_code": code})

    def allocate_code(self, tenant_id: str) -> str:
        """
        Atomically consume the next free requisition code for a tenant.

        Codes already taken (e.g. supplied by hand) are skipped.
        """
        while True:
            counter = self._counters().find_one_and_update(
                {"_id": self._counter_id(tenant_id)},
                {"$inc": {"seq": 1}},
                upsert=True,
                return_document=ReturnDocument.AFTER,
            )
            code = format_requisition_code(counter["seq"])
            if not self.code_exists(tenant_id, code):
                return code
            logger.debug(f"Requisition code {code} already taken, skipping")

    def reserve_code(self, tenant_id: str, code: str) -> None:
        """Advance the counter past a caller-supplied code."""
        sequence = parse_requisition_code(code)
        if sequence is None:
            return
        self._counters().update_one(
            {"_id": self._counter_id(tenant_id)},
            {"$max": {"seq": sequence}},
            upsert=True,
        )

    def peek_next_code(self, tenant_id: str) -> str:
        """Return the code the next allocation would produce, without consuming it."""
        counter = self._counters().find_one({"_id": self._counter_id(tenant_id)})
        sequence = (counter or {}).get("seq", 0) + 1
        code = format_requisition_code(sequence)
        while self.code_exists(tenant_id, code):
            sequence += 1
            code = format_requisition_code(sequence)
        return code

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def list_vacancies(
        self,
        tenant_id: str,
        state: Optional[VacancyState] = None,
        site_id: Optional[str] = None,
        recruiter: Optional[str] = None,
    ) -> list[Vacancy]:
        """List vacancies of a tenant, most recently opened first."""
        query: dict[str, Any] = {"tenant_id": tenant_id}
        if state:
            query["state"] = VacancyState(state).value
        if site_id:
            query["site_id"] = site_id
        if recruiter:
            query["responsible_recruiter"] = recruiter
        return self.find(query, sort_by="opened_at", sort_order=-1)

    def list_public(self, tenant_id: str) -> list[Vacancy]:
        """Open, published vacancies ordered by priority then most recent."""
        vacancies = self.find(
            {"tenant_id": tenant_id, "state": VacancyState.OPEN.value, "is_public": True},
            sort_by="opened_at",
            sort_order=-1,
        )
        # stable sort keeps the recency order inside each priority
        return sorted(
            vacancies, key=lambda v: VacancyPriority(v.priority).rank, reverse=True
        )

    def count_by_site(self, site_id: str) -> int:
        return self.count({"site_id": site_id})

    def reassign_company(self, site_id: str, company_id: str) -> int:
        """Point every vacancy of a site at the site's new company."""
        result = self._get_collection().update_many(
            {"site_id": site_id},
            {"$set": {"company_id": company_id, "updated_at": datetime.utcnow()}},
        )
        return result.modified_count

    def set_state(
        self,
        vacancy_id: str,
        state: VacancyState,
        actual_close_at: Optional[datetime],
    ) -> Optional[Vacancy]:
        """Persist a state change together with its close date and publication flag."""
        return self.update(
            vacancy_id,
            {
                "state": VacancyState(state).value,
                "actual_close_at": actual_close_at,
                "is_public": VacancyState(state) == VacancyState.OPEN,
            },
        )


# Singleton instance
_vacancy_repository: Optional[VacancyRepository] = None


def get_vacancy_repository() -> VacancyRepository:
    """Get the vacancy repository singleton."""
    global _vacancy_repository
    if _vacancy_repository is None:
        _vacancy_repository = VacancyRepository()
    return _vacancy_repository
