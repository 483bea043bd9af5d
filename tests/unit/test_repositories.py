"""
Tests for ghscore.data.repositories: base CRUD behaviour, requisition code
helpers and the per-collection queries.
"""

from datetime import datetime, timedelta

import pytest
from pymongo.errors import DuplicateKeyError

from ghscore.data.models import Session, Vacancy
from ghscore.data.repositories import (
    get_application_repository,
    get_session_repository,
    get_site_repository,
    get_vacancy_repository,
)
from ghscore.data.repositories.vacancy_repository import (
    format_requisition_code,
    parse_requisition_code,
)
from ghscore.utils.constants import VacancyState


@pytest.fixture
def vacancies():
    return get_vacancy_repository()


# ── Requisition codes ────────────────────────────────────────────────────────


class TestRequisitionCodes:
    @pytest.mark.parametrize("sequence,code", [(1, "REQ-001"), (42, "REQ-042"), (1234, "REQ-1234")])
    def test_format(self, sequence, code):
        assert format_requisition_code(sequence) == code

    @pytest.mark.parametrize("code,sequence", [
        ("REQ-007", 7),
        (" REQ-120 ", 120),
        ("OBRA-7", None),
        ("REQ-", None),
    ])
    def test_parse(self, code, sequence):
        assert parse_requisition_code(code) == sequence

    def test_allocation_is_sequential(self, vacancies, tenant_id):
        codes = [vacancies.allocate_code(tenant_id) for _ in range(3)]
        assert codes == ["REQ-001", "REQ-002", "REQ-003"]

    def test_reserve_never_moves_backwards(self, vacancies, tenant_id):
        vacancies.reserve_code(tenant_id, "REQ-020")
        vacancies.reserve_code(tenant_id, "REQ-005")
        assert vacancies.peek_next_code(tenant_id) == "REQ-021"

    def test_free_form_code_does_not_touch_counter(self, vacancies, tenant_id):
        vacancies.reserve_code(tenant_id, "OBRA-99")
        assert vacancies.peek_next_code(tenant_id) == "REQ-001"

    def test_code_unique_per_tenant(self, vacancies, build_vacancy):
        vacancies.create(build_vacancy())
        vacancies.create(build_vacancy(tenant_id="other-tenant"))
        with pytest.raises(DuplicateKeyError):
            vacancies.create(build_vacancy())


# ── Base CRUD ────────────────────────────────────────────────────────────────


class TestBaseRepository:
    def test_create_sets_id_and_timestamps(self, vacancies, build_vacancy):
        created = vacancies.create(build_vacancy())
        assert created.id is not None
        assert created.created_at == created.updated_at

    def test_invalid_id_is_not_found(self, vacancies):
        assert vacancies.get_by_id("not-an-object-id") is None
        assert vacancies.update("not-an-object-id", {"title": "x"}) is None
        assert vacancies.delete("not-an-object-id") is False

    def test_update_returns_fresh_document(self, vacancies, build_vacancy):
        created = vacancies.create(build_vacancy())
        updated = vacancies.update(created.id, {"title": "Residente de Obra"})
        assert updated.title == "Residente de Obra"
        assert updated.requisition_code == created.requisition_code

    def test_update_with_unchanged_values_still_returns_document(self, vacancies, build_vacancy):
        created = vacancies.create(build_vacancy())
        assert vacancies.update(created.id, {"title": created.title}) is not None

    def test_update_can_clear_fields(self, vacancies, build_vacancy):
        created = vacancies.create(build_vacancy(responsible_recruiter="Laura"))
        updated = vacancies.update(created.id, {"responsible_recruiter": None})
        assert updated.responsible_recruiter is None

    def test_get_for_tenant_scopes(self, vacancies, build_vacancy, tenant_id):
        created = vacancies.create(build_vacancy())
        assert vacancies.get_for_tenant(tenant_id, str(created.id)) is not None
        assert vacancies.get_for_tenant("other-tenant", str(created.id)) is None

    def test_delete(self, vacancies, build_vacancy):
        created = vacancies.create(build_vacancy())
        assert vacancies.delete(created.id) is True
        assert vacancies.get_by_id(created.id) is None
        assert vacancies.delete(created.id) is False


# ── Vacancy queries ──────────────────────────────────────────────────────────


class TestVacancyQueries:
    def test_filters(self, vacancies, build_vacancy, tenant_id):
        vacancies.create(build_vacancy(requisition_code="REQ-001", responsible_recruiter="Laura"))
        vacancies.create(build_vacancy(requisition_code="REQ-002", state=VacancyState.IN_PROGRESS))
        vacancies.create(build_vacancy(requisition_code="REQ-003", site_id="site-2"))

        assert len(vacancies.list_vacancies(tenant_id)) == 3
        assert [v.requisition_code for v in vacancies.list_vacancies(tenant_id, state="in_progress")] == ["REQ-002"]
        assert [v.requisition_code for v in vacancies.list_vacancies(tenant_id, site_id="site-2")] == ["REQ-003"]
        assert [v.requisition_code for v in vacancies.list_vacancies(tenant_id, recruiter="Laura")] == ["REQ-001"]

    def test_most_recently_opened_first(self, vacancies, build_vacancy, tenant_id):
        vacancies.create(build_vacancy(requisition_code="REQ-001", opened_at=datetime(2024, 1, 1)))
        vacancies.create(build_vacancy(requisition_code="REQ-002", opened_at=datetime(2024, 1, 5)))
        codes = [v.requisition_code for v in vacancies.list_vacancies(tenant_id)]
        assert codes == ["REQ-002", "REQ-001"]

    def test_set_state_publication(self, vacancies, build_vacancy):
        created = vacancies.create(build_vacancy(is_public=True))
        updated = vacancies.set_state(created.id, VacancyState.FILLED, datetime(2024, 1, 15))
        assert updated.state == VacancyState.FILLED
        assert updated.is_public is False
        assert updated.actual_close_at == datetime(2024, 1, 15)


# ── Other repositories ───────────────────────────────────────────────────────


class TestSiteNames:
    def test_names_by_id(self, site, tenant_id):
        assert get_site_repository().names_by_id(tenant_id) == {str(site.id): "Cartagena"}


class TestApplicationRepository:
    def test_record_view_unknown_token(self):
        assert get_application_repository().record_view("0" * 64) is None

    def test_tracking_token_field_is_write_once(self):
        with pytest.raises(ValueError):
            get_application_repository().update("64b000000000000000000000", {"tracking_token": "x"})


class TestSessionRepository:
    def test_purge_expired(self, tenant_id):
        sessions = get_session_repository()
        now = datetime(2024, 1, 10, 12, 0, 0)
        for token, expires_at in (("old", now - timedelta(hours=1)), ("live", now + timedelta(hours=1))):
            sessions.create(Session(
                token=token, user_id="u1", tenant_id=tenant_id, role="recruiter", expires_at=expires_at,
            ))
        assert sessions.purge_expired(now) == 1
        assert sessions.get_by_token("live") is not None
        assert sessions.get_by_token("old") is None
