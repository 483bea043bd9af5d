"""
End-to-end API tests through FastAPI's TestClient against mongomock.
"""

import pytest
from fastapi.testclient import TestClient

from ghscore.api import create_app
from ghscore.utils.constants import UserRole

PASSWORD = "s3cret-pass"


@pytest.fixture
def client():
    return TestClient(create_app())


@pytest.fixture
def login(client):
    def _login(email):
        response = client.post("/auth/login", json={"email": email, "password": PASSWORD})
        assert response.status_code == 200, response.text
        return {"Authorization": f"Bearer {response.json()['token']}"}

    return _login


@pytest.fixture
def recruiter_headers(login, recruiter):
    return login(recruiter.email)


@pytest.fixture
def admin_headers(login, admin):
    return login(admin.email)


@pytest.fixture
def viewer_headers(login, make_user):
    viewer = make_user(email="viewer@example.com", role=UserRole.VIEWER)
    return login(viewer.email)


@pytest.fixture
def vacancy_payload(site):
    return {
        "title": "Ingeniero Residente",
        "site_id": str(site.id),
        "opened_at": "2024-01-01",
        "estimated_close_at": "2024-01-20",
        "responsible_recruiter": "Laura",
    }


# ── Health / auth ────────────────────────────────────────────────────────────


class TestHealthAndAuth:
    def test_health(self, client):
        body = client.get("/health").json()
        assert body["status"] == "ok"
        assert body["database"] is True

    def test_requires_token(self, client):
        response = client.get("/vacancies")
        assert response.status_code == 401
        assert response.json()["error"] == "unauthorized"

    def test_invalid_token(self, client):
        response = client.get("/vacancies", headers={"Authorization": "Bearer nope"})
        assert response.status_code == 401

    def test_wrong_password(self, client, recruiter):
        response = client.post("/auth/login", json={"email": recruiter.email, "password": "bad"})
        assert response.status_code == 401

    def test_me_and_logout(self, client, recruiter_headers, tenant_id):
        me = client.get("/auth/me", headers=recruiter_headers).json()
        assert me["email"] == "recruiter@example.com"
        assert me["tenant_id"] == tenant_id

        assert client.post("/auth/logout", headers=recruiter_headers).json() == {"success": True}
        assert client.get("/auth/me", headers=recruiter_headers).status_code == 401

    def test_viewer_cannot_write(self, client, viewer_headers, vacancy_payload):
        response = client.post("/vacancies", json=vacancy_payload, headers=viewer_headers)
        assert response.status_code == 403
        assert response.json()["error"] == "forbidden"

    def test_viewer_can_read(self, client, viewer_headers):
        assert client.get("/vacancies", headers=viewer_headers).status_code == 200


# ── Vacancies ────────────────────────────────────────────────────────────────


class TestVacancyEndpoints:
    def test_create_list_and_get(self, client, recruiter_headers, vacancy_payload):
        response = client.post("/vacancies", json=vacancy_payload, headers=recruiter_headers)
        assert response.status_code == 201
        body = response.json()
        assert body["count"] == 1
        created = body["items"][0]
        assert created["requisition_code"] == "REQ-001"
        assert created["state"] == "open"

        listed = client.get("/vacancies", headers=recruiter_headers).json()
        assert [v["requisition_code"] for v in listed] == ["REQ-001"]
        assert listed[0]["site_name"] == "Cartagena"
        assert listed[0]["sla"]["level"] == "overdue"

        fetched = client.get(f"/vacancies/{created['id']}", headers=recruiter_headers).json()
        assert fetched["title"] == "Ingeniero Residente"

    def test_batch_create(self, client, recruiter_headers, vacancy_payload):
        vacancy_payload["quantity"] = 2
        body = client.post("/vacancies", json=vacancy_payload, headers=recruiter_headers).json()
        assert [v["requisition_code"] for v in body["items"]] == ["REQ-001", "REQ-002"]

    def test_create_validation_error_shape(self, client, recruiter_headers, vacancy_payload):
        del vacancy_payload["title"]
        response = client.post("/vacancies", json=vacancy_payload, headers=recruiter_headers)
        assert response.status_code == 422
        body = response.json()
        assert body["error"] == "validation_error"
        assert any(d["field"] == "title" for d in body["details"])

    def test_next_code(self, client, recruiter_headers, vacancy):
        response = client.get("/vacancies/next-code", headers=recruiter_headers)
        assert response.json() == {"next_code": "REQ-002"}

    def test_update_rejects_code_change(self, client, recruiter_headers, vacancy):
        response = client.put(
            f"/vacancies/{vacancy.id}",
            json={"requisition_code": "REQ-999"},
            headers=recruiter_headers,
        )
        assert response.status_code == 422

    def test_update_fill(self, client, recruiter_headers, vacancy):
        response = client.put(
            f"/vacancies/{vacancy.id}", json={"state": "filled"}, headers=recruiter_headers
        )
        assert response.status_code == 200
        body = response.json()
        assert body["actual_close_at"] is not None
        assert body["sla"]["level"] == "completed"

    def test_move(self, client, recruiter_headers, vacancy):
        response = client.post(
            f"/vacancies/{vacancy.id}/move", json={"direction": "next"}, headers=recruiter_headers
        )
        assert response.json()["state"] == "in_progress"

        response = client.post(
            f"/vacancies/{vacancy.id}/move", json={"direction": "sideways"}, headers=recruiter_headers
        )
        assert response.status_code == 422

    def test_unknown_vacancy(self, client, recruiter_headers):
        response = client.get("/vacancies/64b000000000000000000000", headers=recruiter_headers)
        assert response.status_code == 404
        assert response.json()["error"] == "not_found"

    def test_stats(self, client, recruiter_headers, make_vacancy):
        make_vacancy(daily_vacancy_cost=1000)
        body = client.get("/vacancies/stats", headers=recruiter_headers).json()
        assert body["open_count"] == 1
        assert body["expired_count"] == 1
        assert body["total_financial_impact"] > 0
        assert body["recruiter_workload"] == [{"label": "Laura", "count": 1}]


# ── Candidates ───────────────────────────────────────────────────────────────


class TestCandidateEndpoints:
    def test_create_and_progress(self, client, recruiter_headers, vacancy):
        response = client.post(
            "/candidates",
            json={"name": "Ana Torres", "vacancy_id": str(vacancy.id), "email": "ana@example.com"},
            headers=recruiter_headers,
        )
        assert response.status_code == 201
        candidate_id = response.json()["id"]

        response = client.put(
            f"/candidates/{candidate_id}",
            json={"stage": "technical_test", "technical_score": 4.2},
            headers=recruiter_headers,
        )
        body = response.json()
        assert body["stage"] == "technical_test"
        assert body["technical_level"] == "strong"
        assert len(body["stage_history"]) == 2

        listed = client.get(
            "/candidates", params={"vacancy_id": str(vacancy.id)}, headers=recruiter_headers
        ).json()
        assert [c["id"] for c in listed] == [candidate_id]

    def test_not_fit_requires_reason(self, client, recruiter_headers, make_candidate):
        candidate = make_candidate()
        response = client.put(
            f"/candidates/{candidate.id}", json={"result": "not_fit"}, headers=recruiter_headers
        )
        assert response.status_code == 422
        assert response.json()["details"][0]["field"] == "not_fit_reason"

    def test_unknown_vacancy(self, client, recruiter_headers):
        response = client.post(
            "/candidates",
            json={"name": "Ana", "vacancy_id": "64b000000000000000000000"},
            headers=recruiter_headers,
        )
        assert response.status_code == 404


# ── Public portal ────────────────────────────────────────────────────────────


class TestPublicPortal:
    def test_apply_and_track(self, client, vacancy, tenant_id, recruiter_headers):
        jobs = client.get("/applications/public/jobs", params={"tenant": tenant_id}).json()
        assert [j["id"] for j in jobs] == [str(vacancy.id)]

        response = client.post("/applications/apply", json={
            "vacancy_id": str(vacancy.id),
            "full_name": "Carlos Pérez",
            "email": "carlos@example.com",
            "skills": "autocad, excel",
            "years_experience": 5,
        })
        assert response.status_code == 201
        receipt = response.json()
        assert 0 <= receipt["match_score"] <= 100
        assert len(receipt["tracking_token"]) == 64

        status = client.get(f"/applications/track/{receipt['tracking_token']}").json()
        assert status["state"] == "Nueva"
        assert status["requisition_code"] == vacancy.requisition_code
        assert status["tracking_views"] == 1
        assert "match_score" not in status

        unread = client.get("/notifications/unread-count", headers=recruiter_headers).json()
        assert unread["count"] == 1
        assert unread["poll_interval_seconds"] <= 30

    def test_unknown_token(self, client):
        assert client.get(f"/applications/track/{'0' * 64}").status_code == 404

    def test_apply_to_unknown_vacancy(self, client):
        response = client.post("/applications/apply", json={
            "vacancy_id": "64b000000000000000000000",
            "full_name": "Carlos",
            "email": "carlos@example.com",
        })
        assert response.status_code == 404

    def test_apply_validation(self, client, vacancy):
        response = client.post("/applications/apply", json={"vacancy_id": str(vacancy.id)})
        assert response.status_code == 422


# ── Notifications ────────────────────────────────────────────────────────────


class TestNotificationEndpoints:
    def test_mark_read_is_idempotent(self, client, recruiter_headers, tenant_id, vacancy):
        client.put(f"/vacancies/{vacancy.id}", json={"state": "filled"}, headers=recruiter_headers)

        feed = client.get("/notifications", headers=recruiter_headers).json()
        assert [n["type"] for n in feed] == ["vacancy_filled"]

        assert client.post("/notifications/mark-read", headers=recruiter_headers).json() == {"updated": 1}
        assert client.post("/notifications/mark-read", headers=recruiter_headers).json() == {"updated": 0}
        assert client.get("/notifications/unread-count", headers=recruiter_headers).json()["count"] == 0


# ── Organizations ────────────────────────────────────────────────────────────


class TestOrganizationEndpoints:
    def test_recruiter_cannot_create_company(self, client, recruiter_headers):
        response = client.post("/companies", json={"name": "Norte"}, headers=recruiter_headers)
        assert response.status_code == 403

    def test_company_cascade(self, client, admin_headers):
        company = client.post("/companies", json={"name": "Norte"}, headers=admin_headers)
        assert company.status_code == 201
        company_id = company.json()["id"]
        client.post("/sites", json={"name": "Santa Marta", "company_id": company_id}, headers=admin_headers)

        conflict = client.delete(f"/companies/{company_id}", headers=admin_headers)
        assert conflict.status_code == 409

        deleted = client.delete(f"/companies/{company_id}?cascade=true", headers=admin_headers)
        assert deleted.json() == {"deleted": True, "sites_removed": 1}

    def test_site_in_use(self, client, admin_headers, site, vacancy):
        response = client.delete(f"/sites/{site.id}", headers=admin_headers)
        assert response.status_code == 409
        assert response.json()["details"]["vacancies"] == 1


# ── Users ────────────────────────────────────────────────────────────────────


class TestUserEndpoints:
    def test_recruiter_cannot_list_users(self, client, recruiter_headers):
        assert client.get("/users", headers=recruiter_headers).status_code == 403

    def test_admin_provisions_recruiter(self, client, admin_headers, login):
        response = client.post("/users", json={
            "email": "nuevo@example.com",
            "password": PASSWORD,
            "full_name": "Nuevo Reclutador",
        }, headers=admin_headers)
        assert response.status_code == 201
        assert "password_hash" not in response.json()

        listed = client.get("/users", headers=admin_headers).json()
        assert {u["email"] for u in listed} == {"admin@example.com", "nuevo@example.com"}
        assert all("password_hash" not in u for u in listed)

        assert login("nuevo@example.com")

    def test_admin_cannot_grant_admin(self, client, admin_headers):
        response = client.post("/users", json={
            "email": "jefe@example.com",
            "password": PASSWORD,
            "full_name": "Jefe",
            "role": "admin",
        }, headers=admin_headers)
        assert response.status_code == 403

    def test_roles_and_recruiters_for_any_session(self, client, recruiter_headers):
        assert client.get("/users/roles", headers=recruiter_headers).json() == ["recruiter", "viewer"]
        recruiters = client.get("/users/recruiters", headers=recruiter_headers).json()
        assert [r["email"] for r in recruiters] == ["recruiter@example.com"]

    def test_deactivate_and_reset(self, client, admin_headers, recruiter_headers, recruiter):
        response = client.put(
            f"/users/{recruiter.id}/status", json={"is_active": False}, headers=admin_headers
        )
        assert response.json()["is_active"] is False
        assert client.get("/auth/me", headers=recruiter_headers).status_code == 401

        response = client.put(
            f"/users/{recruiter.id}/password", json={"new_password": "x"}, headers=admin_headers
        )
        assert response.status_code == 422

    def test_delete_self_rejected(self, client, admin_headers, admin):
        response = client.delete(f"/users/{admin.id}", headers=admin_headers)
        assert response.status_code == 422

    def test_delete(self, client, admin_headers, recruiter):
        assert client.delete(f"/users/{recruiter.id}", headers=admin_headers).json() == {"deleted": True}
        assert client.delete(f"/users/{recruiter.id}", headers=admin_headers).status_code == 404
