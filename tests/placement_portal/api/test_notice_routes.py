from datetime import timedelta

from placement_portal.core.errors import StoreUnavailableError
from placement_portal.schemas.schemas import Branch


NOTICE_PAYLOAD = {
    "company_name": "Acme",
    "description": "Backend engineer",
    "link": "https://acme.test/jobs/1",
    "target_semesters": [6, 7],
    "target_branches": ["Computer Science", "Information Technology"],
    "target_year": 2026,
    "package_offered": "12 LPA",
    "job_type": "Full Time",
}


def test_admin_creates_notice_with_default_cgpa_range(client, admin_headers, notices):
    response = client.post("/api/notices", json=NOTICE_PAYLOAD, headers=admin_headers)

    assert response.status_code == 201
    notice = response.json()["notice"]
    assert notice["min_cgpa"] == 0.0
    assert notice["max_cgpa"] == 10.0
    assert notice["id"]
    assert len(notices.notices) == 1


def test_create_notice_rejects_inverted_cgpa(client, admin_headers, notices):
    payload = {**NOTICE_PAYLOAD, "min_cgpa": 8, "max_cgpa": 5}

    response = client.post("/api/notices", json=payload, headers=admin_headers)

    assert response.status_code == 400
    assert response.json()["code"] == "CGPARangeInvalid"
    assert notices.notices == {}


def test_create_notice_rejects_unknown_branch(client, admin_headers):
    payload = {**NOTICE_PAYLOAD, "target_branches": ["Computer Science", "Law"]}

    response = client.post("/api/notices", json=payload, headers=admin_headers)

    assert response.status_code == 400
    assert response.json()["code"] == "UnknownBranch"


def test_create_notice_rejects_empty_targets(client, admin_headers):
    payload = {**NOTICE_PAYLOAD, "target_semesters": []}

    response = client.post("/api/notices", json=payload, headers=admin_headers)

    assert response.json()["code"] == "EmptyTargetSet"


def test_students_cannot_create_notices(client, student_headers):
    response = client.post("/api/notices", json=NOTICE_PAYLOAD, headers=student_headers)

    assert response.status_code == 403


def test_student_feed_is_filtered(client, student_headers, notices, make_notice):
    notices.insert(make_notice(company_name="Eligible"))
    notices.insert(make_notice(company_name="Mechanical only", target_branches=[Branch.me]))
    notices.insert(make_notice(company_name="High bar", min_cgpa=9.0))

    response = client.get("/api/notices/student", headers=student_headers)

    body = response.json()
    assert response.status_code == 200
    assert body["count"] == 1
    assert body["notices"][0]["company_name"] == "Eligible"
    assert body["message"] is None


def test_placed_student_feed_is_empty(client, student_doc, student_headers, users, notices, make_notice):
    notices.insert(make_notice())
    users.update_by_id(student_doc["id"], {"placement_status": "Placed", "placed_company": "Globex"})

    response = client.get("/api/notices/student", headers=student_headers)

    body = response.json()
    assert body["count"] == 0
    assert body["notices"] == []
    assert "Globex" in body["message"]


def test_admin_lists_all_notices_newest_first(client, admin_headers, notices, make_notice):
    first = make_notice(company_name="First")
    notices.insert(first)
    notices.insert(make_notice(company_name="Second", created_at=first.created_at + timedelta(hours=1)))

    response = client.get("/api/notices/all", headers=admin_headers)

    assert [n["company_name"] for n in response.json()["notices"]] == ["Second", "First"]


def test_delete_notice(client, admin_headers, notices, make_notice):
    saved = notices.insert(make_notice())

    assert client.delete(f"/api/notices/{saved.id}", headers=admin_headers).status_code == 200
    response = client.delete(f"/api/notices/{saved.id}", headers=admin_headers)
    assert response.status_code == 404
    assert response.json()["code"] == "NotFound"


def test_visited_companies_is_public(client, notices, make_notice):
    notices.insert(make_notice(company_name="Globex"))
    notices.insert(make_notice(company_name="Acme", target_branches=[Branch.ce]))
    notices.insert(make_notice(company_name="Acme"))

    response = client.get("/api/notices/companies")

    assert response.status_code == 200
    assert response.json()["companies"] == ["Acme", "Globex"]


def test_store_outage_maps_to_503(client, notices, monkeypatch):
    def unavailable():
        raise StoreUnavailableError()

    monkeypatch.setattr(notices, "list_all", unavailable)

    response = client.get("/api/notices/companies")

    assert response.status_code == 503
    assert response.json()["code"] == "StoreUnavailable"


def test_create_notice_requires_target_year(client, admin_headers, notices):
    payload = {k: v for k, v in NOTICE_PAYLOAD.items() if k != "target_year"}

    response = client.post("/api/notices", json=payload, headers=admin_headers)

    assert response.status_code == 422
    assert notices.notices == {}


def test_create_notice_rejects_blank_package(client, admin_headers, notices):
    payload = {**NOTICE_PAYLOAD, "package_offered": "   "}

    response = client.post("/api/notices", json=payload, headers=admin_headers)

    assert response.status_code == 400
    assert response.json() == {"success": False, "code": "MissingField", "detail": "package_offered is required"}
    assert notices.notices == {}
