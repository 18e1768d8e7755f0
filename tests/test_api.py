from __future__ import annotations

import pytest

from src.epf_payroll.epf_payroll.main import create_app

from tests.fakes import COMPANY_ID, PERIOD

CSV = "memberno,time\n2,2024-03-04T08:00:00\n2,2024-03-04T17:00:00\n"


@pytest.fixture
def client(container, monkeypatch):
    monkeypatch.setenv("APP_ENV", "testing")
    app = create_app(container=container)
    client = app.test_client()
    with client.session_transaction() as sess:
        sess["user_id"] = "u1"
        sess["role"] = "user"
    return client


def test_requires_a_session(container, monkeypatch):
    monkeypatch.setenv("APP_ENV", "testing")
    anonymous = create_app(container=container).test_client()

    resp = anonymous.post("/api/salaries/generate", json={"companyId": COMPANY_ID, "period": PERIOD})

    assert resp.status_code == 401


def test_generate_previews_then_save_commits(client, repos):
    resp = client.post("/api/salaries/generate", json={"companyId": COMPANY_ID, "period": PERIOD, "inOut": CSV})

    assert resp.status_code == 200
    body = resp.get_json()
    assert {s["employee"] for s in body["salaries"]} == {"e1", "e2"}
    assert repos.salaries.rows == {}

    saved = client.post("/api/salaries", json={"salaries": body["salaries"]})

    assert saved.status_code == 201
    assert len(saved.get_json()["salaries"]) == 2
    assert len(repos.salaries.rows) == 2

    again = client.post("/api/salaries", json={"salaries": body["salaries"]})
    assert sorted(again.get_json()["exists"]) == ["e1", "e2"]


def test_generate_with_commit_flag_persists(client, repos):
    resp = client.post(
        "/api/salaries/generate",
        json={"companyId": COMPANY_ID, "period": PERIOD, "employees": ["e1"], "commit": True},
    )

    assert resp.status_code == 200
    assert resp.get_json()["salaries"][0]["finalSalary"] == "19320.00"
    assert len(repos.salaries.rows) == 1


def test_malformed_csv_line_is_a_400_with_line(client):
    resp = client.post(
        "/api/inout/preview",
        json={"companyId": COMPANY_ID, "period": PERIOD, "inOut": "employee,time\ne1,2024-03-04T08:00:00\nbad\n"},
    )

    assert resp.status_code == 400
    assert resp.get_json() == {"message": "Line 3: expected 'identifier,timestamp'", "kind": "validation", "line": 3}


def test_inout_preview_returns_rows_and_warnings(client):
    resp = client.post("/api/inout/preview", json={"companyId": COMPANY_ID, "period": PERIOD, "inOut": CSV})

    body = resp.get_json()
    assert resp.status_code == 200
    assert body["type"] == "memberNo"
    assert len(body["rows"]) == 2
    assert [w["code"] for w in body["warnings"]] == ["employee_missing"]


def test_not_purchased_is_402(client, repos):
    repos.purchases.statuses.clear()

    resp = client.post("/api/salaries/generate", json={"companyId": COMPANY_ID, "period": PERIOD})

    assert resp.status_code == 402
    assert resp.get_json()["kind"] == "not_purchased"


def test_missing_period_is_400(client):
    resp = client.post("/api/salaries/generate", json={"companyId": COMPANY_ID})
    assert resp.status_code == 400
    assert resp.get_json()["message"] == "period is required"


def test_edit_and_delete_salary(client, repos):
    client.post("/api/salaries/generate", json={"companyId": COMPANY_ID, "period": PERIOD, "employees": ["e1"], "commit": True})
    salary_id = next(iter(repos.salaries.rows))

    edited = client.patch(f"/api/salaries/{salary_id}", json={"remark": "ok", "noPay": {"amount": "875", "reason": "leave"}})

    assert edited.status_code == 200
    salary = edited.get_json()["salary"]
    # EPF on 21000 - 875 = 20125 is 1610.00
    assert salary["finalSalary"] == "18515.00"
    assert salary["remark"] == "ok"

    assert client.delete(f"/api/salaries/{salary_id}").status_code == 200
    assert client.delete(f"/api/salaries/{salary_id}").status_code == 404


def test_payment_generation_endpoint(client):
    assert client.post("/api/payments/generate", json={"companyId": COMPANY_ID, "period": PERIOD}).status_code == 404

    client.post("/api/salaries/generate", json={"companyId": COMPANY_ID, "period": PERIOD, "inOut": CSV, "commit": True})
    created = client.post("/api/payments/generate", json={"companyId": COMPANY_ID, "period": PERIOD})
    existing = client.post("/api/payments/generate", json={"companyId": COMPANY_ID, "period": PERIOD})

    assert created.status_code == 201
    assert existing.status_code == 200
    assert existing.get_json()["exists"] is True


def test_reference_endpoint(client):
    resp = client.post("/api/companies/reference", json={"employerNo": "A/12345", "period": PERIOD})
    assert resp.status_code == 200
    assert resp.get_json() == {"referenceNo": "REF-0001", "name": "LANKA TEA TRADERS"}


def test_quick_generate_runs_the_saga(client):
    resp = client.post("/api/quick/generate", json={"companyId": COMPANY_ID, "period": PERIOD, "inOut": CSV})

    body = resp.get_json()
    assert resp.status_code == 200
    assert body["progress"] == 100
    assert [s["status"] for s in body["steps"]] == ["done", "done", "skipped"]


def test_company_of_another_user_is_not_found(container, monkeypatch):
    monkeypatch.setenv("APP_ENV", "testing")
    other = create_app(container=container).test_client()
    with other.session_transaction() as sess:
        sess["user_id"] = "u2"

    resp = other.post("/api/salaries/generate", json={"companyId": COMPANY_ID, "period": PERIOD})

    assert resp.status_code == 404
    assert resp.get_json() == {"message": "Company not found", "kind": "not_found"}


def test_period_with_single_digit_month_is_a_400(client):
    resp = client.post("/api/salaries/generate", json={"companyId": COMPANY_ID, "period": "2024-3"})
    assert resp.status_code == 400
    assert resp.get_json()["message"] == "Period must be in the format YYYY-MM"
