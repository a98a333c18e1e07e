import csv
import io

import pytest


@pytest.fixture
def ann(make_employee):
    return make_employee()


def _by_code(payload):
    return {a["time_code"]: a for a in payload["allocations"]}


def test_allocations_default_and_accrual(client, admin_headers, ann):
    data = client.get(f"/api/employee-allocations?employeeId={ann['id']}&year=2026", headers=admin_headers).get_json()
    assert data["year"] == 2026
    assert data["hire_date"] == "2015-03-02"

    allocations = _by_code(data)
    assert "D" not in allocations
    assert allocations["B"]["allocated_hours"] == 24
    assert allocations["B"]["is_accrual"] is False
    assert allocations["FH"]["is_accrual"] is True
    assert allocations["FH"]["accrual_details"]["accruedHours"] == 24


def test_override_then_revert(client, admin_headers, ann):
    url = f"/api/employee-allocations?employeeId={ann['id']}&year=2026"
    resp = client.post(
        "/api/employee-allocations",
        json={"employee_id": ann["id"], "time_code": "B", "allocated_hours": 32, "year": 2026, "notes": "extra"},
        headers=admin_headers,
    )
    assert resp.get_json()["success"] is True

    b = _by_code(client.get(url, headers=admin_headers).get_json())["B"]
    assert (b["allocated_hours"], b["is_override"], b["notes"]) == (32, True, "extra")

    client.delete(
        f"/api/employee-allocations?employeeId={ann['id']}&timeCode=B&year=2026",
        headers=admin_headers,
    )
    b = _by_code(client.get(url, headers=admin_headers).get_json())["B"]
    assert (b["allocated_hours"], b["is_override"]) == (24, False)


def test_allocation_errors(client, admin_headers, clerk, ann):
    _, headers = clerk
    body = {"employee_id": ann["id"], "time_code": "B", "allocated_hours": 32, "year": 2026}
    assert client.post("/api/employee-allocations", json=body, headers=headers).status_code == 403
    assert client.post("/api/employee-allocations", json={**body, "time_code": "ZZ"}, headers=admin_headers).status_code == 400
    assert client.post("/api/employee-allocations", json={"employee_id": ann["id"]}, headers=admin_headers).status_code == 400
    assert client.get("/api/employee-allocations", headers=admin_headers).status_code == 400


def test_leave_balance_summary(client, admin_headers, ann):
    client.post(
        "/api/attendance",
        json={"employee_id": ann["id"], "entry_date": "2026-03-10", "time_code": "V", "hours": 8},
        headers=admin_headers,
    )
    summary = client.get("/api/reports/leave-balance-summary?year=2026", headers=admin_headers).get_json()
    assert [c["timeCode"] for c in summary["columns"]] == ["V", "PS", "FH", "P"]
    assert summary["config"] == {"warningThreshold": 16, "criticalThreshold": 4}

    row = summary["employees"][0]
    assert row["name"] == "Able, Ann"
    vacation = row["balances"][0]
    assert (vacation["used"], vacation["allocated"]) == (8, 80)
    assert row["balances"][3]["allocated"] is None


def test_leave_balance_summary_csv(client, admin_headers, ann):
    client.post(
        "/api/attendance",
        json={"employee_id": ann["id"], "entry_date": "2026-03-10", "time_code": "V", "hours": 8},
        headers=admin_headers,
    )
    resp = client.get("/api/reports/leave-balance-summary?year=2026&format=csv", headers=admin_headers)
    assert resp.mimetype == "text/csv"
    assert "leave-balance-summary-2026.csv" in resp.headers["Content-Disposition"]

    rows = list(csv.reader(io.StringIO(resp.data.decode("utf-8-sig"))))
    assert rows[0][:4] == ["Employee", "Vacation Used", "Vacation Allocated", "Vacation Remaining"]
    assert rows[0][-1] == "Personal Used"
    assert rows[1][:4] == ["Able, Ann", "8", "80", "72"]
