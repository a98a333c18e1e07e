def test_create_list_update_delete(client, admin_headers, make_employee):
    ann = make_employee(employee_number="E100", email="ann@example.com")
    assert ann["role"] == "employee"
    assert ann["employment_type"] == "full_time"

    listed = client.get("/api/employees", headers=admin_headers).get_json()
    assert [e["id"] for e in listed] == [ann["id"]]

    resp = client.put("/api/employees", json={"id": ann["id"], "seniority_rank": 4}, headers=admin_headers)
    assert resp.status_code == 200
    assert resp.get_json()["seniority_rank"] == 4

    assert client.delete(f"/api/employees?id={ann['id']}", headers=admin_headers).get_json() == {"success": True}
    assert client.get("/api/employees", headers=admin_headers).get_json() == []
    inactive = client.get("/api/employees?includeInactive=true", headers=admin_headers).get_json()
    assert inactive[0]["is_active"] == 0


def test_validation_errors(client, admin_headers, make_employee):
    make_employee(employee_number="E100")
    resp = client.post(
        "/api/employees",
        json={"first_name": "Bo", "last_name": "Bell", "employee_number": "E100"},
        headers=admin_headers,
    )
    assert resp.status_code == 400
    assert resp.get_json()["error"] == "Employee number already exists"

    resp = client.post(
        "/api/employees",
        json={"first_name": "Bo", "last_name": "Bell", "employment_type": "seasonal"},
        headers=admin_headers,
    )
    assert resp.status_code == 400
    assert resp.get_json()["errors"][0]["field"] == "employment_type"

    assert client.get("/api/employees?id=999", headers=admin_headers).status_code == 404
    assert client.put("/api/employees", json={}, headers=admin_headers).status_code == 400


def test_seniority_endpoint(client, admin_headers, make_employee):
    make_employee(first_name="New", last_name="Hire", date_of_hire="2024-01-08")
    make_employee(first_name="Old", last_name="Timer", date_of_hire="2009-05-04")
    rows = client.get("/api/employees/seniority", headers=admin_headers).get_json()
    assert [(r["first_name"], r["seniority_position"]) for r in rows] == [("Old", 1), ("New", 2)]


def test_group_permissions_scope_employees(client, admin_headers, clerk, make_employee):
    user, headers = clerk
    ann = make_employee()
    unassigned = make_employee(first_name="Free", last_name="Agent", group_id=None)

    visible = client.get("/api/employees", headers=headers).get_json()
    assert [e["id"] for e in visible] == [unassigned["id"]]
    assert client.get(f"/api/employees?id={ann['id']}", headers=headers).status_code == 403

    resp = client.post(
        "/api/user-group-permissions",
        json={"userId": user["id"], "groupId": 4, "can_read": True, "can_update": True},
        headers=admin_headers,
    )
    assert resp.status_code == 200
    assert resp.get_json()["can_update"] == 1

    assert client.get(f"/api/employees?id={ann['id']}", headers=headers).status_code == 200
    assert client.delete(f"/api/employees?id={ann['id']}", headers=headers).status_code == 403


def test_requires_login(app):
    assert app.test_client().get("/api/employees").status_code == 401
