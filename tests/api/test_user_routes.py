def test_admin_manages_users(client, admin_headers):
    resp = client.post(
        "/api/users",
        json={"username": "dana", "password": "pw-12345", "full_name": "Dana Diaz", "group_id": 3, "role_id": 2},
        headers=admin_headers,
    )
    assert resp.status_code == 201
    dana = resp.get_json()
    assert "password_hash" not in dana

    usernames = [u["username"] for u in client.get("/api/users", headers=admin_headers).get_json()]
    assert usernames.count("dana") == 1

    resp = client.put("/api/users", json={"id": dana["id"], "full_name": "Dana D."}, headers=admin_headers)
    assert resp.get_json()["full_name"] == "Dana D."

    assert client.delete(f"/api/users?id={dana['id']}", headers=admin_headers).get_json() == {"success": True}
    assert client.get(f"/api/users?id={dana['id']}", headers=admin_headers).get_json()["is_active"] == 0


def test_user_validation(client, admin_headers):
    resp = client.post("/api/users", json={"username": "admin"}, headers=admin_headers)
    assert resp.status_code == 400
    resp = client.post(
        "/api/users",
        json={"username": "admin", "password": "x", "full_name": "Dup", "group_id": 1},
        headers=admin_headers,
    )
    assert resp.get_json()["error"] == "Username already exists"
    assert client.delete("/api/users?id=1", headers=admin_headers).get_json()["error"] == "Cannot delete your own account"


def test_regular_user_cannot_manage_accounts(client, clerk):
    _, headers = clerk
    assert client.get("/api/users", headers=headers).status_code == 403
    assert client.post("/api/groups", json={"name": "Ops"}, headers=headers).status_code == 403
    assert client.get("/api/roles", headers=headers).status_code == 403


def test_groups_and_roles(client, admin_headers):
    resp = client.post("/api/groups", json={"name": "Ops", "can_view_all": True}, headers=admin_headers)
    assert resp.status_code == 201
    ops = resp.get_json()
    assert ops["can_view_all"] == 1
    assert client.post("/api/groups", json={"name": "Ops"}, headers=admin_headers).status_code == 400

    names = [g["name"] for g in client.get("/api/groups", headers=admin_headers).get_json()]
    assert {"Master", "Employees", "Ops"} <= set(names)

    roles = client.get("/api/roles", headers=admin_headers).get_json()
    assert [r["name"] for r in roles][:2] == ["Administrator", "Manager"]


def test_employee_link(client, make_user, make_employee):
    carmen = make_employee(first_name="Carmen", last_name="Diaz", group_id=4)
    make_employee(first_name="Other", last_name="Group", group_id=3)
    _, first = make_user("first")
    _, second = make_user("second")

    listing = client.get("/api/user-employee-link", headers=first).get_json()
    assert [e["id"] for e in listing["employees"]] == [carmen["id"]]

    resp = client.post("/api/user-employee-link", json={"employeeId": carmen["id"]}, headers=first)
    assert resp.get_json()["employee_id"] == carmen["id"]

    resp = client.post("/api/user-employee-link", json={"employeeId": carmen["id"]}, headers=second)
    assert resp.status_code == 409
    assert client.get("/api/user-employee-link", headers=second).get_json()["employees"] == []

    assert client.post("/api/user-employee-link", json={}, headers=second).status_code == 400
