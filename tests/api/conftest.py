import pytest


@pytest.fixture
def make_user(client, admin_headers, login):
    """Create an account through the API and return (user, headers)."""

    def _make(username: str, *, group_id: int = 4, role_id: int = 5, password: str = "pw-12345"):
        resp = client.post(
            "/api/users",
            json={
                "username": username,
                "password": password,
                "full_name": username.title(),
                "group_id": group_id,
                "role_id": role_id,
            },
            headers=admin_headers,
        )
        assert resp.status_code == 201, resp.get_json()
        return resp.get_json(), login(username, password)

    return _make


@pytest.fixture
def clerk(make_user):
    return make_user("clerk")


@pytest.fixture
def make_employee(client, admin_headers):
    def _make(**fields):
        body = {"first_name": "Ann", "last_name": "Able", "group_id": 4, "date_of_hire": "2015-03-02"}
        body.update(fields)
        resp = client.post("/api/employees", json=body, headers=admin_headers)
        assert resp.status_code == 201, resp.get_json()
        return resp.get_json()

    return _make
