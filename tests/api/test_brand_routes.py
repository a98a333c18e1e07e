def test_brand_selection_falls_back_to_default(app):
    anonymous = app.test_client()
    assert anonymous.get("/api/brand-selection").get_json() == {"brand": "Default", "selectedAt": None}


def test_brand_config_uses_configured_brand(app):
    config = app.test_client().get("/api/brand-config").get_json()
    assert config == {
        "id": "TRL",
        "name": "Trinity Rehab",
        "logoPath": "/TRL/logo.png",
        "logoAlt": "Trinity Rehab Logo",
        "appTitle": "TRL Attendance",
    }


def test_brand_features_need_login(app, admin_headers, client):
    assert app.test_client().get("/api/brand-features").status_code == 401
    features = client.get("/api/brand-features", headers=admin_headers).get_json()
    assert features["brandId"] == "TRL"
    assert features["features"]["globalReadAccess"]["enabled"] is True


def test_time_codes_are_the_active_brand_codes(app):
    codes = app.test_client().get("/api/time-codes").get_json()
    by_code = {c["code"]: c for c in codes}
    assert "D" not in by_code
    assert by_code["FH"]["hours_limit"] == 8
    assert by_code["V"]["id"] == 13
