import json

from brand_attendance.brands.loader import (
    BrandCatalog,
    company_holiday_dates,
    enabled_leave_types,
    is_global_read_access_enabled,
    is_leave_type_enabled,
    leave_balance_summary_config,
)


def test_selection_falls_back_to_default(tmp_path):
    catalog = BrandCatalog(selection_file=tmp_path / "missing.json")
    assert catalog.selection() == {"brand": "Default", "selectedAt": None}
    assert catalog.current_brand() == "Default"


def test_selection_file_and_explicit_brand(tmp_path):
    selection = tmp_path / "brand-selection.json"
    selection.write_text(json.dumps({"brand": "TRL", "selectedAt": "2026-01-02T00:00:00Z"}), encoding="utf-8")
    assert BrandCatalog(selection_file=selection).current_brand() == "TRL"
    assert BrandCatalog(brand="BT", selection_file=selection).current_brand() == "BT"


def test_corrupt_selection_file_is_ignored(tmp_path):
    selection = tmp_path / "brand-selection.json"
    selection.write_text("{not json", encoding="utf-8")
    assert BrandCatalog(selection_file=selection).current_brand() == "Default"


def test_brand_config_uses_display_table():
    config = BrandCatalog(brand="TRL").brand_config().to_dict()
    assert config == {
        "id": "TRL",
        "name": "Trinity Rehab",
        "logoPath": "/TRL/logo.png",
        "logoAlt": "Trinity Rehab Logo",
        "appTitle": "TRL Attendance",
    }
    assert BrandCatalog(brand="Acme").brand_config().app_title == "Multi-User Attendance"


def test_time_codes_filter_inactive():
    catalog = BrandCatalog(brand="TRL")
    active = [tc.code for tc in catalog.time_codes()]
    everything = [tc.code for tc in catalog.time_codes(include_inactive=True)]
    assert "D" not in active
    assert "D" in everything
    assert catalog.time_code_by_code("V").default_allocation == 80
    assert catalog.time_code_by_code("D") is None


def test_missing_brand_has_no_codes_and_disabled_features():
    catalog = BrandCatalog(brand="Nowhere")
    assert catalog.time_codes() is None
    features = catalog.features()
    assert features["brandId"] == "Nowhere"
    assert not features["features"]["leaveManagement"]["enabled"]
    assert catalog.accrual_rule_for_time_code("FH") is None


def test_available_brands_lists_folders():
    assert {"Default", "TRL"} <= set(BrandCatalog().available_brands())


def test_feature_helpers_on_trl():
    features = BrandCatalog(brand="TRL").features()
    assert enabled_leave_types(features) == ["vacation", "sickLeave", "floatingHoliday", "personal"]
    assert is_leave_type_enabled(features, "vacation")
    assert not is_leave_type_enabled(features, "familyEmergency")
    assert is_global_read_access_enabled(features)
    assert leave_balance_summary_config(features) == {"enabled": True, "warningThreshold": 16, "criticalThreshold": 4}
    assert "2026-12-25" in company_holiday_dates(features, 2026)
    assert company_holiday_dates(features, 2027) == set()
    assert BrandCatalog(brand="TRL").accrual_rule_for_time_code("FH")["type"] == "quarterly"


def test_custom_brands_dir(tmp_path):
    brand_dir = tmp_path / "Acme"
    brand_dir.mkdir()
    (brand_dir / "time-codes.json").write_text(
        json.dumps({"timeCodes": [{"id": 1, "code": "X", "description": "Other", "is_active": 1}]}),
        encoding="utf-8",
    )
    catalog = BrandCatalog(tmp_path, brand="Acme")
    assert [tc.code for tc in catalog.time_codes()] == ["X"]
    assert catalog.available_brands() == ["Acme"]
