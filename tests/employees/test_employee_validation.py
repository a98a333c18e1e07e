from brand_attendance.employees.validation import (
    employment_type_label,
    is_rehire_after_hire,
    is_valid_seniority_rank,
    normalize_employment_type,
    validate_employee_fields,
)


def test_valid_fields_pass():
    result = validate_employee_fields(
        {
            "employment_type": "part_time",
            "seniority_rank": 3,
            "date_of_hire": "2020-01-06",
            "rehire_date": "2023-04-03",
        }
    )
    assert result.valid
    assert result.errors == []


def test_blank_dates_and_missing_fields_are_allowed():
    assert validate_employee_fields({}).valid
    assert validate_employee_fields({"date_of_hire": "", "rehire_date": None}).valid


def test_collects_every_error():
    result = validate_employee_fields(
        {
            "employment_type": "contractor",
            "seniority_rank": 9,
            "date_of_hire": "2020-02-30",
        }
    )
    assert not result.valid
    assert [e["field"] for e in result.errors] == ["employment_type", "seniority_rank", "date_of_hire"]


def test_rehire_must_follow_hire():
    result = validate_employee_fields({"date_of_hire": "2021-05-01", "rehire_date": "2021-05-01"})
    assert not result.valid
    assert result.errors[0]["field"] == "rehire_date"
    assert is_rehire_after_hire("2021-05-01", None)
    assert is_rehire_after_hire("not-a-date", "2020-01-01")


def test_seniority_rank_rejects_bools_and_strings():
    assert is_valid_seniority_rank(None)
    assert is_valid_seniority_rank(1)
    assert is_valid_seniority_rank(5)
    assert not is_valid_seniority_rank(0)
    assert not is_valid_seniority_rank(True)
    assert not is_valid_seniority_rank("3")


def test_employment_type_helpers():
    assert normalize_employment_type(None) == "full_time"
    assert normalize_employment_type("part_time") == "part_time"
    assert employment_type_label("part_time") == "Part-time"
    assert employment_type_label(None) == "Full-time"
