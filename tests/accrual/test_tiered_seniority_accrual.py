from datetime import date

from brand_attendance.accrual.calculator.tiered_seniority import base_years, select_tier, tier_label
from brand_attendance.accrual.service import calculate_accrual, estimate_hours_worked, scheduled_hours
from brand_attendance.employees.model import Employee

V_RULE = {
    "type": "tieredSeniority",
    "period": "calendarYear",
    "eligibility": {
        "waitPeriod": {"years": 1},
        "fullTime": {"hoursThreshold": 1560},
        "exempt": {"waitPeriod": {"months": 6}},
    },
    "tiers": [
        {"minBaseYears": 1, "maxBaseYears": 5, "fullTime": {"hours": 80}, "partTime": {"earnHours": 1, "perHoursWorked": 26, "maxHours": 40}},
        {"minBaseYears": 5, "maxBaseYears": 10, "fullTime": {"hours": 120}, "partTime": {"earnHours": 1, "perHoursWorked": 17, "maxHours": 60}},
        {"minBaseYears": 10, "maxBaseYears": None, "fullTime": {"hours": 160}, "partTime": {"earnHours": 1, "perHoursWorked": 13, "maxHours": 80}},
    ],
}

AS_OF = date(2026, 6, 15)


def test_base_years_and_tier_selection():
    assert base_years(date(2015, 6, 16), AS_OF) == 10
    assert base_years(date(2015, 6, 15), AS_OF) == 11
    assert base_years(date(2027, 1, 1), AS_OF) == 0

    tiers = V_RULE["tiers"]
    assert select_tier(tiers, 0) is None
    assert tier_label(select_tier(tiers, 5)) == "5-10"
    assert tier_label(select_tier(tiers, 25)) == "10+"


def test_exempt_gets_the_full_tier():
    result = calculate_accrual("2015-03-02", 2026, AS_OF, V_RULE, is_exempt=True)

    assert result.is_eligible is True
    assert result.accrued_hours == 160
    assert result.message == "Tier 10+ years: 160 hours"
    assert result.tiered_seniority_details["employeeType"] == "exempt"
    assert result.tiered_seniority_details["periodStart"] == "2026-01-01"


def test_full_time_over_threshold_qualifies():
    result = calculate_accrual("2018-03-01", 2026, AS_OF, V_RULE, hours_worked=1600)

    assert result.accrued_hours == 120
    assert result.max_hours == 120
    assert result.message == "Tier 5-10 years: 120 hours"
    details = result.tiered_seniority_details
    assert details["baseYears"] == 8
    assert details["employeeType"] == "fullTime"
    assert details["isFullTimeQualified"] is True
    assert details["periodEnd"] == "2026-12-31"


def test_mid_year_full_time_qualifies_on_scheduled_period_hours():
    employee = Employee(id=1, first_name="Ana", last_name="Ruiz", date_of_hire="2019-01-07")
    as_of = date(2026, 6, 30)
    worked = estimate_hours_worked(employee, date(2026, 1, 1), as_of, [], V_RULE)
    scheduled = scheduled_hours(employee, date(2026, 1, 1), date(2026, 12, 31), V_RULE)
    assert (worked, scheduled) == (1032, 2088)

    result = calculate_accrual(
        employee.date_of_hire, 2026, as_of, V_RULE, hours_worked=worked, scheduled_hours=scheduled
    )

    assert result.accrued_hours == 120
    assert result.tiered_seniority_details["isFullTimeQualified"] is True
    assert result.tiered_seniority_details["estimatedHoursWorked"] == 1032


def test_short_scheduled_period_is_prorated_by_hours_worked():
    result = calculate_accrual("2018-03-01", 2026, AS_OF, V_RULE, hours_worked=1000, scheduled_hours=1200)

    assert result.tiered_seniority_details["isFullTimeQualified"] is False
    assert result.accrued_hours == 58  # floor(1000 / 17)


def test_under_threshold_and_part_time_are_prorated():
    under = calculate_accrual("2020-01-15", 2026, AS_OF, V_RULE, hours_worked=340)
    assert under.accrued_hours == 20  # floor(340 / 17)

    part_time = calculate_accrual(
        "2024-01-10", 2026, AS_OF, V_RULE, hours_worked=520, scheduled_hours=2088, employment_type="part_time"
    )
    assert part_time.tiered_seniority_details["employeeType"] == "partTime"
    assert part_time.accrued_hours == 20
    assert part_time.max_hours == 80

    capped = calculate_accrual("2024-01-10", 2026, AS_OF, V_RULE, hours_worked=2600, employment_type="part_time")
    assert capped.accrued_hours == 40


def test_not_eligible_during_wait_period():
    result = calculate_accrual("2026-01-05", 2026, AS_OF, V_RULE, hours_worked=900)

    assert result.is_eligible is False
    assert result.eligibility_date == date(2027, 1, 5)
    assert result.accrued_hours == 0
    assert result.message.startswith("Not yet eligible")


def test_without_matching_tier_earns_nothing():
    result = calculate_accrual("2025-12-01", 2026, AS_OF, V_RULE, is_exempt=True)

    assert result.is_eligible is True
    assert result.accrued_hours == 0
    assert result.tiered_seniority_details["currentTier"] is None
