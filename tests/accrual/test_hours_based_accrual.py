from datetime import date

from brand_attendance.accrual.calculator.hours_worked import effective_usage_limit
from brand_attendance.accrual.service import calculate_accrual, estimate_hours_worked, uses_hours_worked
from brand_attendance.attendance.model import AttendanceEntry
from brand_attendance.employees.model import Employee

PS_RULE = {
    "type": "hoursWorked",
    "accrualRate": {"earnHours": 1, "perHoursWorked": 30},
    "maxAccrual": 48,
    "maxUsage": {"hours": 24, "days": 3, "rule": "whicheverGreater"},
    "period": "12month",
    "eligibility": {"waitPeriod": {"days": 90}},
    "accrualExclusions": ["V", "PS"],
    "hoursCountedBy": {"exemptFullTime": {"assumedWeeklyHours": 40}},
}

def test_hours_worked_accrues_per_block_of_hours():
    result = calculate_accrual("2020-01-01", 2026, "2026-06-30", PS_RULE, hours_worked=1000)

    assert result.is_eligible is True
    assert result.accrued_hours == 33
    assert result.max_hours == 48
    assert result.message == "33 hours accrued from 1000 hours worked"
    assert result.hours_worked_details["effectiveUsageLimit"] == 24
    assert result.hours_worked_details["totalHoursWorked"] == 1000


def test_hours_worked_is_capped_by_max_accrual():
    result = calculate_accrual("2020-01-01", 2026, "2026-06-30", PS_RULE, hours_worked=2000)

    assert result.accrued_hours == 48


def test_hours_worked_waits_for_eligibility():
    result = calculate_accrual("2026-06-01", 2026, "2026-07-01", PS_RULE, hours_worked=200)

    assert result.is_eligible is False
    assert result.accrued_hours == 0
    assert result.next_accrual_date == date(2026, 8, 30)
    assert result.message == "Not yet eligible. Eligibility begins 8/30/2026."
    assert result.to_dict()["hoursWorkedDetails"]["accrualExclusions"] == ["V", "PS"]


def test_effective_usage_limit_rules():
    assert effective_usage_limit({"hours": 40, "days": 3, "rule": "whicheverGreater"}, 48) == 40
    assert effective_usage_limit({"hours": 40, "days": 3, "rule": "whicheverLesser"}, 48) == 24
    assert effective_usage_limit({"hours": 40, "days": 3, "rule": "fixed"}, 48) == 40
    assert effective_usage_limit(None, 48) == 48


def test_uses_hours_worked():
    assert uses_hours_worked(PS_RULE)
    assert uses_hours_worked({"type": "tieredSeniority"})
    assert not uses_hours_worked({"type": "quarterly"})


def _employee(**overrides):
    base = dict(id=1, first_name="Ana", last_name="Ruiz", date_of_hire="2026-06-01")
    base.update(overrides)
    return Employee(**base)


def _entry(day: str, code: str, hours: float = 8):
    return AttendanceEntry(id=0, employee_id=1, entry_date=day, time_code=code, hours=hours)


def test_estimate_hours_worked_counts_weekdays_from_hire_and_subtracts_exclusions():
    entries = [
        _entry("2026-06-03", "V"),
        _entry("2026-06-04", "P"),
        _entry("2025-12-31", "V"),
    ]

    hours = estimate_hours_worked(_employee(), date(2026, 1, 1), date(2026, 6, 12), entries, PS_RULE)

    assert hours == 72


def test_estimate_hours_worked_part_time_uses_half_days():
    entries = [_entry("2026-06-03", "V")]

    hours = estimate_hours_worked(
        _employee(employment_type="part_time"), date(2026, 1, 1), date(2026, 6, 12), entries, PS_RULE
    )

    assert hours == 32


def test_estimate_hours_worked_uses_rehire_date_and_never_goes_negative():
    employee = _employee(date_of_hire="2010-01-04", rehire_date="2026-06-08")
    entries = [_entry("2026-06-08", "V", 30), _entry("2026-06-09", "PS", 30)]

    assert estimate_hours_worked(employee, date(2026, 1, 1), date(2026, 6, 9), entries, PS_RULE) == 0
    assert estimate_hours_worked(employee, date(2026, 1, 1), date(2026, 5, 1), [], PS_RULE) == 0
