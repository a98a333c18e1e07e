from brand_attendance.employees.model import Employee
from brand_attendance.employees.seniority import (
    has_same_effective_hire_date,
    seniority_position,
    sort_by_seniority,
)


def _emp(emp_id, hire=None, rehire=None, rank=None):
    return Employee(
        id=emp_id,
        first_name=f"First{emp_id}",
        last_name=f"Last{emp_id}",
        date_of_hire=hire,
        rehire_date=rehire,
        seniority_rank=rank,
    )


def test_earliest_effective_hire_first():
    a = _emp(1, hire="2015-01-01")
    b = _emp(2, hire="2010-01-01", rehire="2020-01-01")
    c = _emp(3, hire="2012-06-01")
    assert [e.id for e in sort_by_seniority([a, b, c])] == [3, 1, 2]


def test_rank_breaks_ties_highest_first_and_missing_last():
    a = _emp(1, hire="2018-03-01", rank=2)
    b = _emp(2, hire="2018-03-01", rank=5)
    c = _emp(3, hire="2018-03-01")
    d = _emp(4)
    assert [e.id for e in sort_by_seniority([d, c, a, b])] == [2, 1, 3, 4]


def test_sort_is_stable_and_does_not_mutate():
    items = [_emp(1, hire="2019-01-01"), _emp(2, hire="2019-01-01")]
    original = list(items)
    assert [e.id for e in sort_by_seniority(items)] == [1, 2]
    assert items == original


def test_position_and_same_date():
    staff = [_emp(1, hire="2020-01-01"), _emp(2, hire="2011-01-01")]
    assert seniority_position(staff[0], staff) == 2
    assert seniority_position(_emp(9), staff) is None
    assert has_same_effective_hire_date(_emp(1, hire="2020-01-01"), _emp(2, hire="2001-01-01", rehire="2020-01-01"))
