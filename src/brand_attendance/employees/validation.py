from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from ..common.datetime_utils import is_iso_date
from ..core.constants import MAX_SENIORITY_RANK, MIN_SENIORITY_RANK
from ..core.enums import EmploymentType

EMPLOYMENT_TYPES = tuple(t.value for t in EmploymentType)
DATE_FIELDS = ("date_of_hire", "rehire_date")


@dataclass(frozen=True)
class ValidationResult:
    valid: bool
    errors: list[dict] = field(default_factory=list)


def is_valid_employment_type(value: Any) -> bool:
    return value is None or value in EMPLOYMENT_TYPES


def is_valid_seniority_rank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, bool) or not isinstance(value, int):
        return False
    return MIN_SENIORITY_RANK <= value <= MAX_SENIORITY_RANK


def is_valid_date(value: Any) -> bool:
    if value is None or value == "":
        return True
    return is_iso_date(value)


def is_rehire_after_hire(date_of_hire: Optional[str], rehire_date: Optional[str]) -> bool:
    """Only judged when both dates are present and well-formed."""
    if not date_of_hire or not rehire_date:
        return True
    if not is_iso_date(date_of_hire) or not is_iso_date(rehire_date):
        return True
    return rehire_date > date_of_hire


def validate_employee_fields(data: dict) -> ValidationResult:
    errors: list[dict] = []

    if "employment_type" in data and not is_valid_employment_type(data["employment_type"]):
        errors.append({"field": "employment_type", "message": "Must be one of: full_time, part_time"})

    if "seniority_rank" in data and not is_valid_seniority_rank(data["seniority_rank"]):
        errors.append(
            {
                "field": "seniority_rank",
                "message": f"Must be an integer between {MIN_SENIORITY_RANK} and {MAX_SENIORITY_RANK}",
            }
        )

    for name in DATE_FIELDS:
        if name in data and not is_valid_date(data[name]):
            errors.append({"field": name, "message": "Must be a valid date in YYYY-MM-DD format"})

    if not is_rehire_after_hire(data.get("date_of_hire"), data.get("rehire_date")):
        errors.append({"field": "rehire_date", "message": "Rehire date must be after the original hire date"})

    return ValidationResult(valid=not errors, errors=errors)


def employment_type_label(value: Optional[str]) -> str:
    return "Part-time" if value == EmploymentType.PART_TIME.value else "Full-time"


def normalize_employment_type(value: Optional[str]) -> str:
    if value == EmploymentType.PART_TIME.value:
        return EmploymentType.PART_TIME.value
    return EmploymentType.FULL_TIME.value
