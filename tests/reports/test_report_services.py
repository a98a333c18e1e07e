from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import date

import pytest

from brand_attendance.brands.loader import BrandCatalog
from brand_attendance.brands.model import BrandTimeCode
from brand_attendance.core.exceptions import NotFoundError
from brand_attendance.employees.model import Employee
from brand_attendance.reports.service import (
    AttendanceReportService,
    LeaveBalanceReportService,
    ReportDefinitionService,
    readable_group_ids,
)
from brand_attendance.users.model import AuthUser

FEATURES = {
    "features": {
        "leaveManagement": {
            "enabled": True,
            "leaveTypes": {"vacation": {"enabled": True, "timeCode": "V", "label": "Vacation"}},
        },
        "reports": {"leaveBalanceSummary": {"enabled": True}},
    }
}


@dataclass
class FakeBrands:
    features_data: dict = field(default_factory=lambda: FEATURES)
    codes: list[BrandTimeCode] | None = None

    def features(self):
        return self.features_data

    def time_codes(self):
        return self.codes


@dataclass
class FakePermissions:
    superusers: set[int] = field(default_factory=set)
    readable: dict[int, list[int]] = field(default_factory=dict)

    def is_superuser(self, user_id: int) -> bool:
        return user_id in self.superusers

    def readable_groups(self, user_id: int) -> list[int]:
        return list(self.readable.get(user_id, []))


class RecordingEntries:
    def __init__(self):
        self.calls: list[dict] = []

    def report_rows(self, **kwargs):
        self.calls.append(kwargs)
        return []

    def used_hours(self, *, year: int):
        return {(1, "V"): 16.0}


class Employees:
    def list_all(self):
        return [Employee(id=1, first_name="Ann", last_name="Able", group_id=4)]


class NoAllocations:
    def for_year(self, year: int):
        return []


ADMIN = AuthUser(id=1, username="admin", full_name="Admin", group_id=1, is_superuser=True)
CLERK = AuthUser(id=2, username="clerk", full_name="Clerk", group_id=4)


def test_readable_groups_include_own_group_unless_unrestricted():
    permissions = FakePermissions(superusers={1}, readable={2: [3]})

    assert readable_group_ids(ADMIN, permissions, FakeBrands()) is None
    assert readable_group_ids(CLERK, permissions, FakeBrands()) == {3, 4}

    global_read = FakeBrands(features_data={"features": {"globalReadAccess": {"enabled": True}}})
    assert readable_group_ids(CLERK, permissions, global_read) is None


def test_attendance_report_passes_filters_and_scope():
    entries = RecordingEntries()
    service = AttendanceReportService(entries, FakePermissions(readable={2: [3]}), FakeBrands())

    service.entries(CLERK, start_date="2026-03-01", end_date="2026-03-31", employee_id="7", time_code="V")
    service.entries(CLERK, start_date="2026-03-01", end_date="2026-03-31", employee_id="all", time_code=None)

    assert entries.calls == [
        {"start": "2026-03-01", "end": "2026-03-31", "employee_id": 7, "time_code": "V", "group_ids": [3, 4]},
        {"start": "2026-03-01", "end": "2026-03-31", "employee_id": None, "time_code": None, "group_ids": [3, 4]},
    ]


def _summary(brands: FakeBrands) -> dict:
    service = LeaveBalanceReportService(
        Employees(),
        NoAllocations(),
        RecordingEntries(),
        FakePermissions(superusers={1}),
        brands,
        today=lambda: date(2026, 6, 15),
    )
    return service.summary(ADMIN)


def test_summary_defaults_come_from_brand_time_codes():
    brands = FakeBrands(codes=[BrandTimeCode(id=1, code="V", description="Vacation", hours_limit=None, default_allocation=80)])

    balance = _summary(brands)["employees"][0]["balances"][0]

    assert (balance["used"], balance["allocated"], balance["hasAllocation"]) == (16.0, 80, True)


def test_summary_without_brand_time_codes_has_no_allocations():
    summary = _summary(FakeBrands(codes=None))

    assert summary["columns"] == [{"timeCode": "V", "label": "Vacation", "hasAllocation": False}]
    assert summary["employees"][0]["balances"][0]["allocated"] is None


def _write_definitions(root, brand: str, reports: list[dict]) -> None:
    folder = root / brand
    folder.mkdir(parents=True, exist_ok=True)
    (folder / "report-definitions.json").write_text(json.dumps({"brandId": brand, "reports": reports}), encoding="utf-8")


def test_definitions_fall_back_to_default_brand(tmp_path):
    _write_definitions(tmp_path, "Default", [{"id": "attendance-detail"}])
    _write_definitions(tmp_path, "TRL", [{"id": "trl-only"}])

    assert [r["id"] for r in BrandCatalog(tmp_path, brand="TRL").report_definitions()] == ["trl-only"]
    assert [r["id"] for r in BrandCatalog(tmp_path, brand="BT").report_definitions()] == ["attendance-detail"]
    assert BrandCatalog(tmp_path / "empty", brand="BT").report_definitions() == []


def test_definitions_hide_reports_whose_feature_is_off(tmp_path):
    _write_definitions(
        tmp_path,
        "Default",
        [
            {"id": "attendance-detail"},
            {"id": "leave-balance-summary", "requiredFeature": "leaveManagement"},
            {"id": "approvals", "requiredFeature": "approvalWorkflows"},
        ],
    )
    service = ReportDefinitionService(BrandCatalog(tmp_path, brand="Default"))

    assert [r["id"] for r in service.available()] == ["attendance-detail"]
    assert service.get("approvals")["requiredFeature"] == "approvalWorkflows"
    with pytest.raises(NotFoundError):
        service.get("missing")
