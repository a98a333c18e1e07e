"""Brand configuration: selection, display config, time codes and feature flags.

Each brand is a folder under the brands directory holding ``time-codes.json``,
``brand-features.json`` and ``report-definitions.json``. Missing files are not
errors: time codes fall back to the database and features to everything
disabled. Report definitions come from the Default brand when a brand has none.
"""

from __future__ import annotations

import copy
import json
from pathlib import Path
from typing import Any, Optional

import structlog

from ..core.constants import DEFAULT_APP_TITLE, DEFAULT_BRAND, DEFAULT_CRITICAL_THRESHOLD, DEFAULT_WARNING_THRESHOLD
from .model import BrandConfig, BrandTimeCode

logger = structlog.get_logger(__name__)

PACKAGED_BRANDS_DIR = Path(__file__).resolve().parent / "data"

BRAND_DISPLAY = {
    "Default": {"name": "Default", "appTitle": "Multi-User Attendance", "logoAlt": "Logo"},
    "TRL": {"name": "Trinity Rehab", "appTitle": "TRL Attendance", "logoAlt": "Trinity Rehab Logo"},
    "BT": {"name": "BizTech", "appTitle": "BizTech Attendance", "logoAlt": "BizTech Logo"},
    "NFL": {"name": "NFL", "appTitle": "NFL Attendance", "logoAlt": "NFL Logo"},
    "SBS": {"name": "SBS", "appTitle": "SBS Attendance", "logoAlt": "SBS Logo"},
}

DEFAULT_FEATURES: dict[str, Any] = {
    "brandId": DEFAULT_BRAND,
    "features": {
        "leaveManagement": {"enabled": False},
        "approvalWorkflows": {"enabled": False},
        "policyEnforcement": {"enabled": False},
        "accrualCalculations": {"enabled": False},
    },
}


def default_features(brand_id: str) -> dict[str, Any]:
    features = copy.deepcopy(DEFAULT_FEATURES)
    features["brandId"] = brand_id
    return features


class BrandCatalog:
    def __init__(
        self,
        brands_dir: str | Path | None = None,
        *,
        brand: Optional[str] = None,
        selection_file: str | Path | None = None,
    ):
        self._brands_dir = Path(brands_dir) if brands_dir else PACKAGED_BRANDS_DIR
        self._brand = brand
        self._selection_file = Path(selection_file) if selection_file else None
        self._features_cache: dict[str, dict[str, Any]] = {}

    @property
    def brands_dir(self) -> Path:
        return self._brands_dir

    def selection(self) -> dict[str, Any]:
        """Contents of the brand selection file, or the Default selection."""
        fallback = {"brand": DEFAULT_BRAND, "selectedAt": None}
        if not self._selection_file or not self._selection_file.exists():
            return fallback
        try:
            data = json.loads(self._selection_file.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            logger.warning("brand_selection_unreadable", path=str(self._selection_file))
            return fallback
        if not isinstance(data, dict) or not data.get("brand"):
            return fallback
        return {"brand": str(data["brand"]), "selectedAt": data.get("selectedAt")}

    def current_brand(self) -> str:
        if self._brand:
            return self._brand
        return self.selection()["brand"]

    def brand_config(self) -> BrandConfig:
        brand_id = self.current_brand()
        display = BRAND_DISPLAY.get(brand_id, {})
        return BrandConfig(
            id=brand_id,
            name=display.get("name", brand_id),
            logo_path=f"/{brand_id}/logo.png",
            logo_alt=display.get("logoAlt", f"{brand_id} Logo"),
            app_title=display.get("appTitle", DEFAULT_APP_TITLE),
        )

    def available_brands(self) -> list[str]:
        if not self._brands_dir.exists():
            return []
        return sorted(p.name for p in self._brands_dir.iterdir() if p.is_dir())

    def _read_json(self, brand_id: str, filename: str) -> Optional[dict]:
        path = self._brands_dir / brand_id / filename
        if not path.exists():
            return None
        try:
            return json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            logger.exception("brand_file_unreadable", brand=brand_id, file=filename)
            return None

    def time_codes(self, *, include_inactive: bool = False, brand: Optional[str] = None) -> Optional[list[BrandTimeCode]]:
        """Brand time codes, or None when the brand ships no time-codes.json."""
        brand_id = brand or self.current_brand()
        data = self._read_json(brand_id, "time-codes.json")
        if data is None:
            return None
        codes = [BrandTimeCode.from_dict(item) for item in data.get("timeCodes", [])]
        if include_inactive:
            return codes
        return [tc for tc in codes if tc.is_active == 1]

    def time_code_by_code(self, code: str) -> Optional[BrandTimeCode]:
        for tc in self.time_codes() or []:
            if tc.code == code:
                return tc
        return None

    def report_definitions(self, *, brand: Optional[str] = None) -> list[dict]:
        """Report definitions of the brand, else of the Default brand, else none."""
        for brand_id in (brand or self.current_brand(), DEFAULT_BRAND):
            data = self._read_json(brand_id, "report-definitions.json")
            if isinstance(data, dict):
                return list(data.get("reports") or [])
        return []

    def features(self) -> dict[str, Any]:
        brand_id = self.current_brand()
        cached = self._features_cache.get(brand_id)
        if cached is not None:
            return cached

        data = self._read_json(brand_id, "brand-features.json")
        if not isinstance(data, dict) or not isinstance(data.get("features"), dict):
            return default_features(brand_id)

        self._features_cache[brand_id] = data
        return data

    def clear_features_cache(self) -> None:
        self._features_cache.clear()

    def accrual_rule_for_time_code(self, code: str) -> Optional[dict]:
        return accrual_rule_for_time_code(self.features(), code)


def _feature(features: dict, name: str) -> dict:
    value = (features.get("features") or {}).get(name)
    return value if isinstance(value, dict) else {}


def is_feature_enabled(features: dict, name: str) -> bool:
    return bool(_feature(features, name).get("enabled", False))


def is_leave_type_enabled(features: dict, leave_type: str) -> bool:
    leave = _feature(features, "leaveManagement")
    if not leave.get("enabled"):
        return False
    leave_types = leave.get("leaveTypes") or {}
    return bool((leave_types.get(leave_type) or {}).get("enabled", False))


def enabled_leave_types(features: dict) -> list[str]:
    leave = _feature(features, "leaveManagement")
    if not leave.get("enabled"):
        return []
    leave_types = leave.get("leaveTypes") or {}
    return [name for name, config in leave_types.items() if (config or {}).get("enabled")]


def company_holiday_dates(features: dict, year: int) -> set[str]:
    holidays = _feature(features, "companyHolidays")
    if not holidays.get("enabled") or not holidays.get("dates"):
        return set()

    configured_year = holidays.get("year")
    if configured_year and int(configured_year) != year:
        return set()

    prefix = f"{year}-"
    return {h["date"] for h in holidays["dates"] if str(h.get("date", "")).startswith(prefix)}


def accrual_rule_for_time_code(features: dict, code: str) -> Optional[dict]:
    accrual = _feature(features, "accrualCalculations")
    if not accrual.get("enabled"):
        return None
    rules = accrual.get("rules") or {}
    rule = rules.get(code)
    return rule if isinstance(rule, dict) else None


def leave_balance_summary_config(features: dict) -> dict[str, Any]:
    reports = _feature(features, "reports")
    config = reports.get("leaveBalanceSummary") or {}
    return {
        "enabled": bool(config.get("enabled", False)),
        "warningThreshold": config.get("warningThreshold", DEFAULT_WARNING_THRESHOLD),
        "criticalThreshold": config.get("criticalThreshold", DEFAULT_CRITICAL_THRESHOLD),
    }


def is_global_read_access_enabled(features: dict) -> bool:
    return is_feature_enabled(features, "globalReadAccess")
