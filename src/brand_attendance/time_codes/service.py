from __future__ import annotations

from typing import Optional, Sequence, Union

import structlog

from ..brands.loader import BrandCatalog
from ..brands.model import BrandTimeCode
from ..core.exceptions import ValidationError
from .model import TimeCode
from .repository import TimeCodeRepository

logger = structlog.get_logger(__name__)

AnyTimeCode = Union[BrandTimeCode, TimeCode]


class TimeCodeService:
    """Brand time codes first, the time_codes table as fallback."""

    def __init__(self, time_codes: TimeCodeRepository, brands: BrandCatalog):
        self._time_codes = time_codes
        self._brands = brands

    def sync_from_brand(self, codes: Sequence[BrandTimeCode]) -> dict[str, int]:
        """Mirror brand codes into the table, matching on ``code``."""
        inserted = 0
        updated = 0
        for tc in codes:
            fields = dict(
                code=tc.code,
                description=tc.description,
                hours_limit=tc.hours_limit,
                default_allocation=tc.default_allocation,
                is_active=tc.is_active,
            )
            if self._time_codes.get_by_code(tc.code) is None:
                self._time_codes.insert(**fields)
                inserted += 1
            else:
                self._time_codes.update(**fields)
                updated += 1

        if inserted or updated:
            logger.info("time_codes_synced", brand=self._brands.current_brand(), inserted=inserted, updated=updated)
        return {"inserted": inserted, "updated": updated}

    def active_codes(self) -> list[AnyTimeCode]:
        brand_codes = self._brands.time_codes()
        if brand_codes is not None:
            return list(brand_codes)
        return list(self._time_codes.list_all(active_only=True))

    def list_for_api(self) -> list[dict]:
        brand_all = self._brands.time_codes(include_inactive=True)
        if brand_all is None:
            return [tc.to_dict() for tc in self._time_codes.list_all(active_only=True)]

        try:
            self.sync_from_brand(brand_all)
        except Exception:
            logger.exception("time_code_sync_failed", brand=self._brands.current_brand())

        return [
            {
                "id": tc.id,
                "code": tc.code,
                "description": tc.description,
                "hours_limit": tc.hours_limit,
                "is_active": tc.is_active,
            }
            for tc in brand_all
            if tc.is_active == 1
        ]

    def find(self, code: str) -> Optional[AnyTimeCode]:
        """Active brand code, else active table code."""
        brand_code = self._brands.time_code_by_code(code)
        if brand_code is not None:
            return brand_code
        db_code = self._time_codes.get_by_code(code)
        if db_code is not None and db_code.is_active == 1:
            return db_code
        return None

    def validate_time_code(self, code: str) -> AnyTimeCode:
        found = self.find(code) if code else None
        if found is None:
            raise ValidationError(f"Invalid time code: {code}")
        return found

    def resolve_db_id(self, code: str) -> int:
        db_code = self._time_codes.get_by_code(code)
        return db_code.id if db_code else 0
