from __future__ import annotations

import re
from datetime import date, datetime, timezone
from typing import Optional, Union

_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def is_iso_date(value: Optional[str]) -> bool:
    """True for a well-formed YYYY-MM-DD string naming a real calendar day."""
    if not isinstance(value, str) or not _ISO_DATE.match(value):
        return False
    try:
        parse_iso_date(value)
    except ValueError:
        return False
    return True


def as_date(value: Union[date, datetime, str]) -> date:
    """Accept a date, datetime or ISO string (date part only) and return a date."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return parse_iso_date(str(value)[:10])


def format_iso(value: Optional[date]) -> Optional[str]:
    return value.isoformat() if value else None


def format_us(value: date) -> str:
    """M/D/YYYY, the way dates appear in user-facing messages."""
    return f"{value.month}/{value.day}/{value.year}"


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def today_local() -> date:
    return now_local().date()


def now_utc() -> datetime:
    return datetime.now(timezone.utc)


def utc_iso(value: datetime) -> str:
    """ISO-8601 in UTC with millisecond precision and a trailing Z."""
    value = value.astimezone(timezone.utc)
    return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"
