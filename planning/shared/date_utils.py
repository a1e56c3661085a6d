"""Shared date utilities for spreadsheet and store values."""

from __future__ import annotations

import re
from datetime import UTC, date, datetime, timedelta
from typing import Any

# Excel's day zero (accounts for the 1900 leap-year bug)
EXCEL_EPOCH = datetime(1899, 12, 30, tzinfo=UTC)
MAX_EXCEL_SERIAL = 2958465  # 9999-12-31

# CSV exports carry serials as text: "45292" or "45292.5"
_SERIAL_TEXT = re.compile(r"\d+(\.\d+)?")

_FALLBACK_FORMATS = ["%d/%m/%Y", "%d-%m-%Y", "%d.%m.%Y", "%d/%m/%Y %H:%M", "%d/%m/%Y %H:%M:%S", "%Y/%m/%d"]


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def parse_date(value: Any) -> datetime | None:
    """Parse a date from the formats found in spreadsheet exports.

    Handles:
    - datetime/date cell values (openpyxl with data_only)
    - Excel serial numbers, numeric or as text: 45292 or "45292" -> 2024-01-01
    - ISO date/datetime strings, with or without "Z"
    - Day-first strings: "15/06/2024", "15-06-2024", "15.06.2024"

    Naive values are taken as UTC.

    Returns:
        Timezone-aware datetime or None if the value is blank or unparseable
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        return _as_utc(value)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=UTC)
    if isinstance(value, int | float):
        if 0 < value <= MAX_EXCEL_SERIAL:
            return EXCEL_EPOCH + timedelta(days=float(value))
        return None

    text = str(value).strip()
    if not text:
        return None

    if _SERIAL_TEXT.fullmatch(text) and 0 < float(text) <= MAX_EXCEL_SERIAL:
        return EXCEL_EPOCH + timedelta(days=float(text))

    try:
        return _as_utc(datetime.fromisoformat(text))
    except ValueError:
        pass

    for fmt in _FALLBACK_FORMATS:
        try:
            return _as_utc(datetime.strptime(text, fmt))
        except ValueError:
            continue

    return None


def format_iso(value: datetime) -> str:
    """Format a datetime the way PocketBase stores date fields."""
    return _as_utc(value).strftime("%Y-%m-%d %H:%M:%S.%f")[:-3] + "Z"
