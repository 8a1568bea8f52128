from __future__ import annotations

import math
import re
from datetime import datetime, timedelta
from typing import Any

import pandas as pd

"""Value normalization for timesheet cells.

- Spreadsheet date serial -> datetime
- Display formatting of dates / times ("YYYY.MM.DD. HH:MM:SS" or "HH:MM:SS")
- Half-up rounding for metric and payment display
- Shift time truncation

The offsets below (+2 day serial adjustment, -2h/+2d display correction) are kept
exactly as the existing payroll sheets expect them; output parity depends on them.
"""

__all__ = [
    "EXCEL_EPOCH_OFFSET_DAYS",
    "LEAP_YEAR_BUG_ADJUSTMENT_DAYS",
    "is_number",
    "is_null_equivalent",
    "parse_dotted_date",
    "serial_date_to_datetime",
    "format_display_date",
    "round_half_up",
    "format_decimal",
    "truncate_time",
]

# 1900-01-01 .. 1970-01-01 (days)
EXCEL_EPOCH_OFFSET_DAYS = 25569
LEAP_YEAR_BUG_ADJUSTMENT_DAYS = 2

DISPLAY_HOURS_CORRECTION = timedelta(hours=-2)
DISPLAY_DAYS_CORRECTION = timedelta(days=2)

_UNIX_EPOCH = datetime(1970, 1, 1)

# pandas-parsed strings must carry a year; "12:30" alone is not a date
_HAS_YEAR = re.compile(r"\b\d{4}\b")


def is_number(value: Any) -> bool:
    """True for real numeric cells (bool is not a number here)."""
    if isinstance(value, bool):
        return False
    if isinstance(value, (int, float)):
        return not (isinstance(value, float) and math.isnan(value))
    return False


def is_null_equivalent(value: Any) -> bool:
    """None / empty string / numeric zero count as "no data" in a row."""
    if value is None:
        return True
    if isinstance(value, str):
        return value == ""
    if is_number(value):
        return value == 0
    return False


def parse_dotted_date(value: Any) -> datetime | None:
    """Parse ``"YYYY.MM.DD"`` (time part ignored) into a datetime, or None."""
    if not isinstance(value, str) or "." not in value:
        return None
    parts = value.split(" ")[0].split(".")
    if len(parts) < 3:
        return None
    try:
        year, month, day = (int(p) for p in parts[:3])
        return datetime(year, month, day)
    except ValueError:
        return None


def serial_date_to_datetime(serial: float) -> datetime:
    """Convert a spreadsheet date serial to a (naive) datetime.

    The integer part counts days; the fractional part encodes the time of day.
    Callers only pass serials > 1.
    """
    days = math.floor(serial) - (EXCEL_EPOCH_OFFSET_DAYS + LEAP_YEAR_BUG_ADJUSTMENT_DAYS)
    fraction = math.fmod(serial, 1)
    return _UNIX_EPOCH + timedelta(days=days + fraction)


def _parse_dotted_datetime(value: str) -> datetime | None:
    # "2025.06.19 7:57:20"
    parts = value.split(" ")
    date_part = parts[0].split(".")
    time_part = parts[1] if len(parts) > 1 else ""
    if len(date_part) < 3:
        return None
    try:
        year, month, day = (int(p) for p in date_part[:3])
        hms = [int(p) if p.strip() else 0 for p in time_part.split(":")]
    except ValueError:
        return None
    hours, minutes, seconds = (hms + [0, 0, 0])[:3]
    try:
        return datetime(year, month, day, hours, minutes, seconds)
    except (ValueError, OverflowError):
        return None


def _parse_any_date(value: str) -> datetime | None:
    if not _HAS_YEAR.search(value):
        return None
    try:
        ts = pd.to_datetime(value)
    except (ValueError, TypeError, OverflowError):
        return None
    if ts is pd.NaT:
        return None
    if ts.tzinfo is not None:
        ts = ts.tz_convert(None)
    return ts.to_pydatetime()


def format_display_date(value: Any, include_time: bool = False) -> Any:
    """Format a date/time cell for display.

    Accepts a date serial (> 1), a ``"YYYY.MM.DD[ H:MM:SS]"`` string, a datetime,
    or any other string pandas can parse. Returns the original value unchanged when
    it cannot be parsed; never raises.
    """
    if value is False or is_null_equivalent(value):
        return ""

    parsed: datetime | None
    if isinstance(value, datetime):
        parsed = value.replace(tzinfo=None)
    elif is_number(value):
        try:
            parsed = serial_date_to_datetime(value) if value > 1 else None
        except (OverflowError, ValueError):
            return value
    elif isinstance(value, str) and "." in value:
        parsed = _parse_dotted_datetime(value)
    elif isinstance(value, str):
        parsed = _parse_any_date(value)
    else:
        parsed = None

    if parsed is None:
        return value

    try:
        shown = parsed + DISPLAY_HOURS_CORRECTION + DISPLAY_DAYS_CORRECTION
    except OverflowError:
        return value

    if include_time:
        return f"{shown:%Y.%m.%d}. {shown:%H:%M:%S}"
    return f"{shown:%H:%M:%S}"


def round_half_up(x: float) -> int:
    """Fractional part < 0.5 rounds down, >= 0.5 rounds up."""
    fraction = math.fmod(x, 1)
    if fraction < 0.5:
        return math.floor(x)
    return math.ceil(x)


def format_decimal(value: Any) -> Any:
    """round_half_up for anything numeric-looking; other values pass through."""
    if value is None or isinstance(value, bool):
        return value
    try:
        number = float(value)
    except (TypeError, ValueError):
        return value
    if math.isnan(number) or math.isinf(number):
        return value
    return round_half_up(number)


def truncate_time(x: float) -> int:
    """Shift start/end values are always rounded toward zero, never up."""
    return math.floor(x)
