"""Date parsing for date-type form fields.

Accepts date/datetime objects, ISO strings (with or without a time part) and
day-first numeric strings (23.01.2026, 23/01/2026, 23-01-2026).
"""

import re
from datetime import date, datetime
from typing import Any, Optional

# ISO: 2026-01-23 (optionally followed by T or space + time)
_RE_ISO = re.compile(r"^(\d{4})-(\d{1,2})-(\d{1,2})(?:[T ].*)?$")

# Day-first numeric: DD.MM.YYYY, DD/MM/YYYY, DD-MM-YYYY
_RE_NUMERIC = re.compile(r"^(\d{1,2})[./\-](\d{1,2})[./\-](\d{4})$")


def _build(year: int, month: int, day: int) -> Optional[date]:
    try:
        return date(year, month, day)
    except ValueError:
        return None


def parse_date(value: Any) -> Optional[date]:
    """
    Parse a form date value.

    Args:
        value: date, datetime or string

    Returns:
        The calendar date, or None if the value is not a parseable date
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None

    text = value.strip()
    if not text:
        return None

    m = _RE_ISO.match(text)
    if m:
        return _build(int(m.group(1)), int(m.group(2)), int(m.group(3)))

    m = _RE_NUMERIC.match(text)
    if m:
        return _build(int(m.group(3)), int(m.group(2)), int(m.group(1)))

    return None


def is_date(value: Any) -> bool:
    return parse_date(value) is not None
