"""Date normalization for date fields.

The stored form of a date is an ISO calendar date (YYYY-MM-DD) with no time
zone; the empty string means "no date".
"""

import re
from datetime import date, datetime
from typing import Any, Optional

# ISO: 2026-01-23 (optionally followed by T or space + time)
_RE_ISO = re.compile(r"^(\d{4})-(\d{1,2})-(\d{1,2})(?:[T\s].*)?$")


def parse_iso_date(value: Any) -> Optional[date]:
    """Parse a stored or raw date value into a date.

    Accepts date/datetime objects and ISO strings, optionally with a time
    part ("2026-01-23T10:00:00Z"). Single-digit months and days are padded.

    Args:
        value: Date string, date object, or anything else

    Returns:
        date, or None if the value is not a valid calendar date
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None

    match = _RE_ISO.match(value.strip())
    if not match:
        return None

    year, month, day = (int(part) for part in match.groups())
    try:
        return date(year, month, day)
    except ValueError:
        return None


def to_iso_date(value: Any) -> str:
    """Normalize a value to ``YYYY-MM-DD``, or ``""`` when it is not a date."""
    parsed = parse_iso_date(value)
    return parsed.isoformat() if parsed else ""


def format_date_display(value: Any) -> str:
    """Format a date for display: "2026-01-05" -> "Jan 5, 2026"."""
    parsed = parse_iso_date(value)
    if parsed is None:
        return ""
    return f"{parsed.strftime('%b')} {parsed.day}, {parsed.year}"
