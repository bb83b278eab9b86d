"""Timestamp parsing and display formatting utilities."""

import re
from datetime import datetime, timezone, tzinfo
from typing import Optional
from zoneinfo import ZoneInfo

# Dates in the jobs table are shown in Singapore time
DISPLAY_TIMEZONE = ZoneInfo("Asia/Singapore")

MONTH_ABBREVIATIONS = (
    "Jan",
    "Feb",
    "Mar",
    "Apr",
    "May",
    "Jun",
    "Jul",
    "Aug",
    "Sep",
    "Oct",
    "Nov",
    "Dec",
)

MONTH_NAMES = (
    "january",
    "february",
    "march",
    "april",
    "may",
    "june",
    "july",
    "august",
    "september",
    "october",
    "november",
    "december",
)

# Lowercased month spelling -> month number ("sept" is what some locales emit)
_MONTH_LOOKUP = {
    **{abbr.lower(): i + 1 for i, abbr in enumerate(MONTH_ABBREVIATIONS)},
    **{name: i + 1 for i, name in enumerate(MONTH_NAMES)},
    "sept": 9,
}

ISO_DATE_PATTERN = re.compile(r"^(?P<year>\d{4})-(?P<month>\d{2})-(?P<day>\d{2})$")
DISPLAY_DATE_PATTERN = re.compile(
    r"^(?P<day>\d{1,2})\s+(?P<month>[A-Za-z]+)\.?\s+(?P<year>\d{4})$"
)


def now_exact() -> str:
    """Current UTC time as an ISO 8601 string (microsecond precision)."""
    return datetime.now(timezone.utc).isoformat()


def to_epoch_ms(dt: datetime) -> int:
    """Milliseconds since the Unix epoch. Naive datetimes are treated as UTC."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return int(dt.timestamp() * 1000)


def parse_iso_timestamp(value: str) -> datetime:
    """
    Parse an ISO 8601 timestamp into an aware datetime.

    Accepts a trailing ``Z`` and treats naive timestamps as UTC.

    Raises:
        ValueError: If the value is not an ISO 8601 timestamp
    """
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"

    dt = datetime.fromisoformat(text)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def format_display_date(dt: datetime, tz: tzinfo = DISPLAY_TIMEZONE) -> str:
    """
    Format a datetime as ``DD Mon YYYY`` in the display timezone.

    Month names are fixed English abbreviations so output never depends on
    the host locale.

    Examples:
        format_display_date(datetime(2024, 6, 1, tzinfo=timezone.utc))
        # "01 Jun 2024"
    """
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    local = dt.astimezone(tz)
    return f"{local.day:02d} {MONTH_ABBREVIATIONS[local.month - 1]} {local.year}"


def _build_local_midnight(year: int, month: int, day: int, tz: tzinfo) -> Optional[datetime]:
    try:
        return datetime(year, month, day, tzinfo=tz)
    except ValueError:
        return None


def parse_iso_date(text: str, tz: tzinfo = DISPLAY_TIMEZONE) -> Optional[datetime]:
    """Parse ``YYYY-MM-DD`` as midnight in ``tz``. Returns None on failure."""
    match = ISO_DATE_PATTERN.match(text.strip())
    if not match:
        return None
    return _build_local_midnight(
        int(match.group("year")), int(match.group("month")), int(match.group("day")), tz
    )


def parse_display_date(text: str, tz: tzinfo = DISPLAY_TIMEZONE) -> Optional[datetime]:
    """
    Parse ``DD Mon YYYY`` (or a full month name) as midnight in ``tz``.

    Month matching is case-insensitive. Returns None on failure.
    """
    match = DISPLAY_DATE_PATTERN.match(text.strip())
    if not match:
        return None

    month = _MONTH_LOOKUP.get(match.group("month").lower())
    if month is None:
        return None

    return _build_local_midnight(int(match.group("year")), month, int(match.group("day")), tz)


def parse_table_date(text: str, tz: tzinfo = DISPLAY_TIMEZONE) -> Optional[datetime]:
    """Parse a date cell: ISO ``YYYY-MM-DD`` first, then the display form."""
    return parse_iso_date(text, tz) or parse_display_date(text, tz)
