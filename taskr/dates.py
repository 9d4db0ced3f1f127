"""Date helpers: display <-> canonical dates, week boundaries, timestamps."""

import math
import re
from datetime import date, datetime, timedelta
from typing import List, Optional

from taskr.config import (
    CANONICAL_DATE_FORMAT,
    DISPLAY_DATE_FORMAT,
    SECONDS_PER_MINUTE,
    WEEK_DAYS,
)

# D/M/YYYY with one or two digit day and month
_DISPLAY_DATE_RE = re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{4})$")
# "Z" or "+HH:MM" / "-HH:MM" at the end of an ISO timestamp
_OFFSET_RE = re.compile(r"(Z|[+-]\d{2}:?\d{2})$")


def today(now: Optional[datetime] = None) -> str:
    """Return today's date as a canonical YYYY-MM-DD string."""
    now = now or datetime.now()
    return now.date().isoformat()


def convert_to_iso(date_str: str) -> Optional[str]:
    """
    Convert a DD/MM/YYYY display date into canonical YYYY-MM-DD.

    Args:
        date_str: Date typed by the user, e.g. "05/01/2026" or "5/1/2026".

    Returns:
        The canonical date string, or None if the input is not a valid
        display date (wrong shape or a day that does not exist).
    """
    match = _DISPLAY_DATE_RE.match(date_str.strip())
    if not match:
        return None

    day, month, year = (int(part) for part in match.groups())
    try:
        return date(year, month, day).strftime(CANONICAL_DATE_FORMAT)
    except ValueError:
        return None


def to_display(iso_date: str) -> str:
    """Render a canonical date as DD/MM/YYYY; unknown shapes pass through."""
    try:
        return datetime.strptime(iso_date, CANONICAL_DATE_FORMAT).strftime(DISPLAY_DATE_FORMAT)
    except (TypeError, ValueError):
        return iso_date


def parse_timestamp(value: str) -> datetime:
    """
    Parse a stored ISO timestamp into a naive local datetime.

    Older data files carry UTC timestamps with a "Z" suffix; those are
    converted to local time so they compare with naive timestamps.
    """
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def calendar_date(timestamp: str) -> str:
    """
    Local calendar date (YYYY-MM-DD) of a stored timestamp.

    Naive timestamps are already local, so their date prefix is used as is.
    Timestamps with "Z" or an offset are converted to local time first.
    """
    if _OFFSET_RE.search(timestamp):
        return parse_timestamp(timestamp).date().isoformat()
    return timestamp[:10]


def minutes_between(start: datetime, stop: datetime) -> int:
    """Whole minutes from start to stop, rounding half up."""
    seconds = (stop - start).total_seconds()
    return int(math.floor(seconds / SECONDS_PER_MINUTE + 0.5))


def week_dates(day: date) -> List[date]:
    """Return the Sunday-to-Saturday week containing `day`."""
    # date.weekday(): Monday == 0 .. Sunday == 6
    sunday = day - timedelta(days=(day.weekday() + 1) % WEEK_DAYS)
    return [sunday + timedelta(days=offset) for offset in range(WEEK_DAYS)]
