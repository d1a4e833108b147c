# File: utils/dt_utils.py
"""Date and time utilities for KidsGrowth.

Pure Python date/time functions. Uses standard library datetime and zoneinfo
plus dateutil for calendar arithmetic.

Functions:
    - set_default_timezone / get_default_timezone: Configure the local zone
    - dt_now_utc / dt_now_local / dt_now_iso: Current time helpers
    - dt_today_local / dt_today_iso: Current date helpers
    - as_utc / as_local: Timezone conversion (naive inputs get a default zone)
    - start_of_local_day: Local midnight of a datetime
    - start_of_local_week: Local midnight of the most recent Sunday
    - start_of_local_month: Local midnight of the first day of the month
    - dt_parse_date: Parse date strings
    - dt_parse: Normalize str/date/datetime inputs to aware datetimes
    - dt_to_utc: Parse a string and convert to UTC
"""

from __future__ import annotations

from datetime import UTC, date, datetime
import logging
from zoneinfo import ZoneInfo

# Third-party date utilities
from dateutil.relativedelta import SU, relativedelta

# Module-level logger
_LOGGER = logging.getLogger(__name__)

# ==============================================================================
# Constants
# ==============================================================================

# Default timezone - can be overridden by caller
DEFAULT_TIME_ZONE: ZoneInfo = ZoneInfo("UTC")


# ==============================================================================
# Timezone Configuration
# ==============================================================================


def set_default_timezone(tz: ZoneInfo) -> None:
    """Set the default timezone for all dt_utils functions.

    Call this once at startup with the family's timezone so that period
    windows start at local midnight.

    Args:
        tz: ZoneInfo object representing the default timezone
    """
    global DEFAULT_TIME_ZONE  # noqa: PLW0603
    DEFAULT_TIME_ZONE = tz


def get_default_timezone() -> ZoneInfo:
    """Get the current default timezone."""
    return DEFAULT_TIME_ZONE


# ==============================================================================
# Current Date/Time Functions
# ==============================================================================


def dt_now_utc() -> datetime:
    """Return the current datetime in UTC (timezone-aware)."""
    return datetime.now(UTC)


def dt_now_local(tz: ZoneInfo | None = None) -> datetime:
    """Return the current datetime in local timezone.

    Args:
        tz: Optional timezone override. Uses DEFAULT_TIME_ZONE if not provided.
    """
    return datetime.now(tz or DEFAULT_TIME_ZONE)


def dt_now_iso() -> str:
    """Return the current UTC datetime as an ISO 8601 string."""
    return dt_now_utc().isoformat()


def dt_today_local(tz: ZoneInfo | None = None) -> date:
    """Return today's date in local timezone."""
    return dt_now_local(tz).date()


def dt_today_iso(tz: ZoneInfo | None = None) -> str:
    """Return today's date in local timezone as ISO string (YYYY-MM-DD)."""
    return dt_today_local(tz).isoformat()


# ==============================================================================
# Timezone Conversion
# ==============================================================================


def as_utc(dt_obj: datetime) -> datetime:
    """Convert a datetime to UTC timezone.

    Naive datetimes are assumed to be in the default timezone.
    """
    if dt_obj.tzinfo is None:
        dt_obj = dt_obj.replace(tzinfo=DEFAULT_TIME_ZONE)
    return dt_obj.astimezone(UTC)


def as_local(dt_obj: datetime, tz: ZoneInfo | None = None) -> datetime:
    """Convert a datetime to local timezone.

    Naive datetimes are assumed to be in UTC.

    Args:
        dt_obj: Datetime object
        tz: Optional timezone override. Uses DEFAULT_TIME_ZONE if not provided.
    """
    tz_info = tz or DEFAULT_TIME_ZONE
    if dt_obj.tzinfo is None:
        dt_obj = dt_obj.replace(tzinfo=UTC)
    return dt_obj.astimezone(tz_info)


# ==============================================================================
# Period Boundaries
# ==============================================================================


def start_of_local_day(dt_obj: datetime, tz: ZoneInfo | None = None) -> datetime:
    """Get the start of day (00:00:00) for a datetime in local timezone.

    DST-safe: the wall-clock time is replaced in the local zone and the
    zone recomputes the offset.

    Args:
        dt_obj: Datetime object (can be in any timezone)
        tz: Optional timezone override. Uses DEFAULT_TIME_ZONE if not provided.

    Returns:
        Datetime at 00:00:00 in local timezone (timezone-aware)
    """
    local_dt = as_local(dt_obj, tz)
    return local_dt.replace(hour=0, minute=0, second=0, microsecond=0)


def start_of_local_week(dt_obj: datetime, tz: ZoneInfo | None = None) -> datetime:
    """Get local midnight of the most recent Sunday on or before dt_obj.

    Weeks start on Sunday (day-of-week 0 convention). A Sunday input returns
    midnight of that same Sunday.
    """
    local_dt = as_local(dt_obj, tz)
    sunday = local_dt + relativedelta(weekday=SU(-1))
    return sunday.replace(hour=0, minute=0, second=0, microsecond=0)


def start_of_local_month(dt_obj: datetime, tz: ZoneInfo | None = None) -> datetime:
    """Get local midnight of the first calendar day of dt_obj's month."""
    local_dt = as_local(dt_obj, tz)
    first = local_dt + relativedelta(day=1)
    return first.replace(hour=0, minute=0, second=0, microsecond=0)


# ==============================================================================
# Date/Time Parsing
# ==============================================================================


def dt_parse_date(date_str: str | None) -> date | None:
    """Safely parse a date string into a `datetime.date`.

    Accepts formats:
    - "2025-04-07" (ISO format)
    - "04/07/2025" (US format)
    - "2025/04/07"

    Returns:
        datetime.date or None if parsing fails.
    """
    if not date_str or not isinstance(date_str, str):
        return None

    try:
        return date.fromisoformat(date_str)
    except ValueError:
        pass

    for fmt in ("%m/%d/%Y", "%Y/%m/%d"):
        try:
            return datetime.strptime(date_str, fmt).date()
        except ValueError:
            continue

    return None


def dt_parse(
    dt_input: str | date | datetime | None,
    tz: ZoneInfo | None = None,
) -> datetime | None:
    """Normalize various datetime input formats to an aware datetime.

    - datetime: returned as-is if aware, otherwise tagged with the local zone
    - date: local midnight of that calendar day
    - str: ISO datetime, ISO date or one of the dt_parse_date() formats

    Args:
        dt_input: String, date or datetime to normalize, or None
        tz: Zone applied to naive inputs (defaults to DEFAULT_TIME_ZONE)

    Returns:
        Timezone-aware datetime, or None if the input could not be parsed.

    Example:
        >>> dt_parse("2025-04-15", tz=ZoneInfo("America/New_York"))
        datetime.datetime(2025, 4, 15, 0, 0, tzinfo=ZoneInfo('America/New_York'))
    """
    if not dt_input:
        return None

    tz_info = tz or DEFAULT_TIME_ZONE
    result: datetime

    if isinstance(dt_input, str):
        try:
            result = datetime.fromisoformat(dt_input)
        except ValueError:
            parsed_date = dt_parse_date(dt_input)
            if parsed_date is None:
                _LOGGER.debug("Unable to parse datetime input: %s", dt_input)
                return None
            result = datetime.combine(parsed_date, datetime.min.time())

    # datetime is a subclass of date, so check it first
    elif isinstance(dt_input, datetime):
        result = dt_input

    elif isinstance(dt_input, date):
        result = datetime.combine(dt_input, datetime.min.time())

    else:
        _LOGGER.debug("Unsupported datetime input type: %s", type(dt_input))
        return None

    if result.tzinfo is None:
        result = result.replace(tzinfo=tz_info)

    return result


def dt_to_utc(dt_str: str | None) -> datetime | None:
    """Parse a datetime string, apply the local zone if naive, convert to UTC."""
    parsed = dt_parse(dt_str)
    return as_utc(parsed) if parsed else None
