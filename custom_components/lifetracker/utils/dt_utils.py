# File: utils/dt_utils.py
"""Date utilities for LifeTracker.

Pure Python date functions with ZERO Home Assistant dependencies.
All functions here can be unit tested without Home Assistant mocking.

UTILS PURITY: NO `homeassistant.*` imports allowed.
   Uses standard library: datetime, zoneinfo, dateutil.

All day-level values are calendar days in the configured local timezone and
travel through storage as ISO strings ("YYYY-MM-DD").

Functions:
    - dt_today_local / dt_today_iso: Today's date in local timezone
    - dt_now_iso: Current datetime as ISO string
    - dt_parse_date: Tolerant day parser (date, ISO date, ISO datetime)
    - dt_is_today: Compare a day against today
    - dt_add_days: Day arithmetic
    - dt_days_in_range: Inclusive day list
    - dt_last_n_days: Trailing window ending at a reference day
    - dt_period_start / dt_previous_period_start: Day/week/month periods
    - unique_sorted_dates: Normalize a mixed date list
    - max_consecutive_run: Longest run of day-gap == 1
    - trailing_run: Length of the run of periods ending at an anchor
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from datetime import date, datetime, timedelta
import logging
from zoneinfo import ZoneInfo

# Third-party date utilities (no HA dependency)
from dateutil.relativedelta import relativedelta

# Module-level logger (no HA dependency)
_LOGGER = logging.getLogger(__name__)

# ==============================================================================
# Constants (local copies to avoid circular imports)
# These mirror const.py values but are defined locally for purity.
# ==============================================================================

# Default timezone - can be overridden by caller
DEFAULT_TIME_ZONE: ZoneInfo = ZoneInfo("UTC")

FREQUENCY_DAILY = "daily"
FREQUENCY_WEEKLY = "weekly"
FREQUENCY_MONTHLY = "monthly"

# Python weekday() numbering: Monday=0 .. Sunday=6
WEEK_START_WEEKDAY = 6


# ==============================================================================
# Timezone Configuration
# ==============================================================================


def set_default_timezone(tz: ZoneInfo) -> None:
    """Set the default timezone for all dt_utils functions.

    Call this during integration setup to configure the user's timezone.
    """
    global DEFAULT_TIME_ZONE  # noqa: PLW0603
    DEFAULT_TIME_ZONE = tz


def get_default_timezone() -> ZoneInfo:
    """Get the current default timezone."""
    return DEFAULT_TIME_ZONE


# ==============================================================================
# Current Date/Time Functions
# ==============================================================================


def dt_today_local(tz: ZoneInfo | None = None) -> date:
    """Return today's date in local timezone as a `datetime.date`.

    Example:
        datetime.date(2025, 4, 7)
    """
    tz_info = tz or DEFAULT_TIME_ZONE
    return datetime.now(tz_info).date()


def dt_today_iso(tz: ZoneInfo | None = None) -> str:
    """Return today's date in local timezone as ISO string (YYYY-MM-DD)."""
    return dt_today_local(tz).isoformat()


def dt_now_iso(tz: ZoneInfo | None = None) -> str:
    """Return the current local datetime as an ISO 8601 string."""
    tz_info = tz or DEFAULT_TIME_ZONE
    return datetime.now(tz_info).isoformat()


# ==============================================================================
# Parsing
# ==============================================================================


def dt_parse_date(value: str | date | datetime | None) -> date | None:
    """Safely parse a day value into a `datetime.date`.

    Accepts:
    - date / datetime objects (datetime is reduced to its date)
    - "2025-04-07" (ISO date)
    - "2025-04-07T10:15:00Z" or "2025-04-07 10:15" (truncated to the day)

    Returns:
        datetime.date or None if the value is missing or malformed.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value:
        return None

    day_part = value.strip().split("T", 1)[0].split(" ", 1)[0]
    try:
        return date.fromisoformat(day_part)
    except ValueError:
        _LOGGER.debug("Skipping malformed date value: %r", value)
        return None


def dt_is_today(value: str | date | None, today: date | None = None) -> bool:
    """Return True when value falls on today (or on the given reference day)."""
    parsed = dt_parse_date(value)
    if parsed is None:
        return False
    return parsed == (today or dt_today_local())


# ==============================================================================
# Day Arithmetic and Windows
# ==============================================================================


def dt_add_days(day: date, days: int) -> date:
    """Return day shifted by a signed number of calendar days."""
    return day + timedelta(days=days)


def dt_days_in_range(start: date, end: date) -> list[date]:
    """Return every calendar day in [start, end], oldest first.

    An inverted range yields an empty list.
    """
    if end < start:
        return []
    return [start + timedelta(days=offset) for offset in range((end - start).days + 1)]


def dt_last_n_days(n: int, today: date | None = None) -> list[date]:
    """Return the trailing window of n days ending at today, oldest first.

    Example:
        dt_last_n_days(3, date(2024, 1, 3)) → [2024-01-01, 2024-01-02, 2024-01-03]
    """
    end = today or dt_today_local()
    if n <= 0:
        return []
    return dt_days_in_range(end - timedelta(days=n - 1), end)


# ==============================================================================
# Periods
# ==============================================================================


def dt_week_start(day: date) -> date:
    """Return the Sunday that starts the calendar week containing day."""
    return day - timedelta(days=(day.weekday() - WEEK_START_WEEKDAY) % 7)


def dt_month_start(day: date) -> date:
    """Return the first day of the calendar month containing day."""
    return day.replace(day=1)


def dt_period_start(day: date, frequency: str) -> date:
    """Return the first day of the period (day/week/month) containing day."""
    if frequency == FREQUENCY_WEEKLY:
        return dt_week_start(day)
    if frequency == FREQUENCY_MONTHLY:
        return dt_month_start(day)
    return day


def dt_previous_period_start(period_start: date, frequency: str) -> date:
    """Return the start of the period immediately before period_start."""
    if frequency == FREQUENCY_WEEKLY:
        return period_start - timedelta(weeks=1)
    if frequency == FREQUENCY_MONTHLY:
        return dt_month_start(period_start) - relativedelta(months=1)
    return period_start - timedelta(days=1)


# ==============================================================================
# Consecutive Runs
# ==============================================================================


def unique_sorted_dates(values: Iterable[str | date | None]) -> list[date]:
    """Parse, de-duplicate and sort day values. Malformed entries are skipped."""
    parsed = {day for day in (dt_parse_date(value) for value in values) if day}
    return sorted(parsed)


def max_consecutive_run(values: Iterable[str | date | None]) -> int:
    """Return the longest run of consecutive calendar days in values.

    Duplicates and ordering are irrelevant.

    Examples:
        max_consecutive_run(["2024-03-01", "2024-03-02", "2024-03-04"]) → 2
        max_consecutive_run([]) → 0
    """
    days = unique_sorted_dates(values)
    if not days:
        return 0

    longest = current = 1
    for previous, day in zip(days, days[1:]):
        if (day - previous).days == 1:
            current += 1
            longest = max(longest, current)
        else:
            current = 1
    return longest


def trailing_run(
    periods: set[date], anchor: date, step_back: Callable[[date], date]
) -> int:
    """Count consecutive members of periods walking back from anchor.

    Args:
        periods: Set of period-start days that count as present
        anchor: First period-start to test
        step_back: Returns the period-start before its argument

    Returns:
        Number of consecutive present periods, 0 if anchor is absent.
    """
    run = 0
    cursor = anchor
    while cursor in periods:
        run += 1
        cursor = step_back(cursor)
    return run
